"""Operation latency statistics reported by mongod."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from mongometrics.prom import MONGOD_NAMESPACE, Desc, GaugeVec, Sample

op_latencies_total = GaugeVec(
    "op_latencies_latency_total",
    "op latencies statistics in microseconds of mongod",
    ["type"],
    namespace=MONGOD_NAMESPACE,
)
op_latencies_count_total = GaugeVec(
    "op_latencies_ops_total",
    "op latencies ops total statistics of mongod",
    ["type"],
    namespace=MONGOD_NAMESPACE,
)
op_latencies_histogram = GaugeVec(
    "op_latencies_histogram",
    "op latencies histogram statistics of mongod",
    ["type", "micros"],
    namespace=MONGOD_NAMESPACE,
)

_ALL = (op_latencies_total, op_latencies_count_total, op_latencies_histogram)


@dataclass
class HistBucket:
    """One bucket of a latency histogram."""

    micros: int = 0
    count: float = 0.0

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> HistBucket:
        return cls(micros=int(doc.get("micros", 0)), count=float(doc.get("count", 0)))


@dataclass
class LatencyStat:
    """Latency statistics for one kind of operation."""

    histogram: list[HistBucket] | None = None
    latency: float = 0.0
    ops: float = 0.0

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> LatencyStat:
        buckets = doc.get("histogram")
        return cls(
            histogram=None if buckets is None else [HistBucket.from_document(b) for b in buckets],
            latency=float(doc.get("latency", 0)),
            ops=float(doc.get("ops", 0)),
        )

    def update(self, op: str) -> None:
        """Record this statistic under the given operation label."""
        for bucket in self.histogram or ():
            op_latencies_histogram.labels(op, str(bucket.micros)).set(bucket.count)
        op_latencies_total.labels(op).set(self.latency)
        op_latencies_count_total.labels(op).set(self.ops)


@dataclass
class OpLatenciesStat:
    """The opLatencies section of serverStatus."""

    reads: LatencyStat | None = None
    writes: LatencyStat | None = None
    commands: LatencyStat | None = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> OpLatenciesStat:
        def section(key: str) -> LatencyStat | None:
            sub = doc.get(key)
            return None if sub is None else LatencyStat.from_document(sub)

        return cls(reads=section("reads"), writes=section("writes"), commands=section("commands"))

    def export(self) -> list[Sample]:
        for stat, op in ((self.reads, "read"), (self.writes, "write"), (self.commands, "command")):
            if stat is not None:
                stat.update(op)
        return [sample for metric in _ALL for sample in metric.collect()]

    def describe(self) -> list[Desc]:
        return [desc for metric in _ALL for desc in metric.describe()]