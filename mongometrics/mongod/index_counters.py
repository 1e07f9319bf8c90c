"""Index counters reported by mongod."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from mongometrics.prom import MONGOD_NAMESPACE, CounterVec, Desc, Gauge, Sample

index_counters_miss_ratio = Gauge(
    "miss_ratio",
    "The missRatio value is the ratio of hits to misses. This value is typically 0 or approaching 0",
    namespace=MONGOD_NAMESPACE,
    subsystem="index_counters",
)
index_counters_total = CounterVec(
    "index_counters_total",
    "Total indexes by type",
    ["type"],
    namespace=MONGOD_NAMESPACE,
)


@dataclass
class IndexCounterStats:
    """The indexCounters section of serverStatus."""

    accesses: float = 0.0
    hits: float = 0.0
    misses: float = 0.0
    resets: float = 0.0
    miss_ratio: float = 0.0

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> IndexCounterStats:
        return cls(
            accesses=float(doc.get("accesses", 0)),
            hits=float(doc.get("hits", 0)),
            misses=float(doc.get("misses", 0)),
            resets=float(doc.get("resets", 0)),
            miss_ratio=float(doc.get("missRatio", 0)),
        )

    def export(self) -> list[Sample]:
        for label, value in (
            ("accesses", self.accesses),
            ("hits", self.hits),
            ("misses", self.misses),
            ("resets", self.resets),
        ):
            index_counters_total.labels(label).set(value)
        index_counters_miss_ratio.set(self.miss_ratio)
        return index_counters_total.collect() + index_counters_miss_ratio.collect()

    def describe(self) -> list[Desc]:
        return index_counters_total.describe() + index_counters_miss_ratio.describe()