"""Operation counters from serverStatus."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from mongometrics.prom import COMMON_NAMESPACE, CounterVec, Desc, Sample

op_counters_total = CounterVec(
    "op_counters_total",
    "The opcounters data structure provides an overview of database operations by type and makes it "
    "possible to analyze the load on the database in more granular manner. These numbers will grow "
    "over time and in response to database use. Analyze these values over time to track database "
    "utilization",
    ["type"],
    namespace=COMMON_NAMESPACE,
)

op_counters_repl_total = CounterVec(
    "op_counters_repl_total",
    "The opcountersRepl data structure, similar to the opcounters data structure, provides an overview "
    "of database replication operations by type and makes it possible to analyze the load on the "
    "replica in more granular manner. These values only appear when the current host has replication "
    "enabled",
    ["type"],
    namespace=COMMON_NAMESPACE,
)


@dataclass
class _OpCounts:
    insert: float = 0.0
    query: float = 0.0
    update: float = 0.0
    delete: float = 0.0
    getmore: float = 0.0
    command: float = 0.0

    @classmethod
    def _parse(cls, doc: Mapping[str, Any]):
        return cls(
            insert=float(doc.get("insert", 0)),
            query=float(doc.get("query", 0)),
            update=float(doc.get("update", 0)),
            delete=float(doc.get("delete", 0)),
            getmore=float(doc.get("getmore", 0)),
            command=float(doc.get("command", 0)),
        )

    def _fill(self, vec: CounterVec) -> list[Sample]:
        for label, value in (
            ("insert", self.insert),
            ("query", self.query),
            ("update", self.update),
            ("delete", self.delete),
            ("getmore", self.getmore),
            ("command", self.command),
        ):
            vec.labels(label).set(value)
        return vec.collect()


@dataclass
class OpcountersStats(_OpCounts):
    """The opcounters section of serverStatus."""

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> OpcountersStats:
        return cls._parse(doc)

    def export(self) -> list[Sample]:
        return self._fill(op_counters_total)

    def describe(self) -> list[Desc]:
        return op_counters_total.describe()


@dataclass
class OpcountersReplStats(_OpCounts):
    """The opcountersRepl section of serverStatus."""

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> OpcountersReplStats:
        return cls._parse(doc)

    def export(self) -> list[Sample]:
        return self._fill(op_counters_repl_total)

    def describe(self) -> list[Desc]:
        return op_counters_repl_total.describe()