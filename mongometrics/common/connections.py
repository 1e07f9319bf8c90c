"""Connection counts from serverStatus."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from mongometrics.prom import COMMON_NAMESPACE, Counter, Desc, GaugeVec, Sample

connections = GaugeVec(
    "connections",
    "The connections sub document data regarding the current status of incoming connections and "
    "availability of the database server. Use these values to assess the current load and capacity "
    "requirements of the server",
    ["state"],
    namespace=COMMON_NAMESPACE,
)

connections_metrics_created_total = Counter(
    "created_total",
    "totalCreated provides a count of all incoming connections created to the server. This number "
    "includes connections that have since closed",
    namespace=COMMON_NAMESPACE,
    subsystem="connections_metrics",
)


@dataclass
class ConnectionStats:
    """The connections section of serverStatus."""

    current: float = 0.0
    available: float = 0.0
    total_created: float = 0.0

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> ConnectionStats:
        return cls(
            current=float(doc.get("current", 0)),
            available=float(doc.get("available", 0)),
            total_created=float(doc.get("totalCreated", 0)),
        )

    def export(self) -> list[Sample]:
        connections.labels("current").set(self.current)
        connections.labels("available").set(self.available)
        connections_metrics_created_total.set(self.total_created)
        return connections.collect() + connections_metrics_created_total.collect()

    def describe(self) -> list[Desc]:
        return connections.describe() + connections_metrics_created_total.describe()