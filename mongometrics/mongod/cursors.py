"""Cursor state reported by mongod."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from mongometrics.prom import MONGOD_NAMESPACE, Desc, GaugeVec, Sample

cursors_gauge = GaugeVec(
    "cursors",
    "The cursors data structure contains data regarding cursor state and use",
    ["state"],
    namespace=MONGOD_NAMESPACE,
)


@dataclass
class Cursors:
    """The cursors section of serverStatus."""

    total_open: float = 0.0
    timed_out: float = 0.0
    total_no_timeout: float = 0.0
    pinned: float = 0.0

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> Cursors:
        return cls(
            total_open=float(doc.get("totalOpen", 0)),
            timed_out=float(doc.get("timedOut", 0)),
            total_no_timeout=float(doc.get("totalNoTimeout", 0)),
            pinned=float(doc.get("pinned", 0)),
        )

    def export(self) -> list[Sample]:
        cursors_gauge.labels("total_open").set(self.total_open)
        cursors_gauge.labels("timed_out").set(self.timed_out)
        cursors_gauge.labels("total_no_timeout").set(self.total_no_timeout)
        cursors_gauge.labels("pinned").set(self.pinned)
        return cursors_gauge.collect()

    def describe(self) -> list[Desc]:
        return cursors_gauge.describe()