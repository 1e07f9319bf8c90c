"""Memory usage from serverStatus."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from mongometrics.prom import COMMON_NAMESPACE, Desc, GaugeVec, Sample

memory = GaugeVec(
    "memory",
    "The mem data structure holds information regarding the target system architecture of mongod "
    "and current memory use",
    ["type"],
    namespace=COMMON_NAMESPACE,
)


@dataclass
class MemStats:
    """The mem section of serverStatus."""

    bits: float = 0.0
    resident: float = 0.0
    virtual: float = 0.0
    mapped: float = 0.0
    mapped_with_journal: float = 0.0

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> MemStats:
        return cls(
            bits=float(doc.get("bits", 0)),
            resident=float(doc.get("resident", 0)),
            virtual=float(doc.get("virtual", 0)),
            mapped=float(doc.get("mapped", 0)),
            mapped_with_journal=float(doc.get("mappedWithJournal", 0)),
        )

    def export(self) -> list[Sample]:
        memory.labels("resident").set(self.resident)
        memory.labels("virtual").set(self.virtual)
        memory.labels("mapped").set(self.mapped)
        memory.labels("mapped_with_journal").set(self.mapped_with_journal)
        return memory.collect()

    def describe(self) -> list[Desc]:
        return memory.describe()