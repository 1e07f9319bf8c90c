"""Extra process information from serverStatus."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from mongometrics.prom import COMMON_NAMESPACE, Desc, Gauge, Sample

extra_info_page_faults_total = Gauge(
    "page_faults_total",
    "The page_faults Reports the total number of page faults that require disk operations. Page "
    "faults refer to operations that require the database server to access data which isn’t available "
    "in active memory. The page_faults counter may increase dramatically during moments of poor "
    "performance and may correlate with limited memory environments and larger data sets. Limited and "
    "sporadic page faults do not necessarily indicate an issue",
    namespace=COMMON_NAMESPACE,
    subsystem="extra_info",
)

extra_info_heap_usage_bytes = Gauge(
    "heap_usage_bytes",
    "The heap_usage_bytes field is only available on Unix/Linux systems, and reports the total size "
    "in bytes of heap space used by the database process",
    namespace=COMMON_NAMESPACE,
    subsystem="extra_info",
)


@dataclass
class ExtraInfo:
    """The extra_info section of serverStatus."""

    heap_usage_bytes: float = 0.0
    page_faults: float = 0.0

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> ExtraInfo:
        return cls(
            heap_usage_bytes=float(doc.get("heap_usage_bytes", 0)),
            page_faults=float(doc.get("page_faults", 0)),
        )

    def export(self) -> list[Sample]:
        extra_info_heap_usage_bytes.set(self.heap_usage_bytes)
        extra_info_page_faults_total.set(self.page_faults)
        return extra_info_heap_usage_bytes.collect() + extra_info_page_faults_total.collect()

    def describe(self) -> list[Desc]:
        return extra_info_heap_usage_bytes.describe() + extra_info_page_faults_total.describe()