"""Network traffic from serverStatus."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from mongometrics.prom import COMMON_NAMESPACE, Counter, CounterVec, Desc, Sample

network_bytes_total = CounterVec(
    "network_bytes_total",
    "The network data structure contains data regarding MongoDB’s network use",
    ["state"],
    namespace=COMMON_NAMESPACE,
)

network_metrics_num_requests_total = Counter(
    "num_requests_total",
    "The numRequests field is a counter of the total number of distinct requests that the server has "
    "received. Use this value to provide context for the bytesIn and bytesOut values to ensure that "
    "MongoDB’s network utilization is consistent with expectations and application use",
    namespace=COMMON_NAMESPACE,
    subsystem="network_metrics",
)


@dataclass
class NetworkStats:
    """The network section of serverStatus."""

    bytes_in: float = 0.0
    bytes_out: float = 0.0
    num_requests: float = 0.0

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> NetworkStats:
        return cls(
            bytes_in=float(doc.get("bytesIn", 0)),
            bytes_out=float(doc.get("bytesOut", 0)),
            num_requests=float(doc.get("numRequests", 0)),
        )

    def export(self) -> list[Sample]:
        network_bytes_total.labels("in_bytes").set(self.bytes_in)
        network_bytes_total.labels("out_bytes").set(self.bytes_out)
        network_metrics_num_requests_total.set(self.num_requests)
        return network_metrics_num_requests_total.collect() + network_bytes_total.collect()

    def describe(self) -> list[Desc]:
        return network_metrics_num_requests_total.describe() + network_bytes_total.describe()