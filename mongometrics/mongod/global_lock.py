"""Global lock statistics reported by mongod."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from mongometrics.prom import MONGOD_NAMESPACE, Counter, Desc, Gauge, GaugeVec, Sample

global_lock_ratio = Gauge(
    "ratio",
    "The value of ratio displays the relationship between lockTime and totalTime. Low values indicate "
    "that operations have held the globalLock frequently for shorter periods of time. High values "
    "indicate that operations have held globalLock infrequently for longer periods of time",
    namespace=MONGOD_NAMESPACE,
    subsystem="global_lock",
)
global_lock_total = Counter(
    "total",
    "The value of totalTime represents the time, in microseconds, since the database last started and "
    "creation of the globalLock. This is roughly equivalent to total server uptime",
    namespace=MONGOD_NAMESPACE,
    subsystem="global_lock",
)
global_lock_current_queue = GaugeVec(
    "global_lock_current_queue",
    "The currentQueue data structure value provides more granular information concerning the number "
    "of operations queued because of a lock",
    ["type"],
    namespace=MONGOD_NAMESPACE,
)
global_lock_client = GaugeVec(
    "global_lock_client",
    "The activeClients data structure provides more granular information about the number of "
    "connected clients and the operation types (e.g. read or write) performed by these clients",
    ["type"],
    namespace=MONGOD_NAMESPACE,
)

_ALL = (global_lock_total, global_lock_ratio, global_lock_current_queue, global_lock_client)


@dataclass
class ClientStats:
    """Active clients holding or waiting on the global lock."""

    total: float = 0.0
    readers: float = 0.0
    writers: float = 0.0

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> ClientStats:
        return cls(
            total=float(doc.get("total", 0)),
            readers=float(doc.get("readers", 0)),
            writers=float(doc.get("writers", 0)),
        )

    def export(self) -> None:
        """Record reader and writer counts; collection happens in the parent."""
        global_lock_client.labels("reader").set(self.readers)
        global_lock_client.labels("writer").set(self.writers)


@dataclass
class QueueStats:
    """Operations queued on the global lock."""

    total: float = 0.0
    readers: float = 0.0
    writers: float = 0.0

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> QueueStats:
        return cls(
            total=float(doc.get("total", 0)),
            readers=float(doc.get("readers", 0)),
            writers=float(doc.get("writers", 0)),
        )

    def export(self) -> None:
        """Record queued reader and writer counts; collection happens in the parent."""
        global_lock_current_queue.labels("reader").set(self.readers)
        global_lock_current_queue.labels("writer").set(self.writers)


@dataclass
class GlobalLockStats:
    """The globalLock section of serverStatus."""

    total_time: float = 0.0
    lock_time: float = 0.0
    ratio: float = 0.0
    current_queue: QueueStats | None = None
    active_clients: ClientStats | None = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> GlobalLockStats:
        queue = doc.get("currentQueue")
        clients = doc.get("activeClients")
        return cls(
            total_time=float(doc.get("totalTime", 0)),
            lock_time=float(doc.get("lockTime", 0)),
            ratio=float(doc.get("ratio", 0)),
            current_queue=None if queue is None else QueueStats.from_document(queue),
            active_clients=None if clients is None else ClientStats.from_document(clients),
        )

    def export(self) -> list[Sample]:
        # The total counter is fed from lockTime, as the server reports it.
        global_lock_total.set(self.lock_time)
        global_lock_ratio.set(self.ratio)
        if self.current_queue is not None:
            self.current_queue.export()
        if self.active_clients is not None:
            self.active_clients.export()
        return [sample for metric in _ALL for sample in metric.collect()]

    def describe(self) -> list[Desc]:
        return [desc for metric in _ALL for desc in metric.describe()]