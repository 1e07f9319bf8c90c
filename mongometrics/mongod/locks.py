"""Per-database lock timings reported by mongod."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from mongometrics.prom import MONGOD_NAMESPACE, CounterVec, Desc, Sample

locks_time_locked_global_microseconds_total = CounterVec(
    "locks_time_locked_global_microseconds_total",
    "amount of time in microseconds that any database has held the global lock",
    ["type", "database"],
    namespace=MONGOD_NAMESPACE,
)
locks_time_locked_local_microseconds_total = CounterVec(
    "locks_time_locked_local_microseconds_total",
    "amount of time in microseconds that any database has held the local lock",
    ["type", "database"],
    namespace=MONGOD_NAMESPACE,
)
locks_time_acquiring_global_microseconds_total = CounterVec(
    "locks_time_acquiring_global_microseconds_total",
    "amount of time in microseconds that any database has spent waiting for the global lock",
    ["type", "database"],
    namespace=MONGOD_NAMESPACE,
)

_ALL = (
    locks_time_locked_global_microseconds_total,
    locks_time_locked_local_microseconds_total,
    locks_time_acquiring_global_microseconds_total,
)


@dataclass
class ReadWriteLockTimes:
    """Read and write lock times; upper case is global, lower case is local."""

    read: float = 0.0
    write: float = 0.0
    read_lower: float = 0.0
    write_lower: float = 0.0

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> ReadWriteLockTimes:
        return cls(
            read=float(doc.get("R", 0)),
            write=float(doc.get("W", 0)),
            read_lower=float(doc.get("r", 0)),
            write_lower=float(doc.get("w", 0)),
        )


@dataclass
class LockStats:
    """Lock timings for one database."""

    time_locked_micros: ReadWriteLockTimes = field(default_factory=ReadWriteLockTimes)
    time_acquiring_micros: ReadWriteLockTimes = field(default_factory=ReadWriteLockTimes)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> LockStats:
        return cls(
            time_locked_micros=ReadWriteLockTimes.from_document(doc.get("timeLockedMicros") or {}),
            time_acquiring_micros=ReadWriteLockTimes.from_document(doc.get("timeAcquiringMicros") or {}),
        )


class LockStatsMap(dict):
    """Lock statistics keyed by database name."""

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> LockStatsMap:
        return cls((key, LockStats.from_document(value)) for key, value in doc.items())

    def export(self) -> list[Sample]:
        for key, locks in self.items():
            database = "dot" if key == "." else key
            locked = locks.time_locked_micros
            acquiring = locks.time_acquiring_micros
            locks_time_locked_global_microseconds_total.labels("read", database).set(locked.read)
            locks_time_locked_global_microseconds_total.labels("write", database).set(locked.write)
            locks_time_locked_local_microseconds_total.labels("read", database).set(locked.read_lower)
            locks_time_locked_local_microseconds_total.labels("write", database).set(locked.write_lower)
            locks_time_acquiring_global_microseconds_total.labels("read", database).set(acquiring.read_lower)
            locks_time_acquiring_global_microseconds_total.labels("write", database).set(acquiring.write_lower)
        return [sample for metric in _ALL for sample in metric.collect()]

    def describe(self) -> list[Desc]:
        return [desc for metric in _ALL for desc in metric.describe()]