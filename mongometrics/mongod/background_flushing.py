"""Background flushing statistics from serverStatus."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from mongometrics.prom import MONGOD_NAMESPACE, Counter, Desc, Gauge, Sample

_SUBSYSTEM = "background_flushing"
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

background_flushing_flushes_total = Counter(
    "flushes_total",
    "flushes is a counter that collects the number of times the database has flushed all writes to "
    "disk. This value will grow as database runs for longer periods of time",
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)
background_flushing_total_milliseconds = Counter(
    "total_milliseconds",
    "The total_ms value provides the total number of milliseconds (ms) that the mongod processes have "
    "spent writing (i.e. flushing) data to disk. Because this is an absolute value, consider the value "
    "offlushes and average_ms to provide better context for this datum",
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)
background_flushing_average_milliseconds = Gauge(
    "average_milliseconds",
    "The average_ms value describes the relationship between the number of flushes and the total "
    "amount of time that the database has spent writing data to disk. The larger flushes is, the more "
    'likely this value is likely to represent a "normal," time; however, abnormal data can skew this '
    "value",
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)
background_flushing_last_milliseconds = Gauge(
    "last_milliseconds",
    "The value of the last_ms field is the amount of time, in milliseconds, that the last flush "
    "operation took to complete. Use this value to verify that the current performance of the server "
    "and is in line with the historical data provided by average_ms and total_ms",
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)
background_flushing_last_finished_time = Gauge(
    "last_finished_time",
    "The last_finished field provides a timestamp of the last completed flush operation in the "
    "ISODateformat. If this value is more than a few minutes old relative to your server’s current "
    "time and accounting for differences in time zone, restarting the database may result in some "
    "data loss",
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)

_ALL = (
    background_flushing_flushes_total,
    background_flushing_total_milliseconds,
    background_flushing_average_milliseconds,
    background_flushing_last_milliseconds,
    background_flushing_last_finished_time,
)


def _unix(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return math.floor(moment.timestamp())


@dataclass
class FlushStats:
    """The backgroundFlushing section of serverStatus."""

    flushes: float = 0.0
    total_ms: float = 0.0
    average_ms: float = 0.0
    last_ms: float = 0.0
    last_finished: datetime = field(default_factory=lambda: ZERO_TIME)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> FlushStats:
        last_finished = doc.get("last_finished")
        return cls(
            flushes=float(doc.get("flushes", 0)),
            total_ms=float(doc.get("total_ms", 0)),
            average_ms=float(doc.get("average_ms", 0)),
            last_ms=float(doc.get("last_ms", 0)),
            last_finished=last_finished if last_finished is not None else ZERO_TIME,
        )

    def export(self) -> list[Sample]:
        background_flushing_flushes_total.set(self.flushes)
        background_flushing_total_milliseconds.set(self.total_ms)
        background_flushing_average_milliseconds.set(self.average_ms)
        background_flushing_last_milliseconds.set(self.last_ms)
        background_flushing_last_finished_time.set(_unix(self.last_finished))
        return [sample for metric in _ALL for sample in metric.collect()]

    def describe(self) -> list[Desc]:
        return [desc for metric in _ALL for desc in metric.describe()]