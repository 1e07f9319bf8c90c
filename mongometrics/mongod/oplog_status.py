"""Oplog size and time span of a replica set member."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from bson.timestamp import Timestamp
from pymongo.errors import PyMongoError

from mongometrics.prom import MONGOD_NAMESPACE, Desc, Gauge, GaugeVec, Sample

log = logging.getLogger(__name__)

OPLOG_DB = "local"
OPLOG_COLLECTION = "oplog.rs"

oplog_status_count = Gauge(
    "items_total",
    "The total number of changes in the oplog",
    namespace=MONGOD_NAMESPACE,
    subsystem="replset_oplog",
)
oplog_status_head_timestamp = Gauge(
    "head_timestamp",
    "The timestamp of the newest change in the oplog",
    namespace=MONGOD_NAMESPACE,
    subsystem="replset_oplog",
)
oplog_status_tail_timestamp = Gauge(
    "tail_timestamp",
    "The timestamp of the oldest change in the oplog",
    namespace=MONGOD_NAMESPACE,
    subsystem="replset_oplog",
)
oplog_status_size_bytes = GaugeVec(
    "size_bytes",
    "Size of oplog in bytes",
    ["type"],
    namespace=MONGOD_NAMESPACE,
    subsystem="replset_oplog",
)

_ALL = (oplog_status_count, oplog_status_head_timestamp, oplog_status_tail_timestamp, oplog_status_size_bytes)


@dataclass
class OplogCollectionStats:
    """collStats of the oplog collection."""

    count: float = 0.0
    size: float = 0.0
    storage_size: float = 0.0

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> OplogCollectionStats:
        return cls(
            count=float(doc.get("count", 0)),
            size=float(doc.get("size", 0)),
            storage_size=float(doc.get("storageSize", 0)),
        )


@dataclass
class OplogTimestamps:
    """Unix seconds of the oldest (tail) and newest (head) oplog entries."""

    tail: float = 0.0
    head: float = 0.0


@dataclass
class OplogStatus:
    """Oplog statistics ready for export."""

    oplog_timestamps: OplogTimestamps | None = None
    collection_stats: OplogCollectionStats | None = None

    def export(self) -> list[Sample]:
        oplog_status_size_bytes.labels("current").set(0)
        oplog_status_size_bytes.labels("storage").set(0)
        if self.collection_stats is not None:
            oplog_status_count.set(self.collection_stats.count)
            oplog_status_size_bytes.labels("current").set(self.collection_stats.size)
            oplog_status_size_bytes.labels("storage").set(self.collection_stats.storage_size)
        if self.oplog_timestamps is not None:
            oplog_status_head_timestamp.set(self.oplog_timestamps.head)
            oplog_status_tail_timestamp.set(self.oplog_timestamps.tail)
        return [sample for metric in _ALL for sample in metric.collect()]

    def describe(self) -> list[Desc]:
        return [desc for metric in _ALL for desc in metric.describe()]


def bson_mongo_timestamp_to_unix(timestamp: Timestamp | int) -> float:
    """Return the seconds part of a BSON timestamp."""
    if isinstance(timestamp, Timestamp):
        return float(timestamp.time)
    return float(int(timestamp) >> 32)


def _oplog_edge_timestamp(client, newest: bool) -> float:
    collection = client[OPLOG_DB][OPLOG_COLLECTION]
    entry = collection.find_one({}, sort=[("$natural", -1 if newest else 1)])
    if entry is None:
        raise LookupError("the oplog is empty")
    return bson_mongo_timestamp_to_unix(entry.get("ts", 0))


def get_oplog_timestamps(client) -> OplogTimestamps:
    """Read the timestamps of the newest and oldest oplog entries."""
    head = _oplog_edge_timestamp(client, newest=True)
    tail = _oplog_edge_timestamp(client, newest=False)
    return OplogTimestamps(tail=tail, head=head)


def get_oplog_collection_stats(client) -> OplogCollectionStats:
    """Run collStats on the oplog collection."""
    result = client[OPLOG_DB].command({"collStats": OPLOG_COLLECTION})
    return OplogCollectionStats.from_document(result)


def get_oplog_status(client) -> OplogStatus | None:
    """Gather oplog statistics; None when the timestamps cannot be read."""
    try:
        collection_stats = get_oplog_collection_stats(client)
    except PyMongoError:
        # A failed collStats still yields an (empty) statistics record.
        collection_stats = OplogCollectionStats()
    try:
        timestamps = get_oplog_timestamps(client)
    except (PyMongoError, LookupError) as err:
        log.error("Failed to get oplog status: %s", err)
        return None
    return OplogStatus(oplog_timestamps=timestamps, collection_stats=collection_stats)