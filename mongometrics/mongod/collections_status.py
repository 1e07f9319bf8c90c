"""Per-collection statistics gathered with collStats."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from bson.son import SON
from pymongo.errors import PyMongoError

from mongometrics.prom import MONGOD_NAMESPACE, Desc, GaugeVec, Sample

log = logging.getLogger(__name__)

_SUBSYSTEM = "db_coll"

collection_size = GaugeVec(
    "size",
    "The total size in memory of all records in a collection",
    ["db", "coll"],
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)
collection_object_count = GaugeVec(
    "count",
    "The number of objects or documents in this collection",
    ["db", "coll"],
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)
collection_avg_obj_size = GaugeVec(
    "avgobjsize",
    "The average size of an object in the collection (plus any padding)",
    ["db", "coll"],
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)
collection_storage_size = GaugeVec(
    "storage_size",
    "The total amount of storage allocated to this collection for document storage",
    ["db", "coll"],
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)
collection_indexes = GaugeVec(
    "indexes",
    "The number of indexes on the collection",
    ["db", "coll"],
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)
collection_indexes_size = GaugeVec(
    "indexes_size",
    "The total size of all indexes",
    ["db", "coll"],
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)
collection_index_size = GaugeVec(
    "index_size",
    "The individual index size",
    ["db", "coll", "index"],
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)

_ALL = (
    collection_size,
    collection_object_count,
    collection_avg_obj_size,
    collection_storage_size,
    collection_indexes,
    collection_indexes_size,
    collection_index_size,
)

# Keys ("", database, or database.collection) whose failure has already been logged.
_log_suppressed: set[str] = set()


@dataclass
class CollectionStatus:
    """collStats of one collection."""

    database: str = ""
    name: str = ""
    size: int = 0
    count: int = 0
    avg_obj_size: int = 0
    storage_size: int = 0
    indexes_size: int = 0
    index_sizes: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any], database: str, name: str) -> CollectionStatus:
        return cls(
            database=database,
            name=name,
            size=int(doc.get("size", 0)),
            count=int(doc.get("count", 0)),
            avg_obj_size=int(doc.get("avgObjSize", 0)),
            storage_size=int(doc.get("storageSize", 0)),
            indexes_size=int(doc.get("totalIndexSize", 0)),
            index_sizes={str(k): float(v) for k, v in (doc.get("indexSizes") or {}).items()},
        )


@dataclass
class CollectionStatList:
    """Statistics of all collections."""

    members: list[CollectionStatus] = field(default_factory=list)

    def export(self) -> list[Sample]:
        for metric in _ALL:
            metric.reset()
        for member in self.members:
            labels = {"db": member.database, "coll": member.name}
            collection_size.labels(**labels).set(member.size)
            collection_object_count.labels(**labels).set(member.count)
            collection_avg_obj_size.labels(**labels).set(member.avg_obj_size)
            collection_storage_size.labels(**labels).set(member.storage_size)
            collection_indexes.labels(**labels).set(len(member.index_sizes))
            collection_indexes_size.labels(**labels).set(member.indexes_size)
            for index_name, size in member.index_sizes.items():
                collection_index_size.labels(index=index_name, **labels).set(size)
        return [sample for metric in _ALL for sample in metric.collect()]

    def describe(self) -> list[Desc]:
        return [desc for metric in _ALL[:-1] for desc in metric.describe()]


def _log_once(key: str, message: str, err: Exception) -> None:
    if key not in _log_suppressed:
        log.error("%s. %s This log message will be suppressed from now.", err, message)
        _log_suppressed.add(key)


def get_collection_stat_list(client) -> CollectionStatList | None:
    """Run collStats on every collection; None when databases cannot be listed."""
    try:
        database_names = client.list_database_names()
    except PyMongoError as err:
        _log_once("", "Collection stats will not be collected.", err)
        return None
    _log_suppressed.discard("")

    stat_list = CollectionStatList()
    for db_name in database_names:
        database = client[db_name]
        try:
            coll_names = database.list_collection_names()
        except PyMongoError as err:
            _log_once(db_name, "Collection stats will not be collected for this db.", err)
            continue
        _log_suppressed.discard(db_name)
        for coll_name in coll_names:
            key = f"{db_name}.{coll_name}"
            try:
                result = database.command(SON([("collStats", coll_name), ("scale", 1)]))
            except PyMongoError as err:
                _log_once(key, "Collection stats will not be collected for this collection.", err)
                continue
            _log_suppressed.discard(key)
            stat_list.members.append(CollectionStatus.from_document(result, db_name, coll_name))
    return stat_list