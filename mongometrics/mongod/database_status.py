"""Per-database statistics gathered with dbStats."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from bson.son import SON
from pymongo.errors import PyMongoError

from mongometrics.prom import MONGOD_NAMESPACE, Desc, GaugeVec, Sample

log = logging.getLogger(__name__)

_SUBSYSTEM = "db"

index_size = GaugeVec(
    "index_size_bytes",
    "The total size in bytes of all indexes created on this database",
    ["db"],
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)
data_size = GaugeVec(
    "data_size_bytes",
    "The total size in bytes of the uncompressed data held in this database",
    ["db"],
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)
collections_total = GaugeVec(
    "collections_total",
    "Contains a count of the number of collections in that database",
    ["db"],
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)
indexes_total = GaugeVec(
    "indexes_total",
    "Contains a count of the total number of indexes across all collections in the database",
    ["db"],
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)
objects_total = GaugeVec(
    "objects_total",
    "Contains a count of the number of objects (i.e. documents) in the database across all collections",
    ["db"],
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)

_ALL = (index_size, data_size, collections_total, indexes_total, objects_total)


@dataclass
class DatabaseStatus:
    """dbStats of one database."""

    name: str = ""
    index_size: int = 0
    data_size: int = 0
    collections: int = 0
    objects: int = 0
    indexes: int = 0

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> DatabaseStatus:
        return cls(
            name=str(doc.get("db", "")),
            index_size=int(doc.get("indexSize", 0)),
            data_size=int(doc.get("dataSize", 0)),
            collections=int(doc.get("collections", 0)),
            objects=int(doc.get("objects", 0)),
            indexes=int(doc.get("indexes", 0)),
        )


@dataclass
class DatabaseStatList:
    """Statistics of all databases."""

    members: list[DatabaseStatus] = field(default_factory=list)

    def export(self) -> list[Sample]:
        for member in self.members:
            index_size.labels(db=member.name).set(member.index_size)
            data_size.labels(db=member.name).set(member.data_size)
            collections_total.labels(db=member.name).set(member.collections)
            indexes_total.labels(db=member.name).set(member.indexes)
            objects_total.labels(db=member.name).set(member.objects)
        return [sample for metric in _ALL for sample in metric.collect()]

    def describe(self) -> list[Desc]:
        return [desc for metric in _ALL for desc in metric.describe()]


def get_database_stat_list(client) -> DatabaseStatList | None:
    """Run dbStats on every database; None when any step fails."""
    try:
        database_names = client.list_database_names()
    except PyMongoError:
        log.error("Failed to get database names")
        return None
    stat_list = DatabaseStatList()
    for db_name in database_names:
        try:
            result = client[db_name].command(SON([("dbStats", 1), ("scale", 1)]))
        except PyMongoError:
            log.error("Failed to get database status.")
            return None
        stat_list.members.append(DatabaseStatus.from_document(result))
    return stat_list