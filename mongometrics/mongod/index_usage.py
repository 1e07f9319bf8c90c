"""Index usage counts gathered with the $indexStats aggregation stage."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from pymongo.errors import PyMongoError

from mongometrics.prom import MONGOD_NAMESPACE, CounterVec, Desc, Sample

log = logging.getLogger(__name__)

index_usage = CounterVec(
    "index_usage_count",
    "Contains a usage count of each index",
    ["collection", "db", "index"],
    namespace=MONGOD_NAMESPACE,
)

# Keys ("", database, or database.collection) whose failure has already been logged.
_log_suppressed: set[str] = set()


@dataclass
class IndexUsageStats:
    """Usage of one index."""

    name: str = ""
    ops: float = 0.0
    database: str = ""
    collection: str = ""

    @classmethod
    def from_document(cls, doc: Mapping[str, Any], database: str, collection: str) -> IndexUsageStats:
        accesses = doc.get("accesses") or {}
        return cls(
            name=str(doc.get("name", "")),
            ops=float(accesses.get("ops", 0)),
            database=database,
            collection=collection,
        )


@dataclass
class IndexStatsList:
    """Usage of all indexes."""

    items: list[IndexUsageStats] = field(default_factory=list)

    def export(self) -> list[Sample]:
        index_usage.reset()
        for stat in self.items:
            index_usage.labels(db=stat.database, collection=stat.collection, index=stat.name).add(stat.ops)
        return index_usage.collect()

    def describe(self) -> list[Desc]:
        return index_usage.describe()


def _log_once(key: str, message: str, err: Exception) -> None:
    if key not in _log_suppressed:
        log.error("%s. %s This log message will be suppressed from now.", err, message)
        _log_suppressed.add(key)


def get_index_usage_stat_list(client) -> IndexStatsList | None:
    """Read $indexStats of every collection; None when databases cannot be listed."""
    try:
        database_names = client.list_database_names()
    except PyMongoError as err:
        _log_once("", "Index usage stats will not be collected.", err)
        return None
    _log_suppressed.discard("")

    stats = IndexStatsList()
    for db_name in database_names:
        database = client[db_name]
        try:
            coll_names = database.list_collection_names()
        except PyMongoError as err:
            _log_once(db_name, "Index usage stats will not be collected for this db.", err)
            continue
        _log_suppressed.discard(db_name)
        for coll_name in coll_names:
            key = f"{db_name}.{coll_name}"
            try:
                docs = list(database[coll_name].aggregate([{"$indexStats": {}}]))
            except PyMongoError as err:
                _log_once(key, "Index usage stats will not be collected for this collection.", err)
                continue
            _log_suppressed.discard(key)
            stats.items.extend(IndexUsageStats.from_document(doc, db_name, coll_name) for doc in docs)
    return stats