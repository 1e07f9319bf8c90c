import logging

from pymongo.errors import OperationFailure

from mongometrics.mongod.index_usage import (
    IndexStatsList,
    IndexUsageStats,
    get_index_usage_stat_list,
)

NAME = "mongodb_mongod_index_usage_count"


def _value(samples, **labels):
    matches = [s.value for s in samples if s.name == NAME and dict(s.labels) == labels]
    assert len(matches) == 1
    return matches[0]


class FakeCollection:
    def __init__(self, docs=None, fail=False):
        self.docs = docs or []
        self.fail = fail
        self.pipelines = []

    def aggregate(self, pipeline):
        self.pipelines.append(pipeline)
        if self.fail:
            raise OperationFailure("indexStats denied")
        return iter(self.docs)


class FakeDatabase:
    def __init__(self, collections, fail=False):
        self.collections = collections
        self.fail = fail

    def list_collection_names(self):
        if self.fail:
            raise OperationFailure("listCollections denied")
        return list(self.collections)

    def __getitem__(self, name):
        return self.collections[name]


class FakeClient:
    def __init__(self, databases, fail_list=False):
        self.databases = databases
        self.fail_list = fail_list

    def list_database_names(self):
        if self.fail_list:
            raise OperationFailure("listDatabases denied")
        return list(self.databases)

    def __getitem__(self, name):
        return self.databases[name]


def test_from_document_reads_name_and_ops():
    stat = IndexUsageStats.from_document({"name": "_id_", "accesses": {"ops": 12}}, "shop", "orders")
    assert stat == IndexUsageStats(name="_id_", ops=12.0, database="shop", collection="orders")


def test_from_document_without_accesses():
    stat = IndexUsageStats.from_document({"name": "idx"}, "shop", "orders")
    assert stat.ops == 0.0


def test_export_labels_each_index():
    stats = IndexStatsList(items=[IndexUsageStats("_id_", 7.0, "iu_db", "coll")])
    samples = stats.export()
    assert _value(samples, db="iu_db", collection="coll", index="_id_") == 7.0


def test_export_resets_between_calls():
    stats = IndexStatsList(items=[IndexUsageStats("a_1", 5.0, "iu_reset", "c")])
    stats.export()
    samples = stats.export()
    assert _value(samples, db="iu_reset", collection="c", index="a_1") == 5.0
    later = IndexStatsList(items=[IndexUsageStats("b_1", 1.0, "iu_reset", "c")]).export()
    assert not [s for s in later if dict(s.labels).get("index") == "a_1"]


def test_get_index_usage_stat_list_labels_items():
    orders = FakeCollection([{"name": "_id_", "accesses": {"ops": 3}}, {"name": "x_1", "accesses": {"ops": 4}}])
    client = FakeClient({"iu_get": FakeDatabase({"orders": orders})})
    result = get_index_usage_stat_list(client)
    assert [(i.database, i.collection, i.name, i.ops) for i in result.items] == [
        ("iu_get", "orders", "_id_", 3.0),
        ("iu_get", "orders", "x_1", 4.0),
    ]
    assert orders.pipelines == [[{"$indexStats": {}}]]


def test_get_index_usage_stat_list_skips_failing_parts():
    good = FakeCollection([{"name": "_id_", "accesses": {"ops": 1}}])
    client = FakeClient(
        {
            "iu_bad_db": FakeDatabase({}, fail=True),
            "iu_mixed": FakeDatabase({"bad": FakeCollection(fail=True), "good": good}),
        }
    )
    result = get_index_usage_stat_list(client)
    assert [(i.database, i.collection) for i in result.items] == [("iu_mixed", "good")]


def test_get_index_usage_stat_list_none_when_listing_fails():
    assert get_index_usage_stat_list(FakeClient({}, fail_list=True)) is None


def test_failure_is_logged_once(caplog):
    get_index_usage_stat_list(FakeClient({}))
    client = FakeClient({}, fail_list=True)
    with caplog.at_level(logging.ERROR, logger="mongometrics.mongod.index_usage"):
        get_index_usage_stat_list(client)
        get_index_usage_stat_list(client)
    assert len(caplog.records) == 1
    assert "suppressed" in caplog.records[0].getMessage()