from datetime import datetime, timezone

from mongometrics.mongod.background_flushing import FlushStats

FINISHED = datetime(2019, 6, 1, 12, 0, 0, tzinfo=timezone.utc)

DOC = {
    "flushes": 10,
    "total_ms": 500,
    "average_ms": 50,
    "last_ms": 40,
    "last_finished": FINISHED,
}


def _values(samples):
    return {s.name: s.value for s in samples}


def test_from_document():
    stats = FlushStats.from_document(DOC)
    assert stats.flushes == 10.0
    assert stats.total_ms == 500.0
    assert stats.last_finished == FINISHED


def test_export_values():
    values = _values(FlushStats.from_document(DOC).export())
    assert values["mongodb_mongod_background_flushing_flushes_total"] == 10.0
    assert values["mongodb_mongod_background_flushing_total_milliseconds"] == 500.0
    assert values["mongodb_mongod_background_flushing_average_milliseconds"] == 50.0
    assert values["mongodb_mongod_background_flushing_last_milliseconds"] == 40.0
    assert values["mongodb_mongod_background_flushing_last_finished_time"] == FINISHED.timestamp()


def test_naive_time_is_utc():
    stats = FlushStats.from_document({**DOC, "last_finished": FINISHED.replace(tzinfo=None)})
    values = _values(stats.export())
    assert values["mongodb_mongod_background_flushing_last_finished_time"] == FINISHED.timestamp()


def test_describe_order_and_kinds():
    descs = FlushStats().describe()
    assert [d.fqname for d in descs] == [
        "mongodb_mongod_background_flushing_flushes_total",
        "mongodb_mongod_background_flushing_total_milliseconds",
        "mongodb_mongod_background_flushing_average_milliseconds",
        "mongodb_mongod_background_flushing_last_milliseconds",
        "mongodb_mongod_background_flushing_last_finished_time",
    ]
    assert [d.kind for d in descs] == ["counter", "counter", "gauge", "gauge", "gauge"]