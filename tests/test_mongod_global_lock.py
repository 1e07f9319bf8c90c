from mongometrics.mongod.global_lock import (
    ClientStats,
    GlobalLockStats,
    QueueStats,
    global_lock_client,
    global_lock_current_queue,
)

PREFIX = "mongodb_mongod_"

DOC = {
    "totalTime": 9000,
    "lockTime": 1200,
    "ratio": 0.125,
    "currentQueue": {"total": 5, "readers": 2, "writers": 3},
    "activeClients": {"total": 13, "readers": 6, "writers": 7},
}


def _find(samples, name, **labels):
    matches = [s for s in samples if s.name == name and all(s.labels.get(k) == v for k, v in labels.items())]
    assert matches, f"no sample {name} {labels}"
    return matches[0]


def test_from_document_nested():
    stats = GlobalLockStats.from_document(DOC)
    assert stats.total_time == 9000.0
    assert stats.current_queue == QueueStats(total=5.0, readers=2.0, writers=3.0)
    assert stats.active_clients == ClientStats(total=13.0, readers=6.0, writers=7.0)


def test_from_document_missing_sections():
    stats = GlobalLockStats.from_document({})
    assert stats.current_queue is None
    assert stats.active_clients is None


def test_export_total_uses_lock_time():
    samples = GlobalLockStats.from_document(DOC).export()
    assert _find(samples, PREFIX + "global_lock_total").value == 1200.0
    assert _find(samples, PREFIX + "global_lock_ratio").value == 0.125


def test_export_queue_and_clients():
    samples = GlobalLockStats.from_document(DOC).export()
    assert _find(samples, PREFIX + "global_lock_current_queue", type="reader").value == 2.0
    assert _find(samples, PREFIX + "global_lock_current_queue", type="writer").value == 3.0
    assert _find(samples, PREFIX + "global_lock_client", type="reader").value == 6.0
    assert _find(samples, PREFIX + "global_lock_client", type="writer").value == 7.0


def test_sub_exports_set_values():
    ClientStats(readers=21.0, writers=22.0).export()
    QueueStats(readers=31.0, writers=32.0).export()
    assert global_lock_client.labels("reader").value == 21.0
    assert global_lock_client.labels("writer").value == 22.0
    assert global_lock_current_queue.labels("reader").value == 31.0
    assert global_lock_current_queue.labels("writer").value == 32.0


def test_export_without_sections_still_reports_totals():
    samples = GlobalLockStats(lock_time=44.0, ratio=0.5).export()
    assert _find(samples, PREFIX + "global_lock_total").value == 44.0
    assert _find(samples, PREFIX + "global_lock_ratio").value == 0.5


def test_describe_names():
    names = {d.fqname for d in GlobalLockStats().describe()}
    assert names == {
        PREFIX + "global_lock_total",
        PREFIX + "global_lock_ratio",
        PREFIX + "global_lock_current_queue",
        PREFIX + "global_lock_client",
    }