from mongometrics.common.connections import ConnectionStats


def test_from_document_reads_camel_case_key():
    stats = ConnectionStats.from_document({"current": 3, "available": 80, "totalCreated": 120})
    assert stats.total_created == 120
    assert stats.current == 3


def test_export_values_and_order():
    samples = ConnectionStats(current=3, available=80, total_created=120).export()
    gauges = {s.labels["state"]: s.value for s in samples if s.name == "mongodb_connections"}
    assert gauges == {"current": 3, "available": 80}
    assert samples[-1].name == "mongodb_connections_metrics_created_total"
    assert samples[-1].value == 120


def test_missing_fields_default_zero():
    samples = ConnectionStats.from_document({}).export()
    assert all(s.value == 0 for s in samples)


def test_describe_names():
    names = [d.fqname for d in ConnectionStats().describe()]
    assert names == ["mongodb_connections", "mongodb_connections_metrics_created_total"]