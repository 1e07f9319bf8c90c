from mongometrics.common.op_counters import OpcountersReplStats, OpcountersStats


def _values(samples):
    return {(s.name, tuple(sorted(s.labels.items()))): s.value for s in samples}


DOC = {"insert": 11, "query": 22, "update": 33, "delete": 44, "getmore": 55, "command": 66}


def test_from_document_reads_fields():
    stats = OpcountersStats.from_document(DOC)
    assert stats.insert == 11.0
    assert stats.getmore == 55.0
    assert stats.command == 66.0


def test_missing_fields_default_to_zero():
    stats = OpcountersReplStats.from_document({"query": 3})
    assert stats.query == 3.0
    assert stats.insert == 0.0
    assert stats.delete == 0.0


def test_export_sets_each_type():
    values = _values(OpcountersStats.from_document(DOC).export())
    for key, expected in DOC.items():
        assert values[("mongodb_op_counters_total", (("type", key),))] == float(expected)


def test_repl_export_uses_own_family():
    samples = OpcountersReplStats.from_document(DOC).export()
    assert {s.name for s in samples} == {"mongodb_op_counters_repl_total"}
    values = _values(samples)
    assert values[("mongodb_op_counters_repl_total", (("type", "update"),))] == 33.0


def test_describe():
    (desc,) = OpcountersStats().describe()
    assert desc.fqname == "mongodb_op_counters_total"
    assert desc.kind == "counter"
    assert desc.label_names == ("type",)
    (repl,) = OpcountersReplStats().describe()
    assert repl.fqname == "mongodb_op_counters_repl_total"