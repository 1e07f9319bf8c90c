from mongometrics.mongod.cursors import Cursors


def _values(samples):
    return {s.labels["state"]: s.value for s in samples}


DOC = {"totalOpen": 5, "timedOut": 2, "totalNoTimeout": 1, "pinned": 3}


def test_from_document():
    cursors = Cursors.from_document(DOC)
    assert cursors == Cursors(total_open=5.0, timed_out=2.0, total_no_timeout=1.0, pinned=3.0)


def test_export_states():
    samples = Cursors.from_document(DOC).export()
    assert {s.name for s in samples} == {"mongodb_mongod_cursors"}
    values = _values(samples)
    assert values == {"total_open": 5.0, "timed_out": 2.0, "total_no_timeout": 1.0, "pinned": 3.0}


def test_missing_fields_export_zero():
    values = _values(Cursors.from_document({}).export())
    assert values["pinned"] == 0.0
    assert values["total_open"] == 0.0


def test_describe():
    (desc,) = Cursors().describe()
    assert desc.fqname == "mongodb_mongod_cursors"
    assert desc.kind == "gauge"
    assert desc.label_names == ("state",)