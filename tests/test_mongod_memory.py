from mongometrics.mongod.memory import MemStats

DOC = {"bits": 64, "resident": 100, "virtual": 200, "mapped": 300, "mappedWithJournal": 600}


def _values(samples):
    return {s.labels["type"]: s.value for s in samples}


def test_from_document():
    stats = MemStats.from_document(DOC)
    assert stats.bits == 64.0
    assert stats.mapped_with_journal == 600.0


def test_export_types():
    samples = MemStats.from_document(DOC).export()
    assert {s.name for s in samples} == {"mongodb_mongod_memory"}
    assert _values(samples) == {
        "resident": 100.0,
        "virtual": 200.0,
        "mapped": 300.0,
        "mapped_with_journal": 600.0,
    }


def test_bits_not_exported():
    values = _values(MemStats.from_document(DOC).export())
    assert "bits" not in values


def test_describe():
    (desc,) = MemStats().describe()
    assert desc.fqname == "mongodb_mongod_memory"
    assert desc.label_names == ("type",)
    assert desc.kind == "gauge"