from mongometrics.common.memory import MemStats


def test_export_values():
    doc = {"bits": 64, "resident": 100, "virtual": 200, "mapped": 50, "mappedWithJournal": 75}
    samples = MemStats.from_document(doc).export()
    values = {s.labels["type"]: s.value for s in samples}
    assert values == {"resident": 100, "virtual": 200, "mapped": 50, "mapped_with_journal": 75}


def test_bits_is_parsed_but_not_exported():
    stats = MemStats.from_document({"bits": 64})
    assert stats.bits == 64
    assert "bits" not in {s.labels["type"] for s in stats.export()}


def test_describe():
    (desc,) = MemStats().describe()
    assert desc.fqname == "mongodb_memory"
    assert desc.label_names == ("type",)