from mongometrics.mongod.index_counters import IndexCounterStats

PREFIX = "mongodb_mongod_"

DOC = {"accesses": 100, "hits": 90, "misses": 10, "resets": 1, "missRatio": 0.1}


def _find(samples, name, **labels):
    matches = [s for s in samples if s.name == name and all(s.labels.get(k) == v for k, v in labels.items())]
    assert matches, f"no sample {name} {labels}"
    return matches[0]


def test_from_document():
    stats = IndexCounterStats.from_document(DOC)
    assert stats == IndexCounterStats(accesses=100.0, hits=90.0, misses=10.0, resets=1.0, miss_ratio=0.1)


def test_from_document_defaults():
    assert IndexCounterStats.from_document({}) == IndexCounterStats()


def test_export_values():
    samples = IndexCounterStats.from_document(DOC).export()
    total = PREFIX + "index_counters_total"
    assert _find(samples, total, type="accesses").value == 100.0
    assert _find(samples, total, type="hits").value == 90.0
    assert _find(samples, total, type="misses").value == 10.0
    assert _find(samples, total, type="resets").value == 1.0
    assert _find(samples, PREFIX + "index_counters_miss_ratio").value == 0.1


def test_export_types_present():
    samples = IndexCounterStats().export()
    types = {s.labels["type"] for s in samples if s.name == PREFIX + "index_counters_total"}
    assert types == {"accesses", "hits", "misses", "resets"}


def test_describe_names():
    names = [d.fqname for d in IndexCounterStats().describe()]
    assert names == [PREFIX + "index_counters_total", PREFIX + "index_counters_miss_ratio"]