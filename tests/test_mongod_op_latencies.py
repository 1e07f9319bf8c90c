from mongometrics.mongod.op_latencies import (
    HistBucket,
    LatencyStat,
    OpLatenciesStat,
    op_latencies_histogram,
)

PREFIX = "mongodb_mongod_"

DOC = {
    "reads": {
        "histogram": [{"micros": 128, "count": 5}, {"micros": 256, "count": 9}],
        "latency": 4096,
        "ops": 14,
    },
    "writes": {"latency": 2048, "ops": 6},
}


def _find(samples, name, **labels):
    matches = [s for s in samples if s.name == name and all(s.labels.get(k) == v for k, v in labels.items())]
    assert matches, f"no sample {name} {labels}"
    return matches[0]


def test_hist_bucket_from_document():
    assert HistBucket.from_document({"micros": 128, "count": 5}) == HistBucket(micros=128, count=5.0)


def test_from_document_sections():
    stat = OpLatenciesStat.from_document(DOC)
    assert stat.reads.histogram == [HistBucket(128, 5.0), HistBucket(256, 9.0)]
    assert stat.writes.histogram is None
    assert stat.writes.ops == 6.0
    assert stat.commands is None


def test_export_totals():
    samples = OpLatenciesStat.from_document(DOC).export()
    assert _find(samples, PREFIX + "op_latencies_latency_total", type="read").value == 4096.0
    assert _find(samples, PREFIX + "op_latencies_ops_total", type="read").value == 14.0
    assert _find(samples, PREFIX + "op_latencies_latency_total", type="write").value == 2048.0


def test_export_histogram_labels():
    samples = OpLatenciesStat.from_document(DOC).export()
    name = PREFIX + "op_latencies_histogram"
    assert _find(samples, name, type="read", micros="128").value == 5.0
    assert _find(samples, name, type="read", micros="256").value == 9.0


def test_update_without_histogram_adds_no_buckets():
    LatencyStat(latency=3.0, ops=2.0).update("custom_op")
    histogram_ops = {s.labels["type"] for s in op_latencies_histogram.collect()}
    assert "custom_op" not in histogram_ops


def test_describe_names():
    names = [d.fqname for d in OpLatenciesStat().describe()]
    assert names == [
        PREFIX + "op_latencies_latency_total",
        PREFIX + "op_latencies_ops_total",
        PREFIX + "op_latencies_histogram",
    ]