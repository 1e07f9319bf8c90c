from mongometrics.common.network import NetworkStats


def test_from_document_keys():
    stats = NetworkStats.from_document({"bytesIn": 10, "bytesOut": 20, "numRequests": 30})
    assert (stats.bytes_in, stats.bytes_out, stats.num_requests) == (10, 20, 30)


def test_export_requests_first_then_bytes():
    samples = NetworkStats(bytes_in=10, bytes_out=20, num_requests=30).export()
    assert samples[0].name == "mongodb_network_metrics_num_requests_total"
    assert samples[0].value == 30
    byte_values = {s.labels["state"]: s.value for s in samples[1:]}
    assert byte_values == {"in_bytes": 10, "out_bytes": 20}


def test_describe_order():
    names = [d.fqname for d in NetworkStats().describe()]
    assert names == ["mongodb_network_metrics_num_requests_total", "mongodb_network_bytes_total"]