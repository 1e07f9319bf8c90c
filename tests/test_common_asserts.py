from mongometrics.common.asserts import AssertsStats


def _by_type(samples):
    return {s.labels["type"]: s.value for s in samples}


def test_export_sets_every_type():
    doc = {"regular": 1, "warning": 2, "msg": 3, "user": 4, "rollovers": 5}
    stats = AssertsStats.from_document(doc)
    assert _by_type(stats.export()) == {k: float(v) for k, v in doc.items()}


def test_missing_fields_default_to_zero():
    stats = AssertsStats.from_document({"user": 9})
    values = _by_type(stats.export())
    assert values["user"] == 9
    assert values["regular"] == 0 and values["rollovers"] == 0


def test_samples_carry_metric_name():
    samples = AssertsStats(regular=1).export()
    assert {s.name for s in samples} == {"mongodb_asserts_total"}
    assert all(s.desc.kind == "counter" for s in samples)


def test_describe():
    (desc,) = AssertsStats().describe()
    assert desc.fqname == "mongodb_asserts_total"
    assert desc.label_names == ("type",)