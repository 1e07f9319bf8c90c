"""Assertion counters from serverStatus."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from mongometrics.prom import COMMON_NAMESPACE, CounterVec, Desc, Sample

asserts_total = CounterVec(
    "asserts_total",
    "The asserts document reports the number of asserts on the database. While assert errors are "
    "typically uncommon, if there are non-zero values for the asserts, you should check the log file "
    "for the mongod process for more information. In many cases these errors are trivial, but are "
    "worth investigating.",
    ["type"],
    namespace=COMMON_NAMESPACE,
)


@dataclass
class AssertsStats:
    """The asserts section of serverStatus."""

    regular: float = 0.0
    warning: float = 0.0
    msg: float = 0.0
    user: float = 0.0
    rollovers: float = 0.0

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> AssertsStats:
        return cls(
            regular=float(doc.get("regular", 0)),
            warning=float(doc.get("warning", 0)),
            msg=float(doc.get("msg", 0)),
            user=float(doc.get("user", 0)),
            rollovers=float(doc.get("rollovers", 0)),
        )

    def export(self) -> list[Sample]:
        for label, value in (
            ("regular", self.regular),
            ("warning", self.warning),
            ("msg", self.msg),
            ("user", self.user),
            ("rollovers", self.rollovers),
        ):
            asserts_total.labels(label).set(value)
        return asserts_total.collect()

    def describe(self) -> list[Desc]:
        return asserts_total.describe()