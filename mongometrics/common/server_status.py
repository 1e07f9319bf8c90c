"""Top-level serverStatus document and its export."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from mongometrics.common.asserts import AssertsStats
from mongometrics.common.connections import ConnectionStats
from mongometrics.common.cursors import Cursors
from mongometrics.common.extra_info import ExtraInfo
from mongometrics.common.memory import MemStats
from mongometrics.common.network import NetworkStats
from mongometrics.common.op_counters import OpcountersReplStats, OpcountersStats
from mongometrics.prom import COMMON_NAMESPACE, Counter, Desc, GaugeVec, Sample

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

version_info = GaugeVec(
    "info",
    "Software version information for mongodb process.",
    ["mongodb"],
    namespace=COMMON_NAMESPACE,
    subsystem="version",
)
instance_uptime_seconds = Counter(
    "uptime_seconds",
    "The value of the uptime field corresponds to the number of seconds that the mongos or mongod "
    "process has been active.",
    namespace=COMMON_NAMESPACE,
    subsystem="instance",
)
instance_uptime_estimate_seconds = Counter(
    "uptime_estimate_seconds",
    "uptimeEstimate provides the uptime as calculated from MongoDB's internal course-grained time "
    "keeping system.",
    namespace=COMMON_NAMESPACE,
    subsystem="instance",
)
instance_local_time = Counter(
    "local_time",
    "The localTime value is the current time, according to the server, in UTC specified in an ISODate "
    "format.",
    namespace=COMMON_NAMESPACE,
    subsystem="instance",
)


def _unix(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return math.floor(moment.timestamp())


def _section(doc: Mapping[str, Any], key: str, kind):
    sub = doc.get(key)
    return None if sub is None else kind.from_document(sub)


@dataclass
class ServerStatus:
    """The data returned by the serverStatus command."""

    version: str = ""
    uptime: float = 0.0
    uptime_estimate: float = 0.0
    local_time: datetime = field(default_factory=lambda: ZERO_TIME)
    asserts: AssertsStats | None = None
    connections: ConnectionStats | None = None
    cursors: Cursors | None = None
    extra_info: ExtraInfo | None = None
    mem: MemStats | None = None
    network: NetworkStats | None = None
    opcounters: OpcountersStats | None = None
    opcounters_repl: OpcountersReplStats | None = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> ServerStatus:
        local_time = doc.get("localTime")
        return cls(
            version=str(doc.get("version", "")),
            uptime=float(doc.get("uptime", 0)),
            uptime_estimate=float(doc.get("uptimeEstimate", 0)),
            local_time=local_time if local_time is not None else ZERO_TIME,
            asserts=_section(doc, "asserts", AssertsStats),
            connections=_section(doc, "connections", ConnectionStats),
            cursors=_section(doc, "cursors", Cursors),
            extra_info=_section(doc, "extra_info", ExtraInfo),
            mem=_section(doc, "mem", MemStats),
            network=_section(doc, "network", NetworkStats),
            opcounters=_section(doc, "opcounters", OpcountersStats),
            opcounters_repl=_section(doc, "opcountersRepl", OpcountersReplStats),
        )

    def _sections(self):
        return (
            self.asserts,
            self.connections,
            self.cursors,
            self.extra_info,
            self.mem,
            self.network,
            self.opcounters,
            self.opcounters_repl,
        )

    def export(self) -> list[Sample]:
        version_info.labels(self.version).set(1)
        instance_uptime_seconds.set(self.uptime)
        instance_uptime_estimate_seconds.set(self.uptime)
        instance_local_time.set(_unix(self.local_time))
        samples = (
            version_info.collect()
            + instance_uptime_seconds.collect()
            + instance_uptime_estimate_seconds.collect()
            + instance_local_time.collect()
        )
        for section in self._sections():
            if section is not None:
                samples.extend(section.export())
        return samples

    def describe(self) -> list[Desc]:
        descs = (
            instance_uptime_seconds.describe()
            + instance_uptime_estimate_seconds.describe()
            + instance_local_time.describe()
        )
        for section in self._sections()[:6]:
            if section is not None:
                descs.extend(section.describe())
        return descs