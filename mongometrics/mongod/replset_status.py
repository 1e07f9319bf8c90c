"""Replica set status gathered with replSetGetStatus."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from bson.son import SON
from pymongo.errors import PyMongoError

from mongometrics.common.server_status import ZERO_TIME
from mongometrics.prom import MONGOD_NAMESPACE, CounterVec, Desc, GaugeVec, Sample

log = logging.getLogger(__name__)

SUBSYSTEM = "replset"
_MEMBER_LABELS = ["set", "name", "state"]


def _gauge(name: str, help_text: str, labels: list[str]) -> GaugeVec:
    return GaugeVec(name, help_text, labels, namespace=MONGOD_NAMESPACE, subsystem=SUBSYSTEM)


my_name = _gauge("my_name", "The replica state name of the current member", ["set", "name"])
my_state = _gauge(
    "my_state",
    "An integer between 0 and 10 that represents the replica state of the current member",
    ["set"],
)
date = _gauge(
    "date",
    "The value of the date field is an ISODate of the current time, according to the current server.",
    ["set"],
)
term = _gauge("term", "The election count for the replica set, as known to this replica set member", ["set"])
number_of_members = _gauge("number_of_members", "The number of replica set mebers", ["set"])
heartbeat_interval_millis = _gauge(
    "heatbeat_interval_millis", "The frequency in milliseconds of the heartbeats", ["set"]
)
member_health = _gauge("member_health", "This field conveys if the member is up (1) or down (0).", _MEMBER_LABELS)
member_state = _gauge(
    "member_state",
    "The value of state is an integer between 0 and 10 that represents the replica state of the member.",
    _MEMBER_LABELS,
)
member_uptime = CounterVec(
    "member_uptime",
    "The uptime field holds a value that reflects the number of seconds that this member has been online.",
    _MEMBER_LABELS,
    namespace=MONGOD_NAMESPACE,
    subsystem=SUBSYSTEM,
)
member_optime_date = _gauge(
    "member_optime_date", "The timestamp of the last oplog entry that this member applied.", _MEMBER_LABELS
)
member_rep_lag = _gauge(
    "member_replication_lag", "The replication lag that this member has with the primary.", _MEMBER_LABELS
)
member_operational_lag = _gauge(
    "member_operational_lag",
    "The operationl lag - or staleness of the oplog timestamp - for this member.",
    _MEMBER_LABELS,
)
member_election_date = _gauge(
    "member_election_date", "The timestamp the node was elected as replica leader", _MEMBER_LABELS
)
member_last_heartbeat = _gauge(
    "member_last_heartbeat",
    "The lastHeartbeat value provides an ISODate formatted date and time of the transmission time of "
    "last heartbeat received from this member",
    _MEMBER_LABELS,
)
member_last_heartbeat_recv = _gauge(
    "member_last_heartbeat_recv",
    "The lastHeartbeatRecv value provides an ISODate formatted date and time that the last heartbeat "
    "was received from this member",
    _MEMBER_LABELS,
)
member_ping_ms = _gauge(
    "member_ping_ms",
    "The pingMs represents the number of milliseconds (ms) that a round-trip packet takes to travel "
    "between the remote member and the local instance.",
    _MEMBER_LABELS,
)
member_config_version = _gauge(
    "member_config_version", "The configVersion value is the replica set configuration version.", _MEMBER_LABELS
)

_RESET = (
    my_name,
    my_state,
    term,
    number_of_members,
    heartbeat_interval_millis,
    member_state,
    member_health,
    member_uptime,
    member_optime_date,
    member_rep_lag,
    member_operational_lag,
    member_election_date,
    member_last_heartbeat,
    member_last_heartbeat_recv,
    member_ping_ms,
    member_config_version,
)
_COLLECTED = (
    my_name,
    my_state,
    term,
    date,
    number_of_members,
    heartbeat_interval_millis,
    member_state,
    member_health,
    member_uptime,
    member_optime_date,
    member_rep_lag,
    member_operational_lag,
    member_election_date,
    member_last_heartbeat,
    member_last_heartbeat_recv,
    member_ping_ms,
    member_config_version,
)
_DESCRIBED = tuple(metric for metric in _COLLECTED if metric is not member_last_heartbeat)

# Primary timings remembered from the latest export that saw a primary.
_primary = {"optime_date": 0.0, "last_heartbeat_recv": 0.0}


def _unix(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return math.floor(moment.timestamp())


def _opt(doc: Mapping[str, Any], key: str, kind):
    value = doc.get(key)
    return None if value is None else kind(value)


@dataclass
class Member:
    """One element of the members array of replSetGetStatus."""

    name: str = ""
    self: bool | None = None
    health: int | None = None
    state: int = 0
    state_str: str = ""
    uptime: float = 0.0
    optime: Any = None
    optime_date: datetime = field(default_factory=lambda: ZERO_TIME)
    election_time: Any = None
    election_date: datetime | None = None
    last_heartbeat: datetime | None = None
    last_heartbeat_recv: datetime | None = None
    last_heartbeat_message: str | None = None
    ping_ms: float | None = None
    syncing_to: str | None = None
    config_version: int | None = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> Member:
        optime_date = doc.get("optimeDate")
        return cls(
            name=str(doc.get("name", "")),
            self=_opt(doc, "self", bool),
            health=_opt(doc, "health", int),
            state=int(doc.get("state", 0)),
            state_str=str(doc.get("stateStr", "")),
            uptime=float(doc.get("uptime", 0)),
            optime=doc.get("optime"),
            optime_date=optime_date if optime_date is not None else ZERO_TIME,
            election_time=doc.get("electionTime"),
            election_date=doc.get("electionDate"),
            last_heartbeat=doc.get("lastHeartbeat"),
            last_heartbeat_recv=doc.get("lastHeartbeatRecv"),
            last_heartbeat_message=_opt(doc, "lastHeartbeatMessage", str),
            ping_ms=_opt(doc, "pingMs", float),
            syncing_to=_opt(doc, "syncingTo", str),
            config_version=_opt(doc, "configVersion", int),
        )


@dataclass
class ReplSetStatus:
    """The data returned by replSetGetStatus."""

    set: str = ""
    date: datetime = field(default_factory=lambda: ZERO_TIME)
    my_state: int = 0
    term: int | None = None
    heartbeat_interval_millis: float | None = None
    members: list[Member] = field(default_factory=list)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> ReplSetStatus:
        when = doc.get("date")
        return cls(
            set=str(doc.get("set", "")),
            date=when if when is not None else ZERO_TIME,
            my_state=int(doc.get("myState", 0)),
            term=_opt(doc, "term", int),
            heartbeat_interval_millis=_opt(doc, "heartbeatIntervalMillis", float),
            members=[Member.from_document(m) for m in doc.get("members") or ()],
        )

    def export(self) -> list[Sample]:
        for metric in _RESET:
            metric.reset()

        my_state.labels(self.set).set(self.my_state)
        date_unix = _unix(self.date)
        date.labels(self.set).set(date_unix)
        if self.term is not None:
            term.labels(self.set).set(self.term)
        number_of_members.labels(self.set).set(len(self.members))
        if self.heartbeat_interval_millis is not None:
            heartbeat_interval_millis.labels(self.set).set(self.heartbeat_interval_millis)

        primary = next((m for m in self.members if m.state_str == "PRIMARY"), None)
        if primary is not None:
            _primary["optime_date"] = float(_unix(primary.optime_date))
            recv = primary.last_heartbeat_recv
            _primary["last_heartbeat_recv"] = float(_unix(recv)) if recv is not None else 0.0

        for member in self.members:
            if member.self is not None:
                my_name.labels(set=self.set, name=member.name).set(1)
            labels = {"set": self.set, "name": member.name, "state": member.state_str}
            member_state.labels(**labels).set(member.state)
            if member.health is not None:
                member_health.labels(**labels).set(member.health)
            member_uptime.labels(**labels).set(member.uptime)
            optime_unix = _unix(member.optime_date)
            member_optime_date.labels(**labels).set(optime_unix)
            if member.state_str == "SECONDARY":
                member_rep_lag.labels(**labels).set(_primary["optime_date"] - optime_unix)
                member_operational_lag.labels(**labels).set(date_unix - _primary["last_heartbeat_recv"])
            if member.election_date is not None:
                member_election_date.labels(**labels).set(_unix(member.election_date))
            if member.last_heartbeat is not None:
                member_last_heartbeat.labels(**labels).set(_unix(member.last_heartbeat))
            if member.last_heartbeat_recv is not None:
                member_last_heartbeat_recv.labels(**labels).set(_unix(member.last_heartbeat_recv))
            if member.ping_ms is not None:
                member_ping_ms.labels(**labels).set(member.ping_ms)
            if member.config_version is not None:
                member_config_version.labels(**labels).set(member.config_version)

        return [sample for metric in _COLLECTED for sample in metric.collect()]

    def describe(self) -> list[Desc]:
        return [desc for metric in _DESCRIBED for desc in metric.describe()]


def get_repl_set_status(client) -> ReplSetStatus | None:
    """Run replSetGetStatus; None when the command fails."""
    try:
        result = client["admin"].command(SON([("replSetGetStatus", 1)]))
    except PyMongoError as err:
        log.error("Failed to get replSet status: %s", err)
        return None
    return ReplSetStatus.from_document(result)