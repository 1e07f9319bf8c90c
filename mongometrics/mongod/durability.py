"""Journaling durability statistics reported by mongod."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from mongometrics.prom import MONGOD_NAMESPACE, Desc, Gauge, GaugeVec, Sample, Summary, SummaryVec

_SUBSYSTEM = "durability"

durability_commits = GaugeVec(
    "durability_commits",
    "Durability commits",
    ["state"],
    namespace=MONGOD_NAMESPACE,
)
durability_journaled_megabytes = Gauge(
    "journaled_megabytes",
    "The journaledMB provides the amount of data in megabytes (MB) written to journal during the last "
    "journal group commit interval",
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)
durability_write_to_data_files_megabytes = Gauge(
    "write_to_data_files_megabytes",
    "The writeToDataFilesMB provides the amount of data in megabytes (MB) written from journal to the "
    "data files during the last journal group commit interval",
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)
durability_compression = Gauge(
    "compression",
    "The compression represents the compression ratio of the data written to the journal: "
    "( journaled_size_of_data / uncompressed_size_of_data )",
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)
durability_early_commits = Summary(
    "early_commits",
    "The earlyCommits value reflects the number of times MongoDB requested a commit before the "
    "scheduled journal group commit interval. Use this value to ensure that your journal group commit "
    "interval is not too long for your deployment",
    namespace=MONGOD_NAMESPACE,
    subsystem=_SUBSYSTEM,
)
durability_time_milliseconds = SummaryVec(
    "durability_time_milliseconds",
    "Summary of times spent during the journaling process.",
    ["stage"],
    namespace=MONGOD_NAMESPACE,
)

_COLLECTED = (
    durability_commits,
    durability_journaled_megabytes,
    durability_write_to_data_files_megabytes,
    durability_compression,
    durability_early_commits,
)


@dataclass
class DurTiming:
    """Time spent in each stage of journaling, in milliseconds."""

    dt: float = 0.0
    prep_log_buffer: float = 0.0
    write_to_journal: float = 0.0
    write_to_data_files: float = 0.0
    remap_private_view: float = 0.0

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> DurTiming:
        return cls(
            dt=float(doc.get("dt", 0)),
            prep_log_buffer=float(doc.get("prepLogBuffer", 0)),
            write_to_journal=float(doc.get("writeToJournal", 0)),
            write_to_data_files=float(doc.get("writeToDataFiles", 0)),
            remap_private_view=float(doc.get("remapPrivateView", 0)),
        )

    def export(self) -> list[Sample]:
        for stage, value in (
            ("dt", self.dt),
            ("prep_log_buffer", self.prep_log_buffer),
            ("write_to_journal", self.write_to_journal),
            ("write_to_data_files", self.write_to_data_files),
            ("remap_private_view", self.remap_private_view),
        ):
            durability_time_milliseconds.labels(stage).observe(value)
        return durability_time_milliseconds.collect()


@dataclass
class DurStats:
    """The dur section of serverStatus."""

    commits: float = 0.0
    journaled_mb: float = 0.0
    write_to_data_files_mb: float = 0.0
    compression: float = 0.0
    commits_in_write_lock: float = 0.0
    early_commits: float = 0.0
    time_ms: DurTiming = field(default_factory=DurTiming)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> DurStats:
        return cls(
            commits=float(doc.get("commits", 0)),
            journaled_mb=float(doc.get("journaledMB", 0)),
            write_to_data_files_mb=float(doc.get("writeToDataFilesMB", 0)),
            compression=float(doc.get("compression", 0)),
            commits_in_write_lock=float(doc.get("commitsInWriteLock", 0)),
            early_commits=float(doc.get("earlyCommits", 0)),
            time_ms=DurTiming.from_document(doc.get("timeMs") or {}),
        )

    def export(self) -> list[Sample]:
        durability_commits.labels("written").set(self.commits)
        durability_commits.labels("in_write_lock").set(self.commits_in_write_lock)
        durability_journaled_megabytes.set(self.journaled_mb)
        durability_write_to_data_files_megabytes.set(self.write_to_data_files_mb)
        durability_compression.set(self.compression)
        durability_early_commits.observe(self.early_commits)
        return self.time_ms.export() + self.collect()

    def collect(self) -> list[Sample]:
        return [sample for metric in _COLLECTED for sample in metric.collect()]

    def describe(self) -> list[Desc]:
        descs = [desc for metric in _COLLECTED for desc in metric.describe()]
        return descs + durability_time_milliseconds.describe()