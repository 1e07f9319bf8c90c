# mongometrics

Read the statistics a MongoDB server reports about itself and turn them
into Prometheus metric samples, ready to be rendered in the text
exposition format.

Metric names follow the usual layout: statistics common to `mongod` and
`mongos` are exported under `mongodb_`, statistics specific to `mongod`
under `mongodb_mongod_`.

## Installation

```
pip install mongometrics
```

The package needs `pymongo`, which it uses to query the server and for
BSON types.

## What is covered

Classes built from a document the server returns:

| Module | Class | Source document |
| --- | --- | --- |
| `mongometrics.common.server_status` | `ServerStatus` | `serverStatus` (version, uptime, local time and the sections below) |
| `mongometrics.common.asserts` | `AssertsStats` | `serverStatus.asserts` |
| `mongometrics.common.connections` | `ConnectionStats` | `serverStatus.connections` |
| `mongometrics.common.cursors` | `Cursors` | `serverStatus.cursors` |
| `mongometrics.common.extra_info` | `ExtraInfo` | `serverStatus.extra_info` |
| `mongometrics.common.memory` | `MemStats` | `serverStatus.mem` |
| `mongometrics.common.network` | `NetworkStats` | `serverStatus.network` |
| `mongometrics.common.op_counters` | `OpcountersStats`, `OpcountersReplStats` | `serverStatus.opcounters`, `serverStatus.opcountersRepl` |
| `mongometrics.mongod.background_flushing` | `FlushStats` | `serverStatus.backgroundFlushing` |
| `mongometrics.mongod.cursors` | `Cursors` | `serverStatus.cursors` |
| `mongometrics.mongod.extra_info` | `ExtraInfo` | `serverStatus.extra_info` |
| `mongometrics.mongod.memory` | `MemStats` | `serverStatus.mem` |
| `mongometrics.mongod.durability` | `DurStats`, `DurTiming` | `serverStatus.dur` |
| `mongometrics.mongod.global_lock` | `GlobalLockStats`, `QueueStats`, `ClientStats` | `serverStatus.globalLock` |
| `mongometrics.mongod.index_counters` | `IndexCounterStats` | `serverStatus.indexCounters` |
| `mongometrics.mongod.locks` | `LockStatsMap`, `LockStats`, `ReadWriteLockTimes` | `serverStatus.locks` |
| `mongometrics.mongod.op_latencies` | `OpLatenciesStat`, `LatencyStat`, `HistBucket` | `serverStatus.opLatencies` |
| `mongometrics.mongod.replset_status` | `ReplSetStatus`, `Member` | `replSetGetStatus` |

Each has a `from_document(doc)` class method. Missing fields default to
zero (or to `None` for optional sub-documents), and `export()` returns the
list of `Sample` objects for the metrics it feeds.

The `mongod` modules that query the server themselves take a `pymongo`
client:

- `mongometrics.mongod.replset_status.get_repl_set_status(client)` runs
  `replSetGetStatus`; returns `None` if the command fails.
- `mongometrics.mongod.oplog_status.get_oplog_status(client)` reads the
  oldest and newest entries of `local.oplog.rs` and its `collStats`;
  returns `None` if the timestamps cannot be read. `get_oplog_timestamps`
  and `get_oplog_collection_stats` are also available on their own, and
  `bson_mongo_timestamp_to_unix` extracts the seconds of a BSON timestamp.
- `mongometrics.mongod.database_status.get_database_stat_list(client)`
  runs `dbStats` on every database; returns `None` if any step fails.
- `mongometrics.mongod.collections_status.get_collection_stat_list(client)`
  runs `collStats` on every collection.
- `mongometrics.mongod.index_usage.get_index_usage_stat_list(client)`
  runs the `$indexStats` aggregation stage on every collection.

The last two return `None` only when the database names cannot be listed;
a database or collection that fails is skipped, and its error is logged
once until it succeeds again.

## Usage

```python
from pymongo import MongoClient

from mongometrics.common.server_status import ServerStatus
from mongometrics.mongod.replset_status import get_repl_set_status
from mongometrics.prom import render_text

client = MongoClient("mongodb://localhost:27017")

samples = ServerStatus.from_document(client.admin.command("serverStatus")).export()

replset = get_repl_set_status(client)
if replset is not None:
    samples += replset.export()

print(render_text(samples))
```

Every collector also has `describe()`, which lists the `Desc` records
(fully qualified name, help text, label names and kind) of its metrics
without values.

The metric objects live at module level, so values set by one export stay
in place until the next one. The replica set, collection and index usage
exports clear their labelled series first, so members, collections and
indexes that have gone away stop being reported.

## Metric primitives

`mongometrics.prom` holds the small metric model the collectors are built
on: `Gauge`, `Counter` and `Summary` (count, sum and windowed quantiles),
their labelled variants `GaugeVec`, `CounterVec` and `SummaryVec`, the
`Desc` and `Sample` records they produce, `build_fqname(namespace,
subsystem, name)` for joining metric names, and `render_text(samples)` for
the Prometheus text exposition format.

## What the package does not do

- It has no command and no HTTP endpoint: it produces samples and text,
  and serving them to Prometheus is left to the application.
- The `metrics` section of `serverStatus` (document, operation, query
  executor, record, storage, cursor, TTL and replication counters) is not
  turned into metrics.
- Storage engine specific statistics are not covered.

## Running the tests

```
pip install -e ".[test]"
pytest
```