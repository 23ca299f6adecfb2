# raftkit

Asyncio building blocks for a Raft consensus implementation. The package has
no runtime dependencies beyond the standard library.

## Modules

- `raftkit.quorum.quorum_join(quorum, awaitables)` runs the awaitables
  concurrently. It returns `True` as soon as `quorum` of them have resolved
  to a true value. It returns `False` when there are fewer awaitables than
  the quorum, or when all have finished without reaching it. An awaitable
  that raises counts as a negative reply. Awaitables still pending once the
  outcome is known are cancelled. With no awaitables and a quorum of 0 the
  result is `True`.
- `raftkit.taskdrop.TaskDrop` holds tasks registered with
  `register_abort_on_drop(task)`. It cancels all of them on `close()`, at the
  end of a `with` block, or when the object is garbage collected.
- `raftkit.storage` defines three frozen dataclasses:
  - `Clock(term, index)`.
  - `Entry(prev_clock, this_clock, command)`.
  - `Ballot(cur_term, voted_for)`.

  `Entry` and `Ballot` serialize with `to_bytes()` and `from_bytes(data)`.
  The format uses little-endian 64-bit integers with length-prefixed
  payloads, and truncated data raises `ValueError`. The module also defines
  the abstract async `RaftStorage` interface and
  `find_last_snapshot_index(storage, is_snapshot)`. That function scans from
  the last index down to 1 and returns the highest index whose command
  satisfies `is_snapshot`, or `None`. It raises `LookupError` if an index in
  that range is missing.
- `raftkit.memory_storage.MemoryStorage` keeps the log and the ballot in
  memory.
- `raftkit.file_storage.FileStorage` keeps each entry in
  `<root>/entry/<index>` and the ballot in `<root>/ballot`.
  `extract_entry_index(path)` parses an entry file name back into its index.
- `raftkit.snapshot` carries snapshots as async streams of byte chunks of at
  most `CHUNK_SIZE` (8192) bytes:
  - `into_snapshot_stream(reader)` reads any object with a plain or awaitable
    `read(n)`.
  - `read_snapshot_stream(writer, stream)` writes a stream out.
  - `BytesSnapshot` holds a snapshot in memory and `FileSnapshot` holds one
    in a file.
  - A failing read or stream is reported as `OSError("streaming error")`.
- `raftkit.snapshot_queue.SnapshotQueue` queues entries with
  `await insert(entry, delay)`, where `delay` is in seconds. That call returns
  a future. `await run_once(insert_snapshot)` passes every expired entry,
  earliest first, to the `insert_snapshot` coroutine function. Each entry's
  future then resolves to whether that call succeeded.
- `raftkit.query_queue` provides `Query(core, message, ack)` and
  `QueryQueue`:
  - `register(index, query)` reserves a read until `index` is applied.
    Queries with `core=True` are rejected with `ValueError`.
  - `await execute(index, app)` starts a task for every query reserved at or
    below `index`. It returns `False` when there was none.
  - Each task calls `app.process_read(message)`. The result is set on the
    query's `ack` future, and the future is cancelled if the read raises.
- `raftkit.simple` covers applications whose snapshots are plain bytes:
  - Subclass `RaftAppSimple` and implement `process_read`, `process_write`,
    `install_snapshot` and `fold_snapshot`.
  - Wrap the application in `ToRaftApp(app, repo)` together with a
    `SnapshotRepository`: `BytesRepository()` in memory, or a
    `FileRepository` with one file per snapshot index.
  - When `process_write` returns a new snapshot, `ToRaftApp.process_write`
    stores it at the entry index and reports `MakeSnapshot.COPY_SNAPSHOT`.
    Otherwise, or if storing fails, it reports `MakeSnapshot.NONE`.

## Storage

```python
import asyncio
from pathlib import Path

from raftkit.file_storage import FileStorage
from raftkit.storage import Ballot, Clock, Entry


async def main():
    root = Path("/tmp/raft-log")
    FileStorage.destroy(root)
    FileStorage.create(root)
    storage = FileStorage.open(root)

    await storage.save_ballot(Ballot(cur_term=1, voted_for=None))
    print(await storage.load_ballot())

    await storage.insert_entry(1, Entry(Clock(0, 0), Clock(1, 1), b"noop"))
    print(await storage.get_head_index(), await storage.get_last_index())  # 1 1


asyncio.run(main())
```

`FileStorage.create` and `FileRepository.create` expect the directory not to
exist yet. Call `destroy` first to start from a clean state; `destroy` ignores
a missing directory.

## Waiting for a quorum

```python
import asyncio

from raftkit.quorum import quorum_join


async def reply(ok):
    return ok


async def main():
    ok = await quorum_join(2, [reply(True), reply(False), reply(True)])
    print(ok)  # True


asyncio.run(main())
```

## What the package does not do

raftkit provides pieces, not a running consensus node. It does not include:

- a network server or client;
- leader election, heartbeats or log replication;
- membership changes;
- a command-line tool.

The command encoding of log entries is left to the caller. This is why
`find_last_snapshot_index` takes an `is_snapshot` predicate.

## Running the tests

```
pip install -e ".[test]"
pytest
```