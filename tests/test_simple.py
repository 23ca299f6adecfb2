import pytest

from raftkit.simple import (
    BytesRepository,
    FileRepository,
    MakeSnapshot,
    RaftAppSimple,
    SnapshotRepository,
    ToRaftApp,
)
from raftkit.snapshot import BytesSnapshot


async def collect(stream):
    return b"".join([chunk async for chunk in stream])


class CounterApp(RaftAppSimple):
    def __init__(self):
        self.count = 0

    async def process_read(self, request):
        return str(self.count).encode()

    async def process_write(self, request):
        self.count += 1
        snapshot = str(self.count).encode() if request == b"snap" else None
        return b"ok", snapshot

    async def install_snapshot(self, snapshot):
        self.count = int(snapshot) if snapshot is not None else 0

    async def fold_snapshot(self, old_snapshot, requests):
        base = int(old_snapshot) if old_snapshot is not None else 0
        return str(base + len(requests)).encode()


class BrokenRepository(SnapshotRepository):
    async def save_snapshot_stream(self, stream, snapshot_index):
        raise OSError("disk full")

    async def open_snapshot_stream(self, index):
        raise OSError("disk full")

    async def delete_snapshot(self, index):
        raise OSError("disk full")


def test_file_repository(tmp_path):
    path = tmp_path / "lol-test-file-repo"
    FileRepository.destroy(path)
    FileRepository.create(path)
    assert path.is_dir()
    FileRepository.destroy(path)
    assert not path.exists()


def test_file_repository_create_twice_fails(tmp_path):
    path = tmp_path / "repo"
    FileRepository.create(path)
    with pytest.raises(FileExistsError):
        FileRepository.create(path)


@pytest.mark.asyncio
async def test_file_repository_round_trip(tmp_path):
    path = tmp_path / "repo"
    FileRepository.create(path)
    repo = FileRepository.open(path)
    await repo.save_snapshot_stream(await BytesSnapshot(b"state").open_snapshot_stream(), 7)
    assert (path / "7").read_bytes() == b"state"
    assert await collect(await repo.open_snapshot_stream(7)) == b"state"
    await repo.delete_snapshot(7)
    await repo.delete_snapshot(7)
    assert not (path / "7").exists()


@pytest.mark.asyncio
async def test_bytes_repository_round_trip_and_delete():
    repo = BytesRepository()
    await repo.save_snapshot_stream(await BytesSnapshot(b"abc").open_snapshot_stream(), 2)
    assert await collect(await repo.open_snapshot_stream(2)) == b"abc"
    await repo.delete_snapshot(2)
    with pytest.raises(KeyError):
        await repo.open_snapshot_stream(2)


@pytest.mark.asyncio
async def test_process_write_without_snapshot():
    raft_app = ToRaftApp(CounterApp(), BytesRepository())
    reply, make = await raft_app.process_write(b"inc", 1)
    assert reply == b"ok"
    assert make is MakeSnapshot.NONE
    assert await raft_app.process_read(b"get") == b"1"


@pytest.mark.asyncio
async def test_process_write_with_snapshot_is_stored():
    raft_app = ToRaftApp(CounterApp(), BytesRepository())
    await raft_app.process_write(b"inc", 1)
    reply, make = await raft_app.process_write(b"snap", 2)
    assert make is MakeSnapshot.COPY_SNAPSHOT
    assert await collect(await raft_app.open_snapshot(2)) == b"2"


@pytest.mark.asyncio
async def test_process_write_with_failing_repository():
    raft_app = ToRaftApp(CounterApp(), BrokenRepository())
    reply, make = await raft_app.process_write(b"snap", 1)
    assert reply == b"ok"
    assert make is MakeSnapshot.NONE


@pytest.mark.asyncio
async def test_install_snapshot():
    app = CounterApp()
    raft_app = ToRaftApp(app, BytesRepository())
    await raft_app.save_snapshot(await BytesSnapshot(b"41").open_snapshot_stream(), 5)
    await raft_app.install_snapshot(5)
    assert app.count == 41
    await raft_app.install_snapshot(None)
    assert app.count == 0


@pytest.mark.asyncio
async def test_fold_snapshot():
    raft_app = ToRaftApp(CounterApp(), BytesRepository())
    await raft_app.fold_snapshot(None, [b"a", b"b", b"c"], 3)
    assert await collect(await raft_app.open_snapshot(3)) == b"3"
    await raft_app.fold_snapshot(3, [b"d", b"e"], 5)
    assert await collect(await raft_app.open_snapshot(5)) == b"5"


@pytest.mark.asyncio
async def test_delete_snapshot():
    raft_app = ToRaftApp(CounterApp(), BytesRepository())
    await raft_app.fold_snapshot(None, [b"a"], 1)
    await raft_app.delete_snapshot(1)
    with pytest.raises(KeyError):
        await raft_app.install_snapshot(1)