import pytest

from raftkit.memory_storage import MemoryStorage
from raftkit.storage import Ballot, Clock, Entry, find_last_snapshot_index

ORIGIN = Clock(0, 0)
PLAIN = Entry(ORIGIN, ORIGIN, b"noop")
SNAP = Entry(ORIGIN, ORIGIN, b"snapshot")


def snap_command(command):
    return command == SNAP.command


@pytest.mark.asyncio
async def test_mem_storage():
    store = MemoryStorage()
    member = "http://127.0.0.1:50001"

    assert await store.load_ballot() == Ballot(0, None)
    await store.save_ballot(Ballot(1, member))
    assert await store.load_ballot() == Ballot(1, member)

    assert await find_last_snapshot_index(store, snap_command) is None
    assert (await store.get_last_index(), await store.get_entry(1)) == (0, None)

    await store.insert_entry(1, SNAP)
    assert (await store.get_head_index(), await store.get_last_index()) == (1, 1)
    assert await find_last_snapshot_index(store, snap_command) == 1

    for index in (2, 3, 4, 5):
        await store.insert_entry(index, PLAIN)
    assert (await store.get_head_index(), await store.get_last_index()) == (1, 5)

    await store.insert_entry(4, SNAP)
    assert await store.get_head_index() == 1
    assert await find_last_snapshot_index(store, snap_command) == 4
    await store.insert_entry(2, SNAP)
    assert await find_last_snapshot_index(store, snap_command) == 4

    assert await store.get_entry(1) == SNAP
    for index in (1, 2, 3):
        await store.delete_entry(index)
    assert (await store.get_head_index(), await store.get_entry(1)) == (4, None)

    for index in range(6, 1001):
        await store.insert_entry(index, PLAIN)
    assert (await store.get_head_index(), await store.get_last_index()) == (4, 1000)


@pytest.mark.asyncio
async def test_get_entry_returns_stored_value():
    store = MemoryStorage()
    entry = Entry(Clock(2, 6), Clock(3, 7), b"payload")
    await store.insert_entry(7, entry)
    assert await store.get_entry(7) == entry