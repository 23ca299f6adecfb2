"""In-memory log storage."""

from __future__ import annotations

from typing import Optional

from .storage import Ballot, Entry, RaftStorage


class MemoryStorage(RaftStorage):
    """Keeps entries and the ballot in process memory."""

    def __init__(self) -> None:
        self._log: dict[int, Entry] = {}
        self._vote = Ballot()

    async def insert_entry(self, index: int, entry: Entry) -> None:
        self._log[index] = entry

    async def delete_entry(self, index: int) -> None:
        self._log.pop(index, None)

    async def get_entry(self, index: int) -> Optional[Entry]:
        return self._log.get(index)

    async def get_head_index(self) -> int:
        return min(self._log.keys(), default=0)

    async def get_last_index(self) -> int:
        return max(self._log.keys(), default=0)

    async def save_ballot(self, ballot: Ballot) -> None:
        self._vote = ballot

    async def load_ballot(self) -> Ballot:
        return self._vote