"""Log entries, ballots and the abstract log storage."""

from __future__ import annotations

import abc
import struct
from dataclasses import dataclass, field
from typing import Callable, Optional

_U64 = struct.Struct("<Q")
_ENTRY_HEAD = struct.Struct("<QQQQQ")


@dataclass(frozen=True, order=True)
class Clock:
    """A (term, index) position in the log."""

    term: int = 0
    index: int = 0


@dataclass(frozen=True)
class Entry:
    """A log entry: the clock of its predecessor, its own clock and a command."""

    prev_clock: Clock = field(default_factory=Clock)
    this_clock: Clock = field(default_factory=Clock)
    command: bytes = b""

    def to_bytes(self) -> bytes:
        """Serialize as little-endian fixed-width integers plus the command."""
        head = _ENTRY_HEAD.pack(
            self.prev_clock.term,
            self.prev_clock.index,
            self.this_clock.term,
            self.this_clock.index,
            len(self.command),
        )
        return head + bytes(self.command)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Entry":
        """Parse bytes produced by :meth:`to_bytes`."""
        data = bytes(data)
        if len(data) < _ENTRY_HEAD.size:
            raise ValueError("entry data is truncated")
        pt, pi, tt, ti, length = _ENTRY_HEAD.unpack_from(data)
        start = _ENTRY_HEAD.size
        if len(data) < start + length:
            raise ValueError("entry command is truncated")
        return cls(Clock(pt, pi), Clock(tt, ti), data[start : start + length])


@dataclass(frozen=True)
class Ballot:
    """The record of the most recent vote."""

    cur_term: int = 0
    voted_for: Optional[str] = None

    def to_bytes(self) -> bytes:
        """Serialize the term and the optional candidate id."""
        out = _U64.pack(self.cur_term)
        if self.voted_for is None:
            return out + b"\x00"
        encoded = self.voted_for.encode("utf-8")
        return out + b"\x01" + _U64.pack(len(encoded)) + encoded

    @classmethod
    def from_bytes(cls, data: bytes) -> "Ballot":
        """Parse bytes produced by :meth:`to_bytes`."""
        data = bytes(data)
        if len(data) < _U64.size + 1:
            raise ValueError("ballot data is truncated")
        (term,) = _U64.unpack_from(data)
        tag = data[_U64.size]
        if tag == 0:
            return cls(term, None)
        if tag != 1:
            raise ValueError(f"invalid option tag {tag}")
        pos = _U64.size + 1
        if len(data) < pos + _U64.size:
            raise ValueError("ballot data is truncated")
        (length,) = _U64.unpack_from(data, pos)
        pos += _U64.size
        if len(data) < pos + length:
            raise ValueError("ballot data is truncated")
        return cls(term, data[pos : pos + length].decode("utf-8"))


class RaftStorage(abc.ABC):
    """A sequence of log entries together with the most recent vote."""

    @abc.abstractmethod
    async def insert_entry(self, index: int, entry: Entry) -> None:
        """Store ``entry`` at ``index``, replacing any existing one."""

    @abc.abstractmethod
    async def delete_entry(self, index: int) -> None:
        """Remove the entry at ``index``."""

    @abc.abstractmethod
    async def get_entry(self, index: int) -> Optional[Entry]:
        """Return the entry at ``index`` or None."""

    @abc.abstractmethod
    async def get_head_index(self) -> int:
        """Return the lowest stored index, or 0 when empty."""

    @abc.abstractmethod
    async def get_last_index(self) -> int:
        """Return the highest stored index, or 0 when empty."""

    @abc.abstractmethod
    async def save_ballot(self, ballot: Ballot) -> None:
        """Persist the ballot."""

    @abc.abstractmethod
    async def load_ballot(self) -> Ballot:
        """Return the persisted ballot."""


async def find_last_snapshot_index(
    storage: RaftStorage, is_snapshot: Callable[[bytes], bool]
) -> Optional[int]:
    """Return the highest index whose command is a snapshot, or None.

    Raises LookupError if an index between 1 and the last index is missing.
    """
    last = await storage.get_last_index()
    for index in range(last, 0, -1):
        entry = await storage.get_entry(index)
        if entry is None:
            raise LookupError(f"entry {index} is missing")
        if is_snapshot(entry.command):
            return index
    return None