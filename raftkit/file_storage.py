"""Log storage backed by one file per entry."""

from __future__ import annotations

import asyncio
import os
import shutil
from pathlib import Path
from typing import Optional, Union

from .storage import Ballot, Entry, RaftStorage

PathLike = Union[str, "os.PathLike[str]"]


def extract_entry_index(path: PathLike) -> int:
    """Return the log index encoded in an entry file's name."""
    return int(Path(path).name)


class FileStorage(RaftStorage):
    """Stores each entry under ``<root>/entry/<index>`` and the ballot in ``<root>/ballot``."""

    def __init__(self, root_dir: PathLike) -> None:
        self.root_dir = Path(root_dir)

    @property
    def _ballot_path(self) -> Path:
        return self.root_dir / "ballot"

    def _entry_path(self, index: int) -> Path:
        return self.root_dir / "entry" / str(index)

    def _indices(self) -> list[int]:
        return sorted(
            extract_entry_index(p) for p in (self.root_dir / "entry").iterdir()
        )

    @staticmethod
    def destroy(root_dir: PathLike) -> None:
        """Remove the storage directory if it exists."""
        shutil.rmtree(root_dir, ignore_errors=True)

    @staticmethod
    def create(root_dir: PathLike) -> None:
        """Create an empty storage; the directory must not exist yet."""
        root = Path(root_dir)
        root.mkdir()
        (root / "entry").mkdir()
        (root / "ballot").write_bytes(Ballot().to_bytes())

    @classmethod
    def open(cls, root_dir: PathLike) -> "FileStorage":
        """Open a storage previously made with :meth:`create`."""
        return cls(root_dir)

    async def insert_entry(self, index: int, entry: Entry) -> None:
        await asyncio.to_thread(self._entry_path(index).write_bytes, entry.to_bytes())

    async def delete_entry(self, index: int) -> None:
        await asyncio.to_thread(self._entry_path(index).unlink)

    async def get_entry(self, index: int) -> Optional[Entry]:
        path = self._entry_path(index)
        if not path.exists():
            return None
        data = await asyncio.to_thread(path.read_bytes)
        return Entry.from_bytes(data)

    async def get_head_index(self) -> int:
        indices = await asyncio.to_thread(self._indices)
        return indices[0] if indices else 0

    async def get_last_index(self) -> int:
        indices = await asyncio.to_thread(self._indices)
        return indices[-1] if indices else 0

    async def save_ballot(self, ballot: Ballot) -> None:
        await asyncio.to_thread(self._ballot_path.write_bytes, ballot.to_bytes())

    async def load_ballot(self) -> Ballot:
        data = await asyncio.to_thread(self._ballot_path.read_bytes)
        return Ballot.from_bytes(data)