"""Applications whose snapshots are plain byte sequences, and snapshot repositories."""

from __future__ import annotations

import abc
import contextlib
import enum
import os
import shutil
from pathlib import Path
from typing import Optional, Sequence, Union

from .snapshot import BytesSnapshot, FileSnapshot, SnapshotStream

PathLike = Union[str, "os.PathLike[str]"]


class MakeSnapshot(enum.Enum):
    """What a write asks the log to do about snapshots."""

    NONE = "none"
    COPY_SNAPSHOT = "copy_snapshot"


class RaftAppSimple(abc.ABC):
    """An application whose snapshot is an explicit byte sequence."""

    @abc.abstractmethod
    async def process_read(self, request: bytes) -> bytes:
        """Answer a read request."""

    @abc.abstractmethod
    async def process_write(self, request: bytes) -> tuple[bytes, Optional[bytes]]:
        """Apply a write; return the reply and optionally a new snapshot."""

    @abc.abstractmethod
    async def install_snapshot(self, snapshot: Optional[bytes]) -> None:
        """Replace the state with ``snapshot``, or the initial state for None."""

    @abc.abstractmethod
    async def fold_snapshot(
        self, old_snapshot: Optional[bytes], requests: Sequence[bytes]
    ) -> bytes:
        """Return a snapshot of ``old_snapshot`` with ``requests`` applied."""


class SnapshotRepository(abc.ABC):
    """Where snapshot resources are kept, keyed by log index."""

    @abc.abstractmethod
    async def save_snapshot_stream(
        self, stream: SnapshotStream, snapshot_index: int
    ) -> None:
        """Store the snapshot read from ``stream``."""

    @abc.abstractmethod
    async def open_snapshot_stream(self, index: int) -> SnapshotStream:
        """Return a stream over the snapshot at ``index``."""

    @abc.abstractmethod
    async def delete_snapshot(self, index: int) -> None:
        """Remove the snapshot at ``index`` if present."""


class BytesRepository(SnapshotRepository):
    """Keeps snapshots in memory."""

    def __init__(self) -> None:
        self._resources: dict[int, BytesSnapshot] = {}

    async def save_snapshot_stream(
        self, stream: SnapshotStream, snapshot_index: int
    ) -> None:
        self._resources[snapshot_index] = await BytesSnapshot.save_snapshot_stream(
            stream
        )

    async def open_snapshot_stream(self, index: int) -> SnapshotStream:
        """Raises KeyError when no snapshot is stored at ``index``."""
        return await self._resources[index].open_snapshot_stream()

    async def delete_snapshot(self, index: int) -> None:
        self._resources.pop(index, None)


class FileRepository(SnapshotRepository):
    """Keeps each snapshot in a file named after its index."""

    def __init__(self, root_dir: PathLike) -> None:
        self.root_dir = Path(root_dir)

    @staticmethod
    def destroy(root_dir: PathLike) -> None:
        """Remove the repository directory if it exists."""
        shutil.rmtree(root_dir, ignore_errors=True)

    @staticmethod
    def create(root_dir: PathLike) -> None:
        """Create the repository directory; it must not exist yet."""
        Path(root_dir).mkdir()

    @classmethod
    def open(cls, root_dir: PathLike) -> "FileRepository":
        """Open a repository made with :meth:`create`."""
        return cls(root_dir)

    def _snapshot_path(self, index: int) -> Path:
        return self.root_dir / str(index)

    async def save_snapshot_stream(
        self, stream: SnapshotStream, snapshot_index: int
    ) -> None:
        await FileSnapshot.save_snapshot_stream(
            stream, self._snapshot_path(snapshot_index)
        )

    async def open_snapshot_stream(self, index: int) -> SnapshotStream:
        return await FileSnapshot(self._snapshot_path(index)).open_snapshot_stream()

    async def delete_snapshot(self, index: int) -> None:
        with contextlib.suppress(OSError):
            self._snapshot_path(index).unlink()


class ToRaftApp:
    """Adapts a :class:`RaftAppSimple` and a repository to the full application interface."""

    def __init__(self, app: RaftAppSimple, repo: SnapshotRepository) -> None:
        self.app = app
        self.repo = repo

    async def _store_bytes(self, data: bytes, index: int) -> None:
        stream = await BytesSnapshot(bytes(data)).open_snapshot_stream()
        await self.repo.save_snapshot_stream(stream, index)

    async def _load_bytes(self, index: int) -> bytes:
        stream = await self.repo.open_snapshot_stream(index)
        return (await BytesSnapshot.save_snapshot_stream(stream)).contents

    async def process_read(self, request: bytes) -> bytes:
        return await self.app.process_read(request)

    async def process_write(
        self, request: bytes, entry_index: int
    ) -> tuple[bytes, MakeSnapshot]:
        """Apply a write; a returned snapshot is stored at ``entry_index``."""
        reply, new_snapshot = await self.app.process_write(request)
        if new_snapshot is None:
            return reply, MakeSnapshot.NONE
        try:
            await self._store_bytes(new_snapshot, entry_index)
        except Exception:
            return reply, MakeSnapshot.NONE
        return reply, MakeSnapshot.COPY_SNAPSHOT

    async def install_snapshot(self, snapshot: Optional[int]) -> None:
        data = None if snapshot is None else await self._load_bytes(snapshot)
        await self.app.install_snapshot(data)

    async def fold_snapshot(
        self,
        old_snapshot: Optional[int],
        requests: Sequence[bytes],
        snapshot_index: int,
    ) -> None:
        old = None if old_snapshot is None else await self._load_bytes(old_snapshot)
        new_snapshot = await self.app.fold_snapshot(old, list(requests))
        await self._store_bytes(new_snapshot, snapshot_index)

    async def save_snapshot(self, stream: SnapshotStream, index: int) -> None:
        data = await BytesSnapshot.save_snapshot_stream(stream)
        await self._store_bytes(data.contents, index)

    async def open_snapshot(self, index: int) -> SnapshotStream:
        return await self.repo.open_snapshot_stream(index)

    async def delete_snapshot(self, index: int) -> None:
        await self.repo.delete_snapshot(index)