"""Snapshot resources and the chunked byte streams that carry them."""

from __future__ import annotations

import inspect
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, AsyncIterator, BinaryIO, Union

CHUNK_SIZE = 8192

SnapshotStream = AsyncIterator[bytes]
PathLike = Union[str, "os.PathLike[str]"]


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def into_snapshot_stream(reader: Any) -> AsyncIterator[bytes]:
    """Yield the contents of ``reader`` in chunks of at most CHUNK_SIZE bytes.

    ``reader`` needs a ``read(n)`` method, plain or awaitable. A failing read
    is reported as ``OSError("streaming error")``.
    """
    while True:
        try:
            chunk = await _maybe_await(reader.read(CHUNK_SIZE))
        except Exception as exc:
            raise OSError("streaming error") from exc
        if not chunk:
            return
        yield bytes(chunk)


async def read_snapshot_stream(writer: Any, stream: SnapshotStream) -> None:
    """Write every chunk of ``stream`` to ``writer``.

    A failure of the stream itself is reported as ``OSError("streaming error")``.
    """
    iterator = aiter(stream)
    while True:
        try:
            chunk = await anext(iterator)
        except StopAsyncIteration:
            break
        except Exception as exc:
            raise OSError("streaming error") from exc
        await _maybe_await(writer.write(chunk))


@dataclass(frozen=True)
class BytesSnapshot:
    """A snapshot held entirely in memory."""

    contents: bytes = b""

    def __bytes__(self) -> bytes:
        return bytes(self.contents)

    async def open_snapshot_stream(self) -> SnapshotStream:
        """Return a stream over the contents."""
        import io

        return into_snapshot_stream(io.BytesIO(self.contents))

    @classmethod
    async def save_snapshot_stream(cls, stream: SnapshotStream) -> "BytesSnapshot":
        """Collect a stream into a new in-memory snapshot."""
        import io

        buffer = io.BytesIO()
        await read_snapshot_stream(buffer, stream)
        return cls(buffer.getvalue())


async def _file_chunks(handle: BinaryIO) -> AsyncIterator[bytes]:
    try:
        async for chunk in into_snapshot_stream(handle):
            yield chunk
    finally:
        handle.close()


@dataclass(frozen=True)
class FileSnapshot:
    """A snapshot stored in a regular file."""

    path: Path

    async def open_snapshot_stream(self) -> SnapshotStream:
        """Open the file and return a stream over its contents."""
        handle = open(self.path, "rb")
        return _file_chunks(handle)

    @classmethod
    async def save_snapshot_stream(
        cls, stream: SnapshotStream, path: PathLike
    ) -> "FileSnapshot":
        """Write a stream into ``path``, replacing what was there."""
        target = Path(path)
        with open(target, "wb") as handle:
            await read_snapshot_stream(handle, stream)
        return cls(target)