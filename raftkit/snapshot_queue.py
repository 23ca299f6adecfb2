"""Delayed insertion of snapshot entries into the log."""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from .storage import Entry

logger = logging.getLogger(__name__)

InsertSnapshot = Callable[[Entry], Awaitable[object]]


@dataclass(order=True)
class _Pending:
    deadline: float
    seq: int
    entry: Entry = field(compare=False)
    done: asyncio.Future = field(compare=False)


class SnapshotQueue:
    """Holds snapshot entries until their delay has passed."""

    def __init__(self) -> None:
        self._heap: list[_Pending] = []
        self._lock = asyncio.Lock()
        self._counter = itertools.count()

    async def insert(self, entry: Entry, delay: float) -> "asyncio.Future[bool]":
        """Queue ``entry`` for insertion after ``delay`` seconds.

        Returns a future that resolves to whether the insertion succeeded.
        """
        loop = asyncio.get_running_loop()
        done: asyncio.Future = loop.create_future()
        async with self._lock:
            heapq.heappush(
                self._heap,
                _Pending(loop.time() + delay, next(self._counter), entry, done),
            )
        return done

    async def run_once(self, insert_snapshot: InsertSnapshot) -> None:
        """Insert every entry whose delay has expired, earliest first."""
        loop = asyncio.get_running_loop()
        async with self._lock:
            while self._heap and self._heap[0].deadline <= loop.time():
                pending = heapq.heappop(self._heap)
                try:
                    await insert_snapshot(pending.entry)
                    ok = True
                except Exception:
                    ok = False
                if not pending.done.done():
                    pending.done.set_result(ok)
                if ok:
                    logger.info(
                        "new snapshot entry is inserted at index %d",
                        pending.entry.this_clock.index,
                    )