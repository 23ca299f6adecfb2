"""Read queries waiting for the log to be applied up to a given index."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any


@dataclass
class Query:
    """A read request and the future that receives its answer."""

    core: bool
    message: bytes
    ack: asyncio.Future


class QueryQueue:
    """Queries reserved against a log index, run once that index is applied."""

    def __init__(self) -> None:
        self._reserved: dict[int, list[Query]] = {}
        self._tasks: set[asyncio.Task] = set()

    def register(self, index: int, query: Query) -> None:
        """Reserve ``query`` until ``index`` has been applied."""
        if query.core:
            raise ValueError("core queries cannot be processed as reads")
        self._reserved.setdefault(index, []).append(query)

    async def execute(self, index: int, app: Any) -> bool:
        """Start every query reserved at or below ``index``.

        Returns False when there was nothing to run.
        """
        due = sorted(k for k in self._reserved if k <= index)
        queries = [q for k in due for q in self._reserved.pop(k)]
        if not queries:
            return False
        for query in queries:
            task = asyncio.create_task(self._run(query, app))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        return True

    @staticmethod
    async def _run(query: Query, app: Any) -> None:
        try:
            result = await app.process_read(query.message)
        except Exception:
            if not query.ack.done():
                query.ack.cancel()
            return
        if not query.ack.done():
            query.ack.set_result(result)