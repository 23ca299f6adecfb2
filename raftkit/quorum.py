"""Run a set of boolean awaitables and decide once a quorum has agreed."""

from __future__ import annotations

import asyncio
import inspect
from typing import Awaitable, Iterable


async def quorum_join(quorum: int, awaitables: Iterable[Awaitable[bool]]) -> bool:
    """Return True as soon as ``quorum`` awaitables have resolved to True.

    Returns False when there are fewer awaitables than the quorum, or when
    every awaitable has finished without the quorum being reached. An
    awaitable that raises counts as a negative reply. Awaitables still
    pending once the outcome is known are cancelled.
    """
    pending = list(awaitables)
    n = len(pending)
    if n < quorum:
        for aw in pending:
            if inspect.iscoroutine(aw):
                aw.close()
        return False
    if n == 0:
        return True

    tasks = [asyncio.ensure_future(aw) for aw in pending]
    acked = 0
    agreed = 0
    try:
        for next_done in asyncio.as_completed(tasks):
            try:
                reply = bool(await next_done)
            except asyncio.CancelledError:
                raise
            except Exception:
                reply = False
            acked += 1
            if reply:
                agreed += 1
            if agreed >= quorum:
                return True
            if acked == n:
                return False
        return False
    finally:
        for task in tasks:
            task.cancel()