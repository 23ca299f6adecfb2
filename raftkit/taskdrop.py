"""Cancel background tasks when their owner goes away."""

from __future__ import annotations

import asyncio
import contextlib


class TaskDrop:
    """Holds asyncio tasks and cancels them all when closed or collected."""

    def __init__(self) -> None:
        self._tasks: list[asyncio.Future] = []

    def register_abort_on_drop(self, task: asyncio.Future) -> None:
        """Cancel ``task`` when this owner is closed."""
        self._tasks.append(task)

    def close(self) -> None:
        """Cancel every registered task."""
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            with contextlib.suppress(RuntimeError):
                task.cancel()

    def __enter__(self) -> "TaskDrop":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def __del__(self) -> None:
        self.close()