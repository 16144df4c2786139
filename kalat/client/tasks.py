"""Last-issued-wins task slot for client fetches."""

import asyncio
from collections.abc import Coroutine
from typing import Any


class LatestOnly:
    """
    Holds at most one in-flight task for a given concern. Starting a new one
    cancels the previous, so a superseded fetch never applies its result.
    """

    def __init__(self) -> None:
        self._task: asyncio.Task[Any] | None = None

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    def run(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(coro)
        return self._task

    def cancel(self) -> None:
        """Cancel the in-flight task. A task clearing its own slot is left to finish."""
        task = self._task
        self._task = None
        if task is None or task.done():
            return
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        if task is not current:
            task.cancel()
