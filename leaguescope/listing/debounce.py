"""Coalesce bursts of calls into one after a quiet period."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


class Debouncer:
    """Runs only the last scheduled coroutine once ``delay_ms`` passes without a new call.

    Each :meth:`schedule` cancels the pending run, if any, so a burst of
    keystrokes produces a single fetch.
    """

    def __init__(self, delay_ms: int) -> None:
        self._delay = max(delay_ms, 0) / 1000
        self._task: asyncio.Task[Any] | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(self, factory: Callable[[], Awaitable[Any]]) -> asyncio.Task[Any]:
        """Replace any pending run with ``factory()`` after the quiet period."""
        if self.pending:
            assert self._task is not None
            self._task.cancel()
            logger.debug("debounce_coalesced")
        self._task = asyncio.create_task(self._run(factory))
        return self._task

    async def flush(self) -> None:
        """Wait for the pending run, if any, to finish."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    def cancel(self) -> None:
        if self.pending:
            assert self._task is not None
            self._task.cancel()
        self._task = None

    async def _run(self, factory: Callable[[], Awaitable[Any]]) -> Any:
        await asyncio.sleep(self._delay)
        return await factory()
