# src/daily_pulse/core/clock.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

logger = logging.getLogger(__name__)


class TimerHandle:
    """Cancel handle for a repeating asyncio timer."""

    def __init__(self, task: asyncio.Task[None]) -> None:
        self._task = task

    @property
    def cancelled(self) -> bool:
        return self._task.cancelled() or self._task.done()

    def cancel(self) -> None:
        self._task.cancel()


class AsyncioClock:
    """
    Wall clock + repeating timers on the running asyncio loop.

    All callbacks run on the loop thread, so they never interleave with
    command handling that also runs on the loop.
    """

    def now(self) -> datetime:
        return datetime.now()

    def schedule(self, interval_seconds: float, callback: Callable[[], None]) -> TimerHandle:
        sleep_s = max(0.01, float(interval_seconds))
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._repeat(sleep_s, callback))
        return TimerHandle(task)

    @staticmethod
    async def _repeat(sleep_s: float, callback: Callable[[], None]) -> None:
        while True:
            await asyncio.sleep(sleep_s)
            try:
                callback()
            except Exception:
                # Callbacks are expected to guard themselves; keep the timer alive anyway.
                logger.exception("Timer callback failed")
