# src/daily_pulse/tasks/end_of_day.py

from __future__ import annotations

import logging

from ..core.ports import Clock, KeyValueStore, Notifier, TaskBoard
from .periodic import PeriodicJob

logger = logging.getLogger(__name__)

LAST_END_OF_DAY_CHECK_KEY = "last-end-of-day-check"


def missed_summary(count: int) -> str:
    plural = "s" if count != 1 else ""
    return f"{count} task{plural} marked as missed. Tomorrow is a new day!"


class EndOfDaySweeper(PeriodicJob):
    """
    Once per calendar day, after `threshold_hour`, mark today's open tasks as missed.

    The sweep ticks many times a day; the `last-end-of-day-check` marker makes its
    effect happen at most once. The marker is written only after every task was
    handled, so a failed sweep is retried on the next tick (mark_missed is idempotent).
    """

    name = "EndOfDaySweeper"

    def __init__(
        self,
        board: TaskBoard,
        clock: Clock,
        kv: KeyValueStore,
        *,
        notifier: Notifier | None = None,
        threshold_hour: int = 22,
        interval_seconds: float = 30 * 60.0,
        enabled: bool = True,
    ) -> None:
        super().__init__(clock, interval_seconds=interval_seconds, enabled=enabled)
        self._board = board
        self._kv = kv
        self._notifier = notifier
        self._threshold_hour = int(threshold_hour)

    def _check(self) -> int:
        if not self.enabled:
            return 0

        now = self._clock.now()
        if now.hour < self._threshold_hour:
            return 0

        today = now.date().isoformat()
        if self._kv.get(LAST_END_OF_DAY_CHECK_KEY) == today:
            return 0

        open_ids = [
            t.id
            for t in self._board.list_tasks()
            if t.date == today and not t.completed and not t.missed
        ]
        marked = sum(1 for task_id in open_ids if self._board.mark_missed(task_id))

        self._kv.set(LAST_END_OF_DAY_CHECK_KEY, today)
        logger.info("End-of-day sweep for %s: %d task(s) marked missed", today, marked)

        if marked and self._notifier is not None:
            self._notifier.show("Daily Review", missed_summary(marked), tag="end-of-day")
        return marked

    def trigger_now(self) -> int:
        """Forget today's marker and run the check again (still gated by the hour)."""
        self._kv.remove(LAST_END_OF_DAY_CHECK_KEY)
        return self.tick() or 0
