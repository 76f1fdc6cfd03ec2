# src/daily_pulse/tasks/reminder_scheduler.py

from __future__ import annotations

"""
Task reminder scheduler.

A small polling loop that:
- looks at today's incomplete tasks whose due time equals the current minute,
- shows one reminder per task per calendar day via the injected Notifier,
- records notified task ids under a per-day key in the KeyValueStore.

The persisted id set is the only dedup mechanism: several ticks inside the
same minute, or a restart, never produce a second reminder for the same task.
"""

import json
import logging
from collections.abc import Iterable

from ..core.ports import Clock, KeyValueStore, Notifier, Permission, TaskBoard
from .periodic import PeriodicJob
from .task_models import BoardState, Task

logger = logging.getLogger(__name__)

NOTIFIED_KEY_PREFIX = "notified-tasks-"
REMINDER_TITLE = "⏰ Task Reminder"


def notified_key(day: str) -> str:
    return f"{NOTIFIED_KEY_PREFIX}{day}"


def select_due_tasks(tasks: Iterable[Task], *, today: str, current_time: str, notified: set[str]) -> list[Task]:
    return [
        t
        for t in tasks
        if t.date == today
        and t.due_time == current_time
        and not t.completed
        and t.id not in notified
    ]


class ReminderScheduler(PeriodicJob):
    name = "ReminderScheduler"

    def __init__(
        self,
        board: TaskBoard,
        clock: Clock,
        kv: KeyValueStore,
        notifier: Notifier,
        *,
        interval_seconds: float = 60.0,
        enabled: bool = True,
    ) -> None:
        super().__init__(clock, interval_seconds=interval_seconds, enabled=enabled)
        self._board = board
        self._kv = kv
        self._notifier = notifier
        self._active_day: str | None = None
        self.permission = Permission.DEFAULT

    # ---- persisted notified set ----

    def load_notified(self, day: str) -> set[str]:
        raw = self._kv.get(notified_key(day))
        if not raw:
            return set()
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Corrupt notified-set marker for %s; treating as empty", day)
            return set()
        if not isinstance(data, list):
            logger.warning("Notified-set marker for %s is not a list; treating as empty", day)
            return set()
        return {str(x) for x in data}

    def _save_notified(self, day: str, ids: set[str]) -> None:
        self._kv.set(notified_key(day), json.dumps(sorted(ids)))

    def _roll_day(self, today: str) -> None:
        """Drop the previous day's marker once the calendar day changes."""
        prev = self._active_day
        self._active_day = today
        if prev is not None and prev != today:
            self._kv.remove(notified_key(prev))
            logger.debug("Dropped notified-set for %s", prev)

    def purge_stale_days(self, today: str) -> int:
        """Remove notified-set keys of every day except `today` (left over from earlier runs)."""
        keep = notified_key(today)
        stale = [k for k in self._kv.keys_with_prefix(NOTIFIED_KEY_PREFIX) if k != keep]
        for key in stale:
            self._kv.remove(key)
        if stale:
            logger.info("Removed %d stale notified-set key(s)", len(stale))
        return len(stale)

    # ---- lifecycle ----

    def _on_start(self) -> None:
        today = self._clock.now().date().isoformat()
        try:
            self.purge_stale_days(today)
        except Exception:
            logger.exception("Failed to purge stale notified-set keys")
        self._active_day = today

        try:
            self.permission = self._notifier.request_permission()
        except Exception:
            logger.exception("Notification permission request failed")
            self.permission = Permission.DENIED
        if self.permission != Permission.GRANTED:
            logger.warning("Notifications not granted (%s); reminders will use fallback alerts", self.permission)

    def _check(self) -> int:
        if not self.enabled:
            return 0

        now = self._clock.now()
        today = now.date().isoformat()
        current_time = now.strftime("%H:%M")
        self._roll_day(today)

        notified = self.load_notified(today)
        due = select_due_tasks(
            self._board.list_tasks(), today=today, current_time=current_time, notified=notified
        )

        for task in due:
            self._notifier.show(REMINDER_TITLE, f"It's time for: {task.name}", tag=f"task-{task.id}")
            notified.add(task.id)
            self._save_notified(today, notified)
            logger.info("Reminder sent task_id=%s due=%s", task.id, task.due_time)

        return len(due)

    def on_board_changed(self, state: BoardState) -> None:
        """Prune ids of tasks that no longer exist today (subscribe to TaskStore)."""
        try:
            today = self._clock.now().date().isoformat()
            notified = self.load_notified(today)
            if not notified:
                return
            live = {t.id for t in state.tasks if t.date == today}
            valid = notified & live
            if valid != notified:
                self._save_notified(today, valid)
                logger.debug("Pruned %d stale ids from notified-set", len(notified) - len(valid))
        except Exception:
            logger.exception("Failed to prune notified-set")
