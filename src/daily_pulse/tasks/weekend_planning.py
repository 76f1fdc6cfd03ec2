# src/daily_pulse/tasks/weekend_planning.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.ports import Clock, KeyValueStore
from .periodic import PeriodicJob

logger = logging.getLogger(__name__)

LAST_WEEKEND_PROMPT_KEY = "last-weekend-planning-prompt"


class WeekendPlanningTrigger(PeriodicJob):
    """Ask the UI to open weekly planning, at most once per weekend day, during daytime."""

    name = "WeekendPlanningTrigger"

    def __init__(
        self,
        clock: Clock,
        kv: KeyValueStore,
        on_prompt: Callable[[], None],
        *,
        start_hour: int = 9,
        end_hour: int = 21,
        interval_seconds: float = 60 * 60.0,
        enabled: bool = True,
    ) -> None:
        super().__init__(clock, interval_seconds=interval_seconds, enabled=enabled)
        self._kv = kv
        self._on_prompt = on_prompt
        self._start_hour = int(start_hour)
        self._end_hour = int(end_hour)

    def _check(self) -> bool:
        if not self.enabled:
            return False

        now = self._clock.now()
        if now.weekday() < 5:
            return False

        today = now.date().isoformat()
        if self._kv.get(LAST_WEEKEND_PROMPT_KEY) == today:
            return False

        # end_hour is inclusive: 21:59 still counts.
        if now.hour < self._start_hour or now.hour > self._end_hour:
            return False

        self._kv.set(LAST_WEEKEND_PROMPT_KEY, today)
        logger.info("Weekly planning prompt for %s", today)
        self._on_prompt()
        return True

    def trigger_now(self) -> None:
        self._on_prompt()
