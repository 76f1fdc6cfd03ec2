# src/daily_pulse/core/state.py

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..tasks.end_of_day import EndOfDaySweeper
from ..tasks.reminder_scheduler import ReminderScheduler
from ..tasks.task_store import TaskStore
from ..tasks.weekend_planning import WeekendPlanningTrigger
from .ports import Clock, KeyValueStore, Notifier


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules.
    settings: Any

    clock: Clock
    kv: KeyValueStore
    notifier: Notifier
    store: TaskStore

    reminders: ReminderScheduler
    sweeper: EndOfDaySweeper
    weekend: WeekendPlanningTrigger

    # Set by the weekend trigger; cleared once the planning hint was shown or /plan ran.
    planning_requested: bool = False
    # Front-end hook called by the weekend trigger (the console prints the hint right away).
    on_planning: Callable[[], None] | None = None
    unsubscribe: list[Any] = field(default_factory=list)

    def start_background(self) -> None:
        self.reminders.start()
        self.sweeper.start()
        self.weekend.start()

    def stop_background(self) -> None:
        self.reminders.stop()
        self.sweeper.stop()
        self.weekend.stop()
