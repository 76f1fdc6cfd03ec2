# src/daily_pulse/tasks/task_models.py

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum

DUE_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def as_day(value: date | str) -> str:
    """Normalize a date (or ISO date string) to "YYYY-MM-DD"."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return date.fromisoformat(str(value).strip()).isoformat()


class Priority(StrEnum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @classmethod
    def parse(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.MEDIUM
        for p in cls:
            if p.value.lower() == raw.strip().lower():
                return p
        raise ValueError(f"unknown priority: {raw!r}")


class TaskStatus(StrEnum):
    """Derived lifecycle status (pending -> completed | missed, missed -> completed)."""

    PENDING = "pending"
    COMPLETED = "completed"
    MISSED = "missed"


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    name: str
    date: str
    priority: Priority
    created_at: datetime

    due_time: str | None = None
    completed: bool = False
    missed: bool = False
    completed_at: datetime | None = None
    missed_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.completed and self.missed:
            raise ValueError(f"task {self.id} cannot be both completed and missed")

    @property
    def status(self) -> TaskStatus:
        if self.completed:
            return TaskStatus.COMPLETED
        if self.missed:
            return TaskStatus.MISSED
        return TaskStatus.PENDING


@dataclass(frozen=True, slots=True)
class ScoreEntry:
    date: str
    change: int
    reason: str
    task_id: str | None = None


@dataclass(frozen=True, slots=True)
class ProductivityScore:
    total_score: int = 0
    last_updated: datetime | None = None
    history: tuple[ScoreEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class WeeklyGoals:
    """Goals for one Monday-start week, keyed by "YYYY-MM-DD"."""

    id: str
    week_start_date: str
    goals: Mapping[str, tuple[str, ...]]
    created_at: datetime

    def goal_count(self) -> int:
        return sum(len(v) for v in self.goals.values())


@dataclass(frozen=True, slots=True)
class BoardState:
    tasks: tuple[Task, ...] = ()
    weekly_goals: tuple[WeeklyGoals, ...] = ()
    score: ProductivityScore = field(default_factory=ProductivityScore)


# ---- commands ----


@dataclass(frozen=True, slots=True)
class AddTask:
    task: Task


@dataclass(frozen=True, slots=True)
class UpdateTask:
    task: Task


@dataclass(frozen=True, slots=True)
class DeleteTask:
    task_id: str


@dataclass(frozen=True, slots=True)
class ToggleCompletion:
    task_id: str


@dataclass(frozen=True, slots=True)
class MarkMissed:
    task_id: str


@dataclass(frozen=True, slots=True)
class MarkAllComplete:
    date: str


@dataclass(frozen=True, slots=True)
class AddWeeklyGoals:
    goals: WeeklyGoals


@dataclass(frozen=True, slots=True)
class UpdateWeeklyGoals:
    goals: WeeklyGoals


@dataclass(frozen=True, slots=True)
class AdjustScore:
    change: int
    reason: str
    task_id: str | None = None


Command = (
    AddTask
    | UpdateTask
    | DeleteTask
    | ToggleCompletion
    | MarkMissed
    | MarkAllComplete
    | AddWeeklyGoals
    | UpdateWeeklyGoals
    | AdjustScore
)
