# src/daily_pulse/tasks/stats.py

"""Streak and planner statistics computed from the task collection."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from .task_models import Task

MAX_STREAK_DAYS = 365
MAX_MONTH_STREAK_DAYS = 31


@dataclass(frozen=True, slots=True)
class PlannerStats:
    completed_today: int
    total_today: int
    completed_this_week: int
    total_this_week: int
    streak: int


@dataclass(frozen=True, slots=True)
class MonthlyTrends:
    tasks_completed: int
    tasks_completed_trend: int
    streak: int
    streak_trend: int


def start_of_week(day: date) -> date:
    """Monday on or before `day`."""
    return day - timedelta(days=day.weekday())


def _completed_days(tasks: Iterable[Task]) -> set[str]:
    return {t.date for t in tasks if t.completed}


def _count_back(done: set[str], start: date, limit: int, stop_before: date | None = None) -> int:
    streak = 0
    day = start
    while streak < limit:
        if stop_before is not None and day < stop_before:
            break
        if day.isoformat() not in done:
            break
        streak += 1
        day -= timedelta(days=1)
    return streak


def calculate_streak(tasks: Iterable[Task], today: date) -> int:
    """
    Count consecutive days (walking back from today) with at least one completed task.

    A day still in progress is not held against the streak: when today has no
    completions yet, counting starts from yesterday.
    """
    done = _completed_days(tasks)
    start = today if today.isoformat() in done else today - timedelta(days=1)
    return _count_back(done, start, MAX_STREAK_DAYS)


def compute_planner_stats(tasks: Iterable[Task], today: date) -> PlannerStats:
    items = list(tasks)
    today_key = today.isoformat()
    week_start = start_of_week(today).isoformat()
    week_end = (start_of_week(today) + timedelta(days=6)).isoformat()

    today_tasks = [t for t in items if t.date == today_key]
    week_tasks = [t for t in items if week_start <= t.date <= week_end]

    return PlannerStats(
        completed_today=sum(1 for t in today_tasks if t.completed),
        total_today=len(today_tasks),
        completed_this_week=sum(1 for t in week_tasks if t.completed),
        total_this_week=len(week_tasks),
        streak=calculate_streak(items, today),
    )


def _trend(current: int, previous: int) -> int:
    if previous > 0:
        # Round half up.
        return math.floor((current - previous) / previous * 100 + 0.5)
    return 100 if current > 0 else 0


def compute_monthly_trends(tasks: Iterable[Task], today: date) -> MonthlyTrends:
    items = list(tasks)
    month_start = today.replace(day=1)
    last_month_end = month_start - timedelta(days=1)
    last_month_start = last_month_end.replace(day=1)

    # "YYYY-MM" prefix identifies the calendar month.
    this_month = [t for t in items if t.date[:7] == month_start.isoformat()[:7]]
    last_month = [t for t in items if t.date[:7] == last_month_start.isoformat()[:7]]

    completed_now = sum(1 for t in this_month if t.completed)
    completed_prev = sum(1 for t in last_month if t.completed)

    streak = calculate_streak(items, today)
    prev_streak = _count_back(
        _completed_days(items),
        last_month_end,
        MAX_MONTH_STREAK_DAYS,
        stop_before=last_month_start,
    )

    return MonthlyTrends(
        tasks_completed=completed_now,
        tasks_completed_trend=_trend(completed_now, completed_prev),
        streak=streak,
        streak_trend=_trend(streak, prev_streak),
    )
