# tests/test_stats.py

from __future__ import annotations

from datetime import date, datetime, timedelta

from daily_pulse.tasks.stats import (
    MAX_STREAK_DAYS,
    calculate_streak,
    compute_monthly_trends,
    compute_planner_stats,
    start_of_week,
)
from daily_pulse.tasks.task_models import Priority, Task

_counter = 0


def _task(day: str, *, completed: bool = False, missed: bool = False) -> Task:
    global _counter
    _counter += 1
    return Task(
        id=f"t{_counter}",
        name=f"task {_counter}",
        date=day,
        priority=Priority.MEDIUM,
        created_at=datetime(2024, 1, 1),
        completed=completed,
        missed=missed,
    )


def test_streak_is_zero_without_completions() -> None:
    assert calculate_streak([], date(2024, 3, 10)) == 0
    assert calculate_streak([_task("2024-03-10"), _task("2024-03-09", missed=True)], date(2024, 3, 10)) == 0


def test_streak_stops_at_gap() -> None:
    tasks = [
        _task("2024-03-10", completed=True),
        _task("2024-03-09", completed=True),
        _task("2024-03-08", completed=True),
        _task("2024-03-06", completed=True),
    ]
    assert calculate_streak(tasks, date(2024, 3, 10)) == 3


def test_streak_starts_from_yesterday_when_today_is_open() -> None:
    tasks = [
        _task("2024-03-10"),  # open, today
        _task("2024-03-09", completed=True),
        _task("2024-03-08", completed=True),
    ]
    assert calculate_streak(tasks, date(2024, 3, 10)) == 2


def test_streak_is_capped() -> None:
    today = date(2024, 12, 31)
    tasks = [_task((today - timedelta(days=i)).isoformat(), completed=True) for i in range(400)]
    assert calculate_streak(tasks, today) == MAX_STREAK_DAYS


def test_start_of_week_is_monday() -> None:
    assert start_of_week(date(2024, 3, 3)) == date(2024, 2, 26)  # Sunday
    assert start_of_week(date(2024, 3, 4)) == date(2024, 3, 4)  # Monday


def test_planner_stats_counts_today_and_week() -> None:
    today = date(2024, 3, 6)  # Wednesday
    tasks = [
        _task("2024-03-06", completed=True),
        _task("2024-03-06"),
        _task("2024-03-05", completed=True),
        _task("2024-03-04", missed=True),
        _task("2024-03-03", completed=True),  # previous week
        _task("2024-03-10"),  # Sunday, same week
    ]

    stats = compute_planner_stats(tasks, today)

    assert stats.completed_today == 1
    assert stats.total_today == 2
    assert stats.completed_this_week == 2
    assert stats.total_this_week == 5
    assert stats.streak == 2


def test_monthly_trends() -> None:
    today = date(2024, 3, 3)
    tasks = [
        _task("2024-03-01", completed=True),
        _task("2024-03-02", completed=True),
        _task("2024-03-03", completed=True),
        _task("2024-02-27", completed=True),
        _task("2024-02-29", completed=True),
    ]

    trends = compute_monthly_trends(tasks, today)

    assert trends.tasks_completed == 3
    assert trends.tasks_completed_trend == 50
    # the running streak crosses the month boundary
    assert trends.streak == 4
    # last month's streak ends on Feb 29 and is 1 day long
    assert trends.streak_trend == 300


def test_monthly_trends_without_history() -> None:
    trends = compute_monthly_trends([_task("2024-03-02", completed=True)], date(2024, 3, 2))
    assert trends.tasks_completed_trend == 100
    assert trends.streak_trend == 100

    empty = compute_monthly_trends([], date(2024, 3, 2))
    assert empty.tasks_completed_trend == 0
    assert empty.streak_trend == 0
