# src/daily_pulse/tasks/task_api.py

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Mapping
from datetime import date, timedelta

from .stats import start_of_week
from .task_models import Priority, Task, WeeklyGoals, as_day
from .task_store import TaskStore

logger = logging.getLogger(__name__)


def week_days(week_start: date) -> list[str]:
    return [(week_start + timedelta(days=i)).isoformat() for i in range(7)]


def plan_week(
    store: TaskStore,
    goals: Mapping[str, Iterable[str]],
    *,
    week_of: date,
) -> list[Task]:
    """
    Save a week's goals and materialize them as daily tasks.

    - the week starts on the Monday on or before `week_of`
    - every goal date must fall inside that week
    - goals already planned for a day are not turned into tasks twice
    Returns the tasks created by this call.
    """
    week_start = start_of_week(week_of)
    allowed = set(week_days(week_start))

    cleaned: dict[str, tuple[str, ...]] = {}
    for raw_day, day_goals in goals.items():
        day = as_day(raw_day)
        if day not in allowed:
            raise ValueError(f"{day} is outside the week starting {week_start.isoformat()}")
        items = tuple(g.strip() for g in day_goals if g and g.strip())
        if items:
            cleaned[day] = cleaned.get(day, ()) + items

    existing = store.weekly_goals_for(week_start)
    if existing is None and not cleaned:
        return []
    previous: Mapping[str, tuple[str, ...]] = existing.goals if existing else {}

    if existing is not None:
        merged = dict(existing.goals)
        for day, items in cleaned.items():
            merged[day] = tuple(dict.fromkeys((*merged.get(day, ()), *items)))
        store.update_weekly_goals(
            WeeklyGoals(
                id=existing.id,
                week_start_date=existing.week_start_date,
                goals=merged,
                created_at=existing.created_at,
            )
        )
    else:
        store.add_weekly_goals(
            WeeklyGoals(
                id=f"week-{uuid.uuid4().hex}",
                week_start_date=week_start.isoformat(),
                goals=cleaned,
                created_at=store.now(),
            )
        )

    created: list[Task] = []
    for day, items in cleaned.items():
        already = set(previous.get(day, ()))
        for goal in dict.fromkeys(items):
            if goal in already:
                continue
            created.append(store.add_task(goal, date=day, priority=Priority.MEDIUM))

    logger.info("Planned week %s: %d new task(s)", week_start.isoformat(), len(created))
    return created


def add_goal(store: TaskStore, day: date | str, text: str) -> Task | None:
    """
    Convenience helper: plan a single goal for `day` (used by the console /plan command).
    Returns the created task, or None if the goal was already planned.
    """
    if not text or not text.strip():
        raise ValueError("goal text is required")
    target = date.fromisoformat(as_day(day))
    created = plan_week(store, {target.isoformat(): [text]}, week_of=target)
    return created[0] if created else None
