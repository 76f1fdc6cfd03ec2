# src/daily_pulse/tasks/board_io.py

"""JSON snapshot of the board (tasks, weekly goals, score) between runs."""

from __future__ import annotations

import contextlib
import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any

from .scoring import HISTORY_LIMIT, clamp_score
from .task_models import BoardState, Priority, ProductivityScore, ScoreEntry, Task, WeeklyGoals

logger = logging.getLogger(__name__)


def _ts(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_ts(raw: Any) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(str(raw))
    except ValueError:
        return None


def board_to_dict(state: BoardState) -> dict[str, Any]:
    return {
        "tasks": [
            {
                "id": t.id,
                "name": t.name,
                "date": t.date,
                "priority": t.priority.value,
                "due_time": t.due_time,
                "completed": t.completed,
                "missed": t.missed,
                "created_at": _ts(t.created_at),
                "completed_at": _ts(t.completed_at),
                "missed_at": _ts(t.missed_at),
            }
            for t in state.tasks
        ],
        "weekly_goals": [
            {
                "id": wg.id,
                "week_start_date": wg.week_start_date,
                "goals": {day: list(items) for day, items in wg.goals.items()},
                "created_at": _ts(wg.created_at),
            }
            for wg in state.weekly_goals
        ],
        "score": {
            "total_score": state.score.total_score,
            "last_updated": _ts(state.score.last_updated),
            "history": [
                {"date": e.date, "change": e.change, "reason": e.reason, "task_id": e.task_id}
                for e in state.score.history
            ],
        },
    }


def _task_from_dict(d: dict[str, Any]) -> Task | None:
    try:
        completed = bool(d.get("completed", False))
        return Task(
            id=str(d["id"]),
            name=str(d["name"]),
            date=str(d["date"]),
            priority=Priority.parse(d.get("priority")),
            created_at=_parse_ts(d.get("created_at")) or datetime.now(),
            due_time=d.get("due_time") or None,
            completed=completed,
            # A snapshot violating the invariant keeps the completion.
            missed=bool(d.get("missed", False)) and not completed,
            completed_at=_parse_ts(d.get("completed_at")),
            missed_at=_parse_ts(d.get("missed_at")),
        )
    except (KeyError, TypeError, ValueError):
        logger.warning("Skipping malformed task record: %r", d)
        return None


def board_from_dict(data: dict[str, Any]) -> BoardState:
    tasks = []
    for raw in data.get("tasks") or []:
        if isinstance(raw, dict):
            task = _task_from_dict(raw)
            if task is not None:
                tasks.append(task)

    goals = []
    for raw in data.get("weekly_goals") or []:
        if not isinstance(raw, dict) or "id" not in raw:
            continue
        goals.append(
            WeeklyGoals(
                id=str(raw["id"]),
                week_start_date=str(raw.get("week_start_date", "")),
                goals={
                    str(day): tuple(str(g) for g in items)
                    for day, items in (raw.get("goals") or {}).items()
                    if isinstance(items, list)
                },
                created_at=_parse_ts(raw.get("created_at")) or datetime.now(),
            )
        )

    score_raw = data.get("score") or {}
    history = tuple(
        ScoreEntry(
            date=str(e.get("date", "")),
            change=int(e.get("change", 0)),
            reason=str(e.get("reason", "")),
            task_id=e.get("task_id"),
        )
        for e in (score_raw.get("history") or [])
        if isinstance(e, dict)
    )[-HISTORY_LIMIT:]
    score = ProductivityScore(
        total_score=clamp_score(score_raw.get("total_score", 0) or 0),
        last_updated=_parse_ts(score_raw.get("last_updated")),
        history=history,
    )
    return BoardState(tasks=tuple(tasks), weekly_goals=tuple(goals), score=score)


def load_board(path: str | Path) -> BoardState:
    path = Path(path)
    if not path.exists():
        return BoardState()
    try:
        data = json.loads(path.read_text("utf-8"))
        if not isinstance(data, dict):
            return BoardState()
        state = board_from_dict(data)
        logger.info("Loaded board: %d tasks from %s", len(state.tasks), path)
        return state
    except Exception:
        logger.exception("Failed to load board from %s", path)
        return BoardState()


def save_board(state: BoardState, path: str | Path) -> None:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(json.dumps(board_to_dict(state), ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, path)
        with contextlib.suppress(Exception):
            os.chmod(path, 0o600)
        logger.info("Saved board: %d tasks to %s", len(state.tasks), path)
    except Exception:
        logger.exception("Failed to save board to %s", path)
