# src/daily_pulse/tasks/scoring.py

"""
Productivity score arithmetic.

Pure functions only: "today" and "now" are passed in by the caller so the
score can be tested without a clock.
"""

from __future__ import annotations

from datetime import datetime

from .task_models import ProductivityScore, ScoreEntry

SCORE_MIN = 0
SCORE_MAX = 1000
HISTORY_LIMIT = 50

COMPLETE_POINTS = 10
UNCOMPLETE_POINTS = -10
MISSED_POINTS = -5
ALL_COMPLETE_BONUS = 20


def clamp_score(value: int) -> int:
    return max(SCORE_MIN, min(SCORE_MAX, int(value)))


def apply_score_change(
    score: ProductivityScore,
    change: int,
    reason: str,
    task_id: str | None = None,
    *,
    today: str,
    now: datetime,
) -> ProductivityScore:
    """
    Return a new score with `change` applied.

    - total is clamped to [SCORE_MIN, SCORE_MAX] no matter how large `change` is
    - the audit entry records the requested change, not the clamped delta
    - history keeps only the newest HISTORY_LIMIT entries
    """
    entry = ScoreEntry(date=today, change=int(change), reason=reason, task_id=task_id)
    history = (*score.history, entry)[-HISTORY_LIMIT:]
    return ProductivityScore(
        total_score=clamp_score(score.total_score + int(change)),
        last_updated=now,
        history=history,
    )


def bulk_completion_bonus(completed_count: int) -> int:
    return completed_count * COMPLETE_POINTS + ALL_COMPLETE_BONUS
