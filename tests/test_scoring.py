# tests/test_scoring.py

from __future__ import annotations

from datetime import datetime

from daily_pulse.tasks.scoring import HISTORY_LIMIT, SCORE_MAX, apply_score_change, bulk_completion_bonus
from daily_pulse.tasks.task_models import ProductivityScore, ScoreEntry

NOW = datetime(2024, 3, 1, 12, 0)


def test_score_change_appends_history_and_updates_timestamp() -> None:
    score = ProductivityScore(total_score=100)
    out = apply_score_change(score, 10, "Task completed", "task-1", today="2024-03-01", now=NOW)

    assert out.total_score == 110
    assert out.last_updated == NOW
    assert out.history == (ScoreEntry("2024-03-01", 10, "Task completed", "task-1"),)
    # input untouched
    assert score.total_score == 100
    assert score.history == ()


def test_score_is_clamped_at_both_bounds() -> None:
    low = apply_score_change(ProductivityScore(total_score=3), -5, "Task missed", today="2024-03-01", now=NOW)
    high = apply_score_change(ProductivityScore(total_score=995), 10_000, "bonus", today="2024-03-01", now=NOW)

    assert low.total_score == 0
    assert high.total_score == SCORE_MAX
    # the audit trail records what was requested
    assert low.history[-1].change == -5
    assert high.history[-1].change == 10_000


def test_history_keeps_only_most_recent_entries() -> None:
    score = ProductivityScore()
    for i in range(HISTORY_LIMIT + 7):
        score = apply_score_change(score, 1, f"event {i}", today="2024-03-01", now=NOW)

    assert len(score.history) == HISTORY_LIMIT
    assert score.history[0].reason == "event 7"
    assert score.history[-1].reason == f"event {HISTORY_LIMIT + 6}"


def test_bulk_completion_bonus() -> None:
    assert bulk_completion_bonus(1) == 30
    assert bulk_completion_bonus(3) == 50
