# tests/test_task_store.py

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from daily_pulse.tasks.task_models import (
    BoardState,
    MarkAllComplete,
    Priority,
    ProductivityScore,
    Task,
    TaskStatus,
    ToggleCompletion,
)
from daily_pulse.tasks.task_store import TaskStore, apply_command

from .fakes import FakeClock


def test_write_report_scenario(clock: FakeClock, store: TaskStore) -> None:
    task = store.add_task("Write report", date="2024-03-01", priority="Medium", due_time="14:30")
    assert task.completed is False and task.missed is False
    assert task.created_at == clock.now()

    clock.set(datetime(2024, 3, 1, 14, 45))
    done = store.toggle_completion(task.id)

    assert done is not None
    assert done.completed is True
    assert done.missed is False
    assert done.completed_at == datetime(2024, 3, 1, 14, 45)
    assert store.score.total_score == 10
    assert store.score.history[-1].task_id == task.id
    assert store.score.history[-1].reason == "Task completed"


def test_add_task_validates_input(store: TaskStore) -> None:
    with pytest.raises(ValueError):
        store.add_task("   ", date="2024-03-01")
    with pytest.raises(ValueError):
        store.add_task("x", date="2024-03-01", due_time="25:00")
    with pytest.raises(ValueError):
        store.add_task("x", date="2024-03-01", priority="Urgent")
    assert store.list_tasks() == []


def test_toggle_sequence_score_and_clamp(clock: FakeClock) -> None:
    store = TaskStore(clock, state=BoardState(score=ProductivityScore(total_score=995)))
    task = store.add_task("Ship it", date="2024-03-01")

    store.toggle_completion(task.id)  # 995 + 10 -> 1000
    assert store.score.total_score == 1000
    store.toggle_completion(task.id)  # -10
    assert store.score.total_score == 990
    store.toggle_completion(task.id)
    assert store.score.total_score == 1000

    uncompleted = store.toggle_completion(task.id)
    assert uncompleted is not None
    assert uncompleted.completed is False
    assert uncompleted.completed_at is None
    assert [e.change for e in store.score.history] == [10, -10, 10, -10]


def test_toggle_unknown_id_is_noop(store: TaskStore) -> None:
    before = store.state
    assert store.toggle_completion("task-missing") is None
    assert store.state is before


def test_mark_missed_is_idempotent(store: TaskStore) -> None:
    task = store.add_task("Call bank", date="2024-03-01")

    assert store.mark_missed(task.id) is True
    after_first = store.state
    assert store.mark_missed(task.id) is False

    assert store.state is after_first
    missed = store.get_task(task.id)
    assert missed is not None and missed.status == TaskStatus.MISSED
    assert [e.change for e in store.score.history] == [-5]


def test_mark_missed_ignores_completed_task(store: TaskStore) -> None:
    task = store.add_task("Gym", date="2024-03-01")
    store.toggle_completion(task.id)

    assert store.mark_missed(task.id) is False
    t = store.get_task(task.id)
    assert t is not None and t.completed and not t.missed


def test_completing_missed_task_clears_missed(store: TaskStore) -> None:
    task = store.add_task("Read", date="2024-03-01")
    store.mark_missed(task.id)
    done = store.toggle_completion(task.id)

    assert done is not None
    assert done.completed is True
    assert done.missed is False
    assert done.missed_at is None
    assert store.score.total_score == 10  # 0 - 5 clamps to 0, then +10


def test_mark_all_complete_single_bonus_entry(store: TaskStore) -> None:
    a = store.add_task("A", date="2024-03-01")
    b = store.add_task("B", date="2024-03-01")
    c = store.add_task("C", date="2024-03-01")
    other = store.add_task("Other day", date="2024-03-02")
    store.toggle_completion(a.id)
    store.mark_missed(b.id)

    completed = store.mark_all_complete("2024-03-01")

    assert completed == 2
    assert store.score.history[-1].change == 2 * 10 + 20
    assert store.score.history[-1].task_id is None
    assert store.score.history[-1].reason == "Completed all 2 tasks for the day"
    for task_id in (a.id, b.id, c.id):
        t = store.get_task(task_id)
        assert t is not None and t.completed and not t.missed and t.missed_at is None
    o = store.get_task(other.id)
    assert o is not None and not o.completed


def test_mark_all_complete_with_nothing_to_do_is_noop(store: TaskStore) -> None:
    a = store.add_task("A", date="2024-03-01")
    store.toggle_completion(a.id)
    before = store.state

    assert store.mark_all_complete("2024-03-01") == 0
    assert store.mark_all_complete("2024-03-05") == 0
    assert store.state is before
    assert len(store.score.history) == 1


def test_update_and_delete_do_not_touch_score(store: TaskStore) -> None:
    task = store.add_task("Draft", date="2024-03-01")
    store.update_task(replace(task, name="Draft v2", priority=Priority.HIGH))
    edited = store.get_task(task.id)
    assert edited is not None and edited.name == "Draft v2" and edited.priority == Priority.HIGH

    store.delete_task(task.id)
    assert store.get_task(task.id) is None
    assert store.score.history == ()

    before = store.state
    store.update_task(task)  # stale id
    store.delete_task(task.id)
    assert store.state is before


def test_task_rejects_completed_and_missed() -> None:
    with pytest.raises(ValueError):
        Task(
            id="task-1",
            name="x",
            date="2024-03-01",
            priority=Priority.LOW,
            created_at=datetime(2024, 3, 1),
            completed=True,
            missed=True,
        )


def test_subscribers_get_new_state_and_noops_are_silent(store: TaskStore) -> None:
    seen: list[BoardState] = []
    unsubscribe = store.subscribe(seen.append)

    task = store.add_task("A", date="2024-03-01")
    store.toggle_completion("task-nope")
    store.toggle_completion(task.id)
    assert len(seen) == 2
    assert seen[-1] is store.state

    unsubscribe()
    store.delete_task(task.id)
    assert len(seen) == 2


def test_failing_subscriber_does_not_break_command(store: TaskStore) -> None:
    def boom(_state: BoardState) -> None:
        raise RuntimeError("listener failure")

    store.subscribe(boom)
    task = store.add_task("A", date="2024-03-01")
    assert store.get_task(task.id) is not None


def test_reducer_is_pure() -> None:
    now = datetime(2024, 3, 1, 10, 0)
    task = Task(id="t1", name="x", date="2024-03-01", priority=Priority.MEDIUM, created_at=now)
    state = BoardState(tasks=(task,))

    out = apply_command(state, ToggleCompletion("t1"), now=now)
    assert state.tasks[0].completed is False
    assert out.tasks[0].completed is True

    bulk = apply_command(state, MarkAllComplete("2024-03-01"), now=now)
    assert bulk.score.total_score == 30


def test_adjust_score(store: TaskStore) -> None:
    score = store.adjust_score(1500, "Imported")
    assert score.total_score == 1000
    assert score.history[-1].reason == "Imported"


def test_update_keeps_date_and_created_at(clock: FakeClock, store: TaskStore) -> None:
    task = store.add_task("Pinned", date="2024-03-01")

    store.update_task(replace(task, name="Renamed", date="2024-03-09", created_at=datetime(2020, 1, 1)))

    stored = store.get_task(task.id)
    assert stored is not None
    assert stored.name == "Renamed"
    assert stored.date == "2024-03-01"
    assert stored.created_at == clock.now()
    assert store.tasks_for_date("2024-03-09") == []
