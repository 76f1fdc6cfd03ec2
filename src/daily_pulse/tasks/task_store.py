# src/daily_pulse/tasks/task_store.py

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import date, datetime

from ..core.ports import Clock
from .scoring import (
    COMPLETE_POINTS,
    MISSED_POINTS,
    UNCOMPLETE_POINTS,
    apply_score_change,
    bulk_completion_bonus,
)
from .task_models import (
    DUE_TIME_RE,
    AddTask,
    AddWeeklyGoals,
    AdjustScore,
    BoardState,
    Command,
    DeleteTask,
    MarkAllComplete,
    MarkMissed,
    Priority,
    ProductivityScore,
    Task,
    ToggleCompletion,
    UpdateTask,
    UpdateWeeklyGoals,
    WeeklyGoals,
    as_day,
)

logger = logging.getLogger(__name__)

StateListener = Callable[[BoardState], None]


# ---- pure transitions ----


def _find(tasks: tuple[Task, ...], task_id: str) -> Task | None:
    for t in tasks:
        if t.id == task_id:
            return t
    return None


def _swap(tasks: tuple[Task, ...], new_task: Task) -> tuple[Task, ...]:
    return tuple(new_task if t.id == new_task.id else t for t in tasks)


def _toggle(state: BoardState, task_id: str, now: datetime, today: str) -> BoardState:
    task = _find(state.tasks, task_id)
    if task is None:
        return state

    if task.completed:
        new_task = replace(task, completed=False, completed_at=None)
        change, reason = UNCOMPLETE_POINTS, "Task uncompleted"
    else:
        new_task = replace(task, completed=True, missed=False, completed_at=now, missed_at=None)
        change, reason = COMPLETE_POINTS, "Task completed"

    score = apply_score_change(state.score, change, reason, task.id, today=today, now=now)
    return replace(state, tasks=_swap(state.tasks, new_task), score=score)


def _mark_missed(state: BoardState, task_id: str, now: datetime, today: str) -> BoardState:
    task = _find(state.tasks, task_id)
    if task is None or task.completed or task.missed:
        return state

    new_task = replace(task, missed=True, missed_at=now)
    score = apply_score_change(state.score, MISSED_POINTS, "Task missed", task.id, today=today, now=now)
    return replace(state, tasks=_swap(state.tasks, new_task), score=score)


def _mark_all_complete(state: BoardState, day: str, now: datetime, today: str) -> BoardState:
    todo = [t for t in state.tasks if t.date == day and not t.completed]
    if not todo:
        return state

    todo_ids = {t.id for t in todo}
    tasks = tuple(
        replace(t, completed=True, completed_at=now, missed=False, missed_at=None)
        if t.id in todo_ids
        else t
        for t in state.tasks
    )
    score = apply_score_change(
        state.score,
        bulk_completion_bonus(len(todo)),
        f"Completed all {len(todo)} tasks for the day",
        today=today,
        now=now,
    )
    return replace(state, tasks=tasks, score=score)


def apply_command(state: BoardState, command: Command, *, now: datetime) -> BoardState:
    """
    Apply one command and return the resulting board.

    No-op commands (unknown ids, nothing to complete, already missed) return
    `state` itself, so callers can detect "nothing changed" with `is`.
    """
    today = now.date().isoformat()

    if isinstance(command, AddTask):
        return replace(state, tasks=(*state.tasks, command.task))

    if isinstance(command, UpdateTask):
        current = _find(state.tasks, command.task.id)
        if current is None:
            return state
        # A task never moves to another day and keeps its creation time.
        updated = replace(command.task, date=current.date, created_at=current.created_at)
        return replace(state, tasks=_swap(state.tasks, updated))

    if isinstance(command, DeleteTask):
        if _find(state.tasks, command.task_id) is None:
            return state
        return replace(state, tasks=tuple(t for t in state.tasks if t.id != command.task_id))

    if isinstance(command, ToggleCompletion):
        return _toggle(state, command.task_id, now, today)

    if isinstance(command, MarkMissed):
        return _mark_missed(state, command.task_id, now, today)

    if isinstance(command, MarkAllComplete):
        return _mark_all_complete(state, command.date, now, today)

    if isinstance(command, AddWeeklyGoals):
        return replace(state, weekly_goals=(*state.weekly_goals, command.goals))

    if isinstance(command, UpdateWeeklyGoals):
        if not any(wg.id == command.goals.id for wg in state.weekly_goals):
            return state
        return replace(
            state,
            weekly_goals=tuple(
                command.goals if wg.id == command.goals.id else wg for wg in state.weekly_goals
            ),
        )

    if isinstance(command, AdjustScore):
        score = apply_score_change(
            state.score, command.change, command.reason, command.task_id, today=today, now=now
        )
        return replace(state, score=score)

    raise TypeError(f"unsupported command: {type(command).__name__}")


def new_task_id() -> str:
    return f"task-{uuid.uuid4().hex}"


# ---- stateful store ----


class TaskStore:
    """
    Authoritative in-memory board (tasks, weekly goals, productivity score).

    Every mutation goes through `dispatch`, which runs the pure reducer and
    then notifies subscribers with the new state.

    Threading:
    - not thread-safe; all commands are expected to run on the event loop thread
    """

    def __init__(
        self,
        clock: Clock,
        *,
        state: BoardState | None = None,
        id_factory: Callable[[], str] = new_task_id,
    ) -> None:
        self._clock = clock
        self._state = state if state is not None else BoardState()
        self._id_factory = id_factory
        self._listeners: list[StateListener] = []
        logger.info(
            "TaskStore ready tasks=%d score=%d",
            len(self._state.tasks),
            self._state.score.total_score,
        )

    # ---- queries ----

    @property
    def state(self) -> BoardState:
        return self._state

    @property
    def score(self) -> ProductivityScore:
        return self._state.score

    def list_tasks(self) -> list[Task]:
        return list(self._state.tasks)

    def tasks_for_date(self, day: date | str) -> list[Task]:
        key = as_day(day)
        return [t for t in self._state.tasks if t.date == key]

    def now(self) -> datetime:
        return self._clock.now()

    def get_task(self, task_id: str) -> Task | None:
        return _find(self._state.tasks, task_id)

    def weekly_goals_for(self, week_start: date | str) -> WeeklyGoals | None:
        key = as_day(week_start)
        for wg in self._state.weekly_goals:
            if wg.week_start_date == key:
                return wg
        return None

    # ---- subscription ----

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _emit(self, state: BoardState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("TaskStore listener failed")

    # ---- commands ----

    def dispatch(self, command: Command) -> BoardState:
        before = self._state
        after = apply_command(before, command, now=self._clock.now())
        if after is before:
            logger.debug("Command %s was a no-op", type(command).__name__)
            return before
        self._state = after
        logger.debug("Command %s applied score=%d", type(command).__name__, after.score.total_score)
        self._emit(after)
        return after

    def add_task(
        self,
        name: str,
        *,
        date: date | str,
        priority: Priority | str = Priority.MEDIUM,
        due_time: str | None = None,
    ) -> Task:
        if not name or not name.strip():
            raise ValueError("name is required")
        due = (due_time or "").strip() or None
        if due is not None and not DUE_TIME_RE.match(due):
            raise ValueError(f"due_time must be HH:MM, got {due_time!r}")

        task = Task(
            id=self._id_factory(),
            name=name.strip(),
            date=as_day(date),
            priority=priority if isinstance(priority, Priority) else Priority.parse(priority),
            created_at=self._clock.now(),
            due_time=due,
        )
        self.dispatch(AddTask(task))
        logger.info("Task added id=%s date=%s due=%s", task.id, task.date, task.due_time)
        return task

    def update_task(self, task: Task) -> None:
        if task.due_time is not None and not DUE_TIME_RE.match(task.due_time):
            raise ValueError(f"due_time must be HH:MM, got {task.due_time!r}")
        self.dispatch(UpdateTask(task))

    def delete_task(self, task_id: str) -> None:
        self.dispatch(DeleteTask(task_id))

    def toggle_completion(self, task_id: str) -> Task | None:
        self.dispatch(ToggleCompletion(task_id))
        return self.get_task(task_id)

    def mark_missed(self, task_id: str) -> bool:
        """Return True if the task transitioned to missed."""
        before = self._state
        return self.dispatch(MarkMissed(task_id)) is not before

    def mark_all_complete(self, day: date | str) -> int:
        """Complete every open task on `day`; return how many were completed."""
        key = as_day(day)
        count = sum(1 for t in self._state.tasks if t.date == key and not t.completed)
        self.dispatch(MarkAllComplete(key))
        return count

    def add_weekly_goals(self, goals: WeeklyGoals) -> None:
        self.dispatch(AddWeeklyGoals(goals))

    def update_weekly_goals(self, goals: WeeklyGoals) -> None:
        self.dispatch(UpdateWeeklyGoals(goals))

    def adjust_score(self, change: int, reason: str, task_id: str | None = None) -> ProductivityScore:
        self.dispatch(AdjustScore(change=int(change), reason=reason, task_id=task_id))
        return self._state.score
