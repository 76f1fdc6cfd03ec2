# src/daily_pulse/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import date, timedelta
from typing import cast

from ..core.state import AppState
from ..tasks.stats import compute_monthly_trends, compute_planner_stats
from ..tasks.task_api import add_goal
from ..tasks.task_models import DUE_TIME_RE, Priority, Task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

WEEKDAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except ValueError as e:
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- parsing helpers ----


def parse_day(token: str, today: date) -> date:
    """today | tomorrow | yesterday | mon..sun | YYYY-MM-DD."""
    t = token.strip().lower()
    if t == "today":
        return today
    if t == "tomorrow":
        return today + timedelta(days=1)
    if t == "yesterday":
        return today - timedelta(days=1)
    if t[:3] in WEEKDAYS and t.isalpha():
        # Weekday names refer to the current week, or to the next one on weekends.
        monday = today - timedelta(days=today.weekday())
        if today.weekday() >= 5:
            monday += timedelta(days=7)
        return monday + timedelta(days=WEEKDAYS.index(t[:3]))
    try:
        return date.fromisoformat(t)
    except ValueError:
        raise ValueError(f"not a date: {token!r}") from None


def _split_task_args(args: list[str], today: date) -> tuple[str, str | None, Priority | None, date | None]:
    """Split "/add" style args into name, @HH:MM, !priority and #date parts."""
    words: list[str] = []
    due: str | None = None
    prio: Priority | None = None
    day: date | None = None
    for a in args:
        if a.startswith("@") and len(a) > 1:
            if not DUE_TIME_RE.match(a[1:]):
                raise ValueError(f"due time must be HH:MM, got {a[1:]!r}")
            due = a[1:]
        elif a.startswith("!") and len(a) > 1:
            prio = Priority.parse(a[1:])
        elif a.startswith("#") and len(a) > 1:
            day = parse_day(a[1:], today)
        else:
            words.append(a)
    return " ".join(words), due, prio, day


def short_id(task: Task) -> str:
    return task.id.removeprefix("task-")[:8]


def resolve_task(state: AppState, token: str) -> Task:
    """Find a task by full id or unique id prefix."""
    token = token.strip().removeprefix("task-")
    matches = [t for t in state.store.list_tasks() if t.id.removeprefix("task-").startswith(token)]
    if not token or not matches:
        raise ValueError(f"no task matches {token!r}")
    if len(matches) > 1:
        raise ValueError(f"{token!r} is ambiguous ({len(matches)} tasks)")
    return matches[0]


def format_task(task: Task) -> str:
    mark = {"completed": "x", "missed": "!", "pending": " "}[task.status.value]
    due = task.due_time or "--:--"
    return f"[{mark}] {short_id(task)} {due} {task.priority.value:<6} {task.name}"


def _today(state: AppState) -> date:
    return state.clock.now().date()


# ---- handlers ----


def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    def onoff(flag: bool) -> str:
        return "ON" if flag else "OFF"

    return (
        "Status:\n"
        f"  Reminders: {onoff(state.reminders.running)} (permission: {state.reminders.permission.value})\n"
        f"  End-of-day sweep: {onoff(state.sweeper.running)}\n"
        f"  Weekend planning prompt: {onoff(state.weekend.running)}\n"
        f"  Score: {state.store.score.total_score}"
    )


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add Write report @14:30 !high #tomorrow
    """
    today = _today(state)
    name, due, prio, day = _split_task_args(args, today)
    task = state.store.add_task(
        name,
        date=day or today,
        priority=prio or Priority.MEDIUM,
        due_time=due,
    )
    return f"Added {format_task(task)} on {task.date}"


def cmd_list(state: AppState, args: list[str]) -> str:
    day = parse_day(args[0], _today(state)) if args else _today(state)
    tasks = sorted(state.store.tasks_for_date(day), key=lambda t: (t.due_time or "99:99", t.created_at))
    if not tasks:
        return f"No tasks for {day.isoformat()}."
    lines = [f"Tasks for {day.isoformat()}:"]
    lines += [f"  {format_task(t)}" for t in tasks]
    return "\n".join(lines)


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> [new name] [@HH:MM | @-] [!priority]
    """
    if not args:
        return "Usage: /edit <id> [new name] [@HH:MM | @-] [!priority]"
    task = resolve_task(state, args[0])
    rest = list(args[1:])
    clear_due = "@-" in rest
    rest = [a for a in rest if a != "@-"]
    name, due, prio, _day = _split_task_args(rest, _today(state))

    updated = replace(
        task,
        name=name or task.name,
        due_time=None if clear_due else (due or task.due_time),
        priority=prio or task.priority,
    )
    if updated == task:
        return "Nothing to change."
    state.store.update_task(updated)
    return f"Updated {format_task(updated)}"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    task = state.store.toggle_completion(resolve_task(state, args[0]).id)
    if task is None:
        return "Task no longer exists."
    verb = "Completed" if task.completed else "Reopened"
    return f"{verb} {format_task(task)} (score: {state.store.score.total_score})"


def cmd_missed(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /missed <id>"
    task = resolve_task(state, args[0])
    if not state.store.mark_missed(task.id):
        return "Only pending tasks can be marked as missed."
    return f"Marked missed: {task.name} (score: {state.store.score.total_score})"


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <id>"
    task = resolve_task(state, args[0])
    state.store.delete_task(task.id)
    return f"Deleted {task.name}"


def cmd_alldone(state: AppState, args: list[str]) -> str:
    day = parse_day(args[0], _today(state)) if args else _today(state)
    count = state.store.mark_all_complete(day)
    if not count:
        return "All tasks are already completed!"
    return f"Completed {count} task(s) for {day.isoformat()} (score: {state.store.score.total_score})"


def cmd_score(state: AppState, args: list[str]) -> str:
    limit = 10
    if args:
        with contextlib.suppress(ValueError):
            limit = max(1, int(args[0]))
    score = state.store.score
    lines = [f"Productivity score: {score.total_score}/1000"]
    for e in reversed(score.history[-limit:]):
        lines.append(f"  {e.date} {e.change:+d} {e.reason}")
    return "\n".join(lines)


def cmd_stats(state: AppState, args: list[str]) -> str:
    today = _today(state)
    tasks = state.store.list_tasks()
    s = compute_planner_stats(tasks, today)
    m = compute_monthly_trends(tasks, today)
    return (
        "Stats:\n"
        f"  Today: {s.completed_today}/{s.total_today} completed\n"
        f"  This week: {s.completed_this_week}/{s.total_this_week} completed\n"
        f"  Streak: {s.streak} day(s) ({m.streak_trend:+d}% vs last month)\n"
        f"  This month: {m.tasks_completed} completed ({m.tasks_completed_trend:+d}% vs last month)"
    )


def cmd_plan(state: AppState, args: list[str]) -> str:
    """
    /plan <day> <goal text>   (day: mon..sun, tomorrow, YYYY-MM-DD)
    """
    if len(args) < 2:
        return "Usage: /plan <day> <goal text>  (weekday names mean next week on weekends)"
    state.planning_requested = False
    day = parse_day(args[0], _today(state))
    task = add_goal(state.store, day, " ".join(args[1:]))
    if task is None:
        return "That goal is already planned."
    return f"Planned {format_task(task)} on {task.date}"


def cmd_eod(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        with contextlib.suppress(Exception):
            emit("[EOD] Running end-of-day check...")
    marked = state.sweeper.trigger_now()
    return f"End-of-day check done: {marked} task(s) marked as missed."


def cmd_remind(state: AppState, args: list[str]) -> str:
    """
    /remind          -> show status
    /remind on|off   -> start/stop the reminder scheduler
    """
    if not args:
        return f"Reminders are {'ON' if state.reminders.running else 'OFF'}. Use /remind on or /remind off."

    arg = args[0].lower()
    if arg in ("on", "1", "true", "yes"):
        if state.reminders.running:
            return "Reminders are already ON."
        state.reminders.enabled = True
        state.reminders.start()
        return f"Reminders enabled (permission: {state.reminders.permission.value})."

    if arg in ("off", "0", "false", "no"):
        if not state.reminders.running:
            return "Reminders are already OFF."
        state.reminders.stop()
        state.reminders.enabled = False
        return "Reminders disabled."

    return "Usage: /remind on or /remind off."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show background process status and score.")
registry.register("add", cmd_add, help_text="Add a task: /add <name> [@HH:MM] [!high|!medium|!low] [#day].")
registry.register("list", cmd_list, help_text="List tasks: /list [day].", aliases=["ls"])
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> [name] [@HH:MM|@-] [!priority].")
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("missed", cmd_missed, help_text="Mark a pending task as missed: /missed <id>.")
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("alldone", cmd_alldone, help_text="Complete every open task: /alldone [day].")
registry.register("score", cmd_score, help_text="Show score and recent history: /score [n].")
registry.register("stats", cmd_stats, help_text="Show today/week counts, streak and trends.")
registry.register("plan", cmd_plan, help_text="Plan a weekly goal: /plan <day> <goal>.")
registry.register("eod", cmd_eod, help_text="Run the end-of-day check now.")
registry.register("remind", cmd_remind, help_text="Reminders: /remind on | /remind off.")
