# src/daily_pulse/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires clock/markers/notifier/store and the three background processes into AppState,
- persists the board snapshot as JSON after every change and on shutdown.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.desktop_notifier import DesktopNotifier, print_alert
from ..core.clock import AsyncioClock
from ..core.ports import Clock, KeyValueStore, Notifier
from ..core.state import AppState
from ..storage.kv_store import SqliteKeyValueStore
from ..tasks.board_io import load_board, save_board
from ..tasks.end_of_day import EndOfDaySweeper
from ..tasks.reminder_scheduler import ReminderScheduler
from ..tasks.task_store import TaskStore
from ..tasks.weekend_planning import WeekendPlanningTrigger

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.markers_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.board_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    clock: Clock | None = None,
    kv: KeyValueStore | None = None,
    notifier: Notifier | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Collaborators are injectable so tests can pass a fake clock, in-memory
    markers and a recording notifier. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    clock = clock or AsyncioClock()
    kv = kv or SqliteKeyValueStore(settings.markers_db_path)
    notifier = notifier or DesktopNotifier(
        command=settings.notify_command,
        allowed=settings.notifications_allowed,
        alert=print_alert,
    )

    store = TaskStore(clock, state=load_board(settings.board_path))

    reminders = ReminderScheduler(
        store,
        clock,
        kv,
        notifier,
        interval_seconds=settings.reminder_interval_seconds,
        enabled=settings.reminders_enabled,
    )
    sweeper = EndOfDaySweeper(
        store,
        clock,
        kv,
        notifier=notifier,
        threshold_hour=settings.end_of_day_hour,
        interval_seconds=settings.end_of_day_interval_seconds,
        enabled=settings.end_of_day_enabled,
    )

    state_box: dict[str, AppState] = {}

    def _request_planning() -> None:
        app = state_box.get("state")
        if app is None:
            return
        app.planning_requested = True
        logger.info("Weekly planning time: use /plan <day> <goal> to plan next week.")
        if app.on_planning is not None:
            app.on_planning()

    weekend = WeekendPlanningTrigger(
        clock,
        kv,
        _request_planning,
        start_hour=settings.weekend_start_hour,
        end_hour=settings.weekend_end_hour,
        interval_seconds=settings.weekend_interval_seconds,
        enabled=settings.weekend_planning_enabled,
    )

    state = AppState(
        settings=settings,
        clock=clock,
        kv=kv,
        notifier=notifier,
        store=store,
        reminders=reminders,
        sweeper=sweeper,
        weekend=weekend,
    )
    state_box["state"] = state
    state.unsubscribe.append(store.subscribe(reminders.on_board_changed))
    # Snapshot after every change, same as the KV markers.
    state.unsubscribe.append(store.subscribe(lambda board: save_board(board, settings.board_path)))
    return state


def persist_board(state: AppState) -> None:
    save_board(state.store.state, state.settings.board_path)
