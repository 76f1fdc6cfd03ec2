# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from daily_pulse.cli.bootstrap import create_initial_state
from daily_pulse.core.state import AppState
from daily_pulse.tasks.task_store import TaskStore

from .fakes import FakeClock, FakeNotifier, MemoryKeyValueStore

# Friday.
START = datetime(2024, 3, 1, 9, 0)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(START)


@pytest.fixture()
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def store(clock: FakeClock) -> TaskStore:
    return TaskStore(clock)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and AppState.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="daily-pulse-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        markers_db_path=tmp_path / "markers.sqlite3",
        board_path=tmp_path / "board.json",
        notifications_allowed=True,
        notify_command="notify-send",
        reminders_enabled=True,
        reminder_interval_seconds=60.0,
        end_of_day_enabled=True,
        end_of_day_hour=22,
        end_of_day_interval_seconds=1800.0,
        weekend_planning_enabled=True,
        weekend_start_hour=9,
        weekend_end_hour=21,
        weekend_interval_seconds=3600.0,
    )


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    clock: FakeClock,
    kv: MemoryKeyValueStore,
    notifier: FakeNotifier,
) -> AppState:
    """AppState wired with deterministic fakes (real TaskStore and board I/O)."""
    return create_initial_state(settings=settings, clock=clock, kv=kv, notifier=notifier)
