# src/daily_pulse/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The schedulers depend on Protocols instead of concrete implementations.
This keeps time, storage and notification delivery swappable and makes testing easier
(tests drive a fake clock and an in-memory key-value store).
"""

from collections.abc import Callable
from datetime import datetime
from enum import StrEnum
from typing import Any, Protocol


class CancelHandle(Protocol):
    def cancel(self) -> None: ...


class Clock(Protocol):
    """Source of "now" plus repeating timers."""

    def now(self) -> datetime: ...

    def schedule(self, interval_seconds: float, callback: Callable[[], None]) -> CancelHandle:
        """
        Call `callback` every `interval_seconds` until the handle is cancelled.

        The first call happens one interval after scheduling, not immediately.
        """
        ...


class KeyValueStore(Protocol):
    """Durable small-string storage used for idempotency markers."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...
    def keys_with_prefix(self, prefix: str) -> list[str]: ...


class Permission(StrEnum):
    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"


class Notifier(Protocol):
    """
    Show the user a message.

    Implementations must not drop a message silently: if native notifications are
    unavailable or not permitted they fall back to an alert-style message.
    """

    def show(self, title: str, body: str, tag: str | None = None) -> None: ...
    def request_permission(self) -> Permission: ...


class TaskBoard(Protocol):
    # Read side used by the schedulers
    def list_tasks(self) -> list[Any]: ...

    # Write side used by the end-of-day sweep
    def mark_missed(self, task_id: str) -> bool: ...
