# tests/test_desktop_notifier.py

from __future__ import annotations

import subprocess

import pytest

from daily_pulse.connectors import desktop_notifier
from daily_pulse.connectors.desktop_notifier import DesktopNotifier
from daily_pulse.core.ports import Permission


class RecordingRunner:
    def __init__(self, exc: Exception | None = None) -> None:
        self.calls: list[list[str]] = []
        self.exc = exc

    def __call__(self, argv: list[str], **kwargs) -> None:
        self.calls.append(argv)
        if self.exc is not None:
            raise self.exc


@pytest.fixture()
def installed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(desktop_notifier.shutil, "which", lambda cmd: f"/usr/bin/{cmd}")


@pytest.fixture()
def not_installed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(desktop_notifier.shutil, "which", lambda cmd: None)


def test_granted_notification_runs_command(installed: None) -> None:
    alerts: list[str] = []
    runner = RecordingRunner()
    n = DesktopNotifier(alert=alerts.append, runner=runner)

    assert n.request_permission() == Permission.GRANTED
    n.show("⏰ Task Reminder", "It's time for: Standup", tag="task-1")

    assert alerts == []
    argv = runner.calls[0]
    assert argv[0] == "notify-send"
    assert "--urgency=critical" in argv
    assert "--hint=string:x-canonical-private-synchronous:task-1" in argv
    assert argv[-2:] == ["⏰ Task Reminder", "It's time for: Standup"]


def test_unsupported_platform_uses_alert(not_installed: None) -> None:
    alerts: list[str] = []
    runner = RecordingRunner()
    n = DesktopNotifier(alert=alerts.append, runner=runner)

    assert n.request_permission() == Permission.DENIED
    n.show("Daily Review", "1 task marked as missed. Tomorrow is a new day!")

    assert runner.calls == []
    assert alerts == ["Reminder: Daily Review\n1 task marked as missed. Tomorrow is a new day!"]


def test_disallowed_notifications_use_alert(installed: None) -> None:
    alerts: list[str] = []
    runner = RecordingRunner()
    n = DesktopNotifier(allowed=False, alert=alerts.append, runner=runner)

    assert n.request_permission() == Permission.DENIED
    n.show("t", "b")

    assert runner.calls == []
    assert len(alerts) == 1


def test_show_before_permission_request_uses_alert(installed: None) -> None:
    alerts: list[str] = []
    n = DesktopNotifier(alert=alerts.append, runner=RecordingRunner())

    n.show("t", "b")

    assert alerts == ["Reminder: t\nb"]


def test_failed_command_falls_back(installed: None) -> None:
    alerts: list[str] = []
    runner = RecordingRunner(exc=subprocess.CalledProcessError(1, ["notify-send"]))
    n = DesktopNotifier(alert=alerts.append, runner=runner)
    n.request_permission()

    n.show("t", "b")

    assert len(runner.calls) == 1
    assert alerts == ["Reminder: t\nb"]
