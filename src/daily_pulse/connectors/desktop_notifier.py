# src/daily_pulse/connectors/desktop_notifier.py

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from collections.abc import Callable

from ..core.ports import Permission

logger = logging.getLogger(__name__)

AlertFn = Callable[[str], None]
Runner = Callable[..., object]


def print_alert(text: str) -> None:
    print(f"\a{text}", file=sys.stderr, flush=True)


class DesktopNotifier:
    """
    Native desktop notifications via `notify-send`, with an alert fallback.

    Fallback is used when:
    - the notify command is not installed
    - permission is not granted (disabled in settings)
    - the notify command fails
    A reminder is never dropped silently.
    """

    def __init__(
        self,
        *,
        command: str = "notify-send",
        allowed: bool = True,
        alert: AlertFn = print_alert,
        runner: Runner = subprocess.run,
        timeout_ms: int = 10_000,
    ) -> None:
        self._command = command
        self._allowed = allowed
        self._alert = alert
        self._runner = runner
        self._timeout_ms = int(timeout_ms)
        self.permission = Permission.DEFAULT

    @property
    def is_supported(self) -> bool:
        return bool(self._command) and shutil.which(self._command) is not None

    def request_permission(self) -> Permission:
        if not self.is_supported:
            logger.warning("Desktop notifications not supported (%s not found)", self._command)
            self.permission = Permission.DENIED
            return self.permission
        if self.permission != Permission.DEFAULT:
            return self.permission
        self.permission = Permission.GRANTED if self._allowed else Permission.DENIED
        return self.permission

    def _fallback(self, title: str, body: str) -> None:
        self._alert(f"Reminder: {title}\n{body}")

    def show(self, title: str, body: str, tag: str | None = None) -> None:
        if self.permission != Permission.GRANTED or not self.is_supported:
            self._fallback(title, body)
            return

        argv = [self._command, "--urgency=critical", f"--expire-time={self._timeout_ms}"]
        if tag:
            argv.append(f"--hint=string:x-canonical-private-synchronous:{tag}")
        argv += [title, body]

        try:
            self._runner(argv, check=True, timeout=5, capture_output=True)
        except (OSError, subprocess.SubprocessError):
            logger.exception("Desktop notification failed; falling back to alert")
            self._fallback(title, body)
