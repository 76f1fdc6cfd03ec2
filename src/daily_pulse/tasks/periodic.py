# src/daily_pulse/tasks/periodic.py

from __future__ import annotations

import logging
from typing import Any

from ..core.ports import CancelHandle, Clock

logger = logging.getLogger(__name__)


class PeriodicJob:
    """
    Base for the background processes.

    - start(): run one check immediately, then arm a repeating timer
    - stop(): cancel the timer; nothing re-arms it until start() is called again
    - tick(): one guarded check; exceptions are logged and never escape
    """

    name = "job"

    def __init__(self, clock: Clock, *, interval_seconds: float, enabled: bool = True) -> None:
        self._clock = clock
        self._interval_s = max(1.0, float(interval_seconds))
        self._handle: CancelHandle | None = None
        self.enabled = enabled

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self._handle is not None:
            return
        if not self.enabled:
            logger.info("%s disabled; not starting", self.name)
            return
        self._on_start()
        self.tick()
        self._handle = self._clock.schedule(self._interval_s, self.tick)
        logger.info("%s started (every %.0fs)", self.name, self._interval_s)

    def stop(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        handle.cancel()
        logger.info("%s stopped", self.name)

    def tick(self) -> Any:
        try:
            return self._check()
        except Exception:
            logger.exception("%s tick failed", self.name)
            return None

    def _on_start(self) -> None:
        return

    def _check(self) -> Any:
        raise NotImplementedError
