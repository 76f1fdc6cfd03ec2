# src/daily_pulse/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, starts the background processes
(reminders, end-of-day sweep, weekend planning prompt) on the asyncio loop,
then runs the console REPL until /exit or Ctrl+C.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state, persist_board
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.stop_background()
    except Exception:
        logger.exception("Failed to stop background processes.")

    for unsubscribe in state.unsubscribe:
        try:
            unsubscribe()
        except Exception:
            logger.debug("Unsubscribe failed.", exc_info=True)

    try:
        persist_board(state)
    except Exception:
        logger.exception("Failed to save board.")

    # KeyValueStore uses short-lived sqlite connections per call; close is a no-op hook.
    try:
        kv = getattr(state, "kv", None)
        if kv is not None and hasattr(kv, "close"):
            kv.close()
    except Exception:
        logger.debug("KeyValueStore close failed.", exc_info=True)


async def _run(state: AppState) -> None:
    # Timers need the running loop, so start them here rather than in bootstrap.
    state.start_background()
    try:
        await run_console_loop(state)
    finally:
        _shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/daily_pulse")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "daily-pulse"))

    state = create_initial_state(settings=settings)

    try:
        asyncio.run(_run(state))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
