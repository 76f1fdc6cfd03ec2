# src/daily_pulse/connectors/console_connector.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import sys
import threading
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

PLANNING_HINT = (
    "It's the weekend - time to plan next week. "
    "Use /plan <day> <goal> (e.g. /plan mon Write report)."
)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def show_planning_hint(state: AppState) -> None:
    state.planning_requested = False
    _print_ts(PLANNING_HINT)


def attach_planning_hint(state: AppState) -> None:
    """Print the weekend planning hint as soon as the trigger fires, not on the next prompt."""
    state.on_planning = lambda: show_planning_hint(state)


def handle_line(state: AppState, line: str) -> str | None:
    """Run one console line on the loop thread. Returns the reply (None for empty input)."""
    line = line.strip()
    if not line:
        return None
    if not line.startswith("/"):
        line = "/add " + line

    try:
        return command_registry.handle(state, line, emit=_print_ts)
    except Exception:
        logger.exception("Command handler crashed.")
        return "Internal error while handling a command."


def _start_stdin_reader(loop: asyncio.AbstractEventLoop, queue: asyncio.Queue[str | None]) -> None:
    """Read stdin in a daemon thread; lines are handed to the loop thread via the queue."""

    def _push(item: str | None) -> None:
        # The loop may already be closed when input arrives during shutdown.
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(queue.put_nowait, item)

    def _reader() -> None:
        while True:
            try:
                line = sys.stdin.readline()
            except Exception:
                logger.exception("Console input failed.")
                line = ""
            if not line:
                _push(None)
                return
            _push(line.rstrip("\n"))

    threading.Thread(target=_reader, name="console-input", daemon=True).start()


async def run_console_loop(state: AppState) -> None:
    """
    Interactive REPL.

    Reading stdin blocks, so it happens in a daemon thread; every command is executed
    on the event loop thread, the same thread the background timers use.
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type a task name to add it. Use /help for commands. Use /exit to quit.\n")

    loop = asyncio.get_running_loop()
    lines: asyncio.Queue[str | None] = asyncio.Queue()
    _start_stdin_reader(loop, lines)

    attach_planning_hint(state)
    # A prompt fired before the console started is still pending.
    if state.planning_requested:
        show_planning_hint(state)

    while True:
        print(">>> ", end="", flush=True)
        user_input = await lines.get()
        if user_input is None:
            logger.info("Console EOF received, exiting.")
            break

        if user_input.strip().lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        reply = handle_line(state, user_input)
        if reply is not None:
            _print_ts(reply)
