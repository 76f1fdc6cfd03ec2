# src/daily_pulse/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE_NAME = "daily_pulse.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Console thresholds by logger-name prefix; first match wins.
# Background jobs tick often: WARNING+ only.
CONSOLE_THRESHOLDS: tuple[tuple[str, int], ...] = (
    ("daily_pulse.tasks.reminder_scheduler", logging.WARNING),
    ("daily_pulse.tasks.periodic", logging.WARNING),
    ("daily_pulse.storage", logging.WARNING),
    ("daily_pulse.", logging.NOTSET),
)


class _SchedulerQuietFilter(logging.Filter):
    """Keep the REPL readable; anything without a listed prefix needs ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        for prefix, threshold in CONSOLE_THRESHOLDS:
            if record.name.startswith(prefix):
                return record.levelno >= threshold
        return record.levelno >= logging.ERROR


def _console_handler(level: int, fmt: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.addFilter(_SchedulerQuietFilter())
    return handler


def _file_handler(path: Path, level: int, fmt: logging.Formatter) -> logging.Handler:
    handler = RotatingFileHandler(str(path), maxBytes=2_000_000, backupCount=5, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(fmt)
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/daily_pulse",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install a filtered stderr handler and a rotating file handler on the root logger.

    Replaces handlers installed earlier, so calling it twice does not duplicate output.
    Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for h in list(root.handlers):
        root.removeHandler(h)

    root.addHandler(_console_handler(console_level, fmt))
    root.addHandler(_file_handler(log_file, file_level, fmt))

    logging.captureWarnings(True)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    return log_file
