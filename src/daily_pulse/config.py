# src/daily_pulse/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing required at import time; every value has a default.
- Optional config_local.py for safe local overrides.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "PULSE"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    markers_db_path: Path
    board_path: Path

    # ---- Notifications ----
    notifications_allowed: bool
    notify_command: str

    # ---- Reminder scheduler ----
    reminders_enabled: bool
    reminder_interval_seconds: float

    # ---- End-of-day sweep ----
    end_of_day_enabled: bool
    end_of_day_hour: int
    end_of_day_interval_seconds: float

    # ---- Weekend planning prompt ----
    weekend_planning_enabled: bool
    weekend_start_hour: int
    weekend_end_hour: int
    weekend_interval_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "daily-pulse") or "daily-pulse"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/daily_pulse"))
        markers_db_path = _env_path(_k("MARKERS_DB_PATH"), data_dir / "markers.sqlite3")
        board_path = _env_path(_k("BOARD_PATH"), data_dir / "board.json")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            markers_db_path=markers_db_path,
            board_path=board_path,
            notifications_allowed=_env_bool(_k("NOTIFICATIONS_ALLOWED"), True),
            notify_command=_env(_k("NOTIFY_COMMAND"), "notify-send"),
            reminders_enabled=_env_bool(_k("REMINDERS_ENABLED"), True),
            reminder_interval_seconds=_env_float(_k("REMINDER_INTERVAL_SECONDS"), 60.0),
            end_of_day_enabled=_env_bool(_k("END_OF_DAY_ENABLED"), True),
            end_of_day_hour=_env_int(_k("END_OF_DAY_HOUR"), 22),
            end_of_day_interval_seconds=_env_float(_k("END_OF_DAY_INTERVAL_SECONDS"), 30 * 60.0),
            weekend_planning_enabled=_env_bool(_k("WEEKEND_PLANNING_ENABLED"), True),
            weekend_start_hour=_env_int(_k("WEEKEND_START_HOUR"), 9),
            weekend_end_hour=_env_int(_k("WEEKEND_END_HOUR"), 21),
            weekend_interval_seconds=_env_float(_k("WEEKEND_INTERVAL_SECONDS"), 60 * 60.0),
        )


SETTINGS = Settings.from_env()

# ---- Optional local overrides (never committed) ----
try:
    import config_local as _config_local  # type: ignore

    for _name in ("REMINDERS_ENABLED", "END_OF_DAY_ENABLED", "WEEKEND_PLANNING_ENABLED"):
        if hasattr(_config_local, _name):
            object.__setattr__(SETTINGS, _name.lower(), bool(getattr(_config_local, _name)))  # type: ignore[misc]
except Exception:
    pass


def get_settings() -> Settings:
    return SETTINGS
