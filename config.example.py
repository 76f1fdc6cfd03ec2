# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Use:
- .env (local, gitignored)
- config_local.py (local safe overrides, gitignored)

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "PULSE_APP_NAME": "App display name (default: daily-pulse).",
    "PULSE_LOG_LEVEL": "Console logging level (default: INFO).",
    # Paths (gitignored)
    "PULSE_DATA_DIR": "Local data directory (default: .local/daily_pulse).",
    "PULSE_MARKERS_DB_PATH": "Idempotency marker SQLite path (default: <data_dir>/markers.sqlite3).",
    "PULSE_BOARD_PATH": "Board snapshot JSON path (default: <data_dir>/board.json).",
    # Notifications
    "PULSE_NOTIFICATIONS_ALLOWED": "Allow desktop notifications; otherwise console alerts (true/false).",
    "PULSE_NOTIFY_COMMAND": "Desktop notification command (default: notify-send).",
    # Reminder scheduler
    "PULSE_REMINDERS_ENABLED": "Enable due-time reminders (true/false).",
    "PULSE_REMINDER_INTERVAL_SECONDS": "Reminder check period (default: 60).",
    # End-of-day sweep
    "PULSE_END_OF_DAY_ENABLED": "Enable the end-of-day missed-task sweep (true/false).",
    "PULSE_END_OF_DAY_HOUR": "Local hour after which the sweep runs (default: 22).",
    "PULSE_END_OF_DAY_INTERVAL_SECONDS": "Sweep check period (default: 1800).",
    # Weekend planning prompt
    "PULSE_WEEKEND_PLANNING_ENABLED": "Enable the weekend planning prompt (true/false).",
    "PULSE_WEEKEND_START_HOUR": "First hour of the prompt window (default: 9).",
    "PULSE_WEEKEND_END_HOUR": "Last hour of the prompt window, inclusive (default: 21).",
    "PULSE_WEEKEND_INTERVAL_SECONDS": "Prompt check period (default: 3600).",
}
