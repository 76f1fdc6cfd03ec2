"""
daily-pulse: daily task lifecycle and productivity engine.

Subpackages:
- core: ports (Clock, KeyValueStore, Notifier, TaskBoard) and app state
- tasks: models, reducer/store, scoring, stats, background schedulers
- storage: SQLite key-value store for idempotency markers
- connectors: console front-end and desktop notifier
- cli: composition root, slash commands, entrypoint
"""

__version__ = "0.1.0"
