# tests/test_kv_store.py

from __future__ import annotations

from pathlib import Path

from daily_pulse.storage.kv_store import SqliteKeyValueStore


def test_kv_set_get_overwrite_remove(tmp_path: Path) -> None:
    kv = SqliteKeyValueStore(tmp_path / "markers.sqlite3")

    assert kv.get("last-end-of-day-check") is None

    kv.set("last-end-of-day-check", "2024-03-01")
    assert kv.get("last-end-of-day-check") == "2024-03-01"

    kv.set("last-end-of-day-check", "2024-03-02")
    assert kv.get("last-end-of-day-check") == "2024-03-02"

    kv.remove("last-end-of-day-check")
    assert kv.get("last-end-of-day-check") is None

    # removing a missing key is fine
    kv.remove("last-end-of-day-check")


def test_kv_persists_across_instances(tmp_path: Path) -> None:
    db = tmp_path / "nested" / "markers.sqlite3"
    SqliteKeyValueStore(db).set("notified-tasks-2024-03-01", '["task-a"]')

    reopened = SqliteKeyValueStore(db)
    assert reopened.get("notified-tasks-2024-03-01") == '["task-a"]'
    reopened.close()


def test_kv_keys_with_prefix_is_literal(tmp_path: Path) -> None:
    kv = SqliteKeyValueStore(tmp_path / "markers.sqlite3")
    kv.set("notified-tasks-2024-02-28", "[]")
    kv.set("notified-tasks-2024-03-01", "[]")
    kv.set("notified_tasks_x", "[]")
    kv.set("last-end-of-day-check", "2024-03-01")

    assert kv.keys_with_prefix("notified-tasks-") == [
        "notified-tasks-2024-02-28",
        "notified-tasks-2024-03-01",
    ]
    assert kv.keys_with_prefix("nothing-") == []
