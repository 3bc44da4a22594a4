"""Tests for the activity log."""
from __future__ import annotations

import json

import pytest

from src import activity_log
from src.activity_log import ActivityLog, LogType


def test_add_records_entry_with_id_and_timestamp():
    log = ActivityLog()
    entry = log.add(LogType.UPDATE, "File processed", user="ana", details={"total": 3})

    assert entry.type == "update"
    assert entry.user == "ana"
    assert entry.id
    assert entry.timestamp.endswith("+00:00")
    assert json.loads(entry.details) == {"total": 3}
    assert log.entries() == [entry]


def test_add_rejects_unknown_type():
    with pytest.raises(ValueError):
        ActivityLog().add("debug", "nope")


def test_log_is_capped_to_newest_entries(monkeypatch):
    monkeypatch.setattr(activity_log, "MAX_LOG_ENTRIES", 3)
    log = ActivityLog()
    for i in range(5):
        log.add(LogType.INFO, f"event {i}")

    assert [e.message for e in log.entries()] == ["event 2", "event 3", "event 4"]


def test_import_skips_known_ids_and_assigns_missing():
    log = ActivityLog()
    existing = log.add(LogType.INFO, "first")

    imported, total = log.import_entries(
        [
            existing.to_dict(),
            {"id": "ext-1", "type": "login", "message": "hello", "user": "bia",
             "timestamp": "2024-01-01T00:00:00+00:00"},
            {"type": "logout", "message": "bye", "user": "bia",
             "timestamp": "2024-01-02T00:00:00+00:00"},
        ]
    )

    assert (imported, total) == (2, 3)
    ids = [e.id for e in log.entries()]
    assert len(set(ids)) == 3
    assert "ext-1" in ids


def test_import_cap(monkeypatch):
    monkeypatch.setattr(activity_log, "MAX_IMPORTED_LOG_ENTRIES", 2)
    log = ActivityLog()
    imported, total = log.import_entries(
        [{"message": f"m{i}", "timestamp": f"2024-01-0{i + 1}T00:00:00+00:00"} for i in range(4)]
    )
    assert (imported, total) == (4, 2)
    assert [e.message for e in log.entries()] == ["m2", "m3"]


def test_filter_by_type_user_and_dates():
    log = ActivityLog()
    log.import_entries(
        [
            {"id": "1", "type": "info", "message": "a", "user": "ana",
             "timestamp": "2024-01-01T10:00:00+00:00"},
            {"id": "2", "type": "error", "message": "b", "user": "ana",
             "timestamp": "2024-01-02T10:00:00+00:00"},
            {"id": "3", "type": "info", "message": "c", "user": "bia",
             "timestamp": "2024-01-03T10:00:00+00:00"},
        ]
    )

    assert [e.id for e in log.filter()] == ["3", "2", "1"]
    assert [e.id for e in log.filter(type=LogType.INFO)] == ["3", "1"]
    assert [e.id for e in log.filter(user="ana")] == ["2", "1"]
    assert [e.id for e in log.filter(start="2024-01-02T00:00:00+00:00")] == ["3", "2"]
    assert [e.id for e in log.filter(end="2024-01-02T10:00:00")] == ["2", "1"]


def test_persists_json_and_text_mirror(tmp_path):
    log = ActivityLog(tmp_path)
    log.add(LogType.ERROR, "Failed to process file", user="ana", details="bad zip")

    lines = (tmp_path / activity_log.TEXT_FILENAME).read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    assert "[ERROR] [ana] Failed to process file - Details: bad zip" in lines[0]

    reopened = ActivityLog(tmp_path)
    assert [e.message for e in reopened.entries()] == ["Failed to process file"]
    assert json.loads(reopened.export())[0]["user"] == "ana"
