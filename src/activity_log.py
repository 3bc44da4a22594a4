"""Append-only activity log for dashboard events.

Entries are kept newest-last, capped to ``MAX_LOG_ENTRIES``. When a directory
is given the log is mirrored to ``activity-log.json`` (full list) and
``activity-log.txt`` (one human-readable line per entry, append only).
"""
from __future__ import annotations

import datetime
import json
import logging
import os
import threading
import uuid
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

MAX_LOG_ENTRIES: int = int(os.getenv("ACTIVITY_LOG_MAX_ENTRIES", "500"))
MAX_IMPORTED_LOG_ENTRIES: int = int(os.getenv("ACTIVITY_LOG_MAX_IMPORTED", "5000"))

JSON_FILENAME = "activity-log.json"
TEXT_FILENAME = "activity-log.txt"


class LogType(str, Enum):
    """Kinds of dashboard activity."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    UPDATE = "update"
    LOGIN = "login"
    LOGOUT = "logout"


@dataclass(slots=True)
class LogEntry:
    """One recorded event."""

    id: str
    type: str
    message: str
    user: str
    timestamp: str  # ISO-8601, UTC
    details: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogEntry":
        details = data.get("details")
        if details is not None and not isinstance(details, str):
            details = json.dumps(details, ensure_ascii=False)
        return cls(
            id=str(data.get("id") or _new_id()),
            type=str(data.get("type", LogType.INFO.value)),
            message=str(data.get("message", "")),
            user=str(data.get("user", "system")),
            timestamp=str(data.get("timestamp") or _now().isoformat()),
            details=details,
        )

    def as_text(self) -> str:
        line = f"[{self.timestamp}] [{self.type.upper()}] [{self.user}] {self.message}"
        if self.details:
            line += f" - Details: {self.details}"
        return line


def _now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


def _parse_time(value: Union[str, datetime.datetime]) -> datetime.datetime:
    moment = (
        value
        if isinstance(value, datetime.datetime)
        else datetime.datetime.fromisoformat(value)
    )
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=datetime.timezone.utc)
    return moment


class ActivityLog:
    """Thread-safe, size-capped log of dashboard activity."""

    def __init__(self, directory: Optional[Union[str, Path]] = None) -> None:
        self._entries: List[LogEntry] = []
        self._lock = threading.Lock()
        self._directory = Path(directory) if directory else None
        if self._directory is not None:
            self._directory.mkdir(parents=True, exist_ok=True)
            self._load()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load(self) -> None:
        assert self._directory is not None
        path = self._directory / JSON_FILENAME
        if not path.exists():
            return
        raw = json.loads(path.read_text(encoding="utf-8"))
        self._entries = [LogEntry.from_dict(item) for item in raw]

    def _persist(self, new_entries: Iterable[LogEntry]) -> None:
        if self._directory is None:
            return
        json_path = self._directory / JSON_FILENAME
        tmp = json_path.with_suffix(".json.tmp")
        tmp.write_text(
            json.dumps([e.to_dict() for e in self._entries], ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        os.replace(tmp, json_path)
        with open(self._directory / TEXT_FILENAME, "a", encoding="utf-8") as fh:
            for entry in new_entries:
                fh.write(entry.as_text() + "\n")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add(
        self,
        type: Union[LogType, str],  # noqa: A002 – mirrors the stored field name
        message: str,
        *,
        user: str = "system",
        details: Any = None,
    ) -> LogEntry:
        """Record an event and return the stored entry."""
        entry = LogEntry.from_dict(
            {
                "type": LogType(type).value,
                "message": message,
                "user": user,
                "details": details,
            }
        )
        with self._lock:
            self._entries.append(entry)
            if len(self._entries) > MAX_LOG_ENTRIES:
                del self._entries[: len(self._entries) - MAX_LOG_ENTRIES]
            self._persist([entry])
        logger.debug("activity_logged", extra={"log_type": entry.type, "user": user})
        return entry

    def import_entries(self, entries: Iterable[Dict[str, Any]]) -> Tuple[int, int]:
        """Merge externally exported *entries*.

        Entries whose id is already present are skipped; entries without an
        id receive one. Returns ``(imported, total)``.
        """
        with self._lock:
            known = {e.id for e in self._entries}
            fresh: List[LogEntry] = []
            for item in entries:
                if item.get("id") and str(item["id"]) in known:
                    continue
                entry = LogEntry.from_dict(item)
                known.add(entry.id)
                fresh.append(entry)

            self._entries.extend(fresh)
            if len(self._entries) > MAX_IMPORTED_LOG_ENTRIES:
                del self._entries[: len(self._entries) - MAX_IMPORTED_LOG_ENTRIES]
            self._persist(fresh)
            total = len(self._entries)
        logger.info("Imported %d log entries (total %d)", len(fresh), total)
        return len(fresh), total

    def entries(self) -> List[LogEntry]:
        """Return a copy of all entries, oldest first."""
        with self._lock:
            return list(self._entries)

    def filter(
        self,
        *,
        type: Optional[Union[LogType, str]] = None,  # noqa: A002
        user: Optional[str] = None,
        start: Optional[Union[str, datetime.datetime]] = None,
        end: Optional[Union[str, datetime.datetime]] = None,
    ) -> List[LogEntry]:
        """Return matching entries, newest first."""
        result = self.entries()
        if type is not None:
            wanted = LogType(type).value
            result = [e for e in result if e.type == wanted]
        if user is not None:
            result = [e for e in result if e.user == user]
        if start is not None:
            lower = _parse_time(start)
            result = [e for e in result if _parse_time(e.timestamp) >= lower]
        if end is not None:
            upper = _parse_time(end)
            result = [e for e in result if _parse_time(e.timestamp) <= upper]
        return sorted(result, key=lambda e: _parse_time(e.timestamp), reverse=True)

    def export(self) -> str:
        """Return all entries as a JSON array string."""
        return json.dumps([e.to_dict() for e in self.entries()], ensure_ascii=False, indent=2)
