import logging
import os
import re
import threading
from pathlib import Path
from typing import Dict, Optional, Union

from src.activity_log import JSON_FILENAME as ACTIVITY_LOG_FILENAME
from src.reporting import config
from src.reporting.models import Report, dumps_report, loads_report

_KEY_RE = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9_.-]*$")
# The activity log may share the store directory.
_RESERVED_KEYS = frozenset({Path(ACTIVITY_LOG_FILENAME).stem})


class ReportStore:
    """A thread-safe key-value store for serialized report documents."""

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        """Create a new :class:`ReportStore`.

        Args:
            directory: Optional folder where each key is kept as
                ``<key>.json``. :pydata:`None` (default) keeps blobs in memory
                only.
        """
        self._blobs: Dict[str, str] = {}
        self._lock = threading.Lock()
        self._directory = Path(directory) if directory else None
        if self._directory is not None:
            self._directory.mkdir(parents=True, exist_ok=True)
        self._logger = logging.getLogger(__name__)

    @staticmethod
    def _check_key(key: str) -> None:
        if not key or not _KEY_RE.match(key) or key in _RESERVED_KEYS:
            raise ValueError(f"Invalid store key: {key!r}")

    def _path(self, key: str) -> Path:
        assert self._directory is not None
        return self._directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        """Return the blob stored under *key*, or None if there is none."""
        self._check_key(key)
        with self._lock:
            if key in self._blobs:
                return self._blobs[key]
            if self._directory is None:
                return None
            path = self._path(key)
            if not path.exists():
                return None
            blob = path.read_text(encoding="utf-8")
            self._blobs[key] = blob
            return blob

    def set(self, key: str, blob: str) -> None:
        """
        Stores *blob* under *key*, replacing any previous value.
        When backed by a directory the file is replaced atomically.
        """
        self._check_key(key)
        with self._lock:
            if self._directory is not None:
                path = self._path(key)
                tmp = path.with_suffix(".json.tmp")
                tmp.write_text(blob, encoding="utf-8")
                os.replace(tmp, path)
            self._blobs[key] = blob
        self._logger.debug("Stored %d bytes under key %s", len(blob), key)

    def keys(self) -> list[str]:
        """Returns all known keys, sorted."""
        with self._lock:
            known = set(self._blobs)
            if self._directory is not None:
                known.update(p.stem for p in self._directory.glob("*.json"))
            known -= _RESERVED_KEYS
            return sorted(known)

    # ------------------------------------------------------------------
    # Report helpers
    # ------------------------------------------------------------------

    def save_report(self, report: Report, key: str = config.CURRENT_REPORT_KEY) -> None:
        """Serialize *report* and store it under *key*."""
        self.set(key, dumps_report(report))
        self._logger.info(
            "Report saved",
            extra={"key": key, "source_filename": report.source_filename},
        )

    def load_report(self, key: str = config.CURRENT_REPORT_KEY) -> Optional[Report]:
        """Return the report stored under *key*, or None when absent.

        Raises
        ------
        InvalidReportError
            If the stored document is not a valid report.
        """
        blob = self.get(key)
        if blob is None:
            return None
        return loads_report(blob)
