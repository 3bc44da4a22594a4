"""Decode the first worksheet of an ``.xlsx`` survey export into row records.

``parse_workbook`` is a pure transform of the payload bytes: no file system
access and no retries. Headers come from the first row; every following
non-blank row becomes a ``dict`` keyed by header.
"""
from __future__ import annotations

import datetime
import logging
import zipfile
from xml.etree import ElementTree
from dataclasses import dataclass, field
from io import BytesIO
from typing import Any, Dict, Iterable, List, Optional, Sequence

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from src.exceptions import EmptyDatasetError, ParseError

logger = logging.getLogger(__name__)

RowRecord = Dict[str, Any]

_EMPTY_HEADER = "__EMPTY"

# openpyxl parses XML parts lazily in read-only mode, so these can surface
# while iterating rows as well as on load. lxml errors derive from SyntaxError.
_READ_ERRORS = (
    InvalidFileException,
    zipfile.BadZipFile,
    ElementTree.ParseError,
    SyntaxError,
    KeyError,
    IndexError,
    OSError,
    TypeError,
    ValueError,
)


@dataclass(slots=True)
class ParsedSheet:
    """Headers of the first row and the data rows beneath them."""

    headers: List[str]
    rows: List[RowRecord] = field(default_factory=list)

    @property
    def respondent_count(self) -> int:
        return len(self.rows)


def _normalize_headers(raw: Sequence[Any]) -> List[str]:
    """Stringify header cells, naming blanks and de-duplicating repeats."""
    cells = list(raw)
    while cells and (cells[-1] is None or not str(cells[-1]).strip()):
        cells.pop()

    headers: List[str] = []
    seen: Dict[str, int] = {}
    for cell in cells:
        name = "" if cell is None else str(cell).strip()
        if not name:
            name = _EMPTY_HEADER
        if name in seen:
            base = name
            while name in seen:
                seen[base] += 1
                name = f"{base}_{seen[base]}"
        seen[name] = 0
        headers.append(name)
    return headers


def _cell_value(value: Any) -> Optional[Any]:
    """Return a JSON-safe cell value, or ``None`` for an empty cell."""
    if value is None:
        return None
    if isinstance(value, str):
        return value if value.strip() else None
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, datetime.timedelta):
        return value.total_seconds()
    return value


def _records(headers: List[str], rows: Iterable[Sequence[Any]]) -> List[RowRecord]:
    records: List[RowRecord] = []
    for raw in rows:
        record: RowRecord = {}
        for header, cell in zip(headers, raw):
            value = _cell_value(cell)
            if value is not None:
                record[header] = value
        if record:
            records.append(record)
    return records


def parse_workbook(payload: bytes) -> ParsedSheet:
    """Parse *payload* (the bytes of an ``.xlsx`` file).

    Raises
    ------
    ParseError
        If the payload is not a readable workbook or has no worksheet.
    EmptyDatasetError
        If the first worksheet has no data rows below the header row.
    """

    if not payload:
        raise ParseError("Spreadsheet payload is empty.")

    try:
        workbook = load_workbook(BytesIO(payload), read_only=True, data_only=True)
    except _READ_ERRORS as exc:
        raise ParseError(f"Unable to read spreadsheet: {exc}") from exc

    try:
        if not workbook.sheetnames:
            raise ParseError("Spreadsheet contains no worksheet.")
        sheet = workbook[workbook.sheetnames[0]]
        rows = sheet.iter_rows(values_only=True)

        header_row = next(rows, None)
        if header_row is None or all(cell is None for cell in header_row):
            raise EmptyDatasetError("No data found in the spreadsheet.")

        headers = _normalize_headers(header_row)
        records = _records(headers, rows)
        title = sheet.title
    except EmptyDatasetError:
        raise
    except _READ_ERRORS as exc:
        raise ParseError(f"Unable to read spreadsheet: {exc}") from exc
    finally:
        workbook.close()

    if not records:
        raise EmptyDatasetError("No data found in the spreadsheet.")

    logger.debug(
        "Parsed sheet %r: %d columns, %d rows", title, len(headers), len(records)
    )
    return ParsedSheet(headers=headers, rows=records)
