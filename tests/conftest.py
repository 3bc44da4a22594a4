"""Shared fixtures: in-memory spreadsheet payloads built with openpyxl."""
from __future__ import annotations

from io import BytesIO
from typing import Any, Callable, Iterable, Sequence

import pytest
from openpyxl import Workbook

DEPT = "Qual seu setor?"
ROLE = "Qual sua função?"


def build_xlsx(
    headers: Sequence[Any],
    rows: Iterable[Sequence[Any]],
    *,
    extra_sheets: Sequence[str] = (),
) -> bytes:
    """Return the bytes of a workbook whose first sheet holds *headers*/*rows*."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Respostas"
    ws.append(list(headers))
    for row in rows:
        ws.append(list(row))
    for name in extra_sheets:
        other = wb.create_sheet(name)
        other.append(["ignored"])
        other.append([1])
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture()
def make_xlsx() -> Callable[..., bytes]:
    return build_xlsx


@pytest.fixture()
def scenario_rows() -> list[dict[str, Any]]:
    """Three respondents, one question: RH answers 5 and 3, Eng answers 1."""
    question = "Sinto pressão com prazos"
    return [
        {DEPT: "RH", ROLE: "Analista", question: 5},
        {DEPT: "RH", ROLE: "Gerente", question: 3},
        {DEPT: "Eng", ROLE: "Analista", question: 1},
    ]
