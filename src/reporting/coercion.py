"""Numeric coercion of heterogeneous survey answers.

Every aggregate in the reporting pipeline goes through :func:`to_number` so
that question, category and segment means agree on which answers count.
"""
from __future__ import annotations

import math
import re
from typing import Any, Iterable, List, Optional

_NUMERIC_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_ANY_INT_RE = re.compile(r"\d+")


def to_number(value: Any) -> Optional[float]:
    """Return *value* as a float, or ``None`` when it is not a usable answer.

    Accepted forms:
        • ``int`` / ``float`` (NaN and booleans are rejected)
        • a bare numeric string such as ``"3"`` or ``"3.5"``
        • a Likert label with a leading integer, e.g. ``"4 - Often"``
        • any other string containing an integer (first one wins)
    """

    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
        return None if math.isnan(number) else number

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    if _NUMERIC_RE.match(text):
        return float(text)

    leading = _LEADING_INT_RE.match(text)
    if leading:
        return float(leading.group(1))

    anywhere = _ANY_INT_RE.search(text)
    if anywhere:
        return float(anywhere.group(0))
    return None


def numeric_answers(values: Iterable[Any]) -> List[float]:
    """Coerce *values* and drop everything that is not a number."""
    numbers = (to_number(v) for v in values)
    return [n for n in numbers if n is not None]


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean; ``0.0`` for an empty sequence."""
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)
