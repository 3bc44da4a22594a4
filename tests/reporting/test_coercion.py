"""Unit tests for reporting.coercion."""
from __future__ import annotations

import math

import pytest

from src.reporting.coercion import mean, numeric_answers, to_number


@pytest.mark.parametrize(
    "raw, expected",
    [
        (5, 5.0),
        (2.5, 2.5),
        ("3", 3.0),
        ("3.5", 3.5),
        (" 4 ", 4.0),
        ("4 - Frequentemente", 4.0),
        ("1 - Nunca", 1.0),
        ("5-Sempre", 5.0),
        ("Opção 2", 2.0),
        ("-1 fora da escala", -1.0),
    ],
)
def test_to_number_accepts_numbers_and_labels(raw, expected):
    assert to_number(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "Nunca", True, False, math.nan, [3]])
def test_to_number_discards_non_numeric(raw):
    assert to_number(raw) is None


def test_leading_integer_wins_over_later_digits():
    assert to_number("2 - entre 3 e 4 vezes") == 2.0


def test_numeric_answers_drops_discarded_values():
    assert numeric_answers([5, "3 - Às vezes", None, "sem resposta", "1"]) == [5.0, 3.0, 1.0]


def test_mean_of_empty_is_zero():
    assert mean([]) == 0.0
    assert mean([1.0, 2.0, 4.0]) == pytest.approx(7 / 3)
