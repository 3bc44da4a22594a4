"""Risk level classification for 1–5 scale means."""
from __future__ import annotations

from enum import Enum


class RiskLevel(str, Enum):
    """Ordinal risk bands, lowest first."""

    LOW = "Low"
    MODERATE_LOW = "Moderate-Low"
    MODERATE = "Moderate"
    MODERATE_HIGH = "Moderate-High"
    HIGH = "High"


# Upper bound (inclusive) of each band; anything above the last is HIGH
_BANDS = (
    (2.0, RiskLevel.LOW),
    (2.5, RiskLevel.MODERATE_LOW),
    (3.5, RiskLevel.MODERATE),
    (4.0, RiskLevel.MODERATE_HIGH),
)


def determine_level(mean: float) -> RiskLevel:
    """Map *mean* onto a :class:`RiskLevel`.

    >>> determine_level(2.5).value
    'Moderate-Low'
    """
    for upper, level in _BANDS:
        if mean <= upper:
            return level
    return RiskLevel.HIGH
