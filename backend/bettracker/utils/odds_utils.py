"""American odds helpers (price conversion and win profit)."""

from __future__ import annotations

import math
from typing import Any


def is_finite_number(value: Any) -> bool:
    """True for real ints/floats that are finite. Bools are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _check_odds(odds: float) -> float:
    if not is_finite_number(odds) or odds == 0:
        raise ValueError(f"Invalid American odds: {odds!r}")
    return float(odds)


def american_to_decimal(odds: float) -> float:
    """-110 -> 1.909..., +150 -> 2.5."""
    odds = _check_odds(odds)
    if odds > 0:
        return 1 + odds / 100
    return 1 + 100 / abs(odds)


def profit_for_stake(stake: float, odds: float) -> float:
    """Profit (not total return) on a winning stake at American odds."""
    odds = _check_odds(odds)
    if odds > 0:
        return stake * (odds / 100)
    return stake * (100 / abs(odds))


def implied_probability(odds: float) -> float:
    """Bookmaker implied probability of an American price (vig included)."""
    odds = _check_odds(odds)
    if odds > 0:
        return 100 / (odds + 100)
    return abs(odds) / (abs(odds) + 100)


def format_american(odds: float) -> str:
    """Display form with explicit sign for underdog prices: +150, -110."""
    odds = _check_odds(odds)
    value = int(odds) if float(odds).is_integer() else odds
    return f"+{value}" if odds > 0 else f"{value}"
