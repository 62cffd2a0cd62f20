"""Rounding helpers shared by prosody, grouping and sentiment scoring."""

from __future__ import annotations

import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves toward positive infinity, like ``Math.round(x * 10**n) / 10**n``.

    Python's round() uses banker's rounding (round(0.125, 2) == 0.12);
    stored metrics use half-up so 2.5 becomes 3 and -2.5 becomes -2.

    Args:
        value: Number to round
        ndigits: Decimal places to keep

    Returns:
        The rounded value
    """
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def round_to_int(value: float) -> int:
    """Round half up to the nearest integer."""
    return math.floor(value + 0.5)


def safe_ratio(numerator: float, denominator: float, default: float) -> float:
    """Divide, returning default instead of raising or producing inf/NaN."""
    if denominator == 0:
        return default
    return numerator / denominator
