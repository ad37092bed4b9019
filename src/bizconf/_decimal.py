"""Decimal helpers shared by the scoring functions.

Scores are computed in Decimal and rounded half-up to two places so that
results are reproducible (0.90 - 0.15 is exactly 0.75).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

ZERO = Decimal("0")
ONE = Decimal("1")
CORROBORATION_CAP = Decimal("0.98")
CORROBORATION_BOOST = Decimal("0.05")
EMPTY_PENALTY = Decimal("0.15")
PLACEHOLDER_PENALTY = Decimal("0.10")
STALE_PENALTY = Decimal("0.10")
FORMAT_INVALID_PENALTY = Decimal("0.10")

_CENTS = Decimal("0.01")


def to_decimal(value: float | int | Decimal) -> Decimal:
    """Convert via str() so 0.9 becomes Decimal('0.9'), not its binary expansion."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def subtract_floor(score: Decimal, penalty: Decimal) -> Decimal:
    """Subtract a penalty, flooring at zero."""
    return max(ZERO, score - penalty)


def boost_capped(score: Decimal) -> Decimal:
    """Add the corroboration boost, capped at 0.98."""
    return min(CORROBORATION_CAP, score + CORROBORATION_BOOST)


def round2(score: Decimal) -> float:
    """Round half-up to two decimals and return a float."""
    return float(score.quantize(_CENTS, rounding=ROUND_HALF_UP))
