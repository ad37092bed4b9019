"""Boost/penalty engine — rescore an existing wrapper.

Applied in fixed order, each step floored at zero:
    +0.05 if backed by 2+ distinct source kinds (capped at 0.98)
    -0.15 if the value is empty (or the caller says so)
    -0.10 if the wrapper is a placeholder
    -0.10 if the value is stale
    -0.10 if format validation failed
Penalties are independent and additive.
"""

from __future__ import annotations

from typing import Any

from bizconf.models.conf import Conf
from bizconf._decimal import (
    EMPTY_PENALTY,
    FORMAT_INVALID_PENALTY,
    PLACEHOLDER_PENALTY,
    STALE_PENALTY,
    boost_capped,
    round2,
    subtract_floor,
    to_decimal,
)


def apply_boost_penalties(
    conf: Conf[Any],
    *,
    is_empty: bool = False,
    is_stale: bool = False,
    format_valid: bool | None = None,
) -> float:
    """Compute an adjusted confidence for a wrapper.

    The wrapper itself is not touched; callers rebuild it with the returned
    score if they want to keep it (see ``rescore``).

    Args:
        conf: Wrapper to rescore
        is_empty: Treat the value as empty even if it is not None/""
        is_stale: Value is past its freshness window
        format_valid: False when format validation failed; None means unchecked

    Returns:
        Adjusted confidence rounded to two decimals
    """
    score = to_decimal(conf.confidence)

    if conf.is_corroborated:
        score = boost_capped(score)

    if is_empty or conf.is_empty:
        score = subtract_floor(score, EMPTY_PENALTY)
    if conf.is_placeholder:
        score = subtract_floor(score, PLACEHOLDER_PENALTY)
    if is_stale:
        score = subtract_floor(score, STALE_PENALTY)
    if format_valid is False:
        score = subtract_floor(score, FORMAT_INVALID_PENALTY)

    return round2(score)


def rescore(
    conf: Conf[Any],
    *,
    is_empty: bool = False,
    is_stale: bool = False,
    format_valid: bool | None = None,
) -> Conf[Any]:
    """Return a copy of ``conf`` carrying the adjusted confidence."""
    confidence = apply_boost_penalties(
        conf, is_empty=is_empty, is_stale=is_stale, format_valid=format_valid
    )
    return conf.model_copy(update={"confidence": confidence})
