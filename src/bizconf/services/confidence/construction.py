"""Construction — wrap a freshly observed value in a Conf.

Starting confidence is the registry weight for the source kind (or an
explicit override). Empty values lose 0.15 and placeholders a further
0.10, each floored at zero.
"""

from __future__ import annotations

import math
from typing import TypeVar

from bizconf.models.conf import Conf, is_empty_value
from bizconf.models.source_ref import SourceKind, SourceRef, utc_now
from bizconf._decimal import (
    EMPTY_PENALTY,
    ONE,
    PLACEHOLDER_PENALTY,
    ZERO,
    round2,
    subtract_floor,
    to_decimal,
)
from bizconf.services.confidence.registry import get_base_confidence

T = TypeVar("T")


def wrap_conf(
    value: T,
    source_kind: SourceKind | str,
    *,
    rationale: str | None = None,
    is_placeholder: bool = False,
    source_id: str | None = None,
    source_url: str | None = None,
    notes: str | None = None,
    confidence_override: float | None = None,
) -> Conf[T]:
    """Create a Conf wrapper for a value with a single source.

    Args:
        value: Raw attribute value (any type, passed through untouched)
        source_kind: Where the value came from
        rationale: Free-text justification
        is_placeholder: Value is synthetic filler
        source_id: External identifier of the source record
        source_url: URL of the source record
        notes: Free-text note stored on the SourceRef
        confidence_override: Starting score instead of the registry weight,
            clamped to [0, 1]; NaN is ignored

    Returns:
        New Conf with exactly one SourceRef; retrieved_at and
        last_verified_at share the same timestamp.
    """
    kind = SourceKind(source_kind)
    now = utc_now()

    if confidence_override is not None and not math.isnan(confidence_override):
        score = min(ONE, max(ZERO, to_decimal(confidence_override)))
    else:
        score = to_decimal(get_base_confidence(kind))

    if is_empty_value(value):
        score = subtract_floor(score, EMPTY_PENALTY)
    if is_placeholder:
        score = subtract_floor(score, PLACEHOLDER_PENALTY)

    return Conf(
        value=value,
        confidence=round2(score),
        sources=(
            SourceRef(
                kind=kind,
                id=source_id,
                url=source_url,
                retrieved_at=now,
                notes=notes,
            ),
        ),
        rationale=rationale,
        last_verified_at=now,
        is_placeholder=is_placeholder,
    )
