"""Merge two observations of the same attribute.

The higher-confidence wrapper is primary (ties favor ``a``) and supplies
the value and last_verified_at. Sources are unioned and deduplicated by
(kind, id or url), first occurrence wins. Two or more distinct kinds earn
the corroboration boost.

Rationale falls back primary -> a -> b regardless of which side won, so
merge is not strictly commutative. Apply merges for one attribute in a
fixed order.
"""

from __future__ import annotations

import logging
from typing import TypeVar

from bizconf.models.conf import Conf
from bizconf.models.source_ref import SourceRef
from bizconf._decimal import boost_capped, round2, to_decimal

logger = logging.getLogger(__name__)

T = TypeVar("T")


def dedupe_sources(sources: list[SourceRef] | tuple[SourceRef, ...]) -> tuple[SourceRef, ...]:
    """Drop repeated sources, keeping the first occurrence in order."""
    seen: set[tuple[str, str]] = set()
    unique: list[SourceRef] = []
    for source in sources:
        key = source.dedupe_key()
        if key in seen:
            continue
        seen.add(key)
        unique.append(source)
    return tuple(unique)


def _first_rationale(*candidates: str | None) -> str | None:
    for rationale in candidates:
        if rationale is not None:
            return rationale
    return None


def merge_conf(a: Conf[T], b: Conf[T]) -> Conf[T]:
    """Merge two wrappers for the same field.

    Args:
        a: First observation (wins ties)
        b: Second observation

    Returns:
        New wrapper; neither input is modified.
    """
    if a.confidence >= b.confidence:
        primary, secondary = a, b
    else:
        primary, secondary = b, a

    sources = dedupe_sources(a.sources + b.sources)

    score = to_decimal(primary.confidence)
    kinds = {s.kind for s in sources}
    if len(kinds) >= 2:
        score = boost_capped(score)

    merged = Conf(
        value=primary.value,
        confidence=round2(score),
        sources=sources,
        rationale=_first_rationale(primary.rationale, a.rationale, b.rationale),
        last_verified_at=primary.last_verified_at,
        is_placeholder=primary.is_placeholder and secondary.is_placeholder,
    )

    logger.debug(
        "Merged conf: %.2f + %.2f -> %.2f (%d sources, %d kinds)",
        a.confidence,
        b.confidence,
        merged.confidence,
        len(sources),
        len(kinds),
    )
    return merged
