"""Aggregate confidence over an attribute tree.

Collects every Conf leaf in a nested structure and returns the weighted
mean of their confidences. A leaf's weight is looked up by the root
section it sits under (``identity``, ``operations``...), defaulting to 1.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Final

from bizconf.models.tree import LeafEntry, iter_leaves
from bizconf._decimal import ZERO, round2, to_decimal

SECTION_WEIGHTS: Final = MappingProxyType(
    {
        "identity": 5,
        "operations": 4,
        "offerings": 3,
        "trust": 3,
        "brand": 2,
        "marketing": 2,
        "media": 1,
        "seo": 2,
    }
)

_DEFAULT_WEIGHT = Decimal("1")


def collect_leaves(tree: Any) -> list[LeafEntry]:
    """List every wrapper in ``tree`` with its path and section."""
    return list(iter_leaves(tree))


def compute_aggregate_confidence(
    tree: Any,
    weights: Mapping[str, float] | None = None,
) -> float:
    """Weighted mean of all leaf confidences in ``tree``.

    Args:
        tree: Nested mappings/sequences/models whose leaves may be Conf
        weights: Per-section weights; sections not listed weigh 1

    Returns:
        Mean rounded to two decimals, 0.0 when there are no leaves or the
        total weight is zero
    """
    total_weight = ZERO
    weighted_sum = ZERO

    for entry in iter_leaves(tree):
        if weights is not None and entry.section in weights:
            weight = to_decimal(weights[entry.section])
        else:
            weight = _DEFAULT_WEIGHT
        total_weight += weight
        weighted_sum += to_decimal(entry.conf.confidence) * weight

    if total_weight <= ZERO:
        return 0.0
    return round2(weighted_sum / total_weight)


def compute_section_confidence(section: Any) -> float:
    """Unweighted mean of the leaf confidences in one section."""
    return compute_aggregate_confidence(section)
