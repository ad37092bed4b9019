"""Confidence scoring for business attributes.

Components:
- registry: base trust weight per source kind
- construction: wrap a raw value in a Conf
- adjustments: corroboration boost and quality penalties
- merge: combine two observations of the same attribute
- aggregate: weighted mean over an attribute tree
"""

from bizconf.services.confidence.adjustments import apply_boost_penalties, rescore
from bizconf.services.confidence.aggregate import (
    SECTION_WEIGHTS,
    collect_leaves,
    compute_aggregate_confidence,
    compute_section_confidence,
)
from bizconf.services.confidence.construction import wrap_conf
from bizconf.services.confidence.merge import dedupe_sources, merge_conf
from bizconf.services.confidence.registry import BASE_CONFIDENCE, get_base_confidence

__all__ = [
    "BASE_CONFIDENCE",
    "SECTION_WEIGHTS",
    "apply_boost_penalties",
    "collect_leaves",
    "compute_aggregate_confidence",
    "compute_section_confidence",
    "dedupe_sources",
    "get_base_confidence",
    "merge_conf",
    "rescore",
    "wrap_conf",
]
