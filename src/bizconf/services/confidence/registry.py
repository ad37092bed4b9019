"""Source registry — base trust weight per source kind.

The table is built once at import and exposed read-only. Lookup is total
over the closed SourceKind enumeration.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Final

from bizconf.models.source_ref import SourceKind

BASE_CONFIDENCE: Final = MappingProxyType(
    {
        SourceKind.BUSINESS_OWNER: 0.95,
        SourceKind.USER_PROVIDED: 0.90,
        SourceKind.GOOGLE_PLACES: 0.90,
        SourceKind.OSM: 0.80,
        SourceKind.REVIEW_PLATFORM: 0.80,
        SourceKind.DOMAIN_WHOIS: 0.70,
        SourceKind.STREET_VIEW: 0.70,
        SourceKind.SOCIAL_PROFILE: 0.70,
        SourceKind.LLM_GENERATED: 0.60,
        SourceKind.INTERNAL_INFERENCE: 0.55,
        SourceKind.STOCK_PHOTO: 0.40,
    }
)


def get_base_confidence(kind: SourceKind | str) -> float:
    """Get the base trust weight for a source kind.

    Args:
        kind: SourceKind member or its string value

    Returns:
        Weight in [0.40, 0.95]
    """
    return BASE_CONFIDENCE[SourceKind(kind)]
