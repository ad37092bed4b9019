"""UI prominence policy — map a confidence score to a rendering decision.

Prominence tiers (checked from the top, ties go to the higher tier):
    prominent            >= 0.85
    standard             >= 0.70
    deemphasize          >= 0.50
    hide_or_placeholder  otherwise

Components additionally carry a minimum confidence below which they are
not shown at all; unlisted components use 0.50.
"""

from __future__ import annotations

from enum import StrEnum
from types import MappingProxyType
from typing import Any, Final


class ProminenceLevel(StrEnum):
    """UI visibility tier."""

    PROMINENT = "prominent"
    STANDARD = "standard"
    DEEMPHASIZE = "deemphasize"
    HIDE_OR_PLACEHOLDER = "hide_or_placeholder"


PROMINENCE_THRESHOLDS: Final = MappingProxyType(
    {
        ProminenceLevel.PROMINENT: 0.85,
        ProminenceLevel.STANDARD: 0.70,
        ProminenceLevel.DEEMPHASIZE: 0.50,
        ProminenceLevel.HIDE_OR_PLACEHOLDER: 0.0,
    }
)

UI_COMPONENT_MIN_CONFIDENCE: Final = MappingProxyType(
    {
        "hero.title": 0.80,
        "hero.tagline": 0.80,
        "contact.phone": 0.85,
        "contact.booking_cta": 0.85,
        "contact.address": 0.85,
        "contact.map": 0.85,
        "hours.display": 0.80,
        "reviews.aggregate": 0.80,
        "services.pricing": 0.75,
        "team.bios": 0.70,
        "brand.colors": 0.70,
        "brand.fonts": 0.70,
        "marketing.copy": 0.60,
        "images.hero": 0.50,
        "images.gallery": 0.40,
    }
)

DEFAULT_COMPONENT_MIN_CONFIDENCE: Final[float] = 0.50


def get_prominence_level(confidence: float) -> ProminenceLevel:
    """Get the prominence tier for a confidence score."""
    for level in (
        ProminenceLevel.PROMINENT,
        ProminenceLevel.STANDARD,
        ProminenceLevel.DEEMPHASIZE,
    ):
        if confidence >= PROMINENCE_THRESHOLDS[level]:
            return level
    return ProminenceLevel.HIDE_OR_PLACEHOLDER


def get_component_min_confidence(component: str) -> float:
    """Minimum confidence for a UI component (0.50 when unlisted)."""
    return UI_COMPONENT_MIN_CONFIDENCE.get(component, DEFAULT_COMPONENT_MIN_CONFIDENCE)


def should_show_component(component: str, confidence: float) -> bool:
    """Check whether a component clears its minimum confidence.

    Args:
        component: Component identifier, e.g. "contact.phone"
        confidence: Score of the attribute backing the component

    Returns:
        True if confidence >= the component's minimum
    """
    return confidence >= get_component_min_confidence(component)


def describe_ui_policy() -> dict[str, Any]:
    """Policy block embedded in generated documents for the renderer."""
    return {
        "component_thresholds": dict(UI_COMPONENT_MIN_CONFIDENCE),
        "default_component_threshold": DEFAULT_COMPONENT_MIN_CONFIDENCE,
        "prominence_levels": {
            ProminenceLevel.PROMINENT.value: "confidence >= 0.85",
            ProminenceLevel.STANDARD.value: "0.70-0.84",
            ProminenceLevel.DEEMPHASIZE.value: "0.50-0.69",
            ProminenceLevel.HIDE_OR_PLACEHOLDER.value: "< 0.50",
        },
    }
