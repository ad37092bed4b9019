"""UI prominence and component gating."""

from bizconf.services.prominence.policy import (
    DEFAULT_COMPONENT_MIN_CONFIDENCE,
    PROMINENCE_THRESHOLDS,
    UI_COMPONENT_MIN_CONFIDENCE,
    ProminenceLevel,
    describe_ui_policy,
    get_component_min_confidence,
    get_prominence_level,
    should_show_component,
)

__all__ = [
    "DEFAULT_COMPONENT_MIN_CONFIDENCE",
    "PROMINENCE_THRESHOLDS",
    "UI_COMPONENT_MIN_CONFIDENCE",
    "ProminenceLevel",
    "describe_ui_policy",
    "get_component_min_confidence",
    "get_prominence_level",
    "should_show_component",
]
