"""Conf — the confidence wrapper every business attribute is stored as.

A Conf pairs a value with a trust score in [0, 1] and the sources it was
observed from. Wrappers are frozen; scoring operations always return a
new wrapper.

The ``node_type`` discriminant is serialized with the wrapper so that a
persisted attribute tree can be walked without guessing which mappings
are wrappers and which are plain nested objects.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field, field_validator

from bizconf._decimal import round2, to_decimal
from bizconf.models.source_ref import SourceKind, SourceRef

T = TypeVar("T")

CONF_NODE_TYPE = "conf"


def is_empty_value(value: Any) -> bool:
    """True for values that carry no information (None or empty string)."""
    return value is None or value == ""


class Conf(BaseModel, Generic[T]):
    """Value plus trust score plus provenance."""

    node_type: Literal["conf"] = Field(
        default=CONF_NODE_TYPE, description="Tree discriminant for wrapper nodes"
    )
    value: T = Field(..., description="The attribute value")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Trust score, two decimals")
    sources: tuple[SourceRef, ...] = Field(
        ..., min_length=1, description="Attribution, at least one source"
    )
    rationale: str | None = Field(default=None, description="Why this score was assigned")
    last_verified_at: datetime | None = Field(default=None, description="Last verification time")
    is_placeholder: bool = Field(
        default=False, description="Synthetic filler not derived from an observation"
    )

    @field_validator("confidence")
    @classmethod
    def round_confidence(cls, v: float) -> float:
        """Store confidence rounded half-up to two decimals."""
        return round2(to_decimal(v))

    @property
    def source_kinds(self) -> frozenset[SourceKind]:
        """Distinct source kinds backing this value."""
        return frozenset(s.kind for s in self.sources)

    @property
    def is_corroborated(self) -> bool:
        """True when two or more distinct source kinds agree."""
        return len(self.source_kinds) >= 2

    @property
    def is_empty(self) -> bool:
        return is_empty_value(self.value)

    model_config = {"frozen": True, "extra": "forbid"}
