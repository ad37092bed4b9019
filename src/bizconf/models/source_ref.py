"""Source attribution for confidence-wrapped business attributes.

Every observed attribute cites at least one SourceRef. The SourceKind
enumeration is closed; base trust weights live in the source registry.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class SourceKind(StrEnum):
    """Provenance categories, roughly ordered from most to least reliable."""

    BUSINESS_OWNER = "business_owner"
    USER_PROVIDED = "user_provided"
    GOOGLE_PLACES = "google_places"
    OSM = "osm"
    REVIEW_PLATFORM = "review_platform"
    DOMAIN_WHOIS = "domain_whois"
    STREET_VIEW = "street_view"
    SOCIAL_PROFILE = "social_profile"
    LLM_GENERATED = "llm_generated"
    INTERNAL_INFERENCE = "internal_inference"
    STOCK_PHOTO = "stock_photo"


def utc_now() -> datetime:
    """Current wall-clock time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


class SourceRef(BaseModel):
    """One attribution record. Immutable once created."""

    kind: SourceKind = Field(..., description="Provenance category")
    id: str | None = Field(default=None, description="External identifier (e.g. place id)")
    url: str | None = Field(default=None, description="Source URL")
    retrieved_at: datetime = Field(
        default_factory=utc_now, description="When the value was retrieved"
    )
    notes: str | None = Field(default=None, description="Free-text note")

    def dedupe_key(self) -> tuple[str, str]:
        """Identity used when merging source lists.

        Same kind plus the id, or the url when there is no id.
        """
        if self.id is not None:
            return (self.kind.value, self.id)
        if self.url is not None:
            return (self.kind.value, self.url)
        return (self.kind.value, "")

    model_config = {"frozen": True, "extra": "forbid"}
