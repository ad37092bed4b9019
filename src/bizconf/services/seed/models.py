"""Input and output models for the seed transformer."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator


class RawResearch(BaseModel):
    """The five research outputs, as loosely structured JSON objects."""

    profile: dict[str, Any] = Field(default_factory=dict)
    social: dict[str, Any] = Field(default_factory=dict)
    brand: dict[str, Any] = Field(default_factory=dict)
    selling_points: dict[str, Any] = Field(default_factory=dict)
    images: dict[str, Any] = Field(default_factory=dict)

    @field_validator("profile", "social", "brand", "selling_points", "images", mode="before")
    @classmethod
    def coerce_mapping(cls, v: Any) -> dict[str, Any]:
        """A research step that returned something other than an object counts as empty."""
        if not isinstance(v, Mapping):
            return {}
        return {str(key): item for key, item in v.items()}

    model_config = {"extra": "ignore"}


class PlaceGeo(BaseModel):
    lat: float
    lng: float


class PlaceReview(BaseModel):
    author: str = ""
    text: str = ""
    rating: float | None = None


class PlacePhoto(BaseModel):
    url: str


class PlacesResult(BaseModel):
    """Business details returned by the places API lookup."""

    place_id: str
    phone: str | None = None
    website: str | None = None
    hours: list[dict[str, Any]] | None = None
    geo: PlaceGeo | None = None
    maps_url: str | None = None
    rating: float | None = None
    review_count: int | None = None
    reviews: list[PlaceReview] = Field(default_factory=list)
    photos: list[PlacePhoto] = Field(default_factory=list)

    model_config = {"extra": "ignore"}


class UserInputs(BaseModel):
    """What the user typed into the intake form."""

    business_name: str = Field(..., min_length=1)
    business_address: str | None = None
    business_phone: str | None = None


class SeedProvenance(BaseModel):
    overall_confidence: float
    weighted_confidence: float
    section_confidence: dict[str, float]
    warnings: list[str] = Field(default_factory=list)
    enrichment_pipeline: list[str] = Field(default_factory=list)
    generated_at: datetime
    version: str = "v3"


class SeedDocument(BaseModel):
    """A business site seed with every leaf wrapped in Conf."""

    identity: dict[str, Any]
    operations: dict[str, Any]
    offerings: dict[str, Any]
    trust: dict[str, Any]
    brand: dict[str, Any]
    marketing: dict[str, Any]
    media: dict[str, Any]
    seo: dict[str, Any]
    ui_policy: dict[str, Any]
    provenance: SeedProvenance

    def sections(self) -> dict[str, dict[str, Any]]:
        """The eight attribute sections, in document order."""
        return {name: getattr(self, name) for name in SECTION_NAMES}


SECTION_NAMES: tuple[str, ...] = (
    "identity",
    "operations",
    "offerings",
    "trust",
    "brand",
    "marketing",
    "media",
    "seo",
)
