"""Tests for build_seed — research outputs into a confidence-wrapped seed."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError as PydanticValidationError

from bizconf.models.conf import Conf
from bizconf.models.source_ref import SourceKind
from bizconf.services.confidence.aggregate import SECTION_WEIGHTS, compute_aggregate_confidence
from bizconf.services.seed import SECTION_NAMES, RawResearch, build_seed
from bizconf.validators.conf_tree import validate_conf_tree

USER = {"business_name": "Acme Barber"}

PLACES: dict[str, Any] = {
    "place_id": "place-1",
    "phone": "555-0199",
    "website": "https://acme.example",
    "hours": [{"day": "Mon", "open": "09:00", "close": "17:00"}],
    "geo": {"lat": 40.71, "lng": -74.0},
    "maps_url": "https://maps.example/place-1",
    "rating": 4.6,
    "review_count": 87,
    "reviews": [{"author": "Sam", "text": "Great cut"}],
    "photos": [{"url": "https://photos.example/1.jpg"}],
}

RESEARCH: dict[str, Any] = {
    "profile": {
        "business_name": "Acme Barber Shop",
        "phone": "555-0100",
        "email": "hi@acme.example",
        "services": [{"name": "Cut", "price_hint": "$30-$45", "price_from": 30}],
        "booking": {"url": "https://book.example/acme"},
        "reviews_summary": {"aggregate_rating": 4.2, "review_count": 12},
    },
    "social": {"social_links": [{"platform": "instagram", "url": "https://ig.example/acme"}]},
    "brand": {"colors": {"primary": "#111111"}},
    "selling_points": {"selling_points": [{"headline": "Walk-ins welcome"}]},
    "images": {},
}


class TestSeedStructure:
    """Document shape and provenance."""

    def test_empty_research_builds_all_sections(self) -> None:
        seed = build_seed(RawResearch(), None, USER)
        assert set(seed.sections()) == set(SECTION_NAMES)
        assert set(seed.provenance.section_confidence) == set(SECTION_NAMES)
        assert seed.provenance.version == "v3"
        assert seed.provenance.enrichment_pipeline == ["llm_research"]
        assert 0.0 <= seed.provenance.overall_confidence <= 1.0

    def test_section_confidence_values(self) -> None:
        """brand: three 0.60 values, two empty 0.45, one 0.45 placeholder."""
        seed = build_seed(RawResearch(), None, USER)
        assert seed.provenance.section_confidence["brand"] == 0.53
        assert seed.provenance.section_confidence["marketing"] == 0.60
        assert seed.provenance.section_confidence["offerings"] == 0.55

    def test_overall_is_mean_of_sections(self) -> None:
        seed = build_seed(RESEARCH, PLACES, USER)
        scores = list(seed.provenance.section_confidence.values())
        assert seed.provenance.overall_confidence == pytest.approx(
            sum(scores) / len(scores), abs=0.005
        )

    def test_weighted_confidence_matches_aggregate(self) -> None:
        seed = build_seed(RESEARCH, PLACES, USER)
        assert seed.provenance.weighted_confidence == compute_aggregate_confidence(
            seed.sections(), SECTION_WEIGHTS
        )

    def test_missing_data_warnings(self) -> None:
        seed = build_seed(RawResearch(), None, USER)
        assert seed.provenance.warnings == [
            "Missing: phone number",
            "Missing: email address",
            "Missing: website URL",
            "Missing: geo coordinates (lat/lng)",
            "Missing: booking URL",
            "Missing: customer reviews",
        ]

    def test_places_recorded_in_pipeline(self) -> None:
        seed = build_seed(RESEARCH, PLACES, USER)
        assert seed.provenance.enrichment_pipeline == ["llm_research", "google_places"]
        assert "Missing: phone number" not in seed.provenance.warnings
        assert "Missing: customer reviews" not in seed.provenance.warnings

    def test_ui_policy_embedded(self) -> None:
        seed = build_seed(RawResearch(), None, USER)
        assert seed.ui_policy["component_thresholds"]["contact.phone"] == 0.85

    def test_business_name_falls_back_to_user_input(self) -> None:
        seed = build_seed(RawResearch(), None, USER)
        assert seed.identity["business_name"].value == "Acme Barber"

    def test_business_name_required(self) -> None:
        with pytest.raises(PydanticValidationError):
            build_seed(RawResearch(), None, {"business_name": ""})


class TestSeedMerging:
    """Places and user inputs are merged over LLM research."""

    def test_places_phone_wins_and_corroborates(self) -> None:
        phone = build_seed(RESEARCH, PLACES, USER).identity["phone"]
        assert isinstance(phone, Conf)
        assert phone.value == "555-0199"
        assert phone.confidence == 0.95
        assert [s.kind for s in phone.sources] == [
            SourceKind.LLM_GENERATED,
            SourceKind.GOOGLE_PLACES,
        ]
        assert phone.sources[1].id == "place-1"

    def test_user_phone_then_places(self) -> None:
        """llm+user -> 0.95 (user value); then +places, primary keeps 0.95 -> 0.98."""
        user = {**USER, "business_phone": "555-0123"}
        phone = build_seed(RESEARCH, PLACES, user).identity["phone"]
        assert phone.value == "555-0123"
        assert phone.confidence == 0.98
        assert len(phone.sources) == 3

    def test_user_address_corroborates(self) -> None:
        user = {**USER, "business_address": "1 Main St"}
        address = build_seed(RawResearch(), None, user).identity["address"]
        assert address.confidence == 0.95
        assert address.sources[1].kind is SourceKind.USER_PROVIDED
        assert address.sources[1].notes == "1 Main St"

    def test_places_reviews_feed_schema_org(self) -> None:
        seed = build_seed(RESEARCH, PLACES, USER)
        reviews = seed.trust["reviews"]
        assert reviews.value["aggregate"] == {"rating": 4.6, "count": 87}
        assert reviews.value["featured"][0]["name"] == "Sam"
        schema_org = seed.seo["schema_org"].value
        assert schema_org["aggregate_rating"]["review_count"] == 87
        assert schema_org["same_as"] == ["https://ig.example/acme"]
        assert schema_org["price_range"] == "$30-$45"

    def test_places_photos_lead_gallery(self) -> None:
        gallery = build_seed(RESEARCH, PLACES, USER).media["gallery"]
        assert gallery.sources[0].kind is SourceKind.GOOGLE_PLACES
        assert gallery.confidence == 0.90
        assert gallery.value[0]["alt_text"] == "Photo of Acme Barber"

    def test_placeholders_marked(self) -> None:
        seed = build_seed(RawResearch(), None, USER)
        holiday = seed.operations["holiday_hours"]
        assert holiday.is_placeholder is True
        assert holiday.sources[0].kind is SourceKind.INTERNAL_INFERENCE
        assert holiday.confidence == 0.45

    def test_services_are_individually_wrapped(self) -> None:
        services = build_seed(RESEARCH, None, USER).offerings["services"]
        assert len(services) == 1
        assert services[0]["name"].value == "Cut"
        assert services[0]["price_from"].value == 30


class TestSeedRobustness:
    """Malformed research is coerced, never raised."""

    def test_wrong_types_coerced(self) -> None:
        research = {
            "profile": {
                "phone": 12345,
                "hours": "9-5",
                "services": "lots",
                "address": ["1 Main St"],
                "booking": None,
            }
        }
        seed = build_seed(research, None, USER)
        assert seed.identity["phone"].value is None
        assert seed.operations["hours"].value == []
        assert seed.offerings["services"] == []
        assert seed.identity["address"].value["country"] == "US"


class TestSeedPersistence:
    """The serialized document is a valid persisted tree."""

    def test_serialized_seed_validates(self) -> None:
        document = build_seed(RESEARCH, PLACES, USER).model_dump(mode="json")
        result = validate_conf_tree(document)
        assert result.passed, result.errors

    def test_serialized_seed_aggregates_the_same(self) -> None:
        seed = build_seed(RESEARCH, PLACES, USER)
        document = seed.model_dump(mode="json")
        assert compute_aggregate_confidence(document, SECTION_WEIGHTS) == (
            seed.provenance.weighted_confidence
        )
        assert document["identity"]["phone"]["node_type"] == "conf"


class TestSeedResearchShape:
    """Research parts that are not JSON objects count as empty."""

    @pytest.mark.parametrize(
        "research",
        [
            {"profile": "oops"},
            {"profile": None},
            {"images": []},
            {"social": 42, "brand": "bold"},
            ["x"],
            "not research",
            None,
        ],
    )
    def test_non_mapping_research_builds_seed(self, research: Any) -> None:
        seed = build_seed(research, None, USER)
        assert seed.identity["business_name"].value == "Acme Barber"
        assert "Missing: phone number" in seed.provenance.warnings

    def test_non_mapping_part_does_not_drop_others(self) -> None:
        research = {"profile": "oops", "brand": {"colors": {"primary": "#000000"}}}
        seed = build_seed(research, None, USER)
        assert seed.brand["colors"].value["primary"] == "#000000"

    def test_non_string_keys_kept(self) -> None:
        research = RawResearch.model_validate({"profile": {1: "one", "phone": "555-0100"}})
        assert research.profile == {"1": "one", "phone": "555-0100"}

    def test_zero_social_confidence_kept(self) -> None:
        research = {
            "social": {
                "social_links": [
                    {"platform": "yelp", "url": "https://yelp.example/acme", "confidence": 0},
                    {"platform": "tiktok", "url": "https://tiktok.example/acme"},
                ]
            }
        }
        links = build_seed(research, None, USER).trust["social_links"].value
        assert [link["confidence"] for link in links] == [0, 0.5]


class TestSeedFieldShape:
    """Optional research fields are carried into the seed."""

    def test_team_member_instagram(self) -> None:
        research = {"profile": {"team": [{"name": "Rae", "instagram": "@rae.cuts"}]}}
        member = build_seed(research, None, USER).trust["team"][0]
        assert member["instagram"].value == "@rae.cuts"
        assert member["instagram"].sources[0].kind is SourceKind.LLM_GENERATED

    def test_logo_asset_slots(self) -> None:
        logo = build_seed(RawResearch(), None, USER).brand["logo"].value
        for key in ("logo_url", "logo_svg", "logo_png", "favicon", "og_image"):
            assert logo[key] is None
        assert logo["fallback_design"]["text"] == "Acme Barber"

    def test_hero_image_query_fallbacks(self) -> None:
        research = {
            "images": {
                "hero_images": [
                    {"concept": "Chair", "search_query_stock": "barber chair"},
                    {
                        "concept": "Street",
                        "search_query_specific": "acme barber storefront",
                        "stock_fallback": "city street",
                    },
                ]
            }
        }
        heroes = build_seed(research, None, USER).media["hero_images"].value
        assert heroes[0]["search_query"] == "barber chair"
        assert heroes[0]["stock_fallback"] is None
        assert heroes[1]["search_query"] == "acme barber storefront"
        assert heroes[1]["stock_fallback"] == "city street"

    def test_service_image_stock_query_fallback(self) -> None:
        research = {"images": {"service_images": [{"name": "Fade", "search_query_stock": "fade"}]}}
        image = build_seed(research, None, USER).media["service_images"].value[0]
        assert image["service_name"] == "Fade"
        assert image["search_query"] == "fade"
