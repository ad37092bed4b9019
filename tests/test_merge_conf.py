"""Tests for merge_conf — combining two observations of one attribute."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from bizconf.models.conf import Conf
from bizconf.models.source_ref import SourceKind, SourceRef
from bizconf.services.confidence.construction import wrap_conf
from bizconf.services.confidence.merge import dedupe_sources, merge_conf

GP = SourceKind.GOOGLE_PLACES
OSM = SourceKind.OSM
LLM = SourceKind.LLM_GENERATED
SOCIAL = SourceKind.SOCIAL_PROFILE


class TestMergePrimary:
    """Higher confidence wins; ties favor the first argument."""

    def test_places_and_osm_corroborate(self) -> None:
        places = wrap_conf("555-0100", GP, source_id="place-1")
        osm = wrap_conf("555-0199", OSM, confidence_override=0.70)

        merged = merge_conf(places, osm)

        assert merged.confidence == 0.95
        assert merged.value == "555-0100"
        assert len(merged.sources) == 2
        assert [s.kind for s in merged.sources] == [GP, OSM]

    def test_second_argument_wins_when_higher(self) -> None:
        llm = wrap_conf("Acme Barbers", LLM)
        places = wrap_conf("Acme Barber Shop", GP, source_id="place-1")

        merged = merge_conf(llm, places)

        assert merged.value == "Acme Barber Shop"
        assert merged.confidence == 0.95
        assert [s.kind for s in merged.sources] == [LLM, GP]

    def test_tie_favors_first(self, conf_factory: Callable[..., Any]) -> None:
        a = conf_factory("first", 0.80, OSM, source_id="a")
        b = conf_factory("second", 0.80, OSM, source_id="b")
        merged = merge_conf(a, b)
        assert merged.value == "first"
        assert merged.confidence == 0.80

    def test_boost_capped(self) -> None:
        owner = wrap_conf("x", SourceKind.BUSINESS_OWNER, confidence_override=0.97)
        merged = merge_conf(owner, wrap_conf("x", GP))
        assert merged.confidence == 0.98

    def test_last_verified_from_primary(self, conf_factory: Callable[..., Any]) -> None:
        early = datetime(2025, 1, 1, tzinfo=UTC)
        late = datetime(2026, 1, 1, tzinfo=UTC)
        low = conf_factory("low", 0.50, LLM, last_verified_at=late)
        high = conf_factory("high", 0.90, GP, last_verified_at=early)
        assert merge_conf(low, high).last_verified_at == early

    def test_inputs_not_modified(self) -> None:
        a = wrap_conf("x", GP)
        b = wrap_conf("y", OSM)
        merge_conf(a, b)
        assert a.confidence == 0.90
        assert len(a.sources) == 1
        assert b.confidence == 0.80


class TestMergeSources:
    """Source union deduplicated by (kind, id or url)."""

    def test_self_merge_is_idempotent(self) -> None:
        w = wrap_conf("x", GP, source_id="place-1")
        merged = merge_conf(w, w)
        assert merged.confidence == w.confidence
        assert len(merged.sources) == 1

    def test_same_kind_without_ids_collapses(self) -> None:
        a = wrap_conf("x", LLM)
        b = wrap_conf("y", LLM)
        merged = merge_conf(a, b)
        assert len(merged.sources) == 1
        assert merged.confidence == 0.60

    def test_same_kind_different_ids_kept_without_boost(self) -> None:
        a = wrap_conf("x", OSM, source_id="node/1")
        b = wrap_conf("x", OSM, source_id="node/2")
        merged = merge_conf(a, b)
        assert len(merged.sources) == 2
        assert merged.confidence == 0.80

    def test_url_used_when_no_id(self) -> None:
        now = datetime(2026, 1, 1, tzinfo=UTC)
        sources = (
            SourceRef(kind=SOCIAL, url="https://ig.example/acme", retrieved_at=now),
            SourceRef(kind=SOCIAL, url="https://ig.example/acme", retrieved_at=now),
            SourceRef(kind=SOCIAL, url="https://fb.example/acme", retrieved_at=now),
        )
        assert [s.url for s in dedupe_sources(sources)] == [
            "https://ig.example/acme",
            "https://fb.example/acme",
        ]

    def test_id_takes_precedence_over_url(self) -> None:
        now = datetime(2026, 1, 1, tzinfo=UTC)
        first = SourceRef(kind=GP, id="place-1", url="https://a.example", retrieved_at=now)
        second = SourceRef(kind=GP, id="place-1", url="https://b.example", retrieved_at=now)
        assert dedupe_sources((first, second)) == (first,)

    def test_first_occurrence_wins(self) -> None:
        a = wrap_conf("x", GP, source_id="place-1", notes="first")
        b = wrap_conf("x", GP, source_id="place-1", notes="second")
        merged = merge_conf(a, b)
        assert [s.notes for s in merged.sources] == ["first"]


class TestMergeFlags:
    """Placeholder and rationale resolution."""

    def test_both_placeholders_stay_placeholder(self) -> None:
        a = wrap_conf([], SourceKind.INTERNAL_INFERENCE, is_placeholder=True)
        b = wrap_conf([], SourceKind.STOCK_PHOTO, is_placeholder=True)
        assert merge_conf(a, b).is_placeholder is True

    def test_placeholder_and_real_value_is_not_placeholder(self) -> None:
        placeholder = wrap_conf([], SourceKind.INTERNAL_INFERENCE, is_placeholder=True)
        real = wrap_conf(["Mon 9-5"], GP)
        assert merge_conf(placeholder, real).is_placeholder is False
        assert merge_conf(real, placeholder).is_placeholder is False

    def test_primary_rationale_preferred(self) -> None:
        a = wrap_conf("x", LLM, rationale="LLM-inferred")
        b = wrap_conf("y", GP, rationale="Google Places")
        assert merge_conf(a, b).rationale == "Google Places"

    def test_rationale_falls_back_to_first_argument(self) -> None:
        """Documented quirk: falls back to a, then b, whichever side won."""
        a = wrap_conf("x", LLM, rationale="from a")
        b = wrap_conf("y", GP)
        merged = merge_conf(a, b)
        assert merged.value == "y"
        assert merged.rationale == "from a"

    def test_rationale_falls_back_to_second_argument(self) -> None:
        a = wrap_conf("x", GP)
        b = wrap_conf("y", LLM, rationale="from b")
        assert merge_conf(a, b).rationale == "from b"

    def test_no_rationale_anywhere(self) -> None:
        assert merge_conf(wrap_conf("x", GP), wrap_conf("y", OSM)).rationale is None

    def test_merged_is_a_conf(self) -> None:
        assert isinstance(merge_conf(wrap_conf("x", GP), wrap_conf("y", OSM)), Conf)
