"""Seed transformer — raw research into a confidence-wrapped site seed.

Takes the five research outputs, optional places API data and the user's
intake inputs and produces a SeedDocument whose every leaf is a Conf:

1. LLM research values are wrapped as llm_generated
2. Places data (when present) is merged in as google_places, so verified
   values win and corroborated ones get the boost
3. User inputs are merged in as user_provided
4. Gaps become internal_inference placeholders
5. Section and overall confidence are rolled up for provenance

Research payloads are loosely structured; every field is coerced and the
transformer never raises on malformed research.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from bizconf.models.conf import Conf
from bizconf.models.source_ref import SourceKind, utc_now
from bizconf.observability.tracing import set_span_attributes, traced_span
from bizconf._decimal import round2, to_decimal
from bizconf.services.confidence.aggregate import (
    SECTION_WEIGHTS,
    compute_aggregate_confidence,
    compute_section_confidence,
)
from bizconf.services.confidence.construction import wrap_conf
from bizconf.services.confidence.merge import merge_conf
from bizconf.services.prominence.policy import describe_ui_policy
from bizconf.services.seed.models import (
    SECTION_NAMES,
    PlacesResult,
    RawResearch,
    SeedDocument,
    SeedProvenance,
    UserInputs,
)

logger = logging.getLogger(__name__)

SEED_VERSION = "v3"

_EMPTY_IMAGE = {
    "url": None,
    "search_query": "",
    "alt_text": "",
    "source": "placeholder",
    "license": "",
    "width": 0,
    "height": 0,
    "aspect_ratio": "16:9",
}


def _str(v: Any) -> str | None:
    if isinstance(v, str):
        return v or None
    return None


def _num(v: Any) -> float | int | None:
    if isinstance(v, bool):
        return None
    if isinstance(v, int | float) and v == v:
        return v
    return None


def _list(v: Any) -> list[Any]:
    return list(v) if isinstance(v, list) else []


def _obj(v: Any) -> dict[str, Any]:
    return dict(v) if isinstance(v, Mapping) else {}


def _objs(v: Any) -> list[dict[str, Any]]:
    return [dict(item) for item in _list(v) if isinstance(item, Mapping)]


def _llm(value: Any, rationale: str) -> Conf[Any]:
    return wrap_conf(value, SourceKind.LLM_GENERATED, rationale=rationale)


def _placeholder(value: Any, rationale: str) -> Conf[Any]:
    return wrap_conf(
        value, SourceKind.INTERNAL_INFERENCE, rationale=rationale, is_placeholder=True
    )


class _SeedBuilder:
    """Holds inputs and accumulated warnings while sections are built."""

    def __init__(
        self,
        research: RawResearch,
        places: PlacesResult | None,
        user_inputs: UserInputs,
    ) -> None:
        self.p = research.profile
        self.s = research.social
        self.b = research.brand
        self.sp = research.selling_points
        self.img = research.images
        self.g = places
        self.user = user_inputs
        self.warnings: list[str] = []

    def _places(self, value: Any, rationale: str) -> Conf[Any]:
        return wrap_conf(
            value,
            SourceKind.GOOGLE_PLACES,
            rationale=rationale,
            source_id=self.g.place_id if self.g is not None else None,
        )

    def _warn_if_missing(self, conf: Conf[Any], label: str) -> None:
        if not conf.value:
            self.warnings.append(f"Missing: {label}")

    def identity(self) -> dict[str, Any]:
        p, g, user = self.p, self.g, self.user

        phone = _llm(_str(p.get("phone")), "LLM-inferred phone")
        if user.business_phone:
            phone = merge_conf(
                phone,
                wrap_conf(
                    user.business_phone, SourceKind.USER_PROVIDED, rationale="User provided phone"
                ),
            )
        if g is not None and g.phone:
            phone = merge_conf(phone, self._places(g.phone, "Google Places phone"))
        self._warn_if_missing(phone, "phone number")

        email = _llm(_str(p.get("email")), "LLM-inferred email")
        self._warn_if_missing(email, "email address")

        website = _llm(
            _str(self.s.get("website_url")) or _str(p.get("website_url")),
            "LLM-inferred website",
        )
        if g is not None and g.website:
            website = merge_conf(website, self._places(g.website, "Google Places website"))
        self._warn_if_missing(website, "website URL")

        raw_geo = _obj(p.get("geo"))
        geo = _llm(raw_geo or None, "LLM-inferred coordinates")
        if g is not None and g.geo is not None:
            geo = merge_conf(geo, self._places(g.geo.model_dump(), "Google Places coordinates"))
        self._warn_if_missing(geo, "geo coordinates (lat/lng)")

        google_raw = _obj(p.get("google"))
        google = _llm(
            {
                "place_id": _str(google_raw.get("place_id")),
                "maps_url": _str(google_raw.get("maps_url")),
                "cid": _str(google_raw.get("cid")),
            },
            "LLM-inferred Google identity",
        )
        if g is not None:
            google = merge_conf(
                google,
                self._places(
                    {"place_id": g.place_id, "maps_url": g.maps_url or "", "cid": None},
                    "Google Places verified identity",
                ),
            )

        raw_addr = _obj(p.get("address"))
        address = _llm(
            {
                "street": _str(raw_addr.get("street")),
                "city": _str(raw_addr.get("city")),
                "state": _str(raw_addr.get("state")),
                "zip": _str(raw_addr.get("zip")),
                "country": _str(raw_addr.get("country")) or "US",
            },
            "LLM-inferred address",
        )
        if user.business_address:
            address = merge_conf(
                address,
                wrap_conf(
                    address.value,
                    SourceKind.USER_PROVIDED,
                    rationale="User provided address",
                    notes=user.business_address,
                ),
            )

        service_area = _obj(p.get("service_area")) or {"zips": [], "towns": []}

        return {
            "business_name": _llm(
                _str(p.get("business_name")) or user.business_name, "Business name from input"
            ),
            "tagline": _llm(_str(p.get("tagline")), "LLM-generated tagline"),
            "description": _llm(_str(p.get("description")), "LLM-generated description"),
            "mission_statement": _llm(_str(p.get("mission_statement")), "LLM-generated mission"),
            "business_type": _llm(_str(p.get("business_type")) or "general", "LLM-inferred type"),
            "categories": _llm(_list(p.get("categories")), "LLM-inferred categories"),
            "phone": phone,
            "email": email,
            "website_url": website,
            "primary_contact_name": _llm(
                _str(p.get("primary_contact_name")), "LLM-inferred contact"
            ),
            "address": address,
            "geo": geo,
            "google": google,
            "service_area": _llm(service_area, "LLM-inferred service area"),
            "neighborhood": _llm(_str(p.get("neighborhood")), "LLM-inferred neighborhood"),
            "parking": _llm(_str(p.get("parking")), "LLM-inferred parking"),
            "public_transit": _llm(_str(p.get("public_transit")), "LLM-inferred transit"),
            "landmarks_nearby": _llm(_list(p.get("landmarks_nearby")), "LLM-inferred landmarks"),
        }

    def operations(self) -> dict[str, Any]:
        p, g = self.p, self.g

        hours = _llm(
            [
                {
                    "day": _str(h.get("day")),
                    "open": _str(h.get("open")),
                    "close": _str(h.get("close")),
                    "closed": bool(h.get("closed")),
                }
                for h in _objs(p.get("hours"))
            ],
            "LLM-inferred operating hours",
        )
        if g is not None and g.hours:
            hours = merge_conf(hours, self._places(g.hours, "Google Places verified hours"))

        booking = _obj(p.get("booking"))
        policies = _obj(p.get("policies"))
        access = _obj(p.get("accessibility"))
        if not booking.get("url"):
            self.warnings.append("Missing: booking URL")

        return {
            "hours": hours,
            "holiday_hours": _placeholder([], "No holiday hours data available"),
            "booking": _llm(
                {
                    "url": _str(booking.get("url")),
                    "platform": _str(booking.get("platform")),
                    "walkins_accepted": booking.get("walkins_accepted") is not False,
                    "typical_wait_minutes": _num(booking.get("typical_wait_minutes")),
                    "appointment_required": bool(booking.get("appointment_required")),
                    "lead_time_minutes": _num(booking.get("lead_time_minutes")),
                },
                "LLM-inferred booking info",
            ),
            "policies": _llm(
                {
                    key: _str(policies.get(key))
                    for key in ("cancellation", "late", "no_show", "age", "discount_rules")
                },
                "LLM-inferred policies",
            ),
            "payments": _llm(_list(p.get("payments")), "LLM-inferred payment methods"),
            "amenities": _llm(_list(p.get("amenities")), "LLM-inferred amenities"),
            "accessibility": _llm(
                {
                    "wheelchair": bool(access.get("wheelchair")),
                    "hearing_loop": bool(access.get("hearing_loop")),
                    "service_animals": access.get("service_animals") is not False,
                    "notes": _str(access.get("notes")),
                },
                "LLM-inferred accessibility",
            ),
            "languages_spoken": _llm(_list(p.get("languages_spoken")), "LLM-inferred languages"),
        }

    def offerings(self) -> dict[str, Any]:
        p = self.p
        services = [
            {
                "name": _llm(_str(svc.get("name")), "LLM-generated service name"),
                "description": _llm(
                    _str(svc.get("description")), "LLM-generated service description"
                ),
                "price_hint": _llm(_str(svc.get("price_hint")), "LLM-estimated price range"),
                "price_from": _llm(_num(svc.get("price_from")), "LLM-estimated starting price"),
                "duration_minutes": _llm(
                    _num(svc.get("duration_minutes")), "LLM-estimated duration"
                ),
                "variants": _llm(_list(svc.get("variants")), "LLM-suggested variants"),
                "add_ons": _llm(_list(svc.get("add_ons")), "LLM-suggested add-ons"),
                "requirements": _llm(_str(svc.get("requirements")), "LLM-inferred requirements"),
                "category": _llm(_str(svc.get("category")), "LLM-inferred category"),
            }
            for svc in _objs(p.get("services"))
        ]
        return {
            "services": services,
            "products_sold": _llm(_list(p.get("products_sold")), "LLM-inferred products"),
            "guarantee_details": _llm(_str(p.get("guarantee_details")), "LLM-inferred guarantee"),
            "faq": _llm(
                [
                    {"question": _str(f.get("question")), "answer": _str(f.get("answer"))}
                    for f in _objs(p.get("faq"))
                ],
                "LLM-generated FAQ",
            ),
        }

    def trust(self) -> tuple[dict[str, Any], Conf[Any], list[dict[str, Any]]]:
        p, s, g = self.p, self.s, self.g

        team = [
            {
                "name": _llm(_str(m.get("name")), "LLM-inferred team member"),
                "role": _llm(_str(m.get("role")), "LLM-inferred role"),
                "bio": _llm(_str(m.get("bio")), "LLM-generated bio"),
                "specialties": _llm(_list(m.get("specialties")), "LLM-inferred specialties"),
                "years_experience": _llm(
                    _num(m.get("years_experience")), "LLM-estimated experience"
                ),
                "instagram": _llm(_str(m.get("instagram")), "LLM-inferred social"),
                "headshot_url": _placeholder(None, "No headshot available"),
            }
            for m in _objs(p.get("team"))
        ]

        reviews_raw = _obj(p.get("reviews_summary"))
        reviews = _llm(
            {
                "aggregate": {
                    "rating": _num(reviews_raw.get("aggregate_rating")) or 0,
                    "count": _num(reviews_raw.get("review_count")) or 0,
                },
                "featured": [
                    {
                        "quote": _str(r.get("quote")),
                        "name": _str(r.get("name")),
                        "source": _str(r.get("source")) or "Google",
                    }
                    for r in _objs(reviews_raw.get("featured_reviews"))
                ],
            },
            "LLM-inferred reviews",
        )
        if g is not None and (g.rating or g.reviews):
            places_reviews = {
                "aggregate": {"rating": g.rating or 0, "count": g.review_count or 0},
                "featured": [
                    {"quote": r.text[:200], "name": r.author, "source": "Google"}
                    for r in g.reviews[:3]
                ],
            }
            reviews = merge_conf(reviews, self._places(places_reviews, "Google Places reviews"))
        if not reviews.value["aggregate"]["count"]:
            self.warnings.append("Missing: customer reviews")

        social_links = [
            {
                "platform": _str(link.get("platform")),
                "url": _str(link.get("url")),
                "confidence": 0.5 if (c := _num(link.get("confidence"))) is None else c,
            }
            for link in _objs(s.get("social_links"))
        ]

        section = {
            "team": team,
            "reviews": reviews,
            "social_links": _llm(social_links, "LLM-inferred social profiles"),
            "review_platforms": _llm(
                [
                    {
                        "platform": _str(r.get("platform")),
                        "url": _str(r.get("url")),
                        "rating": _str(r.get("rating")),
                    }
                    for r in _objs(s.get("review_platforms"))
                ],
                "LLM-inferred review platforms",
            ),
            "credentials": _placeholder([], "No credential data"),
            "before_after_gallery": _placeholder([], "No before/after photos"),
        }
        return section, reviews, social_links

    def brand(self) -> dict[str, Any]:
        b, name = self.b, self.user.business_name
        logo = _obj(b.get("logo"))
        colors = _obj(b.get("colors"))
        fonts = _obj(b.get("fonts"))
        fallback = _obj(logo.get("fallback_design"))

        color_defaults = {
            "primary": "#2563eb",
            "secondary": "#7c3aed",
            "accent": "#64ffda",
            "background": "#ffffff",
            "surface": "#f8fafc",
            "text_primary": "#1e293b",
            "text_secondary": "#64748b",
        }

        return {
            "logo": _llm(
                {
                    "found_online": bool(logo.get("found_online")),
                    "logo_url": None,
                    "logo_svg": None,
                    "logo_png": None,
                    "favicon": None,
                    "og_image": None,
                    "search_query": _str(logo.get("search_query")),
                    "fallback_design": {
                        "text": _str(fallback.get("text")) or name,
                        "font": _str(fallback.get("font")) or "Inter",
                        "accent_shape": _str(fallback.get("accent_shape")) or "circle",
                        "accent_color": _str(fallback.get("accent_color")) or "#64ffda",
                    },
                },
                "LLM-generated logo guidance",
            ),
            "colors": _llm(
                {key: _str(colors.get(key)) or default for key, default in color_defaults.items()},
                "LLM-generated color palette",
            ),
            "fonts": _llm(
                {
                    "heading": _str(fonts.get("heading")) or "Inter",
                    "body": _str(fonts.get("body")) or "Inter",
                },
                "LLM-suggested typography",
            ),
            "brand_personality": _llm(
                _str(b.get("brand_personality")), "LLM-generated brand personality"
            ),
            "style_notes": _llm(_str(b.get("style_notes")), "LLM-generated style notes"),
            "tone": _placeholder({"do": [], "dont": []}, "No tone guidelines provided"),
        }

    def marketing(self) -> dict[str, Any]:
        sp = self.sp
        default_primary = {"text": "Get Started", "action": "#contact"}
        default_secondary = {"text": "Learn More", "action": "#services"}
        return {
            "selling_points": _llm(
                [
                    {
                        "headline": _str(pt.get("headline")),
                        "description": _str(pt.get("description")),
                        "icon": _str(pt.get("icon")) or "star",
                    }
                    for pt in _objs(sp.get("selling_points"))
                ],
                "LLM-generated selling points",
            ),
            "hero_slogans": _llm(
                [
                    {
                        "headline": _str(sl.get("headline")),
                        "subheadline": _str(sl.get("subheadline")),
                        "cta_primary": _obj(sl.get("cta_primary")) or default_primary,
                        "cta_secondary": _obj(sl.get("cta_secondary")) or default_secondary,
                    }
                    for sl in _objs(sp.get("hero_slogans"))
                ],
                "LLM-generated hero slogans",
            ),
            "benefit_bullets": _llm(_list(sp.get("benefit_bullets")), "LLM-generated benefits"),
        }

    def media(self) -> dict[str, Any]:
        img, s, g, name = self.img, self.s, self.g, self.user.business_name

        photos = [
            {"url": _str(ph.get("url")), "alt_text": _str(ph.get("alt_text")), "source": "google"}
            for ph in _objs(s.get("google_business_photos"))
        ]
        if g is not None and g.photos:
            photos = [
                {"url": ph.url, "alt_text": f"Photo of {name}", "source": "google_places"}
                for ph in g.photos
            ] + photos

        if photos:
            gallery_kind = (
                SourceKind.GOOGLE_PLACES
                if photos[0]["source"] == "google_places"
                else SourceKind.LLM_GENERATED
            )
            gallery = wrap_conf(
                [{**ph, "license": ""} for ph in photos],
                gallery_kind,
                rationale="Business photos",
                source_id=g.place_id if gallery_kind is SourceKind.GOOGLE_PLACES and g else None,
            )
        else:
            gallery = _llm(
                [
                    {
                        "url": _str(gi.get("url")),
                        "alt_text": _str(gi.get("alt_text")),
                        "source": _str(gi.get("source")),
                        "license": _str(gi.get("license")),
                    }
                    for gi in _objs(img.get("gallery"))
                ],
                "LLM-suggested gallery",
            )

        storefront_raw = img.get("storefront_image")
        if isinstance(storefront_raw, Mapping):
            storefront = _llm(
                {
                    **_EMPTY_IMAGE,
                    "url": _str(storefront_raw.get("url")),
                    "search_query": _str(storefront_raw.get("search_query")) or "",
                    "alt_text": f"Storefront of {name}",
                    "source": "inference",
                    "width": 1920,
                    "height": 1080,
                },
                "LLM-suggested storefront image",
            )
        else:
            storefront = _placeholder(dict(_EMPTY_IMAGE), "No storefront image")

        return {
            "hero_images": _llm(
                [
                    {
                        "concept": _str(hi.get("concept")),
                        "url": _str(hi.get("url")),
                        "search_query": _str(hi.get("search_query"))
                        or _str(hi.get("search_query_stock"))
                        or _str(hi.get("search_query_specific")),
                        "stock_fallback": _str(hi.get("stock_fallback")),
                        "alt_text": _str(hi.get("alt_text")) or _str(hi.get("concept")),
                        "aspect_ratio": _str(hi.get("aspect_ratio")) or "16:9",
                    }
                    for hi in _objs(img.get("hero_images"))
                ],
                "LLM-generated hero image concepts",
            ),
            "storefront_image": storefront,
            "team_image": _placeholder(dict(_EMPTY_IMAGE), "No team photo available"),
            "service_images": _llm(
                [
                    {
                        "service_name": _str(si.get("service_name")) or _str(si.get("name")),
                        "url": _str(si.get("url")),
                        "search_query": _str(si.get("search_query"))
                        or _str(si.get("search_query_stock")),
                        "alt_text": _str(si.get("alt_text")),
                    }
                    for si in _objs(img.get("service_images"))
                ],
                "LLM-suggested service images",
            ),
            "gallery": gallery,
            "placeholder_strategy": _llm(
                _str(img.get("placeholder_strategy")) or "stock", "Fallback image strategy"
            ),
        }

    def seo(self, reviews: Conf[Any], social_links: list[dict[str, Any]]) -> dict[str, Any]:
        p, name = self.p, self.user.business_name
        raw = _obj(p.get("seo"))
        services = _objs(p.get("services"))
        aggregate = reviews.value.get("aggregate", {}) if isinstance(reviews.value, dict) else {}

        schema_org: dict[str, Any] = {
            "type": _str(p.get("schema_org_type")) or "LocalBusiness",
            "same_as": [link["url"] for link in social_links if link["url"]],
        }
        if services and _str(services[0].get("price_hint")):
            schema_org["price_range"] = _str(services[0].get("price_hint"))
        if aggregate.get("count"):
            schema_org["aggregate_rating"] = {
                "rating_value": aggregate.get("rating"),
                "review_count": aggregate.get("count"),
            }

        return {
            "title": _llm(
                _str(raw.get("title")) or _str(p.get("seo_title")) or name,
                "LLM-generated SEO title",
            ),
            "description": _llm(
                _str(raw.get("description")) or _str(p.get("seo_description")) or "",
                "LLM-generated SEO description",
            ),
            **{
                key: _llm(_list(raw.get(key)), label)
                for key, label in (
                    ("primary_keywords", "LLM-generated primary keywords"),
                    ("secondary_keywords", "LLM-generated secondary keywords"),
                    ("service_keywords", "LLM-generated service keywords"),
                    ("neighborhood_keywords", "LLM-generated local keywords"),
                )
            },
            "schema_org": _llm(schema_org, "Generated schema.org inputs"),
            "pages": _placeholder({}, "No page-specific blurbs"),
        }


def build_seed(
    research: RawResearch | Mapping[str, Any],
    places: PlacesResult | Mapping[str, Any] | None,
    user_inputs: UserInputs | Mapping[str, Any],
) -> SeedDocument:
    """Transform raw research into a confidence-wrapped seed document.

    Args:
        research: The five research outputs
        places: Places API result, or None when the lookup found nothing
        user_inputs: Intake form values (business name is required)

    Returns:
        SeedDocument with eight sections, UI policy and provenance
    """
    if not isinstance(research, RawResearch):
        research = RawResearch.model_validate(research if isinstance(research, Mapping) else {})
    if places is not None and not isinstance(places, PlacesResult):
        places = PlacesResult.model_validate(places)
    if not isinstance(user_inputs, UserInputs):
        user_inputs = UserInputs.model_validate(user_inputs)

    with traced_span("bizconf.seed.build", {"seed.has_places": places is not None}):
        builder = _SeedBuilder(research, places, user_inputs)
        identity = builder.identity()
        operations = builder.operations()
        offerings = builder.offerings()
        trust, reviews, social_links = builder.trust()
        sections: dict[str, dict[str, Any]] = {
            "identity": identity,
            "operations": operations,
            "offerings": offerings,
            "trust": trust,
            "brand": builder.brand(),
            "marketing": builder.marketing(),
            "media": builder.media(),
            "seo": builder.seo(reviews, social_links),
        }

        section_confidence = {
            name: compute_section_confidence(sections[name]) for name in SECTION_NAMES
        }
        scores = list(section_confidence.values())
        overall = round2(sum(map(to_decimal, scores)) / len(scores)) if scores else 0.0
        weighted = compute_aggregate_confidence(sections, SECTION_WEIGHTS)

        pipeline = ["llm_research"]
        if places is not None:
            pipeline.append("google_places")

        provenance = SeedProvenance(
            overall_confidence=overall,
            weighted_confidence=weighted,
            section_confidence=section_confidence,
            warnings=builder.warnings,
            enrichment_pipeline=pipeline,
            generated_at=utc_now(),
            version=SEED_VERSION,
        )

        set_span_attributes(
            {
                "seed.overall_confidence": overall,
                "seed.weighted_confidence": weighted,
                "seed.warning_count": len(builder.warnings),
            }
        )
        logger.debug(
            "Built seed for %r: overall=%.2f weighted=%.2f warnings=%d",
            user_inputs.business_name,
            overall,
            weighted,
            len(builder.warnings),
        )

        return SeedDocument(**sections, ui_policy=describe_ui_policy(), provenance=provenance)
