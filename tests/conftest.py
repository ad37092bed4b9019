"""Pytest configuration and fixtures for bizconf tests."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from bizconf.models.conf import Conf
from bizconf.models.source_ref import SourceKind, SourceRef

BIZCONF_ENV_VARS = (
    "BIZCONF_LOG_LEVEL",
    "BIZCONF_SECTION_WEIGHTS",
    "BIZCONF_OTEL_ENABLED",
    "BIZCONF_REQUIRE_OTEL",
    "BIZCONF_OTEL_SERVICE_NAME",
    "BIZCONF_OTEL_EXPORTER",
    "BIZCONF_OTEL_TEST_CAPTURE",
    "BIZCONF_OTEL_EXPORTER_OTLP_ENDPOINT",
    "BIZCONF_OTEL_EXPORTER_OTLP_PROTOCOL",
    "BIZCONF_OTEL_RESOURCE_ATTRS",
)

FIXED_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def clean_bizconf_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test without any BIZCONF_* configuration in the environment."""
    for name in BIZCONF_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def make_conf(
    value: object,
    confidence: float,
    *kinds: SourceKind,
    source_id: str | None = None,
    rationale: str | None = None,
    is_placeholder: bool = False,
    last_verified_at: datetime | None = FIXED_TIME,
) -> Conf[object]:
    """Build a wrapper with an exact confidence and one source per kind."""
    sources = tuple(
        SourceRef(kind=kind, id=source_id, retrieved_at=FIXED_TIME)
        for kind in (kinds or (SourceKind.LLM_GENERATED,))
    )
    return Conf(
        value=value,
        confidence=confidence,
        sources=sources,
        rationale=rationale,
        last_verified_at=last_verified_at,
        is_placeholder=is_placeholder,
    )


@pytest.fixture
def conf_factory() -> object:
    """Factory for wrappers with exact confidence (see make_conf)."""
    return make_conf
