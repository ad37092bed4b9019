"""OpenTelemetry tracing configuration for bizconf.

Tracing is off by default. When enabled, seed builds and CLI commands are
wrapped in spans carrying the resulting confidence scores.

Environment Variables:
    BIZCONF_OTEL_ENABLED: Set to "1" to enable tracing (default: disabled)
    BIZCONF_REQUIRE_OTEL: Set to "1" to fail if tracing cannot initialize
    BIZCONF_OTEL_SERVICE_NAME: Service name for spans (default: "bizconf")
    BIZCONF_OTEL_EXPORTER: Exporter type - "otlp" or "console" (default: "otlp")
    BIZCONF_OTEL_EXPORTER_OTLP_ENDPOINT: OTLP endpoint URL (optional)
    BIZCONF_OTEL_EXPORTER_OTLP_PROTOCOL: "grpc" or "http" (default: "grpc")
    BIZCONF_OTEL_RESOURCE_ATTRS: Comma-separated k=v pairs for resource attributes
    BIZCONF_OTEL_TEST_CAPTURE: Set to "1" to use in-memory exporter for tests

Attribute values are scores, counts and section names only; attribute
values themselves (phone numbers, addresses) are never put on spans.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from opentelemetry.sdk.trace import ReadableSpan, TracerProvider
    from opentelemetry.sdk.trace.export import SpanExporter

logger = logging.getLogger(__name__)

TRACER_NAME = "bizconf"

_tracer_provider: TracerProvider | None = None
_is_configured: bool = False
_test_exporter: Any = None


class TracingConfigError(Exception):
    """Raised when tracing configuration fails and BIZCONF_REQUIRE_OTEL=1."""


def _get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    val = os.environ.get(key, "").strip().lower()
    if val in ("1", "true", "yes"):
        return True
    if val in ("0", "false", "no"):
        return False
    return default


def _get_env_str(key: str, default: str = "") -> str:
    """Get string from environment variable."""
    return os.environ.get(key, default).strip()


def _parse_resource_attrs(attrs_str: str) -> dict[str, str]:
    """Parse comma-separated k=v resource attributes."""
    result: dict[str, str] = {}
    if not attrs_str:
        return result
    for pair in attrs_str.split(","):
        pair = pair.strip()
        if "=" in pair:
            k, v = pair.split("=", 1)
            result[k.strip()] = v.strip()
    return result


def _create_otlp_exporter(protocol: str, endpoint: str | None) -> Any:
    """Create OTLP exporter based on protocol."""
    kwargs: dict[str, Any] = {}
    if endpoint:
        kwargs["endpoint"] = endpoint

    if protocol == "http":
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
            OTLPSpanExporter as HTTPExporter,
        )

        return HTTPExporter(**kwargs)

    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
        OTLPSpanExporter as GRPCExporter,
    )

    return GRPCExporter(**kwargs)


def _create_console_exporter() -> SpanExporter:
    """Create console exporter for development."""
    from opentelemetry.sdk.trace.export import ConsoleSpanExporter

    return ConsoleSpanExporter()


def is_tracing_enabled() -> bool:
    return _get_env_bool("BIZCONF_OTEL_ENABLED", False)


def configure_tracing() -> bool:
    """Configure OpenTelemetry tracing for bizconf.

    Returns:
        True if tracing is active, False if disabled or initialization failed.

    Raises:
        TracingConfigError: If BIZCONF_REQUIRE_OTEL=1 and configuration fails.
    """
    global _tracer_provider, _is_configured, _test_exporter

    if not is_tracing_enabled():
        _is_configured = True
        logger.debug("OpenTelemetry tracing disabled (BIZCONF_OTEL_ENABLED not set)")
        return False

    require_otel = _get_env_bool("BIZCONF_REQUIRE_OTEL", False)
    test_capture = _get_env_bool("BIZCONF_OTEL_TEST_CAPTURE", False)

    if _test_exporter is not None and test_capture:
        return True

    if _is_configured and _tracer_provider is not None:
        return True

    _is_configured = True

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor

        service_name = _get_env_str("BIZCONF_OTEL_SERVICE_NAME", "bizconf")
        exporter_type = _get_env_str("BIZCONF_OTEL_EXPORTER", "otlp")
        endpoint = _get_env_str("BIZCONF_OTEL_EXPORTER_OTLP_ENDPOINT", "")
        protocol = _get_env_str("BIZCONF_OTEL_EXPORTER_OTLP_PROTOCOL", "grpc")
        resource_attrs_str = _get_env_str("BIZCONF_OTEL_RESOURCE_ATTRS", "")

        resource_attrs = {"service.name": service_name}
        resource_attrs.update(_parse_resource_attrs(resource_attrs_str))
        provider = TracerProvider(resource=Resource.create(resource_attrs))

        if test_capture:
            from opentelemetry.sdk.trace.export.in_memory_span_exporter import (
                InMemorySpanExporter,
            )

            _test_exporter = InMemorySpanExporter()
            provider.add_span_processor(SimpleSpanProcessor(_test_exporter))
        elif exporter_type == "console":
            provider.add_span_processor(SimpleSpanProcessor(_create_console_exporter()))
        else:
            otlp_exporter = _create_otlp_exporter(protocol, endpoint or None)
            provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

        trace.set_tracer_provider(provider)
        _tracer_provider = provider

        logger.info(
            "OpenTelemetry tracing configured: service=%s, exporter=%s",
            service_name,
            exporter_type if not test_capture else "in-memory",
        )
        return True

    except Exception as e:
        logger.error("Failed to configure OpenTelemetry tracing: %s", e)
        if require_otel:
            raise TracingConfigError(
                f"OpenTelemetry tracing required but configuration failed: {e}"
            ) from e
        return False


def _set_attributes(span: Any, attributes: dict[str, Any]) -> None:
    for key, value in attributes.items():
        if value is None:
            continue
        if isinstance(value, bool | int | float | str):
            span.set_attribute(key, value)
        elif isinstance(value, list | tuple):
            span.set_attribute(key, ",".join(str(v) for v in value))
        else:
            span.set_attribute(key, str(value))


@contextmanager
def traced_span(name: str, attributes: dict[str, Any] | None = None) -> Iterator[Any]:
    """Open a span named ``name``; yields the span (non-recording when disabled)."""
    from opentelemetry import trace

    tracer = trace.get_tracer(TRACER_NAME)
    with tracer.start_as_current_span(name) as span:
        if attributes and span.is_recording():
            _set_attributes(span, attributes)
        yield span


def set_span_attributes(attributes: dict[str, Any]) -> None:
    """Set attributes on the current span.

    Args:
        attributes: Dictionary of attribute key-value pairs.
    """
    try:
        from opentelemetry import trace

        span = trace.get_current_span()
        if span is not None and span.is_recording():
            _set_attributes(span, attributes)
    except Exception as e:
        logger.debug("Failed to set span attributes: %s", e)


def get_current_trace_id() -> str | None:
    """Get the current trace ID for logging correlation.

    Returns:
        Hex string of current trace ID, or None if no active span.
    """
    from opentelemetry import trace

    ctx = trace.get_current_span().get_span_context()
    if ctx is None or not ctx.is_valid:
        return None
    return format(ctx.trace_id, "032x")


def get_test_spans() -> list[ReadableSpan]:
    """Get captured spans from the in-memory exporter (for testing)."""
    if _test_exporter is not None:
        return list(_test_exporter.get_finished_spans())
    return []


def reset_tracing() -> None:
    """Reset tracing configuration (for testing).

    The global TracerProvider cannot be replaced once set, so the in-memory
    exporter is kept and only its spans are cleared.
    """
    global _is_configured

    if _test_exporter is not None:
        _test_exporter.clear()
    _is_configured = False
