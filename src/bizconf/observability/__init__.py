"""bizconf observability: OpenTelemetry tracing."""

from bizconf.observability.tracing import (
    configure_tracing,
    get_current_trace_id,
    set_span_attributes,
    traced_span,
)

__all__ = ["configure_tracing", "get_current_trace_id", "set_span_attributes", "traced_span"]
