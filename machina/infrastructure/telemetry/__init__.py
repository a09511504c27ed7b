"""OpenTelemetry integration for machina."""

from machina.infrastructure.telemetry.config import (
    configure_tracer_provider,
    get_tracer,
    shutdown_telemetry,
)
from machina.infrastructure.telemetry.tracing import add_span_attributes, async_with_tracer

__all__ = [
    "add_span_attributes",
    "async_with_tracer",
    "configure_tracer_provider",
    "get_tracer",
    "shutdown_telemetry",
]
