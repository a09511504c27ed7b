"""Tracer provider setup.

Tracing stays off unless ``ENABLE_TELEMETRY`` is set. Spans are exported over
OTLP/HTTP when ``OTEL_EXPORTER_OTLP_ENDPOINT`` is configured and printed to
the console otherwise.
"""

import logging

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
)

from machina.configuration.config import Settings, get_settings

logger = logging.getLogger(__name__)

_TRACER_PROVIDER: TracerProvider | None = None
# None means "not decided yet"; settings are read on first use
_TELEMETRY_ENABLED: bool | None = None


def _reset_provider() -> None:
    global _TRACER_PROVIDER, _TELEMETRY_ENABLED
    _TRACER_PROVIDER = None
    _TELEMETRY_ENABLED = None


def _span_processor(settings: Settings) -> SpanProcessor:
    endpoint = settings.otel_exporter_otlp_endpoint
    if not endpoint:
        logger.info("Exporting spans to console (OTEL_EXPORTER_OTLP_ENDPOINT not set)")
        return SimpleSpanProcessor(ConsoleSpanExporter())
    if not endpoint.endswith("/v1/traces"):
        endpoint = endpoint.rstrip("/") + "/v1/traces"
    logger.info(f"Exporting spans to {endpoint}")
    return BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint))


def configure_tracer_provider(
    settings: Settings | None = None, force_reset: bool = False
) -> TracerProvider | None:
    """Install the global tracer provider once.

    Args:
        settings: Settings to configure from; defaults to ``get_settings()``
        force_reset: Rebuild even when a decision was already made

    Returns:
        The provider, or None when telemetry is disabled
    """
    global _TRACER_PROVIDER, _TELEMETRY_ENABLED

    if not force_reset:
        if _TELEMETRY_ENABLED is False:
            return None
        if _TRACER_PROVIDER is not None:
            return _TRACER_PROVIDER

    settings = settings or get_settings()
    if not settings.enable_telemetry:
        _TELEMETRY_ENABLED = False
        return None

    try:
        provider = TracerProvider(
            resource=Resource.create(
                {
                    "service.name": settings.service_name,
                    "deployment.environment": settings.environment,
                }
            )
        )
        provider.add_span_processor(_span_processor(settings))
        trace.set_tracer_provider(provider)
    except Exception as e:
        logger.error(f"Failed to configure tracing, continuing without it: {e}")
        _TELEMETRY_ENABLED = False
        return None

    _TRACER_PROVIDER = provider
    _TELEMETRY_ENABLED = True
    logger.info(f"Tracing enabled for service {settings.service_name}")
    return provider


def get_tracer(instrumentation_name: str = "machina") -> trace.Tracer | None:
    """Return a tracer, or None while telemetry is disabled."""
    provider = configure_tracer_provider()
    return provider.get_tracer(instrumentation_name) if provider is not None else None


def shutdown_telemetry() -> None:
    """Flush pending spans and forget the provider."""
    provider = _TRACER_PROVIDER
    _reset_provider()
    if provider is None:
        return
    try:
        provider.shutdown()
    except Exception as e:
        logger.error(f"Error shutting down tracer provider: {e}")
