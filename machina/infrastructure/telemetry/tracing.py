"""Span helpers for resolution operations."""

import functools
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeVar

from opentelemetry.trace import Status, StatusCode, get_current_span

from machina.infrastructure.telemetry.config import get_tracer

R = TypeVar("R")


def add_span_attributes(attributes: Mapping[str, Any]) -> None:
    """Attach attributes to the active span; a no-op when nothing is recording."""
    span = get_current_span()
    if span.is_recording():
        span.set_attributes(dict(attributes))


def async_with_tracer(
    component_name: str, attributes: Mapping[str, Any] | None = None
) -> Callable[[Callable[..., Awaitable[R]]], Callable[..., Awaitable[R]]]:
    """Run the decorated coroutine function inside a ``<component>.<function>`` span.

    Exceptions are recorded on the span and re-raised unchanged.
    """

    def decorator(func: Callable[..., Awaitable[R]]) -> Callable[..., Awaitable[R]]:
        span_name = f"{component_name}.{func.__name__}"

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> R:
            tracer = get_tracer(component_name)
            if tracer is None:
                return await func(*args, **kwargs)

            with tracer.start_as_current_span(
                span_name, attributes=dict(attributes or {}), record_exception=False
            ) as span:
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    span.record_exception(e)
                    span.set_attribute("error.type", type(e).__name__)
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    raise
                span.set_status(Status(StatusCode.OK))
                return result

        return wrapper

    return decorator
