"""OpenTelemetry helpers -- optional spans around message handling.

Spans are only created when :func:`configure_otel` has been called with
``enabled=True``.  Exporters are not configured here; run the process
under ``opentelemetry-instrument`` (or install an SDK tracer provider)
to ship them anywhere.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace

from ..util.singletons import register_singleton

logger = logging.getLogger(__name__)

_TRACER_NAME = "slackgate"

_otel_active = False


def _reset_otel_state() -> None:
    """Reset module-level OTel state -- for test isolation only."""
    global _otel_active
    _otel_active = False


register_singleton(_reset_otel_state)


def configure_otel(enabled: bool) -> bool:
    """Turn span creation on or off.  Returns the resulting state."""
    global _otel_active
    _otel_active = enabled
    if enabled:
        logger.info("[otel.configure] message spans enabled")
    return _otel_active


@contextmanager
def bot_span(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
) -> Generator[Any, None, None]:
    """Wrap an operation in an OTel span.

    Usage::

        with bot_span("bot.message", attributes={"bot.channel": channel}) as span:
            ...

    When OTel is not active the context manager is a no-op and yields
    ``None``.
    """
    if not _otel_active:
        yield None
        return

    tracer = trace.get_tracer(_TRACER_NAME)
    with tracer.start_as_current_span(name, attributes=attributes) as span:
        yield span


def set_span_attribute(span: Any, key: str, value: Any) -> None:
    if span is not None:
        span.set_attribute(key, value)
