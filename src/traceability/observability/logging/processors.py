"""Observability – structlog processors and get_logger helper.

Processors enrich every event with the ambient propagation state:

* :class:`CorrelationIdProcessor` – ``correlation_id``
* :class:`TraceContextProcessor` – ``trace_id``, ``span_id``, ``parent_span_id``
* :class:`SourceProcessor` – the service ``source``
* :class:`FieldSelectionProcessor` – drops fields disabled in options

Usage::

    import structlog
    from traceability.observability.logging.processors import CorrelationIdProcessor

    structlog.configure(processors=[CorrelationIdProcessor(), ...])
"""
from __future__ import annotations

from typing import Any

import structlog

from traceability.config.settings import OptionsProvider, TraceabilityOptions, resolve_options
from traceability.observability.correlation.context import CorrelationContext
from traceability.observability.tracing.span import current_span

CORRELATION_ID_KEY = "correlation_id"
TRACE_ID_KEY = "trace_id"
SPAN_ID_KEY = "span_id"
PARENT_SPAN_ID_KEY = "parent_span_id"
SOURCE_KEY = "source"

# keys that are never treated as free-form event data
_RESERVED_KEYS = frozenset(
    {
        "timestamp",
        "level",
        "logger",
        "event",
        "exception",
        "exc_info",
        "stack",
        "stack_info",
        SOURCE_KEY,
        CORRELATION_ID_KEY,
        TRACE_ID_KEY,
        SPAN_ID_KEY,
        PARENT_SPAN_ID_KEY,
    }
)


class CorrelationIdProcessor:
    """Inject ``correlation_id`` when the current flow carries one.

    Reads with the non-creating accessor: logging outside a request never
    mints an id.
    """

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        correlation_id = CorrelationContext.get()
        if correlation_id is not None:
            event_dict.setdefault(CORRELATION_ID_KEY, correlation_id)
        return event_dict


class TraceContextProcessor:
    """Inject the ids of the current span; ``parent_span_id`` is ``""`` for roots."""

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        span = current_span()
        if span is None or not span.is_recording:
            return event_dict
        event_dict.setdefault(TRACE_ID_KEY, span.trace_id)
        event_dict.setdefault(SPAN_ID_KEY, span.span_id)
        event_dict.setdefault(PARENT_SPAN_ID_KEY, span.parent_span_id or "")
        return event_dict


class SourceProcessor:
    """Stamp every event with the service name."""

    def __init__(self, source: str) -> None:
        self._source = source

    @property
    def source(self) -> str:
        return self._source

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        event_dict.setdefault(SOURCE_KEY, self._source)
        return event_dict


class FieldSelectionProcessor:
    """Remove the fields switched off by the ``log_include_*`` options.

    Runs last, just before rendering.
    """

    def __init__(self, options: TraceabilityOptions | OptionsProvider | None = None) -> None:
        self._options = options

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        options = resolve_options(self._options)
        drop: set[str] = set()
        if not options.log_include_timestamp:
            drop.add("timestamp")
        if not options.log_include_level:
            drop.add("level")
        if not options.log_include_source:
            drop.add(SOURCE_KEY)
        if not options.log_include_correlation_id:
            drop.add(CORRELATION_ID_KEY)
        if not options.log_include_message:
            drop.add("event")
        if not options.log_include_exception:
            drop.update(("exception", "exc_info"))
        if not options.log_include_data:
            drop.update(k for k in event_dict if k not in _RESERVED_KEYS)
        for key in drop:
            event_dict.pop(key, None)
        return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = [
    "CORRELATION_ID_KEY",
    "CorrelationIdProcessor",
    "FieldSelectionProcessor",
    "PARENT_SPAN_ID_KEY",
    "SOURCE_KEY",
    "SPAN_ID_KEY",
    "SourceProcessor",
    "TRACE_ID_KEY",
    "TraceContextProcessor",
    "get_logger",
]
