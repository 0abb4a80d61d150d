"""Observability – inbound propagation policy.

``decide_inbound`` reconciles what a request brings with what the process
already knows:

1. ``always_generate_new`` ignores every inbound or ambient id.
2. A valid correlation header is adopted as-is.
3. Otherwise an id already present in the ambient context (interceptor
   re-entry) is kept, or a fresh one is generated.
4. Independently, a well-formed ``traceparent`` becomes the parent of the
   server span; anything else opens a root span.

The correlation id and the trace parent serve different audiences and are
decided separately: a broken ``traceparent`` never causes a new
correlation id, and a missing correlation header never discards a valid
trace parent.
"""
from __future__ import annotations

import dataclasses
from typing import Literal

from traceability.config.settings import DEFAULT_HEADER_NAME, TraceabilityOptions
from traceability.observability.correlation.context import new_correlation_id
from traceability.observability.correlation.validator import CorrelationIdValidator
from traceability.observability.tracing import codec
from traceability.observability.tracing.context import TraceContext

CorrelationSource = Literal["header", "ambient", "generated"]

_DEFAULT_VALIDATOR = CorrelationIdValidator()


@dataclasses.dataclass(frozen=True)
class CorrelationDecision:
    """Outcome of :func:`decide_inbound`."""

    correlation_id: str
    parent_context: TraceContext | None
    header_name: str
    source: CorrelationSource


def resolve_header_name(options: TraceabilityOptions) -> str:
    return options.header_name or DEFAULT_HEADER_NAME


def normalize_header_value(
    options: TraceabilityOptions,
    value: str | None,
    validator: CorrelationIdValidator | None = None,
) -> str | None:
    """Return *value* when it is an acceptable correlation id, else ``None``."""
    if not value:
        return None
    return value if (validator or _DEFAULT_VALIDATOR).validate(value, options) else None


def decide_inbound(
    options: TraceabilityOptions,
    header_value: str | None = None,
    existing_correlation_id: str | None = None,
    traceparent: str | None = None,
    validator: CorrelationIdValidator | None = None,
) -> CorrelationDecision:
    correlation_id: str | None = None
    source: CorrelationSource = "generated"

    if not options.always_generate_new:
        correlation_id = normalize_header_value(options, header_value, validator)
        if correlation_id is not None:
            source = "header"
        elif existing_correlation_id:
            correlation_id = existing_correlation_id
            source = "ambient"

    if correlation_id is None:
        correlation_id = new_correlation_id()

    return CorrelationDecision(
        correlation_id=correlation_id,
        parent_context=codec.try_parse(traceparent),
        header_name=resolve_header_name(options),
        source=source,
    )


__all__ = [
    "CorrelationDecision",
    "CorrelationSource",
    "decide_inbound",
    "normalize_header_value",
    "resolve_header_name",
]
