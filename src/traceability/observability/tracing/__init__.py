"""Observability – spans, trace-context codec and span lifecycle."""
from traceability.observability.tracing import codec
from traceability.observability.tracing.context import LegacyTraceId, SpanContext, TraceContext
from traceability.observability.tracing.lifecycle import SpanLifecycle, SpanParent
from traceability.observability.tracing.naming import DisplayNameResolver, NoopDisplayNameResolver
from traceability.observability.tracing.observers import SpanObserver, SpanObserverRegistry, default_registry
from traceability.observability.tracing.span import (
    NOOP_SPAN,
    NoopSpan,
    Span,
    SpanKind,
    SpanStatus,
    current_span,
)
from traceability.observability.tracing.tags import HttpTagProvider

__all__ = [
    "DisplayNameResolver",
    "HttpTagProvider",
    "LegacyTraceId",
    "NOOP_SPAN",
    "NoopDisplayNameResolver",
    "NoopSpan",
    "Span",
    "SpanContext",
    "SpanKind",
    "SpanLifecycle",
    "SpanObserver",
    "SpanObserverRegistry",
    "SpanParent",
    "SpanStatus",
    "TraceContext",
    "codec",
    "current_span",
    "default_registry",
]
