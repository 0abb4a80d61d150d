"""OpenTelemetry adapter – mirror local spans into a TracerProvider.

:class:`OtelSpanObserver` is a span observer: register it and every span the
lifecycle opens is re-created as an OpenTelemetry span, ended with the same
tags and status when the local span stops::

    provider = TracerProvider(id_generator=LocalSpanIdGenerator())
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter()))
    default_registry().add(OtelSpanObserver(provider))

Parenting follows the local hierarchy. With :class:`LocalSpanIdGenerator`
installed on the provider, exported spans keep the local trace and span ids,
so they match the ``traceparent`` sent downstream and the ids in the logs.
"""
from __future__ import annotations

import weakref
from datetime import datetime
from typing import Any

try:
    from opentelemetry import context as otel_context
    from opentelemetry import trace
    from opentelemetry.trace import NonRecordingSpan, Status, StatusCode, TraceFlags
    from opentelemetry.trace import SpanContext as OtelSpanContext
    from opentelemetry.trace import SpanKind as OtelKind
except ImportError as exc:
    raise ImportError("Install 'traceability[otel]' to use the OpenTelemetry adapter") from exc

from traceability.adapters.opentelemetry.ids import pending_ids
from traceability.observability.correlation.context import CorrelationContext
from traceability.observability.tracing.context import TraceContext
from traceability.observability.tracing.span import Span, SpanKind, SpanStatus

CORRELATION_ID_ATTRIBUTE = "correlation.id"
INSTRUMENTATION_NAME = "traceability"

_KIND_MAP = {
    SpanKind.INTERNAL: OtelKind.INTERNAL,
    SpanKind.SERVER: OtelKind.SERVER,
    SpanKind.CLIENT: OtelKind.CLIENT,
}


def _ns(moment: datetime | None) -> int | None:
    if moment is None:
        return None
    return int(moment.timestamp() * 1_000_000_000)


def parent_context_of(ctx: TraceContext) -> Any:
    """OpenTelemetry context whose current span carries the ids of *ctx*.

    The span context is marked remote only when *ctx* came off the wire.
    """
    span_context = OtelSpanContext(
        trace_id=int(ctx.trace_id, 16),
        span_id=int(ctx.span_id, 16),
        is_remote=ctx.is_remote,
        trace_flags=TraceFlags(TraceFlags.SAMPLED if ctx.sampled else TraceFlags.DEFAULT),
    )
    return trace.set_span_in_context(NonRecordingSpan(span_context), otel_context.Context())


class OtelSpanObserver:
    """Span observer that exports through an OpenTelemetry tracer."""

    def __init__(self, tracer_provider: Any = None, instrumentation_name: str = INSTRUMENTATION_NAME) -> None:
        self._tracer = trace.get_tracer(instrumentation_name, tracer_provider=tracer_provider)
        self._open: "weakref.WeakKeyDictionary[Span, Any]" = weakref.WeakKeyDictionary()

    def on_start(self, span: Span) -> None:
        with pending_ids(span.context):
            otel_span = self._tracer.start_span(
                span.name,
                context=self._parent_context(span),
                kind=_KIND_MAP.get(span.kind, OtelKind.INTERNAL),
                start_time=_ns(span.start_time),
            )
        correlation_id = CorrelationContext.get()
        if correlation_id:
            otel_span.set_attribute(CORRELATION_ID_ATTRIBUTE, correlation_id)
        self._open[span] = otel_span

    def on_stop(self, span: Span) -> None:
        otel_span = self._open.pop(span, None)
        if otel_span is None:
            return
        # the name may have changed after start (route-template naming)
        otel_span.update_name(span.name)
        for key, value in span.tags.items():
            otel_span.set_attribute(key, value)
        if span.status is SpanStatus.ERROR:
            otel_span.set_status(Status(StatusCode.ERROR, span.status_description))
        otel_span.end(end_time=_ns(span.end_time))

    def _parent_context(self, span: Span) -> Any:
        if span.parent is not None:
            parent = self._open.get(span.parent)
            if parent is not None:
                return trace.set_span_in_context(parent, otel_context.Context())
        if isinstance(span.parent_context, TraceContext):
            return parent_context_of(span.parent_context)
        return otel_context.Context()


__all__ = ["CORRELATION_ID_ATTRIBUTE", "OtelSpanObserver", "parent_context_of"]
