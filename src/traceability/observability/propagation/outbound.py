"""Observability – framework-neutral outbound interceptor.

Before a request leaves the process the interceptor:

* copies the ambient correlation id into the correlation header, using the
  non-creating accessor so an untracked flow never invents an id;
* optionally opens a CLIENT span as a child of the current span;
* writes ``traceparent`` only from a W3C context. Hierarchical (legacy)
  contexts are dropped.
"""
from __future__ import annotations

import dataclasses
from typing import Any, Mapping

import structlog

from traceability.config.settings import (
    TRACEPARENT_HEADER,
    OptionsProvider,
    TraceabilityOptions,
    resolve_options,
)
from traceability.observability.correlation.context import CorrelationContext
from traceability.observability.correlation.headers import set_header
from traceability.observability.correlation.policy import resolve_header_name
from traceability.observability.tracing import codec
from traceability.observability.tracing.lifecycle import SpanLifecycle
from traceability.observability.tracing.span import NOOP_SPAN, Span, SpanKind, current_span
from traceability.observability.tracing.tags import CLIENT_SPAN_NAME, HttpTagProvider

logger = structlog.get_logger(__name__)


@dataclasses.dataclass
class OutboundScope:
    correlation_id: str | None
    span: Span
    traceparent: str | None = None
    completed: bool = False


class OutboundInterceptor:
    """Emit propagation headers on outgoing requests."""

    def __init__(
        self,
        options: TraceabilityOptions | OptionsProvider | None = None,
        lifecycle: SpanLifecycle | None = None,
        tag_provider: HttpTagProvider | None = None,
        create_spans: bool = True,
    ) -> None:
        self._options = options
        self._lifecycle = lifecycle or SpanLifecycle(options)
        self._tags = tag_provider or HttpTagProvider()
        self._create_spans = create_spans

    @property
    def options(self) -> TraceabilityOptions:
        return resolve_options(self._options)

    @property
    def tag_provider(self) -> HttpTagProvider:
        return self._tags

    def begin(
        self,
        headers: Any,
        name: str | None = None,
        request_tags: Mapping[str, Any] | None = None,
    ) -> OutboundScope:
        correlation_id = CorrelationContext.get()
        if correlation_id:
            self._write(headers, resolve_header_name(self.options), correlation_id)

        span: Span = NOOP_SPAN
        if self._create_spans:
            span = self._lifecycle.start(name or CLIENT_SPAN_NAME, SpanKind.CLIENT, tags=request_tags)

        source = span if span.is_recording else current_span()
        traceparent: str | None = None
        if source is not None and codec.is_w3c(source.context):
            traceparent = codec.serialize(source.context)
            if not self._write(headers, TRACEPARENT_HEADER, traceparent):
                traceparent = None

        return OutboundScope(correlation_id=correlation_id, span=span, traceparent=traceparent)

    def complete(self, scope: OutboundScope, status_code: int | None = None) -> None:
        if scope.completed:
            return
        scope.completed = True
        if status_code is not None:
            self._tags.add_response_tags(scope.span, status_code=status_code)
        self._lifecycle.stop(scope.span)

    def fail(self, scope: OutboundScope, exc: BaseException) -> None:
        if scope.completed:
            return
        self._lifecycle.set_error(scope.span, exc)
        self.complete(scope)

    @staticmethod
    def _write(headers: Any, name: str, value: str) -> bool:
        try:
            set_header(headers, name, value)
        except Exception:  # noqa: BLE001
            logger.debug("outbound.header_write_failed", header=name, exc_info=True)
            return False
        return True


__all__ = ["OutboundInterceptor", "OutboundScope"]
