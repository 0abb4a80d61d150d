"""Observability – framework-neutral inbound interceptor.

Server adapters (ASGI middleware, message-handler decorator) call
:meth:`InboundInterceptor.begin` when a unit of work starts and
:meth:`~InboundInterceptor.complete` or :meth:`~InboundInterceptor.fail`
when it ends. Between those calls the correlation id sits in
:class:`CorrelationContext` and the server span is the current span.
"""
from __future__ import annotations

import contextlib
import dataclasses
from contextvars import Token
from typing import Any, Iterator, Mapping

import structlog

from traceability.config.settings import (
    TRACEPARENT_HEADER,
    OptionsProvider,
    TraceabilityOptions,
    resolve_options,
)
from traceability.observability.correlation.context import CorrelationContext
from traceability.observability.correlation.headers import get_header, set_header
from traceability.observability.correlation.policy import (
    CorrelationDecision,
    decide_inbound,
    resolve_header_name,
)
from traceability.observability.correlation.validator import CorrelationIdValidator
from traceability.observability.tracing.lifecycle import SpanLifecycle
from traceability.observability.tracing.span import Span, SpanKind
from traceability.observability.tracing.tags import SERVER_SPAN_NAME, HttpTagProvider

logger = structlog.get_logger(__name__)


@dataclasses.dataclass
class InboundScope:
    """State carried from ``begin`` to ``complete``/``fail`` for one unit of work."""

    decision: CorrelationDecision
    span: Span
    token: Token[str | None] | None = None
    completed: bool = False

    @property
    def correlation_id(self) -> str:
        return self.decision.correlation_id

    @property
    def header_name(self) -> str:
        return self.decision.header_name


class InboundInterceptor:
    """Apply the inbound policy and own the server span of one unit of work."""

    def __init__(
        self,
        options: TraceabilityOptions | OptionsProvider | None = None,
        lifecycle: SpanLifecycle | None = None,
        validator: CorrelationIdValidator | None = None,
        tag_provider: HttpTagProvider | None = None,
    ) -> None:
        self._options = options
        self._lifecycle = lifecycle or SpanLifecycle(options)
        self._validator = validator or CorrelationIdValidator()
        self._tags = tag_provider or HttpTagProvider()

    @property
    def options(self) -> TraceabilityOptions:
        return resolve_options(self._options)

    @property
    def lifecycle(self) -> SpanLifecycle:
        return self._lifecycle

    @property
    def tag_provider(self) -> HttpTagProvider:
        return self._tags

    def begin(
        self,
        headers: Any,
        name: str | None = None,
        request_tags: Mapping[str, Any] | None = None,
    ) -> InboundScope:
        options = self.options
        header_name = resolve_header_name(options)
        decision = decide_inbound(
            options,
            header_value=get_header(headers, header_name),
            existing_correlation_id=CorrelationContext.get(),
            traceparent=get_header(headers, TRACEPARENT_HEADER),
            validator=self._validator,
        )
        token = CorrelationContext.set(decision.correlation_id)
        span = self._lifecycle.start(
            name or SERVER_SPAN_NAME,
            SpanKind.SERVER,
            parent=decision.parent_context,
            tags=request_tags,
        )
        logger.debug(
            "inbound.begin",
            correlation_source=decision.source,
            has_trace_parent=decision.parent_context is not None,
        )
        return InboundScope(decision=decision, span=span, token=token)

    def complete(self, scope: InboundScope, status_code: int | None = None) -> None:
        if scope.completed:
            return
        if status_code is not None:
            self._tags.add_response_tags(scope.span, status_code=status_code)
        self._finish(scope)

    def fail(self, scope: InboundScope, exc: BaseException, status_code: int | None = None) -> None:
        """Record *exc* on the span and close the scope; the caller re-raises."""
        if scope.completed:
            return
        if status_code is not None:
            self._tags.add_response_tags(scope.span, status_code=status_code)
        self._lifecycle.set_error(scope.span, exc)
        self._finish(scope)

    def response_header(self, scope: InboundScope) -> tuple[str, str]:
        return scope.header_name, scope.correlation_id

    def write_response_header(self, scope: InboundScope, headers: Any) -> bool:
        """Best-effort write of the correlation header onto a response."""
        try:
            set_header(headers, scope.header_name, scope.correlation_id)
        except Exception:  # noqa: BLE001
            logger.debug("inbound.response_header_failed", header=scope.header_name, exc_info=True)
            return False
        return True

    @contextlib.contextmanager
    def unit_of_work(
        self,
        headers: Any,
        name: str | None = None,
        request_tags: Mapping[str, Any] | None = None,
    ) -> Iterator[InboundScope]:
        scope = self.begin(headers, name, request_tags)
        try:
            yield scope
        except GeneratorExit:
            self.complete(scope)
            raise
        except BaseException as exc:
            self.fail(scope, exc)
            raise
        else:
            self.complete(scope)

    def _finish(self, scope: InboundScope) -> None:
        scope.completed = True
        self._lifecycle.stop(scope.span)
        if scope.token is not None:
            try:
                CorrelationContext.reset(scope.token)
            except ValueError:
                # token created in another context; that context keeps its own value
                logger.debug("inbound.context_reset_skipped")
            scope.token = None


__all__ = ["InboundInterceptor", "InboundScope"]
