"""Observability – SpanLifecycle.

Starts and stops spans, links parents to children and keeps the ambient
"current span" slot in stack order::

    lifecycle = SpanLifecycle()
    with lifecycle.scope("load-user", SpanKind.INTERNAL) as span:
        span.set_tag("user.id", user_id)
        ...

``start`` returns :data:`NOOP_SPAN` when span creation is disabled or no
observer is registered, so untraced code pays nothing.
"""
from __future__ import annotations

import contextlib
from datetime import UTC, datetime
from typing import Any, AsyncIterator, Callable, Iterator, Mapping, Union

from traceability.config.settings import OptionsProvider, TraceabilityOptions, resolve_options
from traceability.observability.tracing import codec
from traceability.observability.tracing.context import LegacyTraceId, SpanContext, TraceContext
from traceability.observability.tracing.observers import SpanObserverRegistry, default_registry
from traceability.observability.tracing.span import (
    _CURRENT_SPAN,
    NOOP_SPAN,
    Span,
    SpanKind,
    SpanStatus,
)
from traceability.observability.tracing.tags import ERROR, ERROR_MESSAGE, ERROR_TYPE

SpanParent = Union[Span, TraceContext, LegacyTraceId, None]


def _utc_now() -> datetime:
    return datetime.now(UTC)


class SpanLifecycle:
    """Create, tag and stop spans.

    Parameters
    ----------
    options:
        Options snapshot or provider. ``None`` reads the process-wide
        snapshot on every call.
    registry:
        Observer registry consulted before creating a span.
    clock:
        Callable returning the current UTC time.
    """

    def __init__(
        self,
        options: TraceabilityOptions | OptionsProvider | None = None,
        registry: SpanObserverRegistry | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._options = options
        self._registry = registry or default_registry()
        self._clock = clock or _utc_now

    @property
    def registry(self) -> SpanObserverRegistry:
        return self._registry

    def is_enabled(self) -> bool:
        return resolve_options(self._options).span_creation_enabled and self._registry.has_observers()

    def start(
        self,
        name: str,
        kind: SpanKind = SpanKind.INTERNAL,
        parent: SpanParent = None,
        tags: Mapping[str, Any] | None = None,
    ) -> Span:
        """Open a span and make it the current span of this flow.

        *parent* may be a local :class:`Span`, a remote :class:`TraceContext`,
        a :class:`LegacyTraceId`, or ``None`` to parent on the current span
        (a root span is opened when there is none).
        """
        options = resolve_options(self._options)
        if not options.span_creation_enabled or not self._registry.has_observers():
            return NOOP_SPAN

        if parent is None:
            parent = _CURRENT_SPAN.get()
        if isinstance(parent, Span) and not parent.is_recording:
            parent = None

        parent_span = parent if isinstance(parent, Span) else None
        parent_context: SpanContext | None = parent_span.context if parent_span else parent  # type: ignore[assignment]
        context = self._new_context(parent_context, options.hierarchical_ids)

        span = Span(
            name=name,
            kind=kind,
            context=context,
            start_time=self._clock(),
            parent=parent_span,
            parent_context=parent_context,
            owner=self,
        )
        for key, value in (tags or {}).items():
            span.set_tag(key, value)

        span._previous = _CURRENT_SPAN.get()
        _CURRENT_SPAN.set(span)
        self._registry.notify_start(span)
        return span

    def stop(self, span: Span) -> None:
        """Close *span* and restore the span that was current before it."""
        if not span.is_recording or span.is_ended:
            return
        span.end_time = self._clock()
        if _CURRENT_SPAN.get() is span:
            previous = span._previous
            while previous is not None and previous.is_ended:
                previous = previous._previous
            _CURRENT_SPAN.set(previous)
        self._registry.notify_stop(span)

    def add_tag(self, span: Span, key: str, value: Any) -> None:
        span.set_tag(key, value)

    def set_error(self, span: Span, exc: BaseException) -> None:
        span.set_tag(ERROR, True)
        span.set_tag(ERROR_TYPE, type(exc).__name__)
        span.set_tag(ERROR_MESSAGE, str(exc))
        span.set_status(SpanStatus.ERROR, str(exc))

    @contextlib.contextmanager
    def scope(
        self,
        name: str,
        kind: SpanKind = SpanKind.INTERNAL,
        parent: SpanParent = None,
        tags: Mapping[str, Any] | None = None,
    ) -> Iterator[Span]:
        span = self.start(name, kind, parent, tags)
        try:
            yield span
        except GeneratorExit:
            raise
        except BaseException as exc:
            self.set_error(span, exc)
            raise
        finally:
            self.stop(span)

    @contextlib.asynccontextmanager
    async def async_scope(
        self,
        name: str,
        kind: SpanKind = SpanKind.INTERNAL,
        parent: SpanParent = None,
        tags: Mapping[str, Any] | None = None,
    ) -> AsyncIterator[Span]:
        with self.scope(name, kind, parent, tags) as span:
            yield span

    @staticmethod
    def _new_context(parent: SpanContext | None, hierarchical: bool) -> SpanContext:
        if isinstance(parent, LegacyTraceId):
            return parent.child(codec.new_legacy_segment())
        if hierarchical:
            if isinstance(parent, TraceContext):
                return LegacyTraceId(f"|{parent.trace_id}.").child(codec.new_legacy_segment())
            return codec.new_legacy_root()
        if isinstance(parent, TraceContext):
            return parent.child(codec.new_span_id())
        return TraceContext(trace_id=codec.new_trace_id(), span_id=codec.new_span_id())


__all__ = ["SpanLifecycle", "SpanParent"]
