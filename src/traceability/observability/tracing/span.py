"""Observability – Span, SpanKind, SpanStatus and the ambient current-span slot."""
from __future__ import annotations

from contextvars import ContextVar
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any

from traceability.observability.tracing.context import LegacyTraceId, SpanContext, TraceContext

if TYPE_CHECKING:
    from traceability.observability.tracing.lifecycle import SpanLifecycle


class SpanKind(str, Enum):
    INTERNAL = "INTERNAL"
    SERVER = "SERVER"
    CLIENT = "CLIENT"


class SpanStatus(str, Enum):
    UNSET = "UNSET"
    ERROR = "ERROR"


def format_tag_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class Span:
    """One timed, tagged unit of work.

    Created by :meth:`SpanLifecycle.start`, mutable until stopped. Once
    stopped the span is frozen: further tag or status writes are ignored.
    """

    is_recording = True

    def __init__(
        self,
        name: str,
        kind: SpanKind,
        context: SpanContext,
        start_time: datetime,
        parent: "Span | None" = None,
        parent_context: SpanContext | None = None,
        owner: "SpanLifecycle | None" = None,
    ) -> None:
        self.name = name
        self.kind = kind
        self.context = context
        self.start_time = start_time
        self.end_time: datetime | None = None
        self.parent = parent
        self.parent_context = parent_context
        self.tags: dict[str, str] = {}
        self.status = SpanStatus.UNSET
        self.status_description: str | None = None
        self._owner = owner
        self._previous: Span | None = None

    def __repr__(self) -> str:
        return f"Span(name={self.name!r}, kind={self.kind.value}, context={self.context!r})"

    @property
    def is_ended(self) -> bool:
        return self.end_time is not None

    @property
    def trace_id(self) -> str | None:
        if isinstance(self.context, TraceContext):
            return self.context.trace_id
        if isinstance(self.context, LegacyTraceId):
            return self.context.root_id
        return None

    @property
    def span_id(self) -> str | None:
        if isinstance(self.context, TraceContext):
            return self.context.span_id
        if isinstance(self.context, LegacyTraceId):
            return self.context.value
        return None

    @property
    def parent_span_id(self) -> str | None:
        if isinstance(self.context, TraceContext):
            return self.context.parent_span_id
        if isinstance(self.parent_context, LegacyTraceId):
            return self.parent_context.value
        if isinstance(self.parent_context, TraceContext):
            return self.parent_context.span_id
        return None

    @property
    def duration(self) -> timedelta | None:
        if self.end_time is None:
            return None
        return self.end_time - self.start_time

    def rename(self, name: str) -> None:
        if not self.is_ended and name:
            self.name = name

    def set_tag(self, key: str, value: Any) -> None:
        if self.is_ended or value is None:
            return
        self.tags[key] = format_tag_value(value)

    def set_status(self, status: SpanStatus, description: str | None = None) -> None:
        if self.is_ended:
            return
        self.status = status
        self.status_description = description

    def end(self) -> None:
        """Stop the span through the lifecycle that opened it."""
        if self._owner is not None:
            self._owner.stop(self)

    def __enter__(self) -> "Span":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_val is not None and self._owner is not None:
            self._owner.set_error(self, exc_val)
        self.end()


class NoopSpan(Span):
    """Inert span handed out when nobody observes spans."""

    is_recording = False

    def __init__(self) -> None:
        super().__init__(
            name="",
            kind=SpanKind.INTERNAL,
            context=None,  # type: ignore[arg-type]
            start_time=datetime.min,
        )

    def __repr__(self) -> str:
        return "NoopSpan()"

    @property
    def is_ended(self) -> bool:
        return False

    def rename(self, name: str) -> None:
        pass

    def set_tag(self, key: str, value: Any) -> None:
        pass

    def set_status(self, status: SpanStatus, description: str | None = None) -> None:
        pass

    def end(self) -> None:
        pass

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        pass


NOOP_SPAN = NoopSpan()

_CURRENT_SPAN: ContextVar[Span | None] = ContextVar("_traceability_current_span", default=None)


def current_span() -> Span | None:
    """Return the span currently open in this logical flow, if any."""
    return _CURRENT_SPAN.get()


__all__ = [
    "NOOP_SPAN",
    "NoopSpan",
    "Span",
    "SpanKind",
    "SpanStatus",
    "current_span",
    "format_tag_value",
]
