"""OpenTelemetry adapter – id generator that reuses the local span ids.

Pass it to the SDK provider so exported spans carry the same trace and span
ids as the ``traceparent`` headers and log fields::

    provider = TracerProvider(id_generator=LocalSpanIdGenerator())
"""
from __future__ import annotations

import contextlib
from contextvars import ContextVar
from typing import Iterator

try:
    from opentelemetry.sdk.trace.id_generator import IdGenerator, RandomIdGenerator
except ImportError as exc:
    raise ImportError("Install 'traceability[otel]' to use the OpenTelemetry adapter") from exc

from traceability.observability.tracing.context import TraceContext

# (trace_id, span_id) of the local span being mirrored right now
_PENDING: ContextVar[tuple[int, int] | None] = ContextVar("traceability_otel_pending_ids", default=None)


@contextlib.contextmanager
def pending_ids(context: object) -> Iterator[None]:
    """Expose the ids of *context* to :class:`LocalSpanIdGenerator` for one ``start_span`` call."""
    ids = (int(context.trace_id, 16), int(context.span_id, 16)) if isinstance(context, TraceContext) else None
    token = _PENDING.set(ids)
    try:
        yield
    finally:
        _PENDING.reset(token)


class LocalSpanIdGenerator(IdGenerator):
    """Hand out the pending local ids; random ids for spans started elsewhere."""

    def __init__(self, fallback: IdGenerator | None = None) -> None:
        self._fallback = fallback or RandomIdGenerator()

    def generate_trace_id(self) -> int:
        ids = _PENDING.get()
        return ids[0] if ids is not None else self._fallback.generate_trace_id()

    def generate_span_id(self) -> int:
        ids = _PENDING.get()
        return ids[1] if ids is not None else self._fallback.generate_span_id()


__all__ = ["LocalSpanIdGenerator", "pending_ids"]
