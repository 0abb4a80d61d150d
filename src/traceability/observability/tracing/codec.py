"""Observability – W3C ``traceparent`` codec and id generation."""
from __future__ import annotations

import re
import secrets
from typing import Any

from traceability.observability.tracing.context import LegacyTraceId, TraceContext

_TRACEPARENT_RE = re.compile(
    r"(?P<version>[0-9a-f]{2})-(?P<trace_id>[0-9a-f]{32})-(?P<span_id>[0-9a-f]{16})-(?P<flags>[0-9a-f]{2})"
)
_INVALID_VERSION = "ff"
_ZERO_TRACE_ID = "0" * 32
_ZERO_SPAN_ID = "0" * 16
_SAMPLED_FLAG = 0x01

TRACEPARENT_VERSION = "00"


def try_parse(value: str | None) -> TraceContext | None:
    """Parse a ``version-traceid-spanid-flags`` header value.

    Returns ``None`` for anything that is not a well-formed four-field W3C
    value, including hierarchical ids and all-zero identifiers.
    """
    if not value:
        return None
    match = _TRACEPARENT_RE.fullmatch(value.strip())
    if match is None:
        return None
    if match["version"] == _INVALID_VERSION:
        return None
    if match["trace_id"] == _ZERO_TRACE_ID or match["span_id"] == _ZERO_SPAN_ID:
        return None
    return TraceContext(
        trace_id=match["trace_id"],
        span_id=match["span_id"],
        sampled=bool(int(match["flags"], 16) & _SAMPLED_FLAG),
        is_remote=True,
    )


def serialize(ctx: TraceContext) -> str:
    """Render *ctx* as a ``traceparent`` value; legacy ids are refused."""
    if isinstance(ctx, LegacyTraceId):
        raise TypeError("hierarchical trace ids cannot be serialized as traceparent")
    if not isinstance(ctx, TraceContext):
        raise TypeError(f"expected TraceContext, got {type(ctx).__name__}")
    return f"{TRACEPARENT_VERSION}-{ctx.trace_id}-{ctx.span_id}-{ctx.flags}"


def is_w3c(ctx: Any) -> bool:
    return isinstance(ctx, TraceContext)


def new_trace_id() -> str:
    while True:
        value = secrets.token_hex(16)
        if value != _ZERO_TRACE_ID:
            return value


def new_span_id() -> str:
    while True:
        value = secrets.token_hex(8)
        if value != _ZERO_SPAN_ID:
            return value


def new_legacy_root() -> LegacyTraceId:
    return LegacyTraceId(f"|{secrets.token_hex(8)}.")


def new_legacy_segment() -> str:
    return secrets.token_hex(4)


__all__ = [
    "TRACEPARENT_VERSION",
    "is_w3c",
    "new_legacy_root",
    "new_legacy_segment",
    "new_span_id",
    "new_trace_id",
    "serialize",
    "try_parse",
]
