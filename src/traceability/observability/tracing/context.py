"""Observability – trace-context value objects.

Two encodings identify a span:

* :class:`TraceContext` – W3C trace-context ids (32-hex trace id, 16-hex span
  id, sampled flag). The only variant ever written to the wire.
* :class:`LegacyTraceId` – hierarchical id (``|root.child.``) produced in the
  legacy compatibility mode. Usable as a local parent, never serialized.
"""
from __future__ import annotations

import dataclasses
from typing import Union


@dataclasses.dataclass(frozen=True, slots=True)
class TraceContext:
    """W3C trace-context identifiers of one span."""

    trace_id: str
    span_id: str
    parent_span_id: str | None = None
    sampled: bool = True
    is_remote: bool = False

    @property
    def flags(self) -> str:
        return "01" if self.sampled else "00"

    def child(self, span_id: str) -> "TraceContext":
        """Context of a local child span with the given *span_id*."""
        return TraceContext(
            trace_id=self.trace_id,
            span_id=span_id,
            parent_span_id=self.span_id,
            sampled=self.sampled,
        )


@dataclasses.dataclass(frozen=True, slots=True)
class LegacyTraceId:
    """Hierarchical (non-W3C) span id, e.g. ``|9f1c2a.4b7e01.``."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("LegacyTraceId must not be empty")

    @property
    def root_id(self) -> str:
        """The leading segment shared by every span in the hierarchy."""
        return self.value.strip("|").split(".", 1)[0]

    def child(self, segment: str) -> "LegacyTraceId":
        base = self.value if self.value.endswith(".") else f"{self.value}."
        return LegacyTraceId(f"{base}{segment}.")

    def __str__(self) -> str:
        return self.value


SpanContext = Union[TraceContext, LegacyTraceId]


__all__ = ["LegacyTraceId", "SpanContext", "TraceContext"]
