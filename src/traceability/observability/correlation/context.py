"""Observability – CorrelationContext, the ambient correlation-id store.

The value lives in a ``ContextVar``: every asyncio task and every
``contextvars.copy_context().run`` call works on its own copy, so a request
handler and everything it awaits see the same id while concurrently running
requests never see each other's.

``asyncio.create_task`` copies the spawning context, which means a
fire-and-forget task started from a request would inherit that request's id.
Use :func:`spawn_detached` (or run work inside :func:`detached_context`) to
hand a background job an explicit id, or none at all.
"""
from __future__ import annotations

import asyncio
import contextvars
from contextvars import ContextVar, Token
from typing import Any, Coroutine, TypeVar
from uuid import uuid4

from traceability.observability.tracing.span import _CURRENT_SPAN

T = TypeVar("T")

_CORRELATION_ID: ContextVar[str | None] = ContextVar("_traceability_correlation_id", default=None)


def new_correlation_id() -> str:
    """Fresh identifier: 32 lowercase hex characters."""
    return uuid4().hex


class CorrelationContext:
    """Ambient correlation-id accessors."""

    @staticmethod
    def get() -> str | None:
        """Return the current id without creating one."""
        return _CORRELATION_ID.get()

    @staticmethod
    def try_get() -> tuple[str | None, bool]:
        value = _CORRELATION_ID.get()
        return value, value is not None

    @staticmethod
    def has_value() -> bool:
        return _CORRELATION_ID.get() is not None

    @staticmethod
    def get_or_create() -> str:
        value = _CORRELATION_ID.get()
        if value is None:
            value = new_correlation_id()
            _CORRELATION_ID.set(value)
        return value

    @staticmethod
    def set(value: str) -> Token[str | None]:
        if not value:
            raise ValueError("correlation id must not be empty")
        return _CORRELATION_ID.set(value)

    @staticmethod
    def reset(token: Token[str | None]) -> None:
        _CORRELATION_ID.reset(token)

    @staticmethod
    def clear() -> None:
        _CORRELATION_ID.set(None)


def detached_context(correlation_id: str | None = None) -> contextvars.Context:
    """Copy of the current context with ambient propagation state replaced.

    The copy carries *correlation_id* (or nothing) and no current span, so
    work run inside it neither reuses the caller's id nor parents spans on the
    caller's request.
    """
    ctx = contextvars.copy_context()
    ctx.run(_CORRELATION_ID.set, correlation_id or None)
    ctx.run(_CURRENT_SPAN.set, None)
    return ctx


def spawn_detached(
    coro: Coroutine[Any, Any, T],
    correlation_id: str | None = None,
    *,
    name: str | None = None,
) -> "asyncio.Task[T]":
    """Start *coro* as a task that does not inherit the caller's correlation."""
    return asyncio.get_running_loop().create_task(
        coro, name=name, context=detached_context(correlation_id)
    )


__all__ = ["CorrelationContext", "detached_context", "new_correlation_id", "spawn_detached"]
