"""Observability – @correlated_handler for non-HTTP units of work.

Queue consumers, scheduled jobs and other message handlers get the same
inbound treatment an HTTP request gets: the correlation id is adopted from
the message headers (or generated), a SERVER span is opened, and everything
is restored when the handler returns or raises.
"""
from __future__ import annotations

import functools
import inspect
from collections.abc import Mapping
from typing import Any, Callable, TypeVar

from traceability.config.settings import OptionsProvider, TraceabilityOptions
from traceability.observability.propagation.inbound import InboundInterceptor

F = TypeVar("F", bound=Callable[..., Any])

HeaderGetter = Callable[..., Any]


def headers_from_message(*args: Any, **kwargs: Any) -> Any:  # noqa: ARG001
    """Default header getter.

    Returns the first positional argument that is itself a mapping or that
    exposes a ``headers`` attribute, so both ``handle(message)`` and
    ``Consumer.handle(self, message)`` work unchanged.
    """
    for arg in args:
        if isinstance(arg, Mapping):
            return arg
        headers = getattr(arg, "headers", None)
        if headers is not None:
            return headers
    return None


def correlated_handler(
    fn: F | None = None,
    *,
    name: str | None = None,
    headers: HeaderGetter | None = None,
    options: TraceabilityOptions | OptionsProvider | None = None,
    interceptor: InboundInterceptor | None = None,
) -> Any:
    """Run the decorated handler inside an inbound correlation scope.

    Works on both async and sync callables, bare or parameterised.

    Example::

        @correlated_handler
        async def on_order_created(message: Message) -> None:
            log.info("order.received")          # carries correlation_id

        @correlated_handler(name="billing.consume", headers=lambda m: m.meta)
        def consume(message: Envelope) -> None:
            ...

    Exceptions raised by the handler are recorded on the span and re-raised
    unchanged.
    """
    getter = headers or headers_from_message

    def decorator(func: F) -> F:
        span_name = name or func.__qualname__
        inbound = interceptor or InboundInterceptor(options)

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with inbound.unit_of_work(getter(*args, **kwargs), name=span_name):
                    return await func(*args, **kwargs)

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with inbound.unit_of_work(getter(*args, **kwargs), name=span_name):
                return func(*args, **kwargs)

        return sync_wrapper  # type: ignore[return-value]

    if fn is not None:
        return decorator(fn)
    return decorator


__all__ = ["HeaderGetter", "correlated_handler", "headers_from_message"]
