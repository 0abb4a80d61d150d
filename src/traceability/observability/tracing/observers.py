"""Observability – span observers and the process-wide registry.

Span creation is free when nobody listens: :class:`SpanLifecycle` asks the
registry :meth:`~SpanObserverRegistry.has_observers` before building a span.
"""
from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Protocol

import structlog

if TYPE_CHECKING:
    from traceability.observability.tracing.span import Span

logger = structlog.get_logger(__name__)


class SpanObserver(Protocol):
    """Port: receives spans when they start and when they stop."""

    def on_start(self, span: "Span") -> None: ...

    def on_stop(self, span: "Span") -> None: ...


class SpanObserverRegistry:
    """Copy-on-write set of observers.

    ``add``/``remove`` are serialised by a lock and publish a new tuple;
    request-time reads iterate the published tuple without locking.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._observers: tuple[SpanObserver, ...] = ()

    def add(self, observer: SpanObserver) -> None:
        with self._lock:
            if observer not in self._observers:
                self._observers = (*self._observers, observer)

    def remove(self, observer: SpanObserver) -> None:
        with self._lock:
            self._observers = tuple(o for o in self._observers if o is not observer)

    def clear(self) -> None:
        with self._lock:
            self._observers = ()

    def has_observers(self) -> bool:
        return bool(self._observers)

    @property
    def observers(self) -> tuple[SpanObserver, ...]:
        return self._observers

    def notify_start(self, span: "Span") -> None:
        for observer in self._observers:
            try:
                observer.on_start(span)
            except Exception:  # noqa: BLE001
                logger.debug("span_observer.on_start_failed", observer=type(observer).__name__, exc_info=True)

    def notify_stop(self, span: "Span") -> None:
        for observer in self._observers:
            try:
                observer.on_stop(span)
            except Exception:  # noqa: BLE001
                logger.debug("span_observer.on_stop_failed", observer=type(observer).__name__, exc_info=True)


_DEFAULT_REGISTRY = SpanObserverRegistry()


def default_registry() -> SpanObserverRegistry:
    return _DEFAULT_REGISTRY


__all__ = ["SpanObserver", "SpanObserverRegistry", "default_registry"]
