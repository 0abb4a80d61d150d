"""Config settings – options providers.

The propagation core reads options through a provider so the same code path
works with injected options and with the process-wide snapshot installed at
startup by :func:`configure_options`.
"""
from __future__ import annotations

import threading
from typing import Protocol

from traceability.config.settings.options import TraceabilityOptions


class OptionsProvider(Protocol):
    """Port: hand out the current immutable options snapshot."""

    def get_options(self) -> TraceabilityOptions: ...


class FixedOptionsProvider:
    """Provider that always returns the options it was built with."""

    def __init__(self, options: TraceabilityOptions) -> None:
        self._options = options

    def get_options(self) -> TraceabilityOptions:
        return self._options


class StaticOptionsProvider:
    """Process-wide options snapshot.

    Writes are serialised by a lock and swap the reference; reads take no
    lock and always see a complete, immutable snapshot.
    """

    _lock = threading.Lock()
    _options: TraceabilityOptions = TraceabilityOptions()

    def get_options(self) -> TraceabilityOptions:
        return type(self)._options

    @classmethod
    def configure(cls, options: TraceabilityOptions) -> None:
        if not isinstance(options, TraceabilityOptions):
            raise TypeError(f"expected TraceabilityOptions, got {type(options).__name__}")
        with cls._lock:
            cls._options = options

    @classmethod
    def reset(cls) -> None:
        with cls._lock:
            cls._options = TraceabilityOptions()


_DEFAULT_PROVIDER = StaticOptionsProvider()


def default_provider() -> StaticOptionsProvider:
    return _DEFAULT_PROVIDER


def configure_options(options: TraceabilityOptions) -> None:
    """Install *options* as the process-wide snapshot (call during startup)."""
    StaticOptionsProvider.configure(options)


def get_options() -> TraceabilityOptions:
    return _DEFAULT_PROVIDER.get_options()


def reset_options() -> None:
    StaticOptionsProvider.reset()


def resolve_options(options: TraceabilityOptions | OptionsProvider | None) -> TraceabilityOptions:
    """Normalise an injected options value, provider, or ``None`` to a snapshot."""
    if options is None:
        return get_options()
    if isinstance(options, TraceabilityOptions):
        return options
    return options.get_options()


__all__ = [
    "FixedOptionsProvider",
    "OptionsProvider",
    "StaticOptionsProvider",
    "configure_options",
    "default_provider",
    "get_options",
    "reset_options",
    "resolve_options",
]
