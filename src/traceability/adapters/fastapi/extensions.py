"""FastAPI adapter – one-call installation."""
from __future__ import annotations

from typing import Any

from traceability.adapters.fastapi.middleware import CorrelationIdMiddleware, _require_fastapi
from traceability.adapters.fastapi.routing import StarletteRouteNameResolver
from traceability.config.settings import TraceabilityOptions, configure_options
from traceability.observability.logging.factory import JsonLoggerFactory
from traceability.observability.tracing.naming import DisplayNameResolver


def add_traceability(
    app: Any,
    options: TraceabilityOptions | None = None,
    source: str | None = None,
    configure_logging: bool = True,
    name_resolver: DisplayNameResolver | None = None,
) -> Any:
    """Install correlation propagation on a FastAPI/Starlette *app*.

    *options*, when given, also becomes the process-wide snapshot so that
    outbound clients and log processors agree with the middleware.

    Usage::

        app = FastAPI()
        add_traceability(app, TraceabilityOptions(source="orders-api"))

    Raises :class:`MissingRequiredSettingError` when *configure_logging* is
    on and no service name can be resolved.
    """
    _require_fastapi()
    if options is not None:
        configure_options(options)
    if configure_logging:
        JsonLoggerFactory.configure(options, source=source)
    app.add_middleware(
        CorrelationIdMiddleware,
        options=options,
        name_resolver=name_resolver or StarletteRouteNameResolver(),
    )
    return app


__all__ = ["add_traceability"]
