"""FastAPI adapter – correlation middleware, route naming, installation helper."""
from traceability.adapters.fastapi.extensions import add_traceability
from traceability.adapters.fastapi.middleware import CorrelationIdMiddleware, request_tags_from_scope
from traceability.adapters.fastapi.routing import StarletteRouteNameResolver

__all__ = [
    "CorrelationIdMiddleware",
    "StarletteRouteNameResolver",
    "add_traceability",
    "request_tags_from_scope",
]
