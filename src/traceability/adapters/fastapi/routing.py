"""FastAPI adapter – route-template span names."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class StarletteRouteNameResolver:
    """Name request spans after the matched route template, e.g. ``GET /users/{user_id}``.

    Accepts an ASGI scope or a Starlette ``Request``. Returns ``None`` when
    no route matches fully, leaving the default span name in place.
    """

    def resolve_display_name(self, request: Any) -> str | None:
        from starlette.routing import Match

        scope = request if isinstance(request, Mapping) else getattr(request, "scope", None)
        if not scope or scope.get("type") != "http":
            return None
        app = scope.get("app")
        routes = getattr(app, "routes", None)
        if routes is None:
            routes = getattr(getattr(app, "router", None), "routes", None) or []

        for route in routes:
            match, _ = route.matches(scope)
            if match == Match.FULL:
                path = getattr(route, "path", None)
                if path:
                    return f"{scope.get('method', 'GET')} {path}"
                return None
        return None


__all__ = ["StarletteRouteNameResolver"]
