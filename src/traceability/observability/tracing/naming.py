"""Observability – span display-name resolution.

Only cosmetic: a resolver may turn a request into a friendlier span name
(``GET /users/{user_id}``). Propagation never depends on it.
"""
from __future__ import annotations

from typing import Any, Protocol


class DisplayNameResolver(Protocol):
    """Port: derive a span display name from a framework request object."""

    def resolve_display_name(self, request: Any) -> str | None: ...


class NoopDisplayNameResolver:
    """Default resolver: never supplies a name."""

    def resolve_display_name(self, request: Any) -> str | None:  # noqa: ARG002
        return None


__all__ = ["DisplayNameResolver", "NoopDisplayNameResolver"]
