"""FastAPI adapter – correlation and trace-context ASGI middleware."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from traceability.config.settings import OptionsProvider, TraceabilityOptions
from traceability.observability.correlation.headers import get_header
from traceability.observability.propagation.inbound import InboundInterceptor
from traceability.observability.tracing.naming import DisplayNameResolver, NoopDisplayNameResolver

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send


def _require_fastapi() -> None:
    try:
        import fastapi  # noqa: F401
    except ImportError as exc:
        raise ImportError(
            "Install 'traceability[fastapi]' to use the FastAPI adapter"
        ) from exc


def _content_length(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def request_tags_from_scope(scope: "Scope") -> dict[str, Any]:
    """HTTP request tags derived from an ASGI ``http`` scope."""
    headers = scope.get("headers", [])
    scheme = scope.get("scheme", "http")
    host = get_header(headers, "host")
    if host is None and scope.get("server"):
        server_host, server_port = scope["server"]
        host = f"{server_host}:{server_port}" if server_port else server_host
    path = scope.get("root_path", "") + scope.get("path", "")
    query = scope.get("query_string", b"")
    url = f"{scheme}://{host or ''}{path}"
    if query:
        url = f"{url}?{query.decode('latin-1')}"
    return {
        "method": scope.get("method"),
        "url": url,
        "scheme": scheme,
        "host": host,
        "user_agent": get_header(headers, "user-agent"),
        "content_length": _content_length(get_header(headers, "content-length")),
        "content_type": get_header(headers, "content-type"),
    }


class CorrelationIdMiddleware:
    """Adopt or mint the correlation id and run the request in a SERVER span.

    * the correlation header is read from the request (or generated) and
      echoed on ``http.response.start``, whatever the status code;
    * a valid ``traceparent`` becomes the parent of the request span;
    * unhandled exceptions are recorded on the span and re-raised unchanged.

    Non-HTTP scopes (``lifespan``, ``websocket``) pass through untouched.
    """

    def __init__(
        self,
        app: "ASGIApp",
        options: TraceabilityOptions | OptionsProvider | None = None,
        interceptor: InboundInterceptor | None = None,
        name_resolver: DisplayNameResolver | None = None,
    ) -> None:
        _require_fastapi()
        self.app = app
        self._interceptor = interceptor or InboundInterceptor(options)
        self._names = name_resolver or NoopDisplayNameResolver()

    async def __call__(self, scope: "Scope", receive: "Receive", send: "Send") -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        interceptor = self._interceptor
        inbound = interceptor.begin(
            scope.get("headers", []),
            name=self._names.resolve_display_name(scope),
        )
        interceptor.tag_provider.add_request_tags(inbound.span, **request_tags_from_scope(scope))
        status_code: list[int | None] = [None]

        async def send_with_header(message: "Message") -> None:
            if message["type"] == "http.response.start":
                status_code[0] = message.get("status")
                headers = list(message.get("headers", []))
                if interceptor.write_response_header(inbound, headers):
                    message = {**message, "headers": headers}
                interceptor.tag_provider.add_response_tags(
                    inbound.span,
                    content_length=_content_length(get_header(headers, "content-length")),
                )
            await send(message)

        try:
            await self.app(scope, receive, send_with_header)
        except BaseException as exc:
            interceptor.fail(inbound, exc, status_code=status_code[0] or 500)
            raise
        finally:
            interceptor.complete(inbound, status_code=status_code[0])


__all__ = ["CorrelationIdMiddleware", "request_tags_from_scope"]
