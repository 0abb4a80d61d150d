"""HTTPX adapter – transports that propagate correlation and trace context.

Wrap any httpx transport; every request sent through it carries the
ambient correlation header and, for W3C contexts, ``traceparent``::

    client = httpx.AsyncClient(transport=AsyncCorrelationIdTransport())
"""
from __future__ import annotations

from typing import Any

try:
    import httpx
except ImportError as exc:
    raise ImportError("Install 'traceability[httpx]' to use the HTTPX adapter") from exc

from traceability.config.settings import OptionsProvider, TraceabilityOptions
from traceability.observability.propagation.outbound import OutboundInterceptor, OutboundScope


def _content_length(headers: httpx.Headers) -> int | None:
    raw = headers.get("content-length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _begin(interceptor: OutboundInterceptor, request: httpx.Request) -> OutboundScope:
    scope = interceptor.begin(request.headers)
    interceptor.tag_provider.add_request_tags(
        scope.span,
        method=request.method,
        url=str(request.url),
        scheme=request.url.scheme,
        host=request.url.host,
        user_agent=request.headers.get("user-agent"),
        content_length=_content_length(request.headers),
        content_type=request.headers.get("content-type"),
    )
    return scope


def _complete(interceptor: OutboundInterceptor, scope: OutboundScope, response: httpx.Response) -> None:
    interceptor.tag_provider.add_response_tags(
        scope.span, content_length=_content_length(response.headers)
    )
    interceptor.complete(scope, status_code=response.status_code)


class CorrelationIdTransport(httpx.BaseTransport):
    """Synchronous transport wrapper."""

    def __init__(
        self,
        transport: httpx.BaseTransport | None = None,
        options: TraceabilityOptions | OptionsProvider | None = None,
        interceptor: OutboundInterceptor | None = None,
        **transport_kwargs: Any,
    ) -> None:
        self._transport = transport or httpx.HTTPTransport(**transport_kwargs)
        self._interceptor = interceptor or OutboundInterceptor(options)

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        scope = _begin(self._interceptor, request)
        try:
            response = self._transport.handle_request(request)
        except BaseException as exc:
            self._interceptor.fail(scope, exc)
            raise
        _complete(self._interceptor, scope, response)
        return response

    def close(self) -> None:
        self._transport.close()


class AsyncCorrelationIdTransport(httpx.AsyncBaseTransport):
    """Asynchronous transport wrapper."""

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport | None = None,
        options: TraceabilityOptions | OptionsProvider | None = None,
        interceptor: OutboundInterceptor | None = None,
        **transport_kwargs: Any,
    ) -> None:
        self._transport = transport or httpx.AsyncHTTPTransport(**transport_kwargs)
        self._interceptor = interceptor or OutboundInterceptor(options)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        scope = _begin(self._interceptor, request)
        try:
            response = await self._transport.handle_async_request(request)
        except BaseException as exc:
            self._interceptor.fail(scope, exc)
            raise
        _complete(self._interceptor, scope, response)
        return response

    async def aclose(self) -> None:
        await self._transport.aclose()


__all__ = ["AsyncCorrelationIdTransport", "CorrelationIdTransport"]
