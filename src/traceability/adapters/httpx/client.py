"""HTTPX adapter – client factory and TraceableHttpClient."""
from __future__ import annotations

from typing import Any

import httpx

from traceability.adapters.httpx.transport import AsyncCorrelationIdTransport, CorrelationIdTransport
from traceability.config.settings import OptionsProvider, TraceabilityOptions
from traceability.kernel.errors import ExternalServiceError, TimeoutError as AppTimeoutError


class TraceableHttpClientFactory:
    """Build httpx clients whose transport propagates correlation context.

    *transport*, when given, is wrapped rather than replaced, which keeps
    ``httpx.MockTransport`` and respx usable in tests.
    """

    def __init__(self, options: TraceabilityOptions | OptionsProvider | None = None) -> None:
        self._options = options

    def create(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=AsyncCorrelationIdTransport(transport, options=self._options),
            **kwargs,
        )

    def create_sync(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
        **kwargs: Any,
    ) -> httpx.Client:
        return httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=CorrelationIdTransport(transport, options=self._options),
            **kwargs,
        )


class TraceableHttpClient:
    """Thin async httpx wrapper with propagation and structured error mapping."""

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        options: TraceabilityOptions | OptionsProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ) -> None:
        self._client = TraceableHttpClientFactory(options).create(
            base_url=base_url, timeout=timeout, transport=transport, **kwargs
        )

    async def __aenter__(self) -> "TraceableHttpClient":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self._client.__aexit__(*args)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._request("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self._request("DELETE", url, **kwargs)

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.TimeoutException as exc:
            raise AppTimeoutError(f"HTTP request timed out: {method} {url}") from exc
        except httpx.HTTPStatusError as exc:
            raise ExternalServiceError(
                service=url,
                message=f"HTTP {exc.response.status_code} from {method} {url}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise ExternalServiceError(service=url, message=str(exc)) from exc


__all__ = ["TraceableHttpClient", "TraceableHttpClientFactory"]
