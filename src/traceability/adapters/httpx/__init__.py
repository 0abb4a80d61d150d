"""HTTPX adapter – propagating transports and client factory."""
from traceability.adapters.httpx.client import TraceableHttpClient, TraceableHttpClientFactory
from traceability.adapters.httpx.transport import AsyncCorrelationIdTransport, CorrelationIdTransport

__all__ = [
    "AsyncCorrelationIdTransport",
    "CorrelationIdTransport",
    "TraceableHttpClient",
    "TraceableHttpClientFactory",
]
