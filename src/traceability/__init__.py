"""
traceability – correlation-id and W3C trace-context propagation.

Import path convention::

    from traceability.observability.correlation import CorrelationContext
    from traceability.observability.tracing import SpanLifecycle, SpanKind
    from traceability.config import TraceabilityOptions, configure_options
    from traceability.adapters.fastapi import add_traceability
    from traceability.adapters.httpx import TraceableHttpClientFactory
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
