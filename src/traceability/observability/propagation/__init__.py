"""Observability – inbound and outbound propagation interceptors."""
from traceability.observability.propagation.handlers import (
    HeaderGetter,
    correlated_handler,
    headers_from_message,
)
from traceability.observability.propagation.inbound import InboundInterceptor, InboundScope
from traceability.observability.propagation.outbound import OutboundInterceptor, OutboundScope

__all__ = [
    "HeaderGetter",
    "InboundInterceptor",
    "InboundScope",
    "OutboundInterceptor",
    "OutboundScope",
    "correlated_handler",
    "headers_from_message",
]
