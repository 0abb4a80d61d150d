"""Observability – correlation, propagation, logging, tracing."""

from traceability.observability.correlation import CorrelationContext, CorrelationIdValidator, decide_inbound
from traceability.observability.logging import JsonLoggerFactory, get_logger
from traceability.observability.propagation import InboundInterceptor, OutboundInterceptor, correlated_handler
from traceability.observability.tracing import Span, SpanKind, SpanLifecycle, TraceContext, current_span

__all__ = [
    "CorrelationContext",
    "CorrelationIdValidator",
    "InboundInterceptor",
    "JsonLoggerFactory",
    "OutboundInterceptor",
    "Span",
    "SpanKind",
    "SpanLifecycle",
    "TraceContext",
    "correlated_handler",
    "current_span",
    "decide_inbound",
    "get_logger",
]
