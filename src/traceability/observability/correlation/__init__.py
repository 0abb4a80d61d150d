"""Observability – ambient correlation id, validation and inbound policy."""
from traceability.observability.correlation.context import (
    CorrelationContext,
    detached_context,
    new_correlation_id,
    spawn_detached,
)
from traceability.observability.correlation.headers import get_header, set_header
from traceability.observability.correlation.policy import (
    CorrelationDecision,
    decide_inbound,
    resolve_header_name,
)
from traceability.observability.correlation.validator import CorrelationIdValidator

__all__ = [
    "CorrelationContext",
    "CorrelationDecision",
    "CorrelationIdValidator",
    "decide_inbound",
    "detached_context",
    "get_header",
    "new_correlation_id",
    "resolve_header_name",
    "set_header",
    "spawn_detached",
]
