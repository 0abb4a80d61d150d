"""Observability – structured logging enriched with correlation and trace ids."""
from traceability.observability.logging.factory import JsonLoggerFactory
from traceability.observability.logging.processors import (
    CorrelationIdProcessor,
    FieldSelectionProcessor,
    SourceProcessor,
    TraceContextProcessor,
    get_logger,
)
from traceability.observability.logging.service_name import (
    SERVICE_NAME_ENV,
    resolve_service_name,
    sanitize_source,
)

__all__ = [
    "CorrelationIdProcessor",
    "FieldSelectionProcessor",
    "JsonLoggerFactory",
    "SERVICE_NAME_ENV",
    "SourceProcessor",
    "TraceContextProcessor",
    "get_logger",
    "resolve_service_name",
    "sanitize_source",
]
