"""OpenTelemetry adapter – export locally created spans."""
from traceability.adapters.opentelemetry.ids import LocalSpanIdGenerator
from traceability.adapters.opentelemetry.observer import OtelSpanObserver, parent_context_of

__all__ = ["LocalSpanIdGenerator", "OtelSpanObserver", "parent_context_of"]
