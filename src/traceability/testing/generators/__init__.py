"""Testing generators – Hypothesis strategies."""
from traceability.testing.generators.strategies import correlation_id_strategy, traceparent_strategy

__all__ = ["correlation_id_strategy", "traceparent_strategy"]
