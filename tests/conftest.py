"""Shared test setup: fixtures from traceability.testing and global-state cleanup."""
from __future__ import annotations

import pytest
from hypothesis import HealthCheck, settings

from traceability.config.settings import reset_options
from traceability.observability.correlation import CorrelationContext
from traceability.observability.tracing import default_registry
from traceability.observability.tracing.span import _CURRENT_SPAN
from traceability.testing.fixtures import correlation_fixture, span_recorder  # noqa: F401

# the autouse cleanup below is function-scoped; property tests do not depend on it
settings.register_profile("traceability", suppress_health_check=[HealthCheck.function_scoped_fixture])
settings.load_profile("traceability")


@pytest.fixture(autouse=True)
def _clean_propagation_state():
    CorrelationContext.clear()
    _CURRENT_SPAN.set(None)
    default_registry().clear()
    reset_options()
    yield
    CorrelationContext.clear()
    _CURRENT_SPAN.set(None)
    default_registry().clear()
    reset_options()
