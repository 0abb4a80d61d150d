"""Testing fixtures – pytest fixtures for propagation tests.

Enable in ``conftest.py``::

    pytest_plugins = ["traceability.testing.fixtures"]
"""
from traceability.testing.fixtures.correlation import TEST_CORRELATION_ID, correlation_fixture
from traceability.testing.fixtures.spans import span_recorder

__all__ = ["TEST_CORRELATION_ID", "correlation_fixture", "span_recorder"]
