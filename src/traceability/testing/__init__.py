"""Testing support – span recorder, fixtures and Hypothesis strategies.

Import in your ``conftest.py``::

    pytest_plugins = ["traceability.testing.fixtures"]
"""

from traceability.testing.fakes import RecordingSpanObserver
from traceability.testing.generators import correlation_id_strategy, traceparent_strategy

__all__ = ["RecordingSpanObserver", "correlation_id_strategy", "traceparent_strategy"]
