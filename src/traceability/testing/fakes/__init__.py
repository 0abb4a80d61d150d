"""Testing fakes – in-memory doubles."""
from traceability.testing.fakes.spans import RecordingSpanObserver

__all__ = ["RecordingSpanObserver"]
