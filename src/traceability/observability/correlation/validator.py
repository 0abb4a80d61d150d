"""Observability – CorrelationIdValidator."""
from __future__ import annotations

import re

from traceability.config.settings import TraceabilityOptions

MAX_CORRELATION_ID_LENGTH = 128

_ALLOWED_RE = re.compile(r"[A-Za-z0-9_-]+")


class CorrelationIdValidator:
    """Accept or reject an inbound correlation-id candidate.

    With ``options.validate_format`` off any non-empty string passes. With it
    on, the id must be at most 128 characters of ``[A-Za-z0-9_-]``, which
    covers GUIDs with or without hyphens and W3C trace ids.
    """

    def validate(self, candidate: str | None, options: TraceabilityOptions) -> bool:
        if not candidate:
            return False
        if not options.validate_format:
            return True
        if len(candidate) > MAX_CORRELATION_ID_LENGTH:
            return False
        return _ALLOWED_RE.fullmatch(candidate) is not None


__all__ = ["CorrelationIdValidator", "MAX_CORRELATION_ID_LENGTH"]
