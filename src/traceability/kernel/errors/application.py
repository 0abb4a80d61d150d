"""Application-layer errors."""

from __future__ import annotations

from traceability.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Misuse or misconfiguration detected by the library itself."""

    default_code = "application_error"


__all__ = ["ApplicationError"]
