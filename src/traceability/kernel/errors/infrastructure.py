"""Infrastructure errors raised by the outbound HTTP client."""

from __future__ import annotations

from typing import Any

from traceability.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """I/O failure outside the propagation core."""

    default_code = "infrastructure_error"


class ExternalServiceError(InfrastructureError):
    """A downstream service answered with an error or could not be reached."""

    default_code = "external_service_error"

    def __init__(
        self,
        service: str,
        message: str | None = None,
        *,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Call to '{service}' failed", **kwargs)
        self.service = service
        self.status_code = status_code


class TimeoutError(InfrastructureError):  # noqa: A001
    """A downstream call exceeded its deadline."""

    default_code = "infrastructure_timeout"


__all__ = ["ExternalServiceError", "InfrastructureError", "TimeoutError"]
