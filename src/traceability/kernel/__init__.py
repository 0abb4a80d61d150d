"""Kernel – error hierarchy shared by every layer."""
from traceability.kernel.errors import (
    ApplicationError,
    BaseError,
    ExternalServiceError,
    InfrastructureError,
    TimeoutError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "ExternalServiceError",
    "InfrastructureError",
    "TimeoutError",
]
