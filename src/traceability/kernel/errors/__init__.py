"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── ApplicationError     (application.py)
    │   └── ConfigError      (traceability.config.validation)
    └── InfrastructureError  (infrastructure.py)
        ├── ExternalServiceError
        └── TimeoutError
"""

from traceability.kernel.errors.application import ApplicationError
from traceability.kernel.errors.base import BaseError
from traceability.kernel.errors.infrastructure import (
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
