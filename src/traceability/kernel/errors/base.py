"""Root error class for the traceability error hierarchy."""

from __future__ import annotations


class BaseError(Exception):
    """Root of the error hierarchy.

    Args:
        message: Human-readable description; also what ``str()`` returns, so
            span ``error.message`` tags stay readable.
        code: Machine-readable slug (defaults to ``default_code``).
        cause: Original exception that triggered this error.
    """

    default_code: str = "traceability_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


__all__ = ["BaseError"]
