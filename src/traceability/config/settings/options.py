"""Config settings – TraceabilityOptions."""
from __future__ import annotations

import dataclasses
import re

from traceability.config.settings.base import Settings
from traceability.config.validation import InvalidSettingValueError

DEFAULT_HEADER_NAME = "X-Correlation-Id"
TRACEPARENT_HEADER = "traceparent"
TRACESTATE_HEADER = "tracestate"

ID_FORMAT_W3C = "w3c"
ID_FORMAT_HIERARCHICAL = "hierarchical"

_ID_FORMATS = frozenset({ID_FORMAT_W3C, ID_FORMAT_HIERARCHICAL})
_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# RFC 9110 token characters
_HEADER_TOKEN_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


@dataclasses.dataclass(frozen=True)
class TraceabilityOptions(Settings):
    """Immutable options snapshot consumed by the propagation core.

    ``id_format="hierarchical"`` is the legacy compatibility mode: spans get
    hierarchical ids that are used for local parenting only and are never
    written as ``traceparent``.
    """

    _prefix = "TRACEABILITY"

    header_name: str = DEFAULT_HEADER_NAME
    always_generate_new: bool = False
    validate_format: bool = False
    span_creation_enabled: bool = True
    id_format: str = ID_FORMAT_W3C
    source: str | None = None
    use_entry_point_fallback: bool = True
    minimum_log_level: str = "INFO"
    log_include_timestamp: bool = True
    log_include_level: bool = True
    log_include_source: bool = True
    log_include_correlation_id: bool = True
    log_include_message: bool = True
    log_include_data: bool = True
    log_include_exception: bool = True

    def _validate(self) -> None:
        if not self.header_name or not self.header_name.strip():
            raise InvalidSettingValueError("header_name", self.header_name, "must not be blank")
        if not _HEADER_TOKEN_RE.fullmatch(self.header_name):
            raise InvalidSettingValueError(
                "header_name", self.header_name, "must be a valid HTTP header token"
            )
        if self.header_name.lower() in (TRACEPARENT_HEADER, TRACESTATE_HEADER):
            raise InvalidSettingValueError(
                "header_name", self.header_name, "is reserved for trace-context propagation"
            )
        if self.id_format not in _ID_FORMATS:
            raise InvalidSettingValueError(
                "id_format", self.id_format, f"expected one of {sorted(_ID_FORMATS)}"
            )
        if self.minimum_log_level.upper() not in _LOG_LEVELS:
            raise InvalidSettingValueError(
                "minimum_log_level", self.minimum_log_level, f"expected one of {sorted(_LOG_LEVELS)}"
            )

    @property
    def hierarchical_ids(self) -> bool:
        return self.id_format == ID_FORMAT_HIERARCHICAL


__all__ = [
    "DEFAULT_HEADER_NAME",
    "ID_FORMAT_HIERARCHICAL",
    "ID_FORMAT_W3C",
    "TRACEPARENT_HEADER",
    "TRACESTATE_HEADER",
    "TraceabilityOptions",
]
