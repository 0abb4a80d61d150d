"""Observability – service name resolution for the ``source`` log field."""
from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping

from traceability.config.settings import TraceabilityOptions
from traceability.config.validation import MissingRequiredSettingError

SERVICE_NAME_ENV = "TRACEABILITY_SERVICENAME"
MAX_SOURCE_LENGTH = 100
UNKNOWN_SOURCE = "Unknown"


def sanitize_source(value: str | None) -> str:
    """Reduce *value* to ``[A-Za-z0-9._-]``; whitespace becomes ``_``."""
    if not value or not value.strip():
        return UNKNOWN_SOURCE
    chars: list[str] = []
    for ch in value.strip():
        if ch.isspace():
            chars.append("_")
        elif ch.isascii() and (ch.isalnum() or ch in "-_."):
            chars.append(ch)
    cleaned = "".join(chars)[:MAX_SOURCE_LENGTH]
    return cleaned or UNKNOWN_SOURCE


def entry_point_name() -> str | None:
    """Name of the running program, as ``python -m pkg`` or ``python app.py`` shows it."""
    main = sys.modules.get("__main__")
    spec = getattr(main, "__spec__", None)
    if spec is not None and spec.name:
        name = spec.name
        return name[: -len(".__main__")] if name.endswith(".__main__") else name
    argv0 = sys.argv[0] if sys.argv else ""
    if not argv0 or argv0 == "-c":
        return None
    return Path(argv0).stem or None


def resolve_service_name(
    source: str | None = None,
    options: TraceabilityOptions | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the service name.

    Order: explicit *source*, ``options.source``, the
    ``TRACEABILITY_SERVICENAME`` variable, then the entry-point name when
    ``options.use_entry_point_fallback`` is on.

    Raises
    ------
    MissingRequiredSettingError
        When none of the above yields a name.
    """
    options = options or TraceabilityOptions()
    env = os.environ if environ is None else environ

    for candidate in (source, options.source, env.get(SERVICE_NAME_ENV)):
        if candidate and candidate.strip():
            return sanitize_source(candidate)

    if options.use_entry_point_fallback:
        fallback = entry_point_name()
        if fallback:
            return sanitize_source(fallback)

    raise MissingRequiredSettingError(
        "source",
        hint=f"pass source=..., set TraceabilityOptions.source or export {SERVICE_NAME_ENV}",
    )


__all__ = [
    "MAX_SOURCE_LENGTH",
    "SERVICE_NAME_ENV",
    "UNKNOWN_SOURCE",
    "entry_point_name",
    "resolve_service_name",
    "sanitize_source",
]
