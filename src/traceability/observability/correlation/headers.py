"""Observability – header extraction and replacement.

Carriers understood:

* plain ``dict``/``Mapping[str, str]`` (matched case-insensitively),
* case-insensitive multi-value containers such as ``httpx.Headers`` and
  Starlette ``Headers``/``MutableHeaders``,
* raw ASGI header lists ``list[tuple[bytes, bytes]]``.
"""
from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any

_ENCODING = "latin-1"


def _text(value: Any) -> str:
    return value.decode(_ENCODING) if isinstance(value, (bytes, bytearray)) else str(value)


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = _text(value).strip()
    return text or None


def get_header(headers: Any, name: str) -> str | None:
    """Return the first value of header *name*, or ``None`` when absent or blank."""
    if headers is None:
        return None
    wanted = name.lower()

    if isinstance(headers, (list, tuple)):
        for key, value in headers:
            if _text(key).lower() == wanted:
                return _clean(value)
        return None

    if hasattr(headers, "get_list"):
        values = headers.get_list(name)
    elif hasattr(headers, "getlist"):
        values = headers.getlist(name)
    elif isinstance(headers, Mapping):
        values = [v for k, v in headers.items() if _text(k).lower() == wanted]
    else:
        raise TypeError(f"unsupported header carrier: {type(headers).__name__}")
    return _clean(values[0]) if values else None


def set_header(headers: Any, name: str, value: str) -> None:
    """Write header *name*, replacing every existing occurrence."""
    wanted = name.lower()

    if isinstance(headers, list):
        headers[:] = [(k, v) for k, v in headers if _text(k).lower() != wanted]
        headers.append((wanted.encode(_ENCODING), value.encode(_ENCODING)))
        return

    if isinstance(headers, dict):
        for key in [k for k in headers if _text(k).lower() == wanted]:
            del headers[key]
        headers[name] = value
        return

    if isinstance(headers, MutableMapping) or hasattr(headers, "__setitem__"):
        # httpx.Headers and Starlette MutableHeaders drop duplicates on assignment
        headers[name] = value
        return

    raise TypeError(f"header carrier is read-only: {type(headers).__name__}")


__all__ = ["get_header", "set_header"]
