"""Observability – standard HTTP span tags.

Tag names follow the OpenTelemetry HTTP conventions, so server and client
spans look the same whichever interceptor produced them.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from traceability.observability.tracing.span import Span

HTTP_METHOD = "http.method"
HTTP_URL = "http.url"
HTTP_SCHEME = "http.scheme"
HTTP_HOST = "http.host"
HTTP_USER_AGENT = "http.user_agent"
HTTP_STATUS_CODE = "http.status_code"
HTTP_REQUEST_CONTENT_LENGTH = "http.request_content_length"
HTTP_REQUEST_CONTENT_TYPE = "http.request_content_type"
HTTP_RESPONSE_CONTENT_LENGTH = "http.response_content_length"
ERROR = "error"
ERROR_TYPE = "error.type"
ERROR_MESSAGE = "error.message"

SERVER_SPAN_NAME = "HTTP Request"
CLIENT_SPAN_NAME = "HTTP Client"


class HttpTagProvider:
    """Apply request, response and error tags to a span."""

    def add_request_tags(
        self,
        span: "Span",
        *,
        method: str | None = None,
        url: str | None = None,
        scheme: str | None = None,
        host: str | None = None,
        user_agent: str | None = None,
        content_length: int | None = None,
        content_type: str | None = None,
    ) -> None:
        span.set_tag(HTTP_METHOD, method)
        span.set_tag(HTTP_URL, url)
        span.set_tag(HTTP_SCHEME, scheme)
        span.set_tag(HTTP_HOST, host)
        span.set_tag(HTTP_USER_AGENT, user_agent or None)
        if content_length is not None and content_length > 0:
            span.set_tag(HTTP_REQUEST_CONTENT_LENGTH, content_length)
        span.set_tag(HTTP_REQUEST_CONTENT_TYPE, content_type or None)

    def add_response_tags(
        self,
        span: "Span",
        *,
        status_code: int | None = None,
        content_length: int | None = None,
    ) -> None:
        span.set_tag(HTTP_STATUS_CODE, status_code)
        if content_length is not None:
            span.set_tag(HTTP_RESPONSE_CONTENT_LENGTH, content_length)


__all__ = [
    "CLIENT_SPAN_NAME",
    "ERROR",
    "ERROR_MESSAGE",
    "ERROR_TYPE",
    "HTTP_HOST",
    "HTTP_METHOD",
    "HTTP_REQUEST_CONTENT_LENGTH",
    "HTTP_REQUEST_CONTENT_TYPE",
    "HTTP_RESPONSE_CONTENT_LENGTH",
    "HTTP_SCHEME",
    "HTTP_STATUS_CODE",
    "HTTP_URL",
    "HTTP_USER_AGENT",
    "HttpTagProvider",
    "SERVER_SPAN_NAME",
]
