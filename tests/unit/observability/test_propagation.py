"""Unit tests for the inbound/outbound interceptors and @correlated_handler."""

from __future__ import annotations

import asyncio
import dataclasses
from typing import Any

import pytest

from traceability.config.settings import TraceabilityOptions, configure_options
from traceability.observability.correlation import CorrelationContext
from traceability.observability.propagation import (
    InboundInterceptor,
    OutboundInterceptor,
    correlated_handler,
)
from traceability.observability.tracing import (
    LegacyTraceId,
    SpanKind,
    SpanLifecycle,
    SpanStatus,
    current_span,
    codec,
)
from traceability.testing import RecordingSpanObserver

TRACEPARENT = "00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01"
TRACE_ID = "4bf92f3577b34da6a3ce929d0e0e4736"


class _ReadOnlyHeaders(dict):
    def __setitem__(self, key: str, value: str) -> None:
        raise RuntimeError("headers already sent")


# ---------------------------------------------------------------------------
# InboundInterceptor
# ---------------------------------------------------------------------------


class TestInboundInterceptor:
    def test_adopts_header_and_restores_context(self) -> None:
        inbound = InboundInterceptor()
        scope = inbound.begin({"X-Correlation-Id": "abc"})
        assert CorrelationContext.get() == "abc"
        assert scope.correlation_id == "abc"
        inbound.complete(scope, status_code=200)
        assert CorrelationContext.get() is None

    def test_generates_when_missing(self) -> None:
        inbound = InboundInterceptor()
        with inbound.unit_of_work({}) as scope:
            assert CorrelationContext.get() == scope.correlation_id
            assert scope.decision.source == "generated"

    def test_server_span_parented_on_traceparent(self, span_recorder: RecordingSpanObserver) -> None:
        inbound = InboundInterceptor()
        with inbound.unit_of_work({"traceparent": TRACEPARENT}) as scope:
            assert current_span() is scope.span
        span = span_recorder.stopped[-1]
        assert span.kind is SpanKind.SERVER
        assert span.name == "HTTP Request"
        assert span.trace_id == TRACE_ID
        assert span.parent_span_id == "00f067aa0ba902b7"

    def test_broken_traceparent_keeps_correlation(self, span_recorder: RecordingSpanObserver) -> None:
        inbound = InboundInterceptor()
        with inbound.unit_of_work({"X-Correlation-Id": "keep", "traceparent": "junk"}) as scope:
            assert scope.correlation_id == "keep"
        span = span_recorder.stopped[-1]
        assert span.parent_span_id is None
        assert span.trace_id != TRACE_ID

    def test_status_code_tag(self, span_recorder: RecordingSpanObserver) -> None:
        inbound = InboundInterceptor()
        scope = inbound.begin({})
        inbound.complete(scope, status_code=404)
        assert span_recorder.stopped[-1].tags["http.status_code"] == "404"

    def test_fail_records_error(self, span_recorder: RecordingSpanObserver) -> None:
        inbound = InboundInterceptor()
        with pytest.raises(RuntimeError, match="boom"):
            with inbound.unit_of_work({"X-Correlation-Id": "abc"}):
                raise RuntimeError("boom")
        span = span_recorder.stopped[-1]
        assert span.status is SpanStatus.ERROR
        assert span.tags["error.type"] == "RuntimeError"
        assert CorrelationContext.get() is None

    def test_complete_is_idempotent(self, span_recorder: RecordingSpanObserver) -> None:
        inbound = InboundInterceptor()
        scope = inbound.begin({})
        inbound.complete(scope)
        inbound.complete(scope)
        inbound.fail(scope, ValueError("late"))
        assert len(span_recorder.stopped) == 1
        assert span_recorder.stopped[0].status is SpanStatus.UNSET

    def test_reentry_keeps_ambient_id(self) -> None:
        inbound = InboundInterceptor()
        with inbound.unit_of_work({"X-Correlation-Id": "outer"}):
            with inbound.unit_of_work({}) as inner:
                assert inner.correlation_id == "outer"
                assert inner.decision.source == "ambient"
            assert CorrelationContext.get() == "outer"

    def test_reentry_nests_spans(self, span_recorder: RecordingSpanObserver) -> None:
        inbound = InboundInterceptor()
        with inbound.unit_of_work({}, name="outer") as outer:
            with inbound.unit_of_work({}, name="inner") as inner:
                assert inner.span.parent is outer.span

    def test_injected_options(self) -> None:
        inbound = InboundInterceptor(TraceabilityOptions(header_name="X-Request-Id"))
        with inbound.unit_of_work({"X-Request-Id": "rid", "X-Correlation-Id": "cid"}) as scope:
            assert scope.correlation_id == "rid"
            assert inbound.response_header(scope) == ("X-Request-Id", "rid")

    def test_global_options_read_per_request(self) -> None:
        inbound = InboundInterceptor()
        configure_options(TraceabilityOptions(always_generate_new=True))
        with inbound.unit_of_work({"X-Correlation-Id": "abc"}) as scope:
            assert scope.correlation_id != "abc"

    def test_write_response_header(self) -> None:
        inbound = InboundInterceptor()
        with inbound.unit_of_work({"X-Correlation-Id": "abc"}) as scope:
            headers: dict[str, str] = {}
            assert inbound.write_response_header(scope, headers) is True
            assert headers == {"X-Correlation-Id": "abc"}
            assert inbound.write_response_header(scope, _ReadOnlyHeaders()) is False

    def test_concurrent_requests_are_isolated(self) -> None:
        inbound = InboundInterceptor()

        async def request(cid: str) -> tuple[str, str | None]:
            with inbound.unit_of_work({"X-Correlation-Id": cid}):
                await asyncio.sleep(0)
                return cid, CorrelationContext.get()

        async def run() -> list[tuple[str, str | None]]:
            return await asyncio.gather(*(request(f"req-{i}") for i in range(25)))

        assert all(sent == seen for sent, seen in asyncio.run(run()))


# ---------------------------------------------------------------------------
# OutboundInterceptor
# ---------------------------------------------------------------------------


class TestOutboundInterceptor:
    def test_no_correlation_header_without_ambient_id(self) -> None:
        headers: dict[str, str] = {}
        scope = OutboundInterceptor().begin(headers)
        assert headers == {}
        assert scope.correlation_id is None
        assert CorrelationContext.get() is None

    def test_copies_ambient_id(self, correlation_fixture: str) -> None:
        headers: dict[str, str] = {"x-correlation-id": "stale"}
        OutboundInterceptor().begin(headers)
        assert headers == {"X-Correlation-Id": correlation_fixture}

    def test_custom_header_name(self, correlation_fixture: str) -> None:
        headers: dict[str, str] = {}
        OutboundInterceptor(TraceabilityOptions(header_name="X-Request-Id")).begin(headers)
        assert headers == {"X-Request-Id": correlation_fixture}

    def test_client_span_and_traceparent(self, span_recorder: RecordingSpanObserver) -> None:
        lifecycle = SpanLifecycle()
        outbound = OutboundInterceptor()
        with lifecycle.scope("request", SpanKind.SERVER) as server:
            headers: dict[str, str] = {}
            scope = outbound.begin(headers)
            assert scope.span.kind is SpanKind.CLIENT
            assert scope.span.parent is server
            assert headers["traceparent"] == codec.serialize(scope.span.context)
            assert scope.traceparent == headers["traceparent"]
            outbound.complete(scope, status_code=201)
            assert current_span() is server
        client = span_recorder.by_kind(SpanKind.CLIENT)[0]
        assert client.name == "HTTP Client"
        assert client.tags["http.status_code"] == "201"

    def test_traceparent_from_current_span_when_client_spans_off(
        self, span_recorder: RecordingSpanObserver
    ) -> None:
        outbound = OutboundInterceptor(create_spans=False)
        with SpanLifecycle().scope("request") as server:
            headers: dict[str, str] = {}
            scope = outbound.begin(headers)
            assert scope.span.is_recording is False
            assert headers["traceparent"] == codec.serialize(server.context)

    def test_no_traceparent_without_spans(self) -> None:
        headers: dict[str, str] = {}
        OutboundInterceptor().begin(headers)
        assert "traceparent" not in headers

    def test_legacy_context_never_emitted(self, span_recorder: RecordingSpanObserver) -> None:
        opts = TraceabilityOptions(id_format="hierarchical")
        outbound = OutboundInterceptor(opts)
        with SpanLifecycle(opts).scope("request") as server:
            assert isinstance(server.context, LegacyTraceId)
            headers: dict[str, str] = {}
            scope = outbound.begin(headers)
            assert "traceparent" not in headers
            assert scope.traceparent is None

    def test_header_write_failure_is_swallowed(self, correlation_fixture: str) -> None:
        scope = OutboundInterceptor().begin(_ReadOnlyHeaders())
        assert scope.correlation_id == correlation_fixture

    def test_fail_records_error(self, span_recorder: RecordingSpanObserver) -> None:
        outbound = OutboundInterceptor()
        scope = outbound.begin({})
        outbound.fail(scope, ConnectionError("refused"))
        span = span_recorder.stopped[-1]
        assert span.status is SpanStatus.ERROR
        assert span.tags["error.type"] == "ConnectionError"

    def test_round_trip_through_inbound(self, span_recorder: RecordingSpanObserver) -> None:
        inbound = InboundInterceptor()
        outbound = OutboundInterceptor()
        with inbound.unit_of_work({"X-Correlation-Id": "hop-1", "traceparent": TRACEPARENT}):
            wire: dict[str, str] = {}
            sent = outbound.begin(wire)
            outbound.complete(sent)

        with inbound.unit_of_work(wire) as downstream:
            assert downstream.correlation_id == "hop-1"
            assert downstream.span.trace_id == TRACE_ID
            assert downstream.span.parent_span_id == sent.span.span_id


# ---------------------------------------------------------------------------
# @correlated_handler
# ---------------------------------------------------------------------------


@dataclasses.dataclass
class _Message:
    body: str
    headers: dict[str, str]


class TestCorrelatedHandler:
    def test_sync_handler_from_message_headers(self) -> None:
        seen: list[str | None] = []

        @correlated_handler
        def handle(message: _Message) -> str:
            seen.append(CorrelationContext.get())
            return message.body.upper()

        assert handle(_Message("hi", {"X-Correlation-Id": "msg-1"})) == "HI"
        assert seen == ["msg-1"]
        assert CorrelationContext.get() is None

    def test_async_handler(self, span_recorder: RecordingSpanObserver) -> None:
        @correlated_handler(name="orders.consume")
        async def handle(message: _Message) -> str | None:
            await asyncio.sleep(0)
            return CorrelationContext.get()

        result = asyncio.run(handle(_Message("x", {"X-Correlation-Id": "msg-2", "traceparent": TRACEPARENT})))
        assert result == "msg-2"
        span = span_recorder.by_name("orders.consume")[0]
        assert span.trace_id == TRACE_ID

    def test_mapping_argument_and_method(self) -> None:
        class Consumer:
            @correlated_handler
            def handle(self, headers: dict[str, Any]) -> str | None:
                return CorrelationContext.get()

        assert Consumer().handle({"X-Correlation-Id": "msg-3"}) == "msg-3"

    def test_custom_getter(self) -> None:
        @correlated_handler(headers=lambda envelope: envelope["meta"])
        def handle(envelope: dict[str, Any]) -> str | None:
            return CorrelationContext.get()

        assert handle({"meta": {"X-Correlation-Id": "msg-4"}}) == "msg-4"

    def test_generates_without_headers(self) -> None:
        @correlated_handler
        def handle() -> str | None:
            return CorrelationContext.get()

        assert handle() is not None

    def test_exception_reraised_and_recorded(self, span_recorder: RecordingSpanObserver) -> None:
        @correlated_handler
        def handle(message: _Message) -> None:
            raise LookupError("missing order")

        with pytest.raises(LookupError, match="missing order"):
            handle(_Message("x", {}))
        assert span_recorder.stopped[-1].status is SpanStatus.ERROR
        assert CorrelationContext.get() is None
