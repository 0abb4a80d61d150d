"""Unit tests for SpanLifecycle, Span and the observer registry."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from traceability.config.settings import TraceabilityOptions
from traceability.observability.tracing import (
    NOOP_SPAN,
    LegacyTraceId,
    SpanKind,
    SpanLifecycle,
    SpanObserverRegistry,
    SpanStatus,
    TraceContext,
    current_span,
)
from traceability.observability.tracing import codec
from traceability.testing import RecordingSpanObserver

REMOTE = codec.try_parse("00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-01")


class _StepClock:
    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        self.now += timedelta(milliseconds=5)
        return self.now


@pytest.fixture
def recorder() -> RecordingSpanObserver:
    return RecordingSpanObserver()


@pytest.fixture
def lifecycle(recorder: RecordingSpanObserver) -> SpanLifecycle:
    registry = SpanObserverRegistry()
    registry.add(recorder)
    return SpanLifecycle(TraceabilityOptions(), registry=registry, clock=_StepClock())


# ---------------------------------------------------------------------------
# Creation gating
# ---------------------------------------------------------------------------


class TestSpanGating:
    def test_noop_without_observers(self) -> None:
        lc = SpanLifecycle(TraceabilityOptions(), registry=SpanObserverRegistry())
        assert lc.is_enabled() is False
        span = lc.start("work")
        assert span is NOOP_SPAN
        assert current_span() is None

    def test_noop_when_disabled(self, recorder: RecordingSpanObserver) -> None:
        registry = SpanObserverRegistry()
        registry.add(recorder)
        lc = SpanLifecycle(TraceabilityOptions(span_creation_enabled=False), registry=registry)
        assert lc.start("work") is NOOP_SPAN
        assert recorder.started == []

    def test_noop_span_is_inert(self) -> None:
        NOOP_SPAN.set_tag("k", "v")
        NOOP_SPAN.rename("x")
        NOOP_SPAN.end()
        assert NOOP_SPAN.tags == {}
        assert NOOP_SPAN.is_recording is False

    def test_default_registry_used(self, span_recorder: RecordingSpanObserver) -> None:
        lc = SpanLifecycle()
        with lc.scope("via-default"):
            pass
        span_recorder.assert_span_stopped("via-default")


# ---------------------------------------------------------------------------
# Hierarchy
# ---------------------------------------------------------------------------


class TestSpanHierarchy:
    def test_root_span(self, lifecycle: SpanLifecycle) -> None:
        span = lifecycle.start("root")
        assert isinstance(span.context, TraceContext)
        assert span.parent is None
        assert span.parent_span_id is None
        assert current_span() is span
        lifecycle.stop(span)
        assert current_span() is None

    def test_child_shares_trace_id(self, lifecycle: SpanLifecycle) -> None:
        with lifecycle.scope("parent") as parent:
            with lifecycle.scope("child") as child:
                assert child.parent is parent
                assert child.trace_id == parent.trace_id
                assert child.parent_span_id == parent.span_id
                assert child.span_id != parent.span_id

    def test_remote_parent(self, lifecycle: SpanLifecycle) -> None:
        assert REMOTE is not None
        span = lifecycle.start("server", SpanKind.SERVER, parent=REMOTE)
        assert span.trace_id == REMOTE.trace_id
        assert span.parent_span_id == REMOTE.span_id
        assert span.parent is None
        lifecycle.stop(span)

    def test_stop_restores_previous(self, lifecycle: SpanLifecycle) -> None:
        outer = lifecycle.start("outer")
        inner = lifecycle.start("inner")
        assert current_span() is inner
        lifecycle.stop(inner)
        assert current_span() is outer
        lifecycle.stop(outer)
        assert current_span() is None

    def test_out_of_order_stop_keeps_current(self, lifecycle: SpanLifecycle) -> None:
        outer = lifecycle.start("outer")
        inner = lifecycle.start("inner")
        lifecycle.stop(outer)
        assert current_span() is inner
        lifecycle.stop(inner)
        assert current_span() is None

    def test_stop_twice_notifies_once(self, lifecycle: SpanLifecycle, recorder: RecordingSpanObserver) -> None:
        span = lifecycle.start("once")
        lifecycle.stop(span)
        lifecycle.stop(span)
        assert len(recorder.stopped) == 1

    def test_concurrent_tasks_have_separate_current_span(self, lifecycle: SpanLifecycle) -> None:
        async def worker(name: str) -> tuple[str, str | None]:
            async with lifecycle.async_scope(name) as span:
                await asyncio.sleep(0)
                current = current_span()
                return name, current.name if current else None

        async def run() -> list[tuple[str, str | None]]:
            return await asyncio.gather(*(worker(f"w{i}") for i in range(10)))

        assert all(name == seen for name, seen in asyncio.run(run()))


class TestHierarchicalIds:
    @pytest.fixture
    def legacy(self, recorder: RecordingSpanObserver) -> SpanLifecycle:
        registry = SpanObserverRegistry()
        registry.add(recorder)
        return SpanLifecycle(TraceabilityOptions(id_format="hierarchical"), registry=registry)

    def test_root_is_legacy(self, legacy: SpanLifecycle) -> None:
        with legacy.scope("root") as span:
            assert isinstance(span.context, LegacyTraceId)
            assert span.context.value.startswith("|")

    def test_children_extend_parent_id(self, legacy: SpanLifecycle) -> None:
        with legacy.scope("root") as root:
            with legacy.scope("child") as child:
                assert isinstance(child.context, LegacyTraceId)
                assert child.context.value.startswith(root.context.value)
                assert child.trace_id == root.trace_id
                assert child.parent_span_id == root.span_id

    def test_remote_w3c_parent_seeds_root(self, legacy: SpanLifecycle) -> None:
        assert REMOTE is not None
        with legacy.scope("server", parent=REMOTE) as span:
            assert span.context.value.startswith(f"|{REMOTE.trace_id}.")
            assert span.trace_id == REMOTE.trace_id

    def test_legacy_parent_in_w3c_mode(self, lifecycle: SpanLifecycle) -> None:
        with lifecycle.scope("child", parent=LegacyTraceId("|abc.")) as span:
            assert isinstance(span.context, LegacyTraceId)
            assert span.context.value.startswith("|abc.")


# ---------------------------------------------------------------------------
# Tags, status and errors
# ---------------------------------------------------------------------------


class TestSpanTagsAndErrors:
    def test_initial_and_added_tags(self, lifecycle: SpanLifecycle) -> None:
        span = lifecycle.start("tagged", tags={"a": 1, "skip": None})
        lifecycle.add_tag(span, "flag", True)
        assert span.tags == {"a": "1", "flag": "true"}
        lifecycle.stop(span)

    def test_ended_span_is_frozen(self, lifecycle: SpanLifecycle) -> None:
        span = lifecycle.start("frozen")
        lifecycle.stop(span)
        span.set_tag("late", "x")
        span.rename("renamed")
        assert "late" not in span.tags
        assert span.name == "frozen"

    def test_duration(self, lifecycle: SpanLifecycle) -> None:
        span = lifecycle.start("timed")
        assert span.duration is None
        lifecycle.stop(span)
        assert span.duration == timedelta(milliseconds=5)

    def test_scope_records_and_reraises(self, lifecycle: SpanLifecycle, recorder: RecordingSpanObserver) -> None:
        error = ValueError("bad input")
        with pytest.raises(ValueError) as exc_info:
            with lifecycle.scope("failing"):
                raise error
        assert exc_info.value is error
        span = recorder.stopped[-1]
        assert span.status is SpanStatus.ERROR
        assert span.tags["error"] == "true"
        assert span.tags["error.type"] == "ValueError"
        assert span.tags["error.message"] == "bad input"
        assert current_span() is None

    def test_span_context_manager(self, lifecycle: SpanLifecycle, recorder: RecordingSpanObserver) -> None:
        with pytest.raises(KeyError):
            with lifecycle.start("manual"):
                raise KeyError("k")
        assert recorder.stopped[-1].status is SpanStatus.ERROR

    def test_end_via_span(self, lifecycle: SpanLifecycle) -> None:
        span = lifecycle.start("ended")
        span.end()
        assert span.is_ended
        assert current_span() is None


# ---------------------------------------------------------------------------
# Observer registry
# ---------------------------------------------------------------------------


class _Exploding:
    def on_start(self, span: object) -> None:
        raise RuntimeError("observer failed")

    def on_stop(self, span: object) -> None:
        raise RuntimeError("observer failed")


class TestSpanObserverRegistry:
    def test_add_is_idempotent_and_remove(self, recorder: RecordingSpanObserver) -> None:
        registry = SpanObserverRegistry()
        registry.add(recorder)
        registry.add(recorder)
        assert registry.observers == (recorder,)
        registry.remove(recorder)
        assert registry.has_observers() is False

    def test_failing_observer_does_not_break_others(self, recorder: RecordingSpanObserver) -> None:
        registry = SpanObserverRegistry()
        registry.add(_Exploding())
        registry.add(recorder)
        lc = SpanLifecycle(TraceabilityOptions(), registry=registry)
        with lc.scope("survives"):
            pass
        recorder.assert_span_stopped("survives")

    def test_clear(self, recorder: RecordingSpanObserver) -> None:
        registry = SpanObserverRegistry()
        registry.add(recorder)
        registry.clear()
        assert registry.observers == ()
