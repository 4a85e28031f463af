# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import threading

from bevelnet.deferred import Broadcast, DeferredSingle, DeferredStream


def test_deferred_single_resolves_value_for_blocking_wait():
    assert DeferredSingle.of("value").await_blocking() == "value"


def test_deferred_single_empty_completion_returns_none():
    deferred = DeferredSingle(lambda sink: sink.success())
    assert deferred.await_blocking(timeout=5) is None
    assert deferred.done() is True


def test_deferred_single_failure_does_not_raise_from_blocking_wait(caplog):
    deferred = DeferredSingle.failed(RuntimeError("boom"))
    assert deferred.await_blocking() is None
    assert "boom" in caplog.text


def test_deferred_single_is_lazy_and_runs_source_once():
    calls = []

    def source(sink):
        calls.append(1)
        sink.success("done")

    deferred = DeferredSingle(source, spawn=False)
    assert calls == []

    deferred.trigger()
    deferred.trigger()
    assert deferred.await_blocking() == "done"
    assert len(calls) == 1


def test_deferred_single_ignores_second_resolution():
    def source(sink):
        sink.success("first")
        sink.success("second")
        sink.error(RuntimeError("late"))

    deferred = DeferredSingle(source)
    assert deferred.await_blocking(timeout=5) == "first"


def test_deferred_single_source_exception_fails_result():
    def source(sink):  # noqa: ARG001
        raise ValueError("bad source")

    errors = []
    deferred = DeferredSingle(source, spawn=False)
    deferred.on_resolve(lambda value: errors.append(("value", value)), errors.append)
    assert len(errors) == 1
    assert isinstance(errors[0], ValueError)
    assert deferred.await_blocking() is None


def test_deferred_single_callback_runs_once_on_resolving_thread():
    gate = threading.Event()
    finished = threading.Event()
    seen = []

    def source(sink):
        gate.wait(5)
        sink.success("async")

    deferred = DeferredSingle(source)

    def on_value(value):
        seen.append((value, threading.get_ident()))
        finished.set()

    deferred.on_resolve(on_value)
    gate.set()
    assert finished.wait(5)
    assert deferred.await_blocking(timeout=5) == "async"
    assert len(seen) == 1
    assert seen[0][0] == "async"
    assert seen[0][1] != threading.get_ident()


def test_deferred_single_callback_after_resolution_runs_immediately():
    deferred = DeferredSingle.of(42)
    deferred.trigger()
    seen = []
    deferred.on_resolve(seen.append)
    assert seen == [42]


def test_deferred_single_error_callback_receives_exception():
    exc = ConnectionError("refused")
    seen = []
    DeferredSingle.failed(exc).on_resolve(lambda _: seen.append("value"), seen.append)
    assert seen == [exc]


def test_deferred_single_wait_timeout_returns_none():
    held = []
    deferred = DeferredSingle(held.append, spawn=False)
    assert deferred.await_blocking(timeout=0.05) is None
    assert deferred.done() is False
    held[0].success("late")
    assert deferred.await_blocking(timeout=1) == "late"


def test_deferred_stream_collects_values_in_order():
    def source(sink):
        for value in (1, 2, 3):
            sink.emit(value)
        sink.complete()

    assert DeferredStream(source).await_blocking(timeout=5) == [1, 2, 3]


def test_deferred_stream_replays_values_to_late_subscriber():
    def source(sink):
        sink.emit("a")
        sink.emit("b")
        sink.complete()

    stream = DeferredStream(source, spawn=False)
    stream.trigger()
    events = []
    stream.on_resolve(events.append, lambda: events.append("complete"))
    assert events == ["a", "b", "complete"]


def test_deferred_stream_failure_notifies_error_once():
    def source(sink):
        sink.emit("partial")
        sink.error(RuntimeError("broken"))
        sink.complete()
        sink.emit("ignored")

    events = []
    stream = DeferredStream(source, spawn=False)
    stream.on_resolve(events.append, lambda: events.append("complete"), lambda exc: events.append(str(exc)))
    assert events == ["partial", "broken"]
    assert stream.await_blocking() is None


def test_broadcast_delivers_only_values_after_subscription():
    broadcast = Broadcast()
    broadcast.emit("before")

    stream = broadcast.stream()
    received = []
    completed = []
    stream.on_resolve(received.append, lambda: completed.append(True))
    assert broadcast.subscriber_count() == 1

    broadcast.emit("one")
    broadcast.emit("two")
    broadcast.complete()

    assert received == ["one", "two"]
    assert completed == [True]
    assert stream.await_blocking() == ["one", "two"]


def test_broadcast_multicasts_and_fails_subscribers():
    broadcast = Broadcast()
    first, second = broadcast.stream(), broadcast.stream()
    first.trigger()
    second.trigger()

    broadcast.emit("x")
    broadcast.fail(RuntimeError("gone"))

    errors = []
    first.on_resolve(lambda _: None, on_error=errors.append)
    assert [str(e) for e in errors] == ["gone"]
    assert first.await_blocking() is None
    assert second.done() is True

    late = broadcast.stream()
    assert late.await_blocking() is None
