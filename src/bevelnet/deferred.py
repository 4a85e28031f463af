# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Deferred results for asynchronous transport calls.

A deferred result wraps a *source* callable that produces the outcome. The
source runs at most once, lazily, when the result is first triggered,
subscribed to, or waited on. By default it runs on a freshly spawned daemon
thread so that subscribing never blocks the caller; sources that merely
register listeners may run inline with ``spawn=False``.

Sources receive a sink and report through it:

- ``SingleSink.success(value=None)`` / ``SingleSink.error(exc)``
- ``StreamSink.emit(value)`` / ``StreamSink.complete()`` / ``StreamSink.error(exc)``

Only the first terminal signal counts; later ones are dropped.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)

_PENDING = "pending"
_FULFILLED = "fulfilled"
_FAILED = "failed"


class _Deferred:
    """Lazy single-execution plumbing shared by both result types."""

    def __init__(self, source: Callable, *, spawn: bool = True, description: str | None = None):
        self._source = source
        self._spawn = spawn
        self.description = description or getattr(source, "__name__", "deferred")
        self._lock = threading.Lock()
        self._started = False
        self._done = threading.Event()
        self._state = _PENDING
        self._error: BaseException | None = None

    def _make_sink(self):
        raise NotImplementedError

    def _run_source(self) -> None:
        sink = self._make_sink()
        try:
            self._source(sink)
        except Exception as exc:  # noqa: BLE001
            sink.error(exc)

    def trigger(self) -> None:
        """Start the source without a consumer; a no-op once started."""
        with self._lock:
            if self._started:
                return
            self._started = True
        if self._spawn:
            thread = threading.Thread(target=self._run_source, name=f"bevelnet-{self.description}", daemon=True)
            thread.start()
        else:
            self._run_source()

    def done(self) -> bool:
        return self._done.is_set()

    def _wait(self, timeout: float | None) -> bool:
        self.trigger()
        if not self._done.wait(timeout):
            logger.error("%s did not resolve within %s seconds", self.description, timeout)
            return False
        if self._state == _FAILED:
            logger.error("%s failed: %s", self.description, self._error)
            return False
        return True

    def _report_unhandled(self, exc: BaseException) -> None:
        logger.debug("%s failed with no error callback registered: %s", self.description, exc)


class SingleSink(Generic[T]):
    """Resolution handle passed to a DeferredSingle source."""

    def __init__(self, deferred: DeferredSingle[T]):
        self._deferred = deferred

    def success(self, value: T | None = None) -> None:
        self._deferred._resolve(_FULFILLED, value, None)

    def error(self, exc: BaseException) -> None:
        self._deferred._resolve(_FAILED, None, exc)


class DeferredSingle(_Deferred, Generic[T]):
    """At most one eventual value, or a failure."""

    def __init__(self, source: Callable[[SingleSink[T]], None], *, spawn: bool = True, description: str | None = None):
        super().__init__(source, spawn=spawn, description=description)
        self._value: T | None = None
        self._callbacks: list[tuple[Callable[[T | None], None], Callable[[BaseException], None] | None]] = []

    @classmethod
    def of(cls, value: T | None) -> DeferredSingle[T]:
        """An already-resolved result."""
        return cls(lambda sink: sink.success(value), spawn=False, description="constant result")

    @classmethod
    def failed(cls, exc: BaseException) -> DeferredSingle[T]:
        """An already-failed result."""
        return cls(lambda sink: sink.error(exc), spawn=False, description="constant failure")

    def _make_sink(self) -> SingleSink[T]:
        return SingleSink(self)

    def _resolve(self, state: str, value: T | None, error: BaseException | None) -> None:
        with self._lock:
            if self._state != _PENDING:
                logger.debug("Ignoring repeated resolution of %s", self.description)
                return
            self._state = state
            self._value = value
            self._error = error
            callbacks, self._callbacks = self._callbacks, []
            self._done.set()
        for on_value, on_error in callbacks:
            self._dispatch(on_value, on_error)

    def _dispatch(
        self,
        on_value: Callable[[T | None], None],
        on_error: Callable[[BaseException], None] | None,
    ) -> None:
        if self._state == _FULFILLED:
            on_value(self._value)
        elif on_error is not None:
            on_error(self._error)
        else:
            self._report_unhandled(self._error)

    def on_resolve(
        self,
        on_value: Callable[[T | None], None],
        on_error: Callable[[BaseException], None] | None = None,
    ) -> None:
        """
        Register callbacks for the outcome.

        ``on_value`` is called once with the value on success, ``on_error`` once
        with the exception on failure. Callbacks run on the resolving thread,
        or immediately on the caller's thread when already resolved.
        """
        with self._lock:
            resolved = self._state != _PENDING
            if not resolved:
                self._callbacks.append((on_value, on_error))
        if resolved:
            self._dispatch(on_value, on_error)
        self.trigger()

    def await_blocking(self, timeout: float | None = None) -> T | None:
        """Block until resolved; return the value, or None on empty completion, failure or timeout."""
        if not self._wait(timeout):
            return None
        return self._value


class StreamSink(Generic[T]):
    """Emission handle passed to a DeferredStream source."""

    def __init__(self, deferred: DeferredStream[T]):
        self._deferred = deferred

    def emit(self, value: T) -> None:
        self._deferred._emit(value)

    def complete(self) -> None:
        self._deferred._finish(_FULFILLED, None)

    def error(self, exc: BaseException) -> None:
        self._deferred._finish(_FAILED, exc)


class _StreamSubscriber(Generic[T]):
    def __init__(self, on_value, on_complete, on_error):
        self.on_value = on_value
        self.on_complete = on_complete
        self.on_error = on_error


class DeferredStream(_Deferred, Generic[T]):
    """
    Zero or more eventual values terminated by completion or failure.

    Emitted values are retained, so a subscriber registered late still sees
    every value in order before the terminal signal.
    """

    def __init__(self, source: Callable[[StreamSink[T]], None], *, spawn: bool = True, description: str | None = None):
        super().__init__(source, spawn=spawn, description=description)
        self._values: list[T] = []
        self._subscribers: list[_StreamSubscriber[T]] = []
        # Serializes delivery so values reach each subscriber in emission order.
        self._delivery_lock = threading.RLock()

    def _make_sink(self) -> StreamSink[T]:
        return StreamSink(self)

    def _emit(self, value: T) -> None:
        with self._delivery_lock:
            with self._lock:
                if self._state != _PENDING:
                    logger.debug("Ignoring emission after termination of %s", self.description)
                    return
                self._values.append(value)
                subscribers = list(self._subscribers)
            for subscriber in subscribers:
                subscriber.on_value(value)

    def _finish(self, state: str, error: BaseException | None) -> None:
        with self._delivery_lock:
            with self._lock:
                if self._state != _PENDING:
                    logger.debug("Ignoring repeated termination of %s", self.description)
                    return
                self._state = state
                self._error = error
                subscribers, self._subscribers = self._subscribers, []
                self._done.set()
            for subscriber in subscribers:
                self._terminate(subscriber)

    def _terminate(self, subscriber: _StreamSubscriber[T]) -> None:
        if self._state == _FULFILLED:
            if subscriber.on_complete is not None:
                subscriber.on_complete()
        elif subscriber.on_error is not None:
            subscriber.on_error(self._error)
        else:
            self._report_unhandled(self._error)

    def on_resolve(
        self,
        on_value: Callable[[T], None],
        on_complete: Callable[[], None] | None = None,
        on_error: Callable[[BaseException], None] | None = None,
    ) -> None:
        """Call ``on_value`` per value, then exactly one of ``on_complete`` / ``on_error``."""
        subscriber = _StreamSubscriber(on_value, on_complete, on_error)
        with self._delivery_lock:
            with self._lock:
                backlog = list(self._values)
                terminated = self._state != _PENDING
                if not terminated:
                    self._subscribers.append(subscriber)
            for value in backlog:
                on_value(value)
            if terminated:
                self._terminate(subscriber)
        self.trigger()

    def await_blocking(self, timeout: float | None = None) -> list[T] | None:
        """Block until the stream terminates; return every value, or None on failure or timeout."""
        if not self._wait(timeout):
            return None
        return list(self._values)


class Broadcast(Generic[T]):
    """
    Multicast emitter.

    Each call to :meth:`stream` returns a DeferredStream that receives the
    values emitted after it was subscribed to.
    """

    def __init__(self, description: str = "broadcast"):
        self.description = description
        self._lock = threading.Lock()
        self._sinks: list[StreamSink[T]] = []
        self._closed = False
        self._error: BaseException | None = None

    def _attach(self, sink: StreamSink[T]) -> None:
        with self._lock:
            if not self._closed:
                self._sinks.append(sink)
                return
        if self._error is not None:
            sink.error(self._error)
        else:
            sink.complete()

    def stream(self) -> DeferredStream[T]:
        return DeferredStream(self._attach, spawn=False, description=self.description)

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._sinks)

    def emit(self, value: T) -> None:
        with self._lock:
            sinks = list(self._sinks)
        for sink in sinks:
            sink.emit(value)

    def complete(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            sinks, self._sinks = self._sinks, []
        for sink in sinks:
            sink.complete()

    def fail(self, exc: BaseException) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._error = exc
            sinks, self._sinks = self._sinks, []
        for sink in sinks:
            sink.error(exc)


__all__ = [
    "Broadcast",
    "DeferredSingle",
    "DeferredStream",
    "SingleSink",
    "StreamSink",
]
