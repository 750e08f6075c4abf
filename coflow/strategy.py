"""Eager coroutines whose suspension is decided by a pluggable strategy.

``StrategyRuntime.spawn`` starts a coroutine at once and runs it until it
really suspends. A coroutine suspends in two ways:

* ``await SuspendPoint(value)`` parks it on the runtime's resume queue.
  ``drain`` later resumes it, and the await evaluates to ``value``.
* ``await handle`` on another spawned coroutine. If that coroutine has
  finished, the awaiting one is handed to the ``COMMON`` strategy, which
  resumes it on the spot with the finished coroutine's value. If it has not
  finished, the await does not suspend at all and evaluates to the value the
  other coroutine holds so far, which is ``None``.

``apply`` runs a strategy on a handle: ``COMMON`` resumes it,
``OTHER_THREAD`` moves it to the work queue, and ``FINISH`` destroys it.
"""

from __future__ import annotations

import enum
from typing import Any, Coroutine, Generator


class SuspendStrategy(enum.IntEnum):
    """What to do with a coroutine once it has suspended."""

    COMMON = 0
    OTHER_THREAD = 1
    FINISH = 2


class SuspendPoint:
    """An awaitable that always suspends onto the runtime's resume queue."""

    def __init__(self, value: Any = None) -> None:
        self.value = value

    def __await__(self) -> Generator[Any, Any, Any]:
        return (yield self)

    def __repr__(self) -> str:
        return f"SuspendPoint({self.value!r})"


class _Handle:
    """A spawned coroutine, resumable by the runtime that owns it."""

    def __init__(self, runtime: StrategyRuntime, coro: Coroutine[Any, Any, Any]) -> None:
        if not (hasattr(coro, "send") and hasattr(coro, "throw")):
            raise TypeError("spawn needs a coroutine object")
        self._runtime = runtime
        self._coro = coro
        self._done = False
        self._destroyed = False
        self._error: BaseException | None = None
        self._pending: Any = None
        self.value: Any = None

    def resume(self) -> None:
        """Continue the coroutine from where it suspended."""
        if self._destroyed:
            raise RuntimeError("coroutine has been destroyed")
        if self._done:
            raise RuntimeError("coroutine has already finished")
        value, self._pending = self._pending, None
        self._step(value, None)

    def done(self) -> bool:
        """Return whether the coroutine has run to its end."""
        return self._done

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def destroy(self) -> None:
        """Close the coroutine and forget it in the runtime's queues."""
        if self._destroyed:
            return
        self._destroyed = True
        self._coro.close()
        self._runtime._forget(self)

    def result(self) -> Any:
        """Return the coroutine's return value, or raise what it raised."""
        if not self._done:
            raise RuntimeError("coroutine has not finished")
        if self._error is not None:
            raise self._error
        return self.value

    def __await__(self) -> Generator[Any, Any, Any]:
        if not self._done:
            return self.value
        return (yield self)

    def _step(self, value: Any, error: BaseException | None) -> None:
        try:
            if error is not None:
                request = self._coro.throw(error)
            else:
                request = self._coro.send(value)
        except StopIteration as stop:
            self._done = True
            self.value = stop.value
            return
        except Exception as exc:
            self._done = True
            self._error = exc
            return
        self._suspend_on(request)

    def _suspend_on(self, request: Any) -> None:
        if isinstance(request, SuspendPoint):
            self._pending = request.value
            self._runtime.resume_queue.append(self)
        elif isinstance(request, _Handle):
            if request._error is not None:
                self._step(None, request._error)
                return
            self._pending = request.value
            self._runtime.apply(SuspendStrategy.COMMON, self)
        else:
            self._step(
                None, TypeError(f"cannot await {type(request).__name__} here")
            )

    def __repr__(self) -> str:
        if self._destroyed:
            state = "destroyed"
        elif self._done:
            state = "done"
        else:
            state = "suspended"
        return f"<coroutine handle {state}>"


class StrategyRuntime:
    """Owns the resume and work queues of eagerly started coroutines."""

    def __init__(self) -> None:
        self.resume_queue: list[_Handle] = []
        self.work_queue: list[_Handle] = []

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> _Handle:
        """Start ``coro`` now and return its handle once it suspends or ends."""
        handle = _Handle(self, coro)
        handle._step(None, None)
        return handle

    def drain(self) -> int:
        """Resume queued coroutines, in order, until none are left.

        Coroutines that suspend again while draining are resumed too.
        Returns how many resumptions took place.
        """
        count = 0
        while self.resume_queue:
            handle = self.resume_queue.pop(0)
            handle.resume()
            count += 1
        return count

    def apply(self, strategy: SuspendStrategy | int, handle: _Handle) -> None:
        """Treat the suspended ``handle`` the way ``strategy`` says."""
        strategy = SuspendStrategy(strategy)
        if strategy is SuspendStrategy.COMMON:
            handle.resume()
        elif strategy is SuspendStrategy.OTHER_THREAD:
            self.work_queue.append(handle)
        else:
            handle.destroy()

    def _forget(self, handle: _Handle) -> None:
        self.resume_queue = [h for h in self.resume_queue if h is not handle]
        self.work_queue = [h for h in self.work_queue if h is not handle]