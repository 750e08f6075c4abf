"""Eagerly started coroutine tasks driven by a scheduler.

A task runs its coroutine as soon as it is created. Awaiting ``SlowWork``
hands the function to the scheduler's worker and resumes the task with the
result. Awaiting another ``Task`` suspends the parent until the child has
finished and the scheduler has retired it.

A scheduler is any object with ``call_soon(fn)`` and
``submit_work(func, callback)``, where ``callback`` is later invoked on the
scheduler's thread with ``func()``'s result.
"""

from __future__ import annotations

import enum
import threading
from typing import Any, Callable, Coroutine, Generator, Protocol


class AwaiterKind(enum.IntEnum):
    """The kind of suspension point a task is at."""

    INITIAL = 1
    SCHEDULING = 2
    FINAL = 3


class _Scheduler(Protocol):
    def call_soon(self, fn: Callable[[], Any]) -> None: ...

    def submit_work(
        self, func: Callable[[], Any], callback: Callable[[Any], Any]
    ) -> None: ...


class SlowWork:
    """An awaitable that runs ``func`` on the scheduler's worker."""

    def __init__(self, func: Callable[[], Any]) -> None:
        if not callable(func):
            raise TypeError("slow work needs a callable")
        self.func = func

    def __await__(self) -> Generator[Any, Any, Any]:
        return (yield self)


def do_slow_work(func: Callable[[], Any]) -> SlowWork:
    """Wrap ``func`` so that a task can await it off the loop thread."""
    return SlowWork(func)


_running = threading.local()


def _task_stack() -> list[Task]:
    stack = getattr(_running, "stack", None)
    if stack is None:
        stack = []
        _running.stack = stack
    return stack


class Task:
    """A coroutine that starts at once and reports its result to an awaiter."""

    def __init__(self, coro: Coroutine[Any, Any, Any], loop: _Scheduler | None = None) -> None:
        if not (hasattr(coro, "send") and hasattr(coro, "throw")):
            raise TypeError("Task needs a coroutine object")
        if loop is None:
            stack = _task_stack()
            if not stack:
                raise RuntimeError("no loop given and no task is running")
            loop = stack[-1].loop
        self.loop = loop
        self.phase = AwaiterKind.INITIAL
        self._coro = coro
        self._value: Any = None
        self._error: BaseException | None = None
        self._done = False
        self._finalized = False
        self._claimed = False
        self._parent: Task | None = None
        self._resume(None, None)

    def step(self, value: Any = None) -> None:
        """Resume the coroutine, sending ``value`` to its suspension point."""
        self._resume(value, None)

    def done(self) -> bool:
        """Return whether the coroutine has run to its end."""
        return self._done

    def result(self) -> Any:
        """Return the coroutine's return value, or raise what it raised."""
        if not self._done:
            raise RuntimeError("task has not finished")
        if self._error is not None:
            raise self._error
        return self._value

    def __await__(self) -> Generator[Any, Any, Any]:
        return (yield self)

    def _resume(self, value: Any, error: BaseException | None) -> None:
        if self._done:
            raise RuntimeError("task already finished")
        stack = _task_stack()
        stack.append(self)
        try:
            try:
                if error is not None:
                    request = self._coro.throw(error)
                else:
                    request = self._coro.send(value)
            except StopIteration as stop:
                self._finish(stop.value, None)
                return
            except Exception as exc:
                self._finish(None, exc)
                return
        finally:
            stack.pop()
        self.phase = AwaiterKind.SCHEDULING
        self._suspend_on(request)

    def _suspend_on(self, request: Any) -> None:
        if isinstance(request, SlowWork):
            self.loop.submit_work(request.func, self.step)
        elif isinstance(request, Task):
            if request is self:
                self._resume(None, RuntimeError("a task cannot await itself"))
            elif request._claimed:
                self._resume(None, RuntimeError("task is already awaited"))
            else:
                request._claimed = True
                if request._finalized:
                    self.loop.call_soon(lambda: self._deliver(request))
                else:
                    request._parent = self
        else:
            self._resume(
                None, TypeError(f"cannot await {type(request).__name__} in a task")
            )

    def _finish(self, value: Any, error: BaseException | None) -> None:
        self._done = True
        self._value = value
        self._error = error
        self.phase = AwaiterKind.FINAL
        self.loop.call_soon(self._finalize)

    def _finalize(self) -> None:
        self._finalized = True
        parent, self._parent = self._parent, None
        if parent is not None:
            parent._deliver(self)
        elif self._error is not None:
            raise self._error

    def _deliver(self, child: Task) -> None:
        if child._error is not None:
            self._resume(None, child._error)
        else:
            self._resume(child._value, None)

    def __repr__(self) -> str:
        state = "done" if self._done else self.phase.name.lower()
        return f"<Task {state}>"