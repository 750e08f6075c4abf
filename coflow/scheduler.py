"""A single-threaded event loop with one background worker thread.

Ready callbacks run on the thread that calls ``run_once``. Work handed to
``submit_work`` runs on the worker thread, and its callback is queued back
to the loop thread with the work's result. On each turn the loop first
resumes completed work and then runs the callbacks scheduled with
``call_soon``.
"""

from __future__ import annotations

import argparse
import functools
import queue
import threading
import time
from typing import Any, Callable, Coroutine

from coflow.task import Task, do_slow_work


def _reraise(error: BaseException) -> None:
    raise error


class EventLoop:
    """Runs tasks on the calling thread and slow work on a worker thread."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._ready: list[Callable[[], Any]] = []
        self._completed: list[Callable[[], Any]] = []
        self._work: queue.Queue[tuple[Callable[[], Any], Callable[[Any], Any]] | None] = (
            queue.Queue()
        )
        self._closed = False
        self._worker = threading.Thread(
            target=self._work_loop, name="coflow-worker", daemon=True
        )
        self._worker.start()

    def call_soon(self, fn: Callable[[], Any]) -> None:
        """Schedule ``fn`` to run on the next turn of the loop."""
        if not callable(fn):
            raise TypeError("call_soon needs a callable")
        with self._cond:
            self._ready.append(fn)
            self._cond.notify_all()

    def submit_work(self, func: Callable[[], Any], callback: Callable[[Any], Any]) -> None:
        """Run ``func`` on the worker; later call ``callback`` with its result.

        If ``func`` raises, the exception is raised from ``run_once`` on the
        loop thread instead.
        """
        if not callable(func) or not callable(callback):
            raise TypeError("submit_work needs two callables")
        if self._closed:
            raise RuntimeError("event loop is closed")
        self._work.put((func, callback))

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> Task:
        """Start ``coro`` as a task on this loop."""
        return Task(coro, self)

    def run_once(self, timeout: float | None = None) -> int:
        """Wait up to ``timeout`` for work, run one batch and return its size."""
        with self._cond:
            if not (self._ready or self._completed):
                self._cond.wait_for(
                    lambda: bool(self._ready or self._completed), timeout
                )
            batch = self._completed + self._ready
            self._completed = []
            self._ready = []
        for position, fn in enumerate(batch):
            try:
                fn()
            except BaseException:
                with self._cond:
                    self._ready[:0] = batch[position + 1 :]
                raise
        return len(batch)

    def run_until_complete(
        self, coro: Coroutine[Any, Any, Any] | Task, timeout: float | None = None
    ) -> Any:
        """Run the loop until ``coro`` finishes and return its result.

        Raises what the coroutine raised, or ``TimeoutError`` when ``timeout``
        seconds pass first.
        """
        target = coro if isinstance(coro, Task) else self.spawn(coro)
        outcome: dict[str, Any] = {}

        async def runner() -> None:
            try:
                outcome["value"] = await target
            except Exception as exc:
                outcome["error"] = exc

        watcher = Task(runner(), self)
        deadline = None if timeout is None else time.monotonic() + timeout
        while not watcher.done():
            remaining = None
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise TimeoutError("coroutine did not finish in time")
            self.run_once(remaining)
        self.run_once(0)
        if "error" in outcome:
            raise outcome["error"]
        return outcome.get("value")

    def close(self) -> None:
        """Stop the worker thread after the work already submitted."""
        if self._closed:
            return
        self._closed = True
        self._work.put(None)
        self._worker.join()

    def __enter__(self) -> EventLoop:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    def _work_loop(self) -> None:
        while True:
            item = self._work.get()
            if item is None:
                return
            func, callback = item
            try:
                result = func()
            except BaseException as error:
                entry: Callable[[], Any] = functools.partial(_reraise, error)
            else:
                entry = functools.partial(callback, result)
            with self._cond:
                self._completed.append(entry)
                self._cond.notify_all()


async def _second_coroutine() -> int:
    return 3


async def _third_coroutine() -> float:
    return 3.1


async def _first_coroutine() -> str:
    a = 1

    def func() -> int:
        return a

    result = await do_slow_work(func)
    print(f"result1 is: {result}")
    a = 2
    result = await do_slow_work(func)
    print(f"result2 is: {result}")
    num = await Task(_second_coroutine())
    print(f"second_coroutine result is: {num}")
    a = 3
    result = await do_slow_work(func)
    print(f"result3 is: {result}")
    num2 = await Task(_third_coroutine())
    a = 4
    result = await do_slow_work(func)
    print(f"third_coroutine result is: {num2}")
    result = await do_slow_work(func)
    print(f"result4 is: {result}")
    return "b"


async def _coroutine() -> str:
    a = 1

    def func() -> int:
        return a

    result = await do_slow_work(func)
    print(f"result is: {result}")
    num = await Task(_second_coroutine())
    print(f"coroutine result is: {num}")
    return "b"


async def _demo() -> list[str]:
    tasks = [Task(_coroutine()), Task(_first_coroutine())]
    return [await task for task in tasks]


def main(argv: list[str] | None = None) -> int:
    """Run two demonstration coroutines that mix slow work and subtasks."""
    parser = argparse.ArgumentParser(
        prog="coflow-scheduler",
        description="Run coroutines that await slow work and other coroutines.",
    )
    parser.parse_args(argv)
    with EventLoop() as loop:
        loop.run_until_complete(_demo())
    return 0