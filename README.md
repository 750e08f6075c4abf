# coflow

coflow is a small collection of hand-driven coroutine schedulers built on
plain `async def` coroutines and generators. No framework sits underneath,
so you can follow, step by step, when a coroutine suspends, who resumes it
and on which thread.

## What is inside

| Module | Purpose |
| --- | --- |
| `coflow.metaresult` | `MetaResult`, a value that holds either one item or a list of items, and `convert`, a cast between types (`int` to a one-character `str` and back). |
| `coflow.task` | `Task`, `SlowWork`, `do_slow_work` and `AwaiterKind`: a task starts at once; awaiting `do_slow_work(func)` runs `func` on the scheduler's worker, and awaiting another `Task` resumes the parent only after the child has finished. |
| `coflow.scheduler` | `EventLoop`: runs tasks on the calling thread and slow work on one background worker thread. |
| `coflow.strategy` | `SuspendStrategy`, `SuspendPoint` and `StrategyRuntime`: eagerly started coroutines whose suspended handles are resumed at once (`COMMON`), moved to a work queue (`OTHER_THREAD`) or destroyed (`FINISH`). |
| `coflow.netdemo` | A blocking TCP server that answers `ok` and a client that sends a message (`run_server`, `run_client`). |

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

### Offloading slow work and awaiting subtasks

```python
from coflow.scheduler import EventLoop
from coflow.task import Task, do_slow_work


async def child():
    return 3


async def compute():
    first = await do_slow_work(lambda: 1)
    second = await Task(child())
    return first + second


with EventLoop() as loop:
    print(loop.run_until_complete(compute(), timeout=5.0))  # 4
```

Each slow function runs on the loop's worker thread; the awaiting coroutine
is resumed on the thread that drives the loop. `run_until_complete` raises
what the coroutine raised, or `TimeoutError` when the timeout passes first.
A `Task` created inside a running task uses that task's loop; elsewhere,
pass the loop explicitly or use `EventLoop.spawn`.

### Suspend strategies

```python
from coflow.strategy import StrategyRuntime, SuspendPoint


async def job():
    value = await SuspendPoint(5)
    return value * 2


runtime = StrategyRuntime()
handle = runtime.spawn(job())   # runs until the SuspendPoint
runtime.drain()                 # resumes everything on the resume queue
print(handle.result())          # 10
```

### Single or iterable results

```python
from coflow.metaresult import MetaResult, convert

single = MetaResult(False, 1)
print(single.unwrap())

many = MetaResult(True)
many.append(1)
many.append(2)
print(list(many))

print(convert(42, str))   # '*'
```

## Commands

```
coflow-scheduler
```

Runs two demonstration coroutines on an `EventLoop`, mixing slow work and
subtasks, and prints each intermediate result as the coroutine resumes.

```
coflow-netdemo server [--host HOST] [--port PORT] [--max-clients N]
coflow-netdemo client [--host HOST] [--port PORT] [--message TEXT]
```

The server (default `127.0.0.1:2001`) reads one message per connection,
writes its text to standard output, answers `ok` and closes the
connection; without `--max-clients` it serves forever. The client sends its
message followed by a NUL byte, then prints `connect` and the reply.

## What it does not do

- There is no readiness-driven file or socket I/O inside the event loop;
  blocking work can only be offloaded with `do_slow_work`, and the
  `EventLoop` has a single worker thread.
- There is no loop that collects finished work at a fixed interval, and no
  logging helpers.
- The TCP demo is blocking and serves one client at a time.