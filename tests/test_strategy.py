import pytest

from coflow.strategy import StrategyRuntime, SuspendPoint, SuspendStrategy


def test_demo_order_trace():
    rt = StrategyRuntime()
    trace = []

    async def third():
        trace.append("third end")
        return 99.12

    async def second():
        a = await rt.spawn(third())
        trace.append(("second got", a))
        return 3

    async def first():
        trace.append("before point")
        await SuspendPoint()
        trace.append("after point")
        a = await rt.spawn(second())
        trace.append(("first got", a))
        await SuspendPoint()
        trace.append("end2")
        return "b"

    handle = rt.spawn(first())
    assert trace == ["before point"]
    assert len(rt.resume_queue) == 1
    assert rt.drain() == 2
    assert handle.done()
    assert handle.result() == "b"
    assert trace == [
        "before point",
        "after point",
        "third end",
        ("second got", 99.12),
        ("first got", 3),
        "end2",
    ]
    assert rt.resume_queue == []


def test_suspend_point_returns_its_value():
    rt = StrategyRuntime()

    async def body():
        got = await SuspendPoint("x")
        return got

    handle = rt.spawn(body())
    assert not handle.done()
    rt.drain()
    assert handle.result() == "x"


def test_drain_on_empty_queue():
    assert StrategyRuntime().drain() == 0


def test_finished_child_resumes_without_queueing():
    rt = StrategyRuntime()

    async def child():
        return 3

    async def parent():
        return await rt.spawn(child())

    handle = rt.spawn(parent())
    assert handle.done()
    assert handle.result() == 3
    assert rt.resume_queue == []


def test_unfinished_child_does_not_suspend_parent():
    rt = StrategyRuntime()

    async def child():
        await SuspendPoint()
        return 3

    seen = []

    async def parent():
        value = await rt.spawn(child())
        seen.append(value)
        return "b"

    handle = rt.spawn(parent())
    assert handle.result() == "b"
    assert seen == [None]
    assert len(rt.resume_queue) == 1
    rt.drain()
    assert rt.resume_queue == []


def test_apply_other_thread_moves_to_work_queue():
    rt = StrategyRuntime()

    async def body():
        await SuspendPoint()
        return 1

    handle = rt.spawn(body())
    rt.resume_queue.clear()
    rt.apply(SuspendStrategy.OTHER_THREAD, handle)
    assert rt.work_queue == [handle]
    assert not handle.done()


def test_apply_common_resumes():
    rt = StrategyRuntime()

    async def body():
        return await SuspendPoint(7)

    handle = rt.spawn(body())
    rt.resume_queue.clear()
    rt.apply(SuspendStrategy.COMMON, handle)
    assert handle.result() == 7


def test_apply_finish_destroys():
    rt = StrategyRuntime()

    async def body():
        await SuspendPoint()
        return 1

    handle = rt.spawn(body())
    rt.apply(SuspendStrategy.FINISH, handle)
    assert handle.destroyed
    assert rt.resume_queue == []
    with pytest.raises(RuntimeError):
        handle.resume()


def test_apply_rejects_unknown_strategy():
    rt = StrategyRuntime()

    async def body():
        await SuspendPoint()

    handle = rt.spawn(body())
    with pytest.raises(ValueError):
        rt.apply(42, handle)


def test_resume_after_finish_raises():
    rt = StrategyRuntime()

    async def body():
        return 1

    handle = rt.spawn(body())
    with pytest.raises(RuntimeError):
        handle.resume()


def test_result_before_finish_raises():
    rt = StrategyRuntime()

    async def body():
        await SuspendPoint()

    handle = rt.spawn(body())
    with pytest.raises(RuntimeError):
        handle.result()


def test_error_propagates_to_awaiting_parent():
    rt = StrategyRuntime()

    async def child():
        raise ValueError("boom")

    async def parent():
        try:
            await rt.spawn(child())
        except ValueError as exc:
            return str(exc)

    assert rt.spawn(parent()).result() == "boom"


def test_awaiting_unsupported_object_fails():
    rt = StrategyRuntime()

    class Odd:
        def __await__(self):
            return (yield self)

    async def body():
        await Odd()

    handle = rt.spawn(body())
    with pytest.raises(TypeError):
        handle.result()


def test_spawn_requires_coroutine():
    with pytest.raises(TypeError):
        StrategyRuntime().spawn(lambda: None)