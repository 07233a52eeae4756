"""
Deferred task facility tests
"""
import asyncio

import pytest

from kubequest.simulation.clock import AsyncioClock, VirtualClock, build_clock


class TestVirtualClock:

    def test_fires_in_due_then_submission_order(self):
        clock = VirtualClock()
        fired = []
        clock.schedule(300, fired.append, "c")
        clock.schedule(100, fired.append, "a")
        clock.schedule(100, fired.append, "b")

        assert clock.advance(299) == 2
        assert fired == ["a", "b"]
        assert clock.now_ms == 299

        clock.advance(1)
        assert fired == ["a", "b", "c"]
        assert clock.pending == 0

    def test_callback_sees_due_time(self):
        clock = VirtualClock(start_ms=1000)
        seen = []
        clock.schedule(250, lambda: seen.append(clock.now_ms))
        clock.advance(5000)
        assert seen == [1250]
        assert clock.now_ms == 6000

    def test_task_scheduled_by_task_fires_in_same_advance(self):
        clock = VirtualClock()
        fired = []
        clock.schedule(10, lambda: clock.schedule(10, fired.append, "second"))
        clock.advance(20)
        assert fired == ["second"]

    def test_run_until_idle(self):
        clock = VirtualClock()
        task = clock.schedule(2000, lambda: None)
        assert clock.run_until_idle() == 1
        assert task.fired
        assert clock.now_ms == 2000

    def test_rejects_negative_values(self):
        clock = VirtualClock()
        with pytest.raises(ValueError):
            clock.schedule(-1, lambda: None)
        with pytest.raises(ValueError):
            clock.advance(-1)


class TestAsyncioClock:

    def test_fires_on_running_loop(self):
        clock = AsyncioClock()
        fired = []

        async def scenario():
            clock.schedule(10, fired.append, "healed")
            assert clock.pending == 1
            await asyncio.sleep(0.05)

        asyncio.run(scenario())
        assert fired == ["healed"]
        assert clock.pending == 0

    def test_failing_callback_is_contained(self):
        clock = AsyncioClock()
        fired = []

        def boom():
            raise RuntimeError("boom")

        async def scenario():
            clock.schedule(0, boom)
            clock.schedule(5, fired.append, "after")
            await asyncio.sleep(0.05)

        asyncio.run(scenario())
        assert fired == ["after"]

    def test_cannot_advance(self):
        with pytest.raises(RuntimeError):
            AsyncioClock().advance(100)


def test_build_clock():
    assert isinstance(build_clock("virtual"), VirtualClock)
    assert isinstance(build_clock("realtime"), AsyncioClock)
    with pytest.raises(ValueError):
        build_clock("sundial")
