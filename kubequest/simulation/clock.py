# kubequest/simulation/clock.py
import asyncio
import heapq
import itertools
import logging
import time
from typing import Any, Callable, List, Optional

logger = logging.getLogger(__name__)


class ScheduledTask:
    """A one-shot deferred call. Carries plain arguments only, never live state."""
    def __init__(self, due_ms: int, seq: int, callback: Callable[..., Any], args: tuple):
        self.due_ms = due_ms
        self.seq = seq
        self.callback = callback
        self.args = args
        self.fired = False

    def __lt__(self, other: "ScheduledTask") -> bool:
        return (self.due_ms, self.seq) < (other.due_ms, other.seq)

    def run(self):
        self.fired = True
        self.callback(*self.args)


class VirtualClock:
    """
    Deterministic clock for tests and offline scenarios.
    Time only moves when advance() is called; due tasks fire in (due time, submission) order.
    """
    mode = "virtual"

    def __init__(self, start_ms: int = 0):
        self._now_ms = start_ms
        self._queue: List[ScheduledTask] = []
        self._seq = itertools.count()

    @property
    def now_ms(self) -> int:
        return self._now_ms

    @property
    def pending(self) -> int:
        return len(self._queue)

    def schedule(self, delay_ms: int, callback: Callable[..., Any], *args) -> ScheduledTask:
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        task = ScheduledTask(self._now_ms + delay_ms, next(self._seq), callback, args)
        heapq.heappush(self._queue, task)
        return task

    def advance(self, ms: int) -> int:
        """Moves time forward by `ms`, firing every task that becomes due. Returns the number fired."""
        if ms < 0:
            raise ValueError("Cannot move a clock backwards")
        target = self._now_ms + ms
        fired = 0
        while self._queue and self._queue[0].due_ms <= target:
            task = heapq.heappop(self._queue)
            # Tasks observe the time they were due at
            self._now_ms = task.due_ms
            task.run()
            fired += 1
        self._now_ms = target
        return fired

    def run_until_idle(self) -> int:
        fired = 0
        while self._queue:
            fired += self.advance(self._queue[0].due_ms - self._now_ms)
        return fired


class AsyncioClock:
    """
    Real-time clock backed by the running event loop.
    Callbacks run on the loop thread, the same one that serves requests.
    """
    mode = "realtime"

    def __init__(self):
        self._origin = time.monotonic()
        self._pending = 0

    @property
    def now_ms(self) -> int:
        return int((time.monotonic() - self._origin) * 1000)

    @property
    def pending(self) -> int:
        return self._pending

    def schedule(self, delay_ms: int, callback: Callable[..., Any], *args) -> asyncio.TimerHandle:
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        loop = asyncio.get_running_loop()
        self._pending += 1
        return loop.call_later(delay_ms / 1000.0, self._run, callback, args)

    def advance(self, ms: int) -> int:
        raise RuntimeError("A realtime clock cannot be advanced manually; set CLOCK_MODE=virtual")

    def _run(self, callback: Callable[..., Any], args: tuple):
        self._pending -= 1
        try:
            callback(*args)
        except Exception as e:
            # No caller awaits a timer callback
            logger.error(f"Deferred task {getattr(callback, '__name__', callback)} failed: {e}", exc_info=True)


def build_clock(mode: str, start_ms: Optional[int] = None):
    if mode == "virtual":
        return VirtualClock(start_ms or 0)
    if mode == "realtime":
        return AsyncioClock()
    raise ValueError(f"Unknown clock mode: {mode}")
