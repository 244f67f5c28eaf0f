"""
Timers for the stepwise traversal simulator.

The simulator only needs an object with

    call_later(delay_s, callback) -> handle   # handle.cancel() withdraws it

asyncio event loops already have this shape. Two more implementations live
here:

- ManualTickScheduler: a virtual clock that fires callbacks only when the
  caller advances it. Used by tests and by headless step-through.
- BlockingTickScheduler: real time on the calling thread, built on the
  standard sched module; run() returns once nothing is pending.

All of them are single-threaded: a callback runs to completion before the next
one is considered.
"""

import heapq
import itertools
import sched
import time
from typing import Callable, List, Optional


class ManualTickHandle:
    """Pending callback in a ManualTickScheduler."""

    def __init__(self, due: float, seq: int, callback: Callable[[], None]):
        self.due = due
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __lt__(self, other: "ManualTickHandle") -> bool:
        return (self.due, self.seq) < (other.due, other.seq)


class ManualTickScheduler:
    """Virtual-clock scheduler; time moves only through advance()/run_next()."""

    def __init__(self):
        self.now = 0.0
        self._queue: List[ManualTickHandle] = []
        self._seq = itertools.count()
        self.fired = 0

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> ManualTickHandle:
        handle = ManualTickHandle(self.now + max(0.0, delay_s), next(self._seq), callback)
        heapq.heappush(self._queue, handle)
        return handle

    @property
    def pending_count(self) -> int:
        return sum(1 for h in self._queue if not h.cancelled)

    def next_due(self) -> Optional[float]:
        """Virtual time of the next live callback, or None."""
        self._drop_cancelled()
        return self._queue[0].due if self._queue else None

    def run_next(self) -> bool:
        """Jump to the next live callback and run it. Returns False when idle."""
        self._drop_cancelled()
        if not self._queue:
            return False
        handle = heapq.heappop(self._queue)
        self.now = max(self.now, handle.due)
        self.fired += 1
        handle.callback()
        return True

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, firing every callback that falls due.

        Callbacks scheduled by fired callbacks also run if they fall inside the
        window. Returns the number of callbacks fired.
        """
        deadline = self.now + seconds
        count = 0
        while True:
            due = self.next_due()
            if due is None or due > deadline:
                break
            self.run_next()
            count += 1
        self.now = deadline
        return count

    def run_until_idle(self, max_callbacks: Optional[int] = None) -> int:
        """Fire callbacks in due order until none remain (or max_callbacks fired)."""
        count = 0
        while max_callbacks is None or count < max_callbacks:
            if not self.run_next():
                break
            count += 1
        return count

    def _drop_cancelled(self) -> None:
        while self._queue and self._queue[0].cancelled:
            heapq.heappop(self._queue)


class BlockingTickHandle:
    """Pending callback in a BlockingTickScheduler."""

    def __init__(self, scheduler: sched.scheduler, event):
        self._scheduler = scheduler
        self._event = event

    def cancel(self) -> None:
        if self._event in self._scheduler.queue:
            self._scheduler.cancel(self._event)


class BlockingTickScheduler:
    """Wall-clock scheduler; run() sleeps between callbacks on the calling thread."""

    def __init__(self, timefunc=time.monotonic, delayfunc=time.sleep):
        self._scheduler = sched.scheduler(timefunc, delayfunc)

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> BlockingTickHandle:
        event = self._scheduler.enter(max(0.0, delay_s), 0, callback)
        return BlockingTickHandle(self._scheduler, event)

    @property
    def pending_count(self) -> int:
        return len(self._scheduler.queue)

    def run(self) -> None:
        """Block until every scheduled callback (including ones they schedule) has run."""
        self._scheduler.run()
