"""
Phase schedulers for JVMSim.

Transitions are split into phases separated by delays that exist for
pacing only. A scheduler decides how those delays are spent: the
immediate scheduler runs on a virtual clock (tests, scripted runs), the
real-time scheduler actually sleeps (interactive use). Both execute every
callback on the caller's thread, strictly in due-time order.
"""

import heapq
import itertools
import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from .errors import SchedulerError

logger = logging.getLogger(__name__)


class ScheduledCall:
    """Handle for a pending callback"""

    def __init__(self, due: float, seq: int, callback: Callable[[], None], label: str = ""):
        self.due = due
        self.seq = seq
        self.callback = callback
        self.label = label
        self.cancelled = False
        self.done = False

    def __lt__(self, other: 'ScheduledCall') -> bool:
        return (self.due, self.seq) < (other.due, other.seq)

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.done)

    def cancel(self):
        self.cancelled = True

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "done" if self.done else "pending"
        return f"ScheduledCall({self.label or self.callback!r}, due={self.due:.3f}, {state})"


class PhaseScheduler(ABC):
    """Single-threaded timer queue"""

    DEFAULT_MAX_STEPS = 10_000

    def __init__(self):
        self._queue: List[ScheduledCall] = []
        self._seq = itertools.count()

    @abstractmethod
    def now(self) -> float:
        """Current time on this scheduler's clock, in seconds"""

    @abstractmethod
    def _wait_until(self, due: float):
        """Block (really or virtually) until ``due``"""

    def call_later(self, delay: float, callback: Callable[[], None], label: str = "") -> ScheduledCall:
        if delay < 0:
            raise ValueError(f"Delay cannot be negative: {delay}")
        call = ScheduledCall(self.now() + delay, next(self._seq), callback, label)
        heapq.heappush(self._queue, call)
        return call

    @property
    def pending(self) -> int:
        return sum(1 for call in self._queue if call.pending)

    @property
    def is_idle(self) -> bool:
        return self.pending == 0

    def _pop_next(self) -> Optional[ScheduledCall]:
        while self._queue:
            call = heapq.heappop(self._queue)
            if not call.cancelled:
                return call
        return None

    def _run(self, call: ScheduledCall):
        self._wait_until(call.due)
        call.done = True
        call.callback()

    def run_next(self) -> bool:
        """Run the next pending callback; False if nothing was queued"""
        call = self._pop_next()
        if call is None:
            return False
        self._run(call)
        return True

    def run_until_idle(self, max_steps: Optional[int] = None) -> int:
        """
        Drain the queue, including callbacks scheduled along the way.

        Raises SchedulerError if the queue is still busy after ``max_steps``
        callbacks, which means some transition keeps rescheduling itself.
        """
        limit = self.DEFAULT_MAX_STEPS if max_steps is None else max_steps
        steps = 0
        while self.run_next():
            steps += 1
            if steps >= limit and not self.is_idle:
                raise SchedulerError(
                    f"Scheduler still busy after {steps} steps",
                    code="E_RUNAWAY",
                    help_text="A transition keeps scheduling follow-up phases"
                )
        return steps


class ImmediateScheduler(PhaseScheduler):
    """Virtual-clock scheduler: delays cost no wall-clock time"""

    def __init__(self, start: float = 0.0):
        super().__init__()
        self._now = start

    def now(self) -> float:
        return self._now

    def _wait_until(self, due: float):
        self._now = max(self._now, due)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running every callback that falls due"""
        target = self._now + seconds
        steps = 0
        while True:
            call = self._pop_next()
            if call is None:
                break
            if call.due > target:
                heapq.heappush(self._queue, call)
                break
            self._run(call)
            steps += 1
        self._now = max(self._now, target)
        return steps


class RealTimeScheduler(PhaseScheduler):
    """Sleeps through delays so that phases play out at human pace"""

    def __init__(self, clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep):
        super().__init__()
        self._clock = clock
        self._sleep = sleep

    def now(self) -> float:
        return self._clock()

    def _wait_until(self, due: float):
        remaining = due - self._clock()
        if remaining > 0:
            self._sleep(remaining)
