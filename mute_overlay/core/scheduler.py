"""
Single-threaded timer scheduler driven by the host event loop.

Timers never fire on their own: the host calls ``run_due`` between events,
so a timer callback can never run concurrently with a pointer handler.
"""

import heapq
import itertools
import time
from typing import Callable, List, Optional, Tuple


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.monotonic() * 1000


class TimerHandle:
    """A pending callback that can be cancelled until it runs."""

    def __init__(self, deadline: float, callback: Callable[[], None]):
        self.deadline = deadline
        self.callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self):
        self.cancelled = True

    def __repr__(self):
        state = 'cancelled' if self.cancelled else 'fired' if self.fired else 'pending'
        return f"TimerHandle(deadline={self.deadline:.0f}, {state})"


class TimerScheduler:
    """Deadline-ordered callbacks, run only from ``run_due``."""

    def __init__(self, clock: Callable[[], float] = monotonic_ms):
        self.clock = clock
        self._heap: List[Tuple[float, int, TimerHandle]] = []
        self._sequence = itertools.count()

    def now(self) -> float:
        return self.clock()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """Schedule ``callback`` to run ``delay_ms`` from now."""
        handle = TimerHandle(self.clock() + delay_ms, callback)
        heapq.heappush(self._heap, (handle.deadline, next(self._sequence), handle))
        return handle

    def next_deadline(self) -> Optional[float]:
        """Deadline of the earliest pending timer, or None."""
        self._drop_cancelled()
        if not self._heap:
            return None
        return self._heap[0][0]

    def pending_count(self) -> int:
        return sum(1 for _, _, handle in self._heap if handle.pending)

    def run_due(self, now: Optional[float] = None) -> int:
        """Run every timer whose deadline has passed; return how many ran."""
        if now is None:
            now = self.clock()

        ran = 0
        while self._heap and self._heap[0][0] <= now:
            _, _, handle = heapq.heappop(self._heap)
            if not handle.pending:
                continue
            handle.fired = True
            handle.callback()
            ran += 1
        return ran

    def clear(self):
        """Cancel everything still pending."""
        for _, _, handle in self._heap:
            handle.cancel()
        self._heap = []

    def _drop_cancelled(self):
        while self._heap and not self._heap[0][2].pending:
            heapq.heappop(self._heap)
