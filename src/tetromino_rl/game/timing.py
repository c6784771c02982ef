from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Tuple


Callback = Callable[[], None]


class TimerHandle:
    def __init__(self, deadline_ms: int, callback: Callback) -> None:
        self.deadline_ms = deadline_ms
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class PollingScheduler:
    """One-shot timers checked against a millisecond clock.

    Nothing runs on its own: the owner calls ``run_pending()`` from its main
    loop, so every callback executes on the caller's thread.
    """

    def __init__(self, now_ms: Callable[[], int]) -> None:
        self.now_ms = now_ms
        self._queue: List[Tuple[int, int, TimerHandle]] = []
        self._counter = itertools.count()

    def call_later(self, delay_ms: int, callback: Callback) -> TimerHandle:
        handle = TimerHandle(self.now_ms() + int(delay_ms), callback)
        heapq.heappush(self._queue, (handle.deadline_ms, next(self._counter), handle))
        return handle

    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def run_pending(self) -> int:
        """Fire every due, non-cancelled callback in deadline order."""
        fired = 0
        now = self.now_ms()
        while self._queue and self._queue[0][0] <= now:
            _, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            handle.callback()
            fired += 1
        return fired


class ManualClock:
    """Settable clock for driving a PollingScheduler without real time."""

    def __init__(self, start_ms: int = 0) -> None:
        self.ms = int(start_ms)

    def __call__(self) -> int:
        return self.ms

    def advance(self, ms: int) -> None:
        self.ms += int(ms)
