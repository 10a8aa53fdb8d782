"""Cooperative, cancellable timers driven by the host's idle loop.

Nothing here spawns threads: callbacks only run inside ``run_pending``, which
the owning event loop calls between input polls. That keeps every registry
mutation on the single host thread.
"""

from __future__ import annotations

import heapq
import itertools
import time
from collections.abc import Callable


class TimerHandle:
    """Cancellable reference to one scheduled callback."""

    def __init__(self, callback: Callable[[], None], interval: float | None) -> None:
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class CooperativeScheduler:
    """Min-heap of due times polled by the event loop.

    ``clock`` is injectable so tests can advance time deterministically.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._queue: list[tuple[float, int, TimerHandle]] = []
        self._sequence = itertools.count()

    def _push(self, due: float, handle: TimerHandle) -> None:
        heapq.heappush(self._queue, (due, next(self._sequence), handle))

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once, ``delay`` seconds from now."""
        handle = TimerHandle(callback, None)
        self._push(self._clock() + max(0.0, delay), handle)
        return handle

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` every ``interval`` seconds until cancelled."""
        if interval <= 0:
            raise ValueError("interval must be positive")
        handle = TimerHandle(callback, interval)
        self._push(self._clock() + interval, handle)
        return handle

    def pending(self) -> int:
        """Return the number of live (not cancelled) timers."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def seconds_until_next(self) -> float | None:
        """Return the wait until the earliest live timer, or ``None`` when idle."""
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)
        if not self._queue:
            return None
        return max(0.0, self._queue[0][0] - self._clock())

    def run_pending(self) -> int:
        """Fire every due callback once and return how many ran.

        A repeating timer that fell behind fires once and is rescheduled from
        now rather than replaying each missed interval.
        """
        now = self._clock()
        ran = 0
        while self._queue and self._queue[0][0] <= now:
            _, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            if handle.interval is not None:
                self._push(now + handle.interval, handle)
            handle.callback()
            ran += 1
        return ran
