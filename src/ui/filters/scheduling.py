"""Cancellable deferred callbacks for the filter synchronizer.

All scheduling is single-threaded and cooperative. A ``ScheduledCall`` that
has been cancelled never runs its callback.

Two schedulers are provided:

- ``EventLoopScheduler`` delegates to a running ``asyncio`` loop.
- ``CooperativeScheduler`` keeps its own timer queue and fires due callbacks
  when the host calls ``run_due()``. Streamlit pumps it from a periodic
  fragment; tests drive it with a ``ManualClock``.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
import time
from typing import Callable, List, Optional, Protocol, Tuple


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class ScheduledCall(Protocol):
    """Handle for a deferred callback."""

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay in milliseconds."""

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ScheduledCall: ...


class EventLoopScheduler:
    """Scheduler backed by ``asyncio`` timers."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay_ms / 1000.0, callback)


class ManualClock:
    """Simulated millisecond clock."""

    def __init__(self, start_ms: float = 0.0):
        self.now_ms = float(start_ms)

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, delta_ms: float) -> None:
        self.now_ms += delta_ms


class CooperativeCall:
    """Handle returned by ``CooperativeScheduler.call_later``."""

    __slots__ = ("due_ms", "callback", "cancelled")

    def __init__(self, due_ms: float, callback: Callable[[], None]):
        self.due_ms = due_ms
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class CooperativeScheduler:
    """Timer queue fired explicitly by its host.

    ``clock`` returns the current time in milliseconds.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None, logger_obj: Optional[logging.Logger] = None):
        self._clock = clock or _monotonic_ms
        self._queue: List[Tuple[float, int, CooperativeCall]] = []
        self._sequence = itertools.count()
        self.logger = logger_obj or logging.getLogger(__name__)

    def now_ms(self) -> float:
        return self._clock()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> CooperativeCall:
        call = CooperativeCall(self.now_ms() + max(delay_ms, 0), callback)
        heapq.heappush(self._queue, (call.due_ms, next(self._sequence), call))
        return call

    @property
    def pending_count(self) -> int:
        return sum(1 for _, _, call in self._queue if not call.cancelled)

    def next_due_ms(self) -> Optional[float]:
        """Due time of the earliest live callback, or None when idle."""
        self._discard_cancelled_head()
        return self._queue[0][0] if self._queue else None

    def _discard_cancelled_head(self) -> None:
        while self._queue and self._queue[0][2].cancelled:
            heapq.heappop(self._queue)

    def run_due(self) -> int:
        """Fire every live callback whose due time has passed.

        Callbacks run in due order, ties in scheduling order. A callback
        scheduled by another callback runs in the same pass if already due.

        Returns:
            Number of callbacks fired.
        """
        fired = 0
        now = self.now_ms()
        while True:
            self._discard_cancelled_head()
            if not self._queue or self._queue[0][0] > now:
                return fired
            _, _, call = heapq.heappop(self._queue)
            # Mark spent so a late cancel() is harmless
            call.cancelled = True
            fired += 1
            call.callback()
            self.logger.debug(f"Fired deferred callback due at {call.due_ms:.0f}ms")

    def advance(self, delta_ms: float) -> int:
        """Move a ``ManualClock`` forward and fire what became due."""
        if not isinstance(self._clock, ManualClock):
            raise TypeError("advance() requires a ManualClock")
        self._clock.advance(delta_ms)
        return self.run_due()

    def cancel_all(self) -> None:
        for _, _, call in self._queue:
            call.cancel()
        self._queue.clear()
