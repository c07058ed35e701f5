"""Clock, timer and request-gate primitives for the search controller.

All times are epoch milliseconds. ``ManualClock`` doubles as a scheduler so
tests can step time forward and fire watchdogs deterministically.
"""

import asyncio
import heapq
import itertools
import logging
import time
from abc import ABC, abstractmethod
from typing import Callable

import config

logger = logging.getLogger(__name__)


class Clock(ABC):
    @abstractmethod
    def now(self) -> int: ...


class SystemClock(Clock):
    def now(self) -> int:
        return int(time.time() * 1000)


class TimerHandle(ABC):
    @abstractmethod
    def cancel(self) -> None:
        """Stop the timer. Safe to call more than once."""


class Scheduler(ABC):
    @abstractmethod
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...


class _AsyncioHandle(TimerHandle):
    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()


class AsyncioScheduler(Scheduler):
    """Schedules on the running event loop."""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        loop = asyncio.get_running_loop()
        return _AsyncioHandle(loop.call_later(delay_ms / 1000, callback))


class _ManualHandle(TimerHandle):
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualClock(Clock, Scheduler):
    """Clock that only moves when told to, firing due timers as it goes."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self._now = start
        self._timers: list[tuple[int, int, _ManualHandle, Callable[[], None]]] = []
        self._seq = itertools.count()

    def now(self) -> int:
        return self._now

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        handle = _ManualHandle()
        heapq.heappush(self._timers, (self._now + delay_ms, next(self._seq), handle, callback))
        return handle

    def advance(self, ms: int) -> None:
        target = self._now + ms
        while self._timers and self._timers[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._timers)
            self._now = due
            if not handle.cancelled:
                callback()
        self._now = target

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h, _ in self._timers if not h.cancelled)


class RequestGate:
    """Single-flight flag plus a minimum gap between requests.

    Advisory and process-local. A watchdog clears a flight that never
    finishes so the caller is never left gated.
    """

    def __init__(
        self,
        clock: Clock,
        scheduler: Scheduler,
        min_gap_ms: int = config.REQUEST_GAP_MS,
        watchdog_ms: int = config.WATCHDOG_MS,
        on_reset: Callable[[], None] | None = None,
    ) -> None:
        self.clock = clock
        self.scheduler = scheduler
        self.min_gap_ms = min_gap_ms
        self.watchdog_ms = watchdog_ms
        self.on_reset = on_reset
        self.in_flight = False
        self.last_request_at = 0
        self._watchdog: TimerHandle | None = None
        self._ticket = 0

    def permits(self) -> bool:
        if self.in_flight:
            return False
        return self.clock.now() - self.last_request_at >= self.min_gap_ms

    def begin(self) -> int:
        self._disarm()
        self._ticket += 1
        self.in_flight = True
        self.last_request_at = self.clock.now()
        self._watchdog = self.scheduler.call_later(self.watchdog_ms, self._expire)
        return self._ticket

    def finish(self, ticket: int) -> bool:
        """Clear the flight. False if the ticket is stale and nothing changed."""
        # A flight already reset by the watchdog must not clear a newer one.
        if ticket != self._ticket:
            return False
        self._disarm()
        self.in_flight = False
        return True

    def _disarm(self) -> None:
        if self._watchdog is not None:
            self._watchdog.cancel()
            self._watchdog = None

    def _expire(self) -> None:
        logger.warning("Safety reset: request still in flight after %d ms", self.watchdog_ms)
        self._watchdog = None
        self._ticket += 1
        self.in_flight = False
        if self.on_reset is not None:
            self.on_reset()
