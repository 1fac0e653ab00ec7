"""
Clock - timer substrate for the simulation engine.

Every timer is an owned TimerHandle that can be cancelled on its own.
The clock implementation is swappable:

  - AsyncioClock: real timers on the running event loop (loop.call_at)
  - ManualClock: deterministic virtual time, advanced explicitly by tests

All times are milliseconds. Callbacks run one at a time on the loop thread
(or inside ManualClock.advance), so engine state needs no locking.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Tuple


class TimerHandle:
    """
    One-shot or periodic timer owned by whoever scheduled it.

    cancel() is idempotent and takes effect immediately: a cancelled handle
    never invokes its callback, even if the underlying loop callback was
    already queued.
    """

    def __init__(
        self,
        clock: "Clock",
        callback: Callable[[], None],
        due: float,
        interval: Optional[float] = None,
        label: str = "",
    ):
        self._clock = clock
        self._callback = callback
        self.due = due
        self.interval = interval
        self.label = label
        self._cancelled = False
        self._finished = False
        self._native: Optional[asyncio.TimerHandle] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def active(self) -> bool:
        """True while the callback may still run"""
        return not (self._cancelled or self._finished)

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._clock._disarm(self)

    def _fire(self) -> None:
        self._native = None
        if not self.active:
            return

        if self.interval is None:
            self._finished = True
        else:
            # Re-arm on a fixed cadence from the original due time
            self.due += self.interval
            self._clock._arm(self)

        self._callback()

    def __repr__(self):
        kind = f"every {self.interval}ms" if self.interval is not None else "once"
        state = "active" if self.active else ("cancelled" if self._cancelled else "done")
        return f"TimerHandle({self.label or '?'}, due={self.due:.1f}, {kind}, {state})"


class Clock:
    """Base clock: scheduling API shared by real and virtual clocks."""

    def now(self) -> float:
        """Monotonic time in milliseconds"""
        raise NotImplementedError

    def wall_time(self) -> datetime:
        """Wall-clock instant used for transaction timestamps"""
        return datetime.now()

    def call_later(self, delay_ms: float, callback: Callable[[], None], label: str = "") -> TimerHandle:
        """Run callback once after delay_ms"""
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")
        handle = TimerHandle(self, callback, self.now() + delay_ms, label=label)
        self._arm(handle)
        return handle

    def call_every(self, interval_ms: float, callback: Callable[[], None], label: str = "") -> TimerHandle:
        """Run callback every interval_ms, first run one interval from now"""
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be > 0, got {interval_ms}")
        handle = TimerHandle(self, callback, self.now() + interval_ms, interval=interval_ms, label=label)
        self._arm(handle)
        return handle

    def _arm(self, handle: TimerHandle) -> None:
        raise NotImplementedError

    def _disarm(self, handle: TimerHandle) -> None:
        pass


class AsyncioClock(Clock):
    """
    Clock backed by the asyncio event loop.

    The loop is resolved lazily so the clock can be built before the
    loop starts running.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self.loop.time() * 1000.0

    def _arm(self, handle: TimerHandle) -> None:
        handle._native = self.loop.call_at(handle.due / 1000.0, handle._fire)

    def _disarm(self, handle: TimerHandle) -> None:
        if handle._native is not None:
            handle._native.cancel()
            handle._native = None


class ManualClock(Clock):
    """
    Deterministic virtual clock.

    Time only moves on advance(); due timers fire in (due, scheduling order)
    order and each callback observes now() == its due time.

    Example:
        clock = ManualClock()
        clock.call_later(200, cb)
        clock.advance(199)   # nothing
        clock.advance(1)     # cb runs at t=200
    """

    def __init__(self, start_ms: float = 0.0, wall_start: Optional[datetime] = None):
        self._now = start_ms
        self._wall_start = wall_start or datetime(2025, 1, 1, 12, 0, 0)
        self._queue: List[Tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def wall_time(self) -> datetime:
        return self._wall_start + timedelta(milliseconds=self._now)

    def _arm(self, handle: TimerHandle) -> None:
        heapq.heappush(self._queue, (handle.due, next(self._seq), handle))

    def pending(self) -> int:
        """Number of timers that can still fire"""
        return sum(1 for _, _, h in self._queue if h.active)

    def advance(self, ms: float) -> None:
        """Move virtual time forward by ms, firing every timer that comes due"""
        if ms < 0:
            raise ValueError("ManualClock cannot go backwards")

        target = self._now + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if not handle.active:
                continue
            self._now = max(self._now, due)
            handle._fire()
        self._now = target
