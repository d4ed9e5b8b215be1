"""
Schedulers - Cancellable deferred callbacks.

The controller never sleeps. When it needs something to happen later
(flip a mismatched pair back, leave a cleared level) it asks a scheduler
to call it back. Two implementations:

- AsyncioScheduler: runs on the current asyncio event loop (API server)
- ManualScheduler: a virtual clock advanced by the caller (tests, CLI)

Both run callbacks on a single thread, in due-time order.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Protocol
import asyncio
import heapq
import itertools


class TimerHandle(Protocol):
    """Handle returned by a scheduler; cancelling it prevents the callback."""

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """
    Schedule callbacks on an asyncio event loop.

    If no loop is given, the loop running at scheduling time is used,
    so this must be called from inside a coroutine or loop callback.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


@dataclass
class ManualTimer:
    """A pending callback on a ManualScheduler."""
    due: float
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualScheduler:
    """
    Virtual-clock scheduler.

    Nothing fires until advance() or run_all() is called.

    Usage:
        scheduler = ManualScheduler()
        controller = GameController(levels, scheduler=scheduler)
        controller.tap(0); controller.tap(1)
        scheduler.advance(1.0)  # mismatch resolves
    """
    now: float = 0.0
    _queue: list[tuple[float, int, ManualTimer]] = field(default_factory=list)
    _counter: itertools.count = field(default_factory=itertools.count)

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(due=self.now + max(delay, 0.0), callback=callback)
        heapq.heappush(self._queue, (timer.due, next(self._counter), timer))
        return timer

    @property
    def pending(self) -> int:
        """Number of callbacks that are scheduled and not cancelled."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    @property
    def next_due(self) -> float | None:
        """Virtual time of the next live callback, if any."""
        live = [due for due, _, timer in self._queue if not timer.cancelled]
        return min(live) if live else None

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward and fire everything now due.

        Callbacks scheduled while firing are honoured if they fall
        inside the window. Returns the number of callbacks fired.
        """
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            if timer.cancelled:
                continue
            timer.callback()
            fired += 1
        self.now = target
        return fired

    def run_all(self) -> int:
        """Fire every pending callback regardless of due time."""
        fired = 0
        while self._queue:
            due, _, timer = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            if timer.cancelled:
                continue
            timer.callback()
            fired += 1
        return fired
