"""Timer scheduling for playback.

Hides where time comes from. Production code runs timers on the
asyncio event loop; tests drive a virtual clock by hand.

Hidden design decisions:
- Every suspension is a cancellable one-shot timer
- Callbacks run on the scheduler's thread, never concurrently
- The manual clock jumps straight to the next due timer
"""

import asyncio
import heapq
import itertools
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Protocol

from ..errors import PlaybackError


class TimerHandle(Protocol):
    """A pending timer that can be cancelled."""

    def cancel(self) -> None: ...

    def cancelled(self) -> bool: ...


class Scheduler(ABC):
    """Source of time and one-shot timers."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        """Run callback(*args) after delay seconds."""

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds on the scheduler's clock."""


class AsyncioScheduler(Scheduler):
    """Scheduler backed by an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> asyncio.TimerHandle:
        return self.loop.call_later(max(delay, 0.0), callback, *args)

    def now(self) -> float:
        return self.loop.time()


class ManualTimer:
    """Timer registered on a ManualScheduler."""

    __slots__ = ("when", "callback", "args", "_cancelled")

    def __init__(self, when: float, callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
        self.when = when
        self.callback = callback
        self.args = args
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """Virtual clock advanced explicitly by the caller.

    Example:
        scheduler = ManualScheduler()
        scheduler.call_later(1.0, print, "tick")
        scheduler.advance(0.5)  # nothing
        scheduler.advance(0.5)  # prints "tick"
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, ManualTimer]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ManualTimer:
        timer = ManualTimer(self._now + max(delay, 0.0), callback, args)
        heapq.heappush(self._queue, (timer.when, next(self._counter), timer))
        return timer

    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        """Number of timers that are due to fire."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled())

    def _pop_due(self, until: float) -> ManualTimer | None:
        while self._queue and self._queue[0][0] <= until:
            _, _, timer = heapq.heappop(self._queue)
            if not timer.cancelled():
                return timer
        return None

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing every timer that comes due.

        Returns:
            Number of callbacks run
        """
        target = self._now + seconds
        fired = 0
        while (timer := self._pop_due(target)) is not None:
            self._now = timer.when
            timer.callback(*timer.args)
            fired += 1
        self._now = target
        return fired

    def run_until_idle(self, max_callbacks: int = 1_000_000) -> int:
        """Fire timers in order until none are left.

        Raises:
            PlaybackError: If timers keep rescheduling past max_callbacks
        """
        fired = 0
        while (timer := self._pop_due(float("inf"))) is not None:
            if fired >= max_callbacks:
                raise PlaybackError(f"scheduler still busy after {max_callbacks} callbacks")
            self._now = max(self._now, timer.when)
            timer.callback(*timer.args)
            fired += 1
        return fired
