"""Minimal discrete-event queue with a monotonically advancing simulated clock.

Events are ordered by ``(time, sequence)`` so that callbacks scheduled for the
same simulated instant run in insertion order. Only what the scheduling core
needs is provided: relative/absolute scheduling, cancellation and a bounded
``run``.
"""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass(order=True)
class Event:
    """One scheduled callback. Ordering uses ``(time, seq)`` only."""

    time: float
    seq: int
    callback: Callable[..., Any] = field(compare=False)
    args: tuple[Any, ...] = field(default=(), compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class EventQueue:
    """Priority queue of events keyed by simulated time and insertion order."""

    def __init__(self) -> None:
        self._heap: list[Event] = []
        self._counter = itertools.count()
        self._now = 0.0
        self._stopped = False

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        """Number of scheduled, non-cancelled events."""
        return sum(1 for event in self._heap if not event.cancelled)

    def schedule(self, delay: float, callback: Callable[..., Any], *args: Any) -> Event:
        """Schedule ``callback(*args)`` after ``delay`` simulated time units."""
        if delay < 0.0:
            raise ValueError("delay must be >= 0")
        return self.schedule_at(self._now + delay, callback, *args)

    def schedule_at(self, time: float, callback: Callable[..., Any], *args: Any) -> Event:
        """Schedule ``callback(*args)`` at absolute simulated ``time``."""
        if time < self._now:
            raise ValueError(f"cannot schedule in the past (time={time}, now={self._now})")
        event = Event(time=time, seq=next(self._counter), callback=callback, args=args)
        heapq.heappush(self._heap, event)
        return event

    def stop(self) -> None:
        """Stop the current ``run`` after the executing callback returns."""
        self._stopped = True

    def run(self, until: float) -> int:
        """Execute events with ``time <= until`` in order; return how many ran.

        The clock is left at ``until`` unless ``stop`` was called, in which
        case it stays at the time of the last executed event.
        """
        if until < self._now:
            raise ValueError("until must be >= now")
        self._stopped = False
        executed = 0
        while self._heap and not self._stopped:
            if self._heap[0].time > until:
                break
            event = heapq.heappop(self._heap)
            if event.cancelled:
                continue
            self._now = event.time
            event.callback(*event.args)
            executed += 1
        if not self._stopped:
            self._now = until
        return executed
