"""
Cooperative Scheduler
=====================

Virtual-clock timer facility for the engine's periodic processes.

Nothing runs on its own: a driver calls ``advance(dt)`` and every task due
inside that window runs to completion, one at a time, in due-time order.
Tasks due at the same instant run in the order they were scheduled.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Optional, Tuple

# Tolerance for comparing float due times against the clock
_EPS = 1e-9


class TaskHandle:
    """A scheduled one-shot or periodic callback. Cancel with ``cancel()``."""

    __slots__ = ("callback", "interval", "name", "_anchor", "_runs", "_due", "_cancelled")

    def __init__(
        self,
        callback: Callable[[], None],
        due: float,
        interval: Optional[float] = None,
        name: str = ""
    ):
        self.callback = callback
        self.interval = interval
        self.name = name
        self._anchor = due
        self._runs = 0
        self._due = due
        self._cancelled = False

    @property
    def due(self) -> float:
        return self._due

    @property
    def periodic(self) -> bool:
        return self.interval is not None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def _reschedule(self) -> None:
        # Multiply from the anchor instead of accumulating to avoid drift
        self._runs += 1
        self._due = self._anchor + self._runs * self.interval

    def __repr__(self) -> str:
        kind = f"every {self.interval:g}s" if self.periodic else "once"
        state = " cancelled" if self._cancelled else ""
        return f"TaskHandle({self.name or self.callback!r}, due={self._due:.4f}, {kind}{state})"


class CooperativeScheduler:
    """
    Single-threaded scheduler over a virtual clock.

    The clock starts at 0.0 and only moves inside ``advance``.
    """

    def __init__(self):
        self._now: float = 0.0
        self._queue: List[Tuple[float, int, TaskHandle]] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        """Current virtual time in seconds."""
        return self._now

    @property
    def pending(self) -> int:
        """Number of live (not cancelled) tasks."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def _push(self, handle: TaskHandle) -> None:
        heapq.heappush(self._queue, (handle.due, next(self._seq), handle))

    def call_later(
        self,
        delay: float,
        callback: Callable[[], None],
        name: str = ""
    ) -> TaskHandle:
        """
        Run ``callback`` once, ``delay`` seconds from now.

        Raises:
            ValueError: If delay is negative.
        """
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        handle = TaskHandle(callback, self._now + delay, name=name)
        self._push(handle)
        return handle

    def call_every(
        self,
        interval: float,
        callback: Callable[[], None],
        name: str = ""
    ) -> TaskHandle:
        """
        Run ``callback`` every ``interval`` seconds, first run one interval from now.

        Raises:
            ValueError: If interval is not positive.
        """
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        handle = TaskHandle(callback, self._now + interval, interval=interval, name=name)
        self._push(handle)
        return handle

    def advance(self, dt: float) -> int:
        """
        Move the clock forward by ``dt`` seconds, running every task due.

        Tasks scheduled by callbacks that fall inside the window also run.

        Args:
            dt: Seconds to advance.

        Returns:
            Number of callbacks executed.

        Raises:
            ValueError: If dt is negative.
        """
        if dt < 0:
            raise ValueError(f"dt must be >= 0, got {dt}")

        target = self._now + dt
        executed = 0
        while self._queue:
            due, _, handle = self._queue[0]
            if due > target + _EPS:
                break
            heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = max(self._now, due)
            if handle.periodic:
                handle._reschedule()
                self._push(handle)
            else:
                handle.cancel()
            handle.callback()
            executed += 1

        self._now = max(self._now, target)
        return executed

    def cancel_all(self) -> None:
        """Cancel and drop every scheduled task."""
        for _, _, handle in self._queue:
            handle.cancel()
        self._queue.clear()

    def reset(self) -> None:
        """Drop all tasks and rewind the clock to zero."""
        self.cancel_all()
        self._now = 0.0
