"""
Repeating task scheduling.

The session clock runs as a repeating task obtained from a Scheduler. Every
task handle has a ``cancel()`` that is safe to call more than once, and the
owner is expected to cancel it on every exit path.

Two implementations:
    - ThreadScheduler: real time, one daemon thread per task.
    - ManualScheduler: virtual time advanced explicitly with ``advance()``.
      Also exposes ``now()`` so a controller can share its clock.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Protocol

logger = logging.getLogger(__name__)


class ScheduledTask(Protocol):
    """Handle for a scheduled repeating callback."""

    @property
    def cancelled(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Something that can run a callback every ``interval`` seconds."""

    def schedule_repeating(
        self, interval: float, callback: Callable[[], None]
    ) -> ScheduledTask: ...


# =============================================================================
# Real-time scheduler
# =============================================================================

class _ThreadTask:
    """Repeating callback on a daemon thread, stopped by an Event."""

    def __init__(self, interval: float, callback: Callable[[], None], name: str):
        self._interval = interval
        self._callback = callback
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def _run(self) -> None:
        # Event.wait returns True once cancelled
        while not self._stop.wait(self._interval):
            try:
                self._callback()
            except Exception:
                logger.exception("Scheduled callback failed; stopping task")
                self._stop.set()

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()

    def cancel(self) -> None:
        # Does not join; a callback already in flight may still complete
        self._stop.set()


class ThreadScheduler:
    """Scheduler backed by background threads."""

    def __init__(self, name: str = "kickguard-clock"):
        self.name = name

    def schedule_repeating(
        self, interval: float, callback: Callable[[], None]
    ) -> _ThreadTask:
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")
        task = _ThreadTask(interval, callback, self.name)
        task.start()
        return task


# =============================================================================
# Virtual-time scheduler
# =============================================================================

class _ManualTask:
    def __init__(self, interval: float, callback: Callable[[], None], next_due: float):
        self.interval = interval
        self.callback = callback
        self.next_due = next_due
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class ManualScheduler:
    """
    Deterministic scheduler for synchronous hosts and tests.

    Example:
        >>> scheduler = ManualScheduler()
        >>> task = scheduler.schedule_repeating(1.0, on_tick)
        >>> scheduler.advance(3)   # on_tick runs three times
        >>> task.cancel()
    """

    def __init__(self, start: Optional[datetime] = None):
        self._origin = start or datetime(2024, 1, 1, 9, 0, 0)
        self._elapsed = 0.0
        self._tasks: List[_ManualTask] = []

    def now(self) -> datetime:
        """Current virtual time."""
        return self._origin + timedelta(seconds=self._elapsed)

    @property
    def active_tasks(self) -> int:
        return sum(1 for t in self._tasks if not t.cancelled)

    def schedule_repeating(
        self, interval: float, callback: Callable[[], None]
    ) -> _ManualTask:
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")
        task = _ManualTask(interval, callback, self._elapsed + interval)
        self._tasks.append(task)
        return task

    def advance(self, seconds: float) -> None:
        """Move virtual time forward, firing every callback that falls due."""
        target = self._elapsed + seconds
        while True:
            due = [t for t in self._tasks if not t.cancelled and t.next_due <= target]
            if not due:
                break
            task = min(due, key=lambda t: t.next_due)
            self._elapsed = task.next_due
            task.next_due += task.interval
            task.callback()
        self._elapsed = target
        self._tasks = [t for t in self._tasks if not t.cancelled]
