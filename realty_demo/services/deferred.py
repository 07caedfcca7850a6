from __future__ import annotations

import heapq
import itertools
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Protocol, Tuple

logger = logging.getLogger("realty_demo.deferred")


# =========================================================
# CLOCKS
# =========================================================

class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class ManualClock:
    """
    Virtual clock for tests and replays. Time only moves on advance().
    """

    def __init__(self, start: Optional[datetime] = None) -> None:
        self._now = start or datetime(2024, 10, 1, 9, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> datetime:
        if seconds < 0:
            raise ValueError("ManualClock cannot move backwards")
        self._now = self._now + timedelta(seconds=seconds)
        return self._now


# =========================================================
# TASKS
# =========================================================

class DeferredTask:
    """Handle for a callback scheduled to run once at due_at."""

    def __init__(self, due_at: datetime, callback: Callable[[], None], label: str) -> None:
        self.due_at = due_at
        self.label = label
        self._callback = callback
        self.cancelled = False
        self.done = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.done)

    def cancel(self) -> bool:
        """Cancel if still pending. Returns True if this call cancelled it."""
        if not self.pending:
            return False
        self.cancelled = True
        logger.debug("Cancelled deferred task %s", self.label)
        return True

    def _run(self) -> None:
        self.done = True
        self._callback()

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "done" if self.done else "pending"
        return f"DeferredTask(label={self.label!r}, due_at={self.due_at.isoformat()}, {state})"


class DeferredTaskScheduler:
    """
    Cancellable delayed tasks advanced by an explicit pump.

    Nothing runs on its own: run_due() executes whatever is due according to
    the injected clock. The app pumps it from a background coroutine; tests
    pump it after moving a ManualClock.
    """

    def __init__(self, clock: Clock) -> None:
        self.clock = clock
        self._queue: List[Tuple[datetime, int, DeferredTask]] = []
        self._counter = itertools.count()

    def schedule(
        self,
        delay_seconds: float,
        callback: Callable[[], None],
        label: str = "task",
    ) -> DeferredTask:
        due_at = self.clock.now() + timedelta(seconds=max(0.0, delay_seconds))
        task = DeferredTask(due_at, callback, label)
        heapq.heappush(self._queue, (due_at, next(self._counter), task))
        logger.debug("Scheduled %s for %s", label, due_at.isoformat())
        return task

    def pending_tasks(self) -> List[DeferredTask]:
        return [task for _, _, task in sorted(self._queue) if task.pending]

    def run_due(self) -> int:
        """Run every pending task due at or before now. Returns how many ran."""
        now = self.clock.now()
        ran = 0
        while self._queue and self._queue[0][0] <= now:
            _, _, task = heapq.heappop(self._queue)
            if not task.pending:
                continue
            try:
                task._run()
            except Exception:
                logger.exception("Deferred task %s failed", task.label)
            ran += 1
        return ran

    def advance(self, seconds: float) -> int:
        """Move a ManualClock forward and run what became due."""
        advance = getattr(self.clock, "advance", None)
        if advance is None:
            raise TypeError("advance() requires a clock with an advance(seconds) method")
        advance(seconds)
        return self.run_due()

    def cancel_all(self) -> int:
        cancelled = sum(1 for _, _, task in self._queue if task.cancel())
        self._queue.clear()
        return cancelled
