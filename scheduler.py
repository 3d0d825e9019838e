from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, List, Optional

TimerCallback = Callable[[], None]


@dataclass
class TimerHandle:
    """A pending one-shot or repeating timer; ``cancel()`` is idempotent."""

    due_ms: int
    callback: TimerCallback
    interval_ms: Optional[int] = None
    active: bool = True

    def cancel(self) -> None:
        self.active = False


@dataclass(order=True)
class _QueueEntry:
    due_ms: int
    seq: int
    handle: TimerHandle = field(compare=False)


class Scheduler:
    """Single-threaded virtual-clock timer queue.

    Nothing runs on its own: the owner calls ``advance(ms)`` (the pygame loop
    passes ``clock.tick()``'s delta) and every timer that became due runs on
    the caller's thread, earliest first, ties in registration order. A
    repeating timer that fell behind fires once per elapsed period.
    """

    def __init__(self) -> None:
        self.now_ms = 0
        self._queue: List[_QueueEntry] = []
        self._seq = itertools.count()

    def set_timeout(self, delay_ms: int, callback: TimerCallback) -> TimerHandle:
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")
        handle = TimerHandle(due_ms=self.now_ms + delay_ms, callback=callback)
        self._push(handle)
        return handle

    def set_interval(self, interval_ms: int, callback: TimerCallback) -> TimerHandle:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be > 0, got {interval_ms}")
        handle = TimerHandle(due_ms=self.now_ms + interval_ms, callback=callback, interval_ms=interval_ms)
        self._push(handle)
        return handle

    def pending(self) -> int:
        return sum(1 for entry in self._queue if entry.handle.active)

    def advance(self, elapsed_ms: int) -> int:
        """Move the clock forward and run due callbacks. Returns how many ran."""
        if elapsed_ms < 0:
            raise ValueError(f"elapsed_ms must be >= 0, got {elapsed_ms}")
        target = self.now_ms + elapsed_ms
        fired = 0
        while self._queue and self._queue[0].due_ms <= target:
            entry = heapq.heappop(self._queue)
            handle = entry.handle
            if not handle.active:
                continue
            self.now_ms = entry.due_ms
            if handle.interval_ms is not None:
                handle.due_ms += handle.interval_ms
                self._push(handle)
            else:
                handle.active = False
            handle.callback()
            fired += 1
        self.now_ms = target
        return fired

    def _push(self, handle: TimerHandle) -> None:
        heapq.heappush(self._queue, _QueueEntry(handle.due_ms, next(self._seq), handle))
