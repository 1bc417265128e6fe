# SPDX-License-Identifier: MIT

import asyncio
import logging
from typing import Any, Awaitable, Callable

from wordsprint.model.ymd import Ymd

logger = logging.getLogger(__name__)

SyncCallback = Callable[..., Awaitable[Any]]


class DebouncedSyncScheduler:
    """
    Coalesces bursts of edits into one reconciliation per day.

    Each schedule() call for a day cancels the timer still waiting for that
    day and starts a new one. Timers for different days are independent, so
    their callbacks may run concurrently and finish in any order. A callback
    that already started is never cancelled.
    """

    def __init__(self, delay_seconds: float, callback: SyncCallback) -> None:
        self.delay_seconds = delay_seconds
        self._callback = callback
        self._timers: dict[Ymd, asyncio.TimerHandle] = {}
        self._in_flight: set[asyncio.Task[Any]] = set()

    def schedule(self, day: Ymd, *args: Any) -> None:
        loop = asyncio.get_running_loop()
        pending = self._timers.pop(day, None)
        if pending is not None:
            pending.cancel()
        self._timers[day] = loop.call_later(
            self.delay_seconds, self._fire, day, args
        )

    def _fire(self, day: Ymd, args: tuple[Any, ...]) -> None:
        self._timers.pop(day, None)
        task = asyncio.get_running_loop().create_task(self._callback(day, *args))
        self._in_flight.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: "asyncio.Task[Any]") -> None:
        self._in_flight.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Scheduled sync failed", exc_info=error)

    def pending(self) -> list[Ymd]:
        return sorted(self._timers)

    def in_flight(self) -> int:
        return len(self._in_flight)

    def cancel_all(self) -> None:
        """Drop waiting timers. In-flight callbacks are left to settle."""
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()

    async def drain(self) -> None:
        """Wait until no timer is pending and no callback is running."""
        while self._timers or self._in_flight:
            if self._in_flight:
                await asyncio.wait(list(self._in_flight))
            else:
                await asyncio.sleep(self.delay_seconds / 2)
