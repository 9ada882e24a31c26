"""Fixed-cadence timer driving the poll cycles."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


class PollingScheduler:
    """Invoke ``job`` immediately and then every ``interval`` seconds.

    Each firing runs as its own task, so a slow job never delays the next
    firing. :meth:`stop` only suppresses future firings; jobs already running
    are left to settle.
    """

    def __init__(self, job: Callable[[], Awaitable[Any]], interval: float) -> None:
        if interval <= 0:
            raise ValueError("Polling interval must be positive")
        self._job = job
        self.interval = interval
        self._timer: asyncio.Task[None] | None = None
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def start(self) -> None:
        """Start the timer; a no-op when it is already running."""

        if self.running:
            return
        loop = asyncio.get_running_loop()
        self._timer = loop.create_task(self._tick_forever())

    def stop(self) -> None:
        if self._timer is None:
            return
        self._timer.cancel()
        self._timer = None

    async def _tick_forever(self) -> None:
        while True:
            self._fire()
            await asyncio.sleep(self.interval)

    def _fire(self) -> None:
        task = asyncio.get_running_loop().create_task(self._invoke())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _invoke(self) -> None:
        try:
            await self._job()
        except Exception:
            logger.exception("Scheduled poll cycle failed")


__all__ = ["PollingScheduler"]
