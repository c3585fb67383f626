"""Cancellable periodic background tasks.

Each task sleeps between ticks without holding any lock and runs one bounded
pass per tick. Failures inside a pass are logged so the loop keeps running
for the life of the process, and ``stop()`` cancels it on shutdown.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional

LOGGER = logging.getLogger(__name__)


class PeriodicTask:
    """Run ``action`` every ``interval_seconds`` on the running event loop."""

    def __init__(self, name: str, interval_seconds: float, action: Callable[[], Any]) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        self.name = name
        self.interval_seconds = interval_seconds
        self._action = action
        self._task: Optional[asyncio.Task] = None
        self.runs = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._loop(), name=self.name)
        LOGGER.info("Started %s (every %ss)", self.name, self.interval_seconds)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        LOGGER.info("Stopped %s", self.name)

    async def run_once(self) -> Any:
        """Run a single pass now; errors are logged, not raised."""

        try:
            if inspect.iscoroutinefunction(self._action):
                result = await self._action()
            else:
                # Sync passes (file deletes, lock-taking sweeps) run on a worker thread.
                result = await asyncio.to_thread(self._action)
        except Exception:
            LOGGER.exception("Periodic task %s failed", self.name)
            return None
        finally:
            self.runs += 1
        return result

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self.run_once()
