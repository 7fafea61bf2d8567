"""Recurring background refresh of the export artifacts"""

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicRefresh:
    """Runs a callback every ``interval_seconds`` on the event loop.

    Owned by the application lifespan: ``start`` on startup, ``stop`` on
    shutdown. The callback runs on the loop thread, so it never overlaps a
    request handler's own call.
    """

    def __init__(self, callback: Callable[[], object], interval_seconds: float):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.callback = callback
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the recurring task; no-op if it is already running"""
        if self.running:
            logger.debug("Periodic refresh already running")
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info(f"Periodic refresh started (every {self.interval_seconds}s)")

    async def stop(self) -> None:
        """Cancel the recurring task and wait for it to exit"""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Periodic refresh stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.callback()
            except Exception:
                logger.exception("Periodic refresh callback failed")
