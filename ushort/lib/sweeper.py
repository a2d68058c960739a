"""Periodic expiry sweep."""

import asyncio
import logging
from typing import Optional

from .service import MappingLifecycle


class ExpirySweeper:
    """Run ``MappingLifecycle.sweep_expired`` on a fixed interval.

    A failed sweep is logged and the loop keeps going; the next tick simply
    tries again.
    """

    def __init__(
        self,
        lifecycle: MappingLifecycle,
        interval_seconds: float,
        logger: Optional[logging.Logger] = None,
    ):
        self.lifecycle = lifecycle
        self.interval_seconds = interval_seconds
        self.logger = logger or logging.getLogger(__name__)
        self._task: Optional[asyncio.Task] = None

    @property
    def enabled(self) -> bool:
        return self.interval_seconds > 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> int:
        deleted = await self.lifecycle.sweep_expired()
        self.logger.info(f"Expiry sweep completed: {deleted} URLs deleted")
        return deleted

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.run_once()
            except Exception as e:
                self.logger.error(f"Error during expiry sweep: {e}")

    def start(self) -> None:
        """Start the background loop (no-op when disabled or already running)."""
        if not self.enabled:
            self.logger.info("Expiry sweep disabled")
            return
        if self.running:
            return
        self.logger.info(f"Starting expiry sweep every {self.interval_seconds}s")
        self._task = asyncio.get_running_loop().create_task(self._loop())

    async def stop(self) -> None:
        """Cancel the background loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self.logger.info("Expiry sweep stopped")
