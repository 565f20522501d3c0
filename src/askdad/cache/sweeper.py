"""Background task that evicts expired answers on a fixed interval."""

import asyncio
import contextlib
import logging

from .store import AnswerCache

logger = logging.getLogger(__name__)


class CacheSweeper:
    """Periodically calls AnswerCache.sweep from an asyncio task.

    The owner starts it at startup and stops it at shutdown, so the loop
    never outlives the application.
    """

    def __init__(self, cache: AnswerCache, interval: float = 60.0) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.cache = cache
        self.interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the sweep loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"✓ Cache sweeper started (every {self.interval:g}s)")

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Cache sweeper stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.cache.sweep()
            except Exception as e:
                logger.error(f"Error sweeping answer cache: {e}")
