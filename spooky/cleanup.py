"""Cleanup Service - Periodic removal of expired stories."""

import asyncio
from typing import Optional

from core.exceptions import SpookyError
from core.logger import get_logger

from .storage.story_store import StoryStore

logger = get_logger("cleanup")


class CleanupService:
    """Runs ``StoryStore.cleanup_expired`` now and then every interval.

    Started and stopped by the application lifespan. An interval of zero
    or less disables the background task.
    """

    def __init__(self, stories: StoryStore, interval_hours: float = 6.0):
        self.stories = stories
        self.interval_seconds = interval_hours * 3600
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> int:
        """Single sweep. Storage failures are logged and reported as zero."""
        try:
            removed = await self.stories.cleanup_expired()
        except SpookyError as e:
            logger.error("Story cleanup failed", error=str(e))
            return 0
        logger.info("Story cleanup completed", removed=removed)
        return removed

    async def _loop(self) -> None:
        while True:
            await self.run_once()
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        if self.interval_seconds <= 0:
            logger.info("Automatic story cleanup disabled")
            return
        if self.running:
            return
        logger.info("Starting automatic story cleanup", interval_hours=self.interval_seconds / 3600)
        self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Automatic story cleanup stopped")
