"""Periodic cleanup for long-running hosts."""

import logging
import threading

from feedcal.config import CleanupConfig
from feedcal.exceptions import FeedError
from feedcal.storage.feed_router import FeedRouter

logger = logging.getLogger(__name__)


class PeriodicCleanup(threading.Thread):
    """Daemon thread running router cleanup every interval_minutes."""

    def __init__(self, router: FeedRouter, config: CleanupConfig | None = None):
        super().__init__(name="feedcal-cleanup", daemon=True)
        self.router = router
        self.config = config or CleanupConfig()
        self._stop_event = threading.Event()

    def run_once(self) -> int:
        try:
            removed = self.router.cleanup(
                self.config.retention_days, self.config.max_past_events
            )
        except FeedError as e:
            logger.error(f"Periodic cleanup failed: {e}")
            return 0
        if removed:
            logger.info(f"Periodic cleanup removed {removed} event(s)")
        return removed

    def run(self) -> None:
        interval = self.config.interval_minutes * 60
        while not self._stop_event.wait(interval):
            self.run_once()

    def stop(self) -> None:
        self._stop_event.set()
