"""Periodic sync using pure asyncio.

Jobs:
- Sync: merge with the remote record store every ``sync.interval`` seconds
- Cleanup: prune old version backups once a day
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tearlog.config import TearlogConfig
    from tearlog.journal import Journal
    from tearlog.sync.base import RecordStore

logger = logging.getLogger(__name__)

VERSIONS_TO_KEEP = 200


class SyncScheduler:
    """Simple asyncio-based scheduler for periodic sync."""

    def __init__(self, journal: Journal, remote: RecordStore, config: TearlogConfig) -> None:
        self._journal = journal
        self._remote = remote
        self._interval = config.sync.interval
        self.runs = 0

    async def start(self, shutdown_event: asyncio.Event) -> None:
        """Run jobs until shutdown_event is set. The first sync runs immediately."""
        logger.info("Scheduler started (sync every %ds via %s)", self._interval, self._remote.name)

        last_cleanup_date: str | None = None

        while not shutdown_event.is_set():
            await self._sync()

            today = datetime.now().strftime("%Y-%m-%d")
            if last_cleanup_date != today:
                self._cleanup()
                last_cleanup_date = today

            try:
                await asyncio.wait_for(shutdown_event.wait(), timeout=self._interval)
                break
            except asyncio.TimeoutError:
                pass

        logger.info("Scheduler stopped.")

    async def _sync(self) -> None:
        self.runs += 1
        try:
            report = await self._journal.sync(self._remote)
        except Exception as e:
            logger.error("Scheduled sync failed: %s", e)
            return
        if report.skipped:
            logger.info("Scheduled sync skipped (%s)", report.status.value)

    def _cleanup(self) -> None:
        removed = self._journal.store.cleanup_old_versions(keep=VERSIONS_TO_KEEP)
        if removed:
            logger.info("Cleanup: removed %d old versions", removed)
