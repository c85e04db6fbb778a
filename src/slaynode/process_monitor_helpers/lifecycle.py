"""Lifecycle management for background collection."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .background_worker import BackgroundScanWorker

logger = logging.getLogger(__name__)


class LifecycleManager:
    """Starts, stops and re-arms the periodic collection task."""

    def __init__(self, background_worker: BackgroundScanWorker, shutdown_event: asyncio.Event):
        self.background_worker = background_worker
        self.shutdown_event = shutdown_event
        self._background_task: Optional[asyncio.Task] = None

    def start_background_scanning(self) -> None:
        """Spawn the timer task; a no-op when it is already running."""
        if self._background_task is not None:
            return

        self.shutdown_event.clear()
        self._background_task = asyncio.create_task(self.background_worker.run_scan_loop())
        logger.info(
            "Started dev server collection timer (interval: %ss)",
            self.background_worker.interval_seconds,
        )

    async def stop_background_scanning(self) -> None:
        """Cancel the timer task along with any collection it is running."""
        if self._background_task is None:
            return

        logger.info("Stopping dev server collection timer")
        self.shutdown_event.set()
        task = self._background_task
        self._background_task = None
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        logger.info("Dev server collection timer stopped")

    def rearm(self, interval_seconds: float) -> None:
        """Apply a new interval; the running timer restarts its wait."""
        if self._background_task is None:
            self.background_worker.interval_seconds = interval_seconds
            return
        self.background_worker.rearm(interval_seconds)
        logger.info("Re-armed collection timer (interval: %ss)", interval_seconds)

    def is_running(self) -> bool:
        return self._background_task is not None
