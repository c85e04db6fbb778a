"""Background collection worker."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

INITIAL_DELAY_SECONDS = 1.0


class BackgroundScanWorker:
    """Runs the periodic collection loop until ``shutdown_event`` is set."""

    def __init__(
        self,
        interval_seconds: float,
        request_collection: Callable[[], Awaitable[object]],
        shutdown_event: asyncio.Event,
        initial_delay_seconds: float = INITIAL_DELAY_SECONDS,
    ):
        self.interval_seconds = interval_seconds
        self.request_collection = request_collection
        self.shutdown_event = shutdown_event
        self.initial_delay_seconds = initial_delay_seconds
        self._rearm_event = asyncio.Event()

    def rearm(self, interval_seconds: float) -> None:
        """Adopt a new interval and restart the current wait from zero."""
        self.interval_seconds = interval_seconds
        self._rearm_event.set()

    async def run_scan_loop(self) -> None:
        """Tick once after the initial delay, then every ``interval_seconds``."""
        logger.debug("Process monitor background loop started (interval: %ss)", self.interval_seconds)

        delay = self.initial_delay_seconds
        while not self.shutdown_event.is_set():
            if not await self._sleep(delay):
                # Interval changed mid-wait; start a fresh wait with the new value.
                delay = self.interval_seconds
                continue
            if self.shutdown_event.is_set():
                break
            try:
                await self.request_collection()
            except Exception:  # policy_guard: allow-silent-handler
                logger.exception("Error in process monitor background loop")
            delay = self.interval_seconds

        logger.debug("Process monitor background loop stopped")

    async def _sleep(self, delay: float) -> bool:
        """Wait ``delay`` seconds. Returns False if re-armed early, True otherwise."""
        self._rearm_event.clear()
        waiters = [
            asyncio.ensure_future(self.shutdown_event.wait()),
            asyncio.ensure_future(self._rearm_event.wait()),
        ]
        try:
            await asyncio.wait(waiters, timeout=delay, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in waiters:
                waiter.cancel()
        return not self._rearm_event.is_set() or self.shutdown_event.is_set()
