"""
Periodic, non-overlapping collection of development-server processes.

``ProcessMonitor`` ties the collection pipeline to a timer:

1. a background task ticks every ``interval_seconds`` (after a 1s initial delay)
2. each tick, or an explicit refresh, asks the ``ScanCoordinator`` to collect
3. requests that arrive mid-collection are coalesced into one follow-up run
4. results go to process subscribers, failures to error subscribers

Stopping the monitor cancels the timer and any in-flight collection; a
cancelled collection publishes nothing.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional, Sequence, Set

from .errors import ErrorKind, SlayNodeError
from .models import ProcessRecord
from .process_monitor_helpers import (
    BackgroundScanWorker,
    CommandRunner,
    LifecycleManager,
    ProcessScanner,
    ScanCoordinator,
)
from .process_monitor_helpers.scan_coordinator import Collector

logger = logging.getLogger(__name__)

INTERVAL_EPSILON_SECONDS = 0.01
DEFAULT_INTERVAL_SECONDS = 5.0

ProcessesCallback = Callable[[Sequence[ProcessRecord]], None]
ErrorCallback = Callable[[ErrorKind, str], None]
Unsubscribe = Callable[[], None]


class ProcessMonitor:
    """Scheduler facade publishing process snapshots and collection errors."""

    def __init__(
        self,
        collector: Optional[Collector] = None,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        *,
        ps_path: str = "ps",
        lsof_path: str = "lsof",
        command_timeout: float = 5.0,
    ):
        if collector is None:
            collector = ProcessScanner(
                CommandRunner(timeout_seconds=command_timeout),
                ps_path=ps_path,
                lsof_path=lsof_path,
                on_enrichment_error=self.publish_error,
            )
        self.collector = collector
        self._process_subscribers: List[ProcessesCallback] = []
        self._error_subscribers: List[ErrorCallback] = []
        self._latest: List[ProcessRecord] = []
        self._refresh_tasks: Set[asyncio.Task] = set()
        self._shutdown_event = asyncio.Event()
        self._scan_coordinator = ScanCoordinator(collector, self._publish_processes, self.publish_error)
        self._background_worker = BackgroundScanWorker(
            interval_seconds,
            self._scan_coordinator.request_collection,
            self._shutdown_event,
        )
        self._lifecycle = LifecycleManager(self._background_worker, self._shutdown_event)

    @property
    def interval_seconds(self) -> float:
        return self._background_worker.interval_seconds

    @property
    def latest_processes(self) -> List[ProcessRecord]:
        """Copy of the most recently published snapshot."""
        return list(self._latest)

    @property
    def is_running(self) -> bool:
        return self._lifecycle.is_running()

    @property
    def is_collecting(self) -> bool:
        return self._scan_coordinator.is_collecting

    def start(self) -> None:
        """Begin periodic collection. Must be called from a running event loop."""
        self._lifecycle.start_background_scanning()

    async def stop(self) -> None:
        """Cancel the timer, pending refreshes and any in-flight collection."""
        await self._lifecycle.stop_background_scanning()
        tasks = list(self._refresh_tasks)
        self._refresh_tasks.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def update_interval(self, interval_seconds: float) -> bool:
        """
        Change the collection interval.

        Returns:
            True if the timer was re-armed, False if the change was too small to matter
        """
        if interval_seconds <= 0:
            raise ValueError(f"interval must be positive (got {interval_seconds})")
        if abs(interval_seconds - self.interval_seconds) <= INTERVAL_EPSILON_SECONDS:
            return False
        self._lifecycle.rearm(interval_seconds)
        return True

    async def refresh(self) -> bool:
        """Collect now, or coalesce into the in-flight collection."""
        return await self._scan_coordinator.request_collection()

    def request_refresh(self) -> Optional[asyncio.Task]:
        """
        Schedule an out-of-band collection without waiting for it.

        Returns:
            The scheduled task, or None when the request was coalesced into a running collection
        """
        if self._scan_coordinator.mark_pending():
            return None
        task = asyncio.get_running_loop().create_task(self._scan_coordinator.request_collection())
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)
        return task

    def subscribe_processes(self, callback: ProcessesCallback) -> Unsubscribe:
        self._process_subscribers.append(callback)
        return _unsubscriber(self._process_subscribers, callback)

    def subscribe_errors(self, callback: ErrorCallback) -> Unsubscribe:
        self._error_subscribers.append(callback)
        return _unsubscriber(self._error_subscribers, callback)

    def publish_error(self, error: SlayNodeError) -> None:
        """Deliver ``(kind, message)`` to every error subscriber."""
        logger.warning("Publishing %s: %s", error.kind.value, error.message)
        for callback in list(self._error_subscribers):
            callback(error.kind, error.message)

    def _publish_processes(self, records: Sequence[ProcessRecord]) -> None:
        self._latest = list(records)
        logger.debug("Publishing %d processes to %d subscribers", len(records), len(self._process_subscribers))
        for callback in list(self._process_subscribers):
            callback(list(records))


def _unsubscriber(subscribers: list, callback) -> Unsubscribe:
    def _unsubscribe() -> None:
        if callback in subscribers:
            subscribers.remove(callback)

    return _unsubscribe


__all__ = ["ProcessMonitor", "ProcessesCallback", "ErrorCallback", "Unsubscribe"]
