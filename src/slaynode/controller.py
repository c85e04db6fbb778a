"""
Command surface consumed by a UI: refresh, stop-by-pid and interval changes.

``DevServerController`` owns the only state shared between the collection
path and the termination path: the latest snapshot and the set of pids
currently being stopped. All of it is touched from the event loop thread
only, so no locking is needed.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, FrozenSet, List, Optional, Sequence, Set, Tuple

from .errors import InvalidProcessId, ProcessNotFound, SlayNodeError, TimeoutWaitingForShutdown
from .models import ProcessRecord
from .preferences import PreferencesStore
from .process_killer import ProcessKiller
from .process_monitor import ErrorCallback, ProcessMonitor, Unsubscribe

logger = logging.getLogger(__name__)

ViewsCallback = Callable[[List["ProcessView"]], None]

_NO_PORT = float("inf")


def format_uptime(seconds: float) -> str:
    """Abbreviated duration such as ``1h 2m 3s``; zero-valued units are dropped."""
    total = max(0, int(seconds))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)


@dataclass(frozen=True)
class ProcessView:
    """Presentation-ready row for one process."""

    pid: int
    title: str
    subtitle: str
    ports_description: str
    uptime_description: str
    details: str
    working_directory: Optional[str]
    record: ProcessRecord
    is_stopping: bool

    @classmethod
    def from_record(cls, record: ProcessRecord, is_stopping: bool = False) -> "ProcessView":
        uptime_text = format_uptime(record.uptime)
        chips = [f"PID {record.pid}", f"Uptime {uptime_text}"]
        if record.working_directory:
            chips.append(record.working_directory)
        if record.descriptor.details:
            chips.append(record.descriptor.details)
        return cls(
            pid=record.pid,
            title=_title(record),
            subtitle=record.command,
            ports_description=_ports_description(record.ports),
            uptime_description=uptime_text,
            details=" · ".join(chips),
            working_directory=record.working_directory,
            record=record,
            is_stopping=is_stopping,
        )


def _title(record: ProcessRecord) -> str:
    base = record.descriptor.name
    if not record.ports:
        return base
    return f"{base} • :{', '.join(str(port) for port in record.ports)}"


def _ports_description(ports: Sequence[int]) -> str:
    if not ports:
        return "Port: unknown"
    if len(ports) == 1:
        return f"Port: {ports[0]}"
    return f"Ports: {', '.join(str(port) for port in ports)}"


def sort_key(record: ProcessRecord) -> Tuple[float, str, int]:
    """Lowest port first (portless last), then name case-insensitively, then pid."""
    lowest = min(record.ports) if record.ports else _NO_PORT
    return (lowest, record.descriptor.name.casefold(), record.pid)


class DevServerController:
    """Glues ``ProcessMonitor``, ``ProcessKiller`` and ``PreferencesStore`` together."""

    def __init__(
        self,
        monitor: Optional[ProcessMonitor] = None,
        killer: Optional[ProcessKiller] = None,
        preferences: Optional[PreferencesStore] = None,
    ):
        self.preferences = preferences or PreferencesStore()
        self.monitor = monitor or ProcessMonitor(interval_seconds=self.preferences.refresh_interval)
        self.killer = killer or ProcessKiller()
        self._latest: List[ProcessRecord] = []
        self._stopping: Set[int] = set()
        self._stop_tasks: Set[asyncio.Task] = set()
        self._view_subscribers: List[ViewsCallback] = []
        self.monitor.subscribe_processes(self._on_processes)

    @property
    def latest_processes(self) -> List[ProcessRecord]:
        return list(self._latest)

    @property
    def stopping_pids(self) -> FrozenSet[int]:
        return frozenset(self._stopping)

    def views(self) -> List[ProcessView]:
        """Sorted presentation rows for the latest snapshot."""
        return [
            ProcessView.from_record(record, record.pid in self._stopping)
            for record in sorted(self._latest, key=sort_key)
        ]

    def start(self) -> None:
        """Apply the stored interval, start the timer and collect once right away."""
        self.monitor.update_interval(self.preferences.refresh_interval)
        self.monitor.start()
        self.monitor.request_refresh()

    async def stop(self) -> None:
        await self.monitor.stop()
        tasks = list(self._stop_tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._stop_tasks.clear()
        self._stopping.clear()

    def subscribe(self, callback: ViewsCallback) -> Unsubscribe:
        self._view_subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._view_subscribers:
                self._view_subscribers.remove(callback)

        return _unsubscribe

    def subscribe_errors(self, callback: ErrorCallback) -> Unsubscribe:
        return self.monitor.subscribe_errors(callback)

    def request_refresh(self) -> Optional[asyncio.Task]:
        return self.monitor.request_refresh()

    def set_interval(self, seconds: float) -> int:
        """
        Persist a new refresh interval and re-arm the timer.

        Returns:
            The clamped interval now in effect
        """
        self.preferences.set_refresh_interval(seconds)
        interval = self.preferences.refresh_interval
        self.monitor.update_interval(interval)
        return interval

    def request_stop(self, pid: int) -> Optional[asyncio.Task]:
        """
        Begin stopping ``pid`` in the background.

        Invalid or unknown pids are reported on the error channel right away.
        A pid that is already being stopped is ignored.

        Returns:
            The background stop task, or None when nothing was started
        """
        if pid <= 0:
            self.monitor.publish_error(InvalidProcessId(pid))
            return None
        if pid in self._stopping:
            logger.debug("Process %s is already stopping", pid)
            return None

        record = next((item for item in self._latest if item.pid == pid), None)
        if record is None:
            self.monitor.publish_error(ProcessNotFound(pid))
            return None

        self._stopping.add(pid)
        self._publish_views()
        task = asyncio.get_running_loop().create_task(self._stop(pid, record.ports))
        self._stop_tasks.add(task)
        task.add_done_callback(self._stop_tasks.discard)
        return task

    async def _stop(self, pid: int, ports: Tuple[int, ...]) -> None:
        try:
            await self.killer.terminate_and_confirm(pid, ports)
        except TimeoutWaitingForShutdown as exc:  # policy_guard: allow-silent-handler
            # Signals went out; assume the process is gone and surface a warning.
            self._remove(pid)
            self.monitor.publish_error(exc)
        except SlayNodeError as exc:  # policy_guard: allow-silent-handler
            self._stopping.discard(pid)
            self._publish_views()
            self.monitor.publish_error(exc)
            return
        else:
            self._remove(pid)
        self.monitor.request_refresh()

    def _remove(self, pid: int) -> None:
        self._stopping.discard(pid)
        self._latest = [record for record in self._latest if record.pid != pid]
        self._publish_views()

    def _on_processes(self, records: Sequence[ProcessRecord]) -> None:
        self._latest = list(records)
        self._publish_views()

    def _publish_views(self) -> None:
        views = self.views()
        for callback in list(self._view_subscribers):
            callback(views)


__all__ = ["DevServerController", "ProcessView", "format_uptime", "sort_key"]
