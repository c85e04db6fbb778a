"""Scan coordination logic."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Protocol, Sequence

from ..errors import CommandExecutionFailed, MalformedOutput, SlayNodeError
from ..models import ProcessRecord

logger = logging.getLogger(__name__)

_COLLECTION_TIMEOUT_SECONDS = 15.0

ProcessesPublisher = Callable[[Sequence[ProcessRecord]], None]
ErrorPublisher = Callable[[SlayNodeError], None]


class Collector(Protocol):
    def collect(self) -> Awaitable[List[ProcessRecord]]: ...


class ScanCoordinator:
    """
    Serializes collections and coalesces requests that arrive mid-scan.

    At most one collection runs at a time. Any number of requests made while
    one is in flight collapse into a single follow-up collection.
    """

    def __init__(
        self,
        collector: Collector,
        publish_processes: ProcessesPublisher,
        publish_error: ErrorPublisher,
        collection_timeout: float = _COLLECTION_TIMEOUT_SECONDS,
    ):
        self.collector = collector
        self.publish_processes = publish_processes
        self.publish_error = publish_error
        self.collection_timeout = collection_timeout
        self._lock = asyncio.Lock()
        self._collecting = False
        self._pending = False

    @property
    def is_collecting(self) -> bool:
        return self._collecting

    @property
    def has_pending_refresh(self) -> bool:
        return self._pending

    def mark_pending(self) -> bool:
        """Set the follow-up flag if a collection is running. Returns whether it was set."""
        if not self._collecting:
            return False
        self._pending = True
        return True

    async def request_collection(self) -> bool:
        """
        Collect now, or mark a follow-up if a collection is already running.

        Returns:
            True if this call ran the collection loop, False if it was coalesced
        """
        if self.mark_pending():
            logger.debug("Collection in flight, coalescing refresh request")
            return False

        self._collecting = True
        try:
            async with self._lock:
                while True:
                    self._pending = False
                    await self._collect_once()
                    if not self._pending:
                        break
                    logger.debug("Running coalesced follow-up collection")
        finally:
            self._collecting = False
            self._pending = False
        return True

    async def _collect_once(self) -> None:
        try:
            records = await asyncio.wait_for(self.collector.collect(), timeout=self.collection_timeout)
        except asyncio.TimeoutError:  # policy_guard: allow-silent-handler
            logger.warning("Process collection timed out after %.1fs", self.collection_timeout)
            self.publish_error(
                CommandExecutionFailed(
                    "collection",
                    -1,
                    f"Process collection timed out after {self.collection_timeout:g}s",
                )
            )
            return
        except SlayNodeError as exc:  # policy_guard: allow-silent-handler
            logger.warning("Process collection failed: %s", exc)
            self.publish_error(exc)
            return
        except OSError as exc:  # policy_guard: allow-silent-handler
            logger.exception("Process collection failed")
            self.publish_error(CommandExecutionFailed("collection", -1, str(exc)))
            return
        except Exception as exc:  # policy_guard: allow-silent-handler
            logger.exception("Process collection raised unexpectedly")
            error = MalformedOutput(f"Could not process the process list: {exc!r}")
            error.__cause__ = exc
            self.publish_error(error)
            return

        self.publish_processes(list(records))

