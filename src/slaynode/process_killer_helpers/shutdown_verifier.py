"""Confirm that a signalled process is gone and its ports are free."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from ..errors import TimeoutWaitingForShutdown
from .liveness import is_alive
from .port_probe import PortProbe

logger = logging.getLogger(__name__)

SHUTDOWN_POLL_INTERVAL_SECONDS = 0.5
SHUTDOWN_TIMEOUT_SECONDS = 10.0


class ShutdownVerifier:
    """Polls liveness and port state until both clear or the deadline passes."""

    def __init__(
        self,
        port_probe: Optional[PortProbe] = None,
        liveness_probe: Callable[[int], bool] = is_alive,
        poll_interval: float = SHUTDOWN_POLL_INTERVAL_SECONDS,
        timeout: float = SHUTDOWN_TIMEOUT_SECONDS,
    ):
        self.port_probe = port_probe or PortProbe()
        self.liveness_probe = liveness_probe
        self.poll_interval = poll_interval
        self.timeout = timeout

    async def wait_for_shutdown(self, pid: int, ports: Iterable[int] = ()) -> None:
        """
        Block until ``pid`` is dead and none of ``ports`` is listening.

        Raises:
            TimeoutWaitingForShutdown: The deadline passed first; the process
                was signalled and is presumed dead but could not be confirmed
        """
        monitored: Tuple[int, ...] = tuple(sorted(set(ports)))
        observed: Dict[str, Any] = {"alive": True, "bound": set(monitored)}

        try:
            await asyncio.wait_for(self._poll(pid, monitored, observed), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            logger.warning(
                "Shutdown of process %s unconfirmed after %.1fs (alive=%s, bound=%s)",
                pid,
                self.timeout,
                observed["alive"],
                sorted(observed["bound"]),
            )
            raise TimeoutWaitingForShutdown(pid, monitored, self.timeout) from exc
        logger.info("Confirmed shutdown of process %s", pid)

    async def _poll(self, pid: int, monitored: Tuple[int, ...], observed: Dict[str, Any]) -> None:
        """Probe until the process is dead and no monitored port is bound; ``observed`` holds the last result."""
        while True:
            observed["alive"] = self.liveness_probe(pid)
            observed["bound"] = await self.port_probe.bound_ports(monitored) if monitored else set()
            if not observed["alive"] and not observed["bound"]:
                return
            await asyncio.sleep(self.poll_interval)
