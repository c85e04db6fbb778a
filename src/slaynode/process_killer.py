"""
Stop development servers and confirm they are gone.

Usage:
    from slaynode.process_killer import ProcessKiller

    killer = ProcessKiller()
    await killer.terminate_and_confirm(4242, ports=[3000])
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .errors import InvalidProcessId
from .process_killer_helpers import PortProbe, ProcessTerminator, ShutdownVerifier
from .process_killer_helpers.shutdown_verifier import SHUTDOWN_TIMEOUT_SECONDS
from .process_monitor_helpers.command_runner import CommandRunner

logger = logging.getLogger(__name__)

DEFAULT_GRACE_PERIOD_SECONDS = 1.5


class ProcessKiller:
    """Composes the terminator with shutdown verification."""

    def __init__(
        self,
        terminator: Optional[ProcessTerminator] = None,
        verifier: Optional[ShutdownVerifier] = None,
        *,
        grace_period: float = DEFAULT_GRACE_PERIOD_SECONDS,
        shutdown_timeout: float = SHUTDOWN_TIMEOUT_SECONDS,
        lsof_path: str = "lsof",
        command_timeout: float = 5.0,
    ):
        self.terminator = terminator or ProcessTerminator()
        if verifier is None:
            verifier = ShutdownVerifier(
                PortProbe(CommandRunner(timeout_seconds=command_timeout), lsof_path),
                timeout=shutdown_timeout,
            )
        self.verifier = verifier
        self.grace_period = grace_period

    async def terminate(self, pid: int, force_after: Optional[float] = None) -> None:
        """Signal ``pid``; see ``ProcessTerminator.terminate``."""
        await self.terminator.terminate(pid, self.grace_period if force_after is None else force_after)

    async def terminate_and_confirm(self, pid: int, ports: Iterable[int] = ()) -> None:
        """
        Terminate ``pid`` and wait until it is dead and ``ports`` are released.

        Raises:
            InvalidProcessId, ProcessNotFound, PermissionDenied, TerminationFailed:
                Signal delivery failed
            TimeoutWaitingForShutdown: Signals were sent but shutdown was not confirmed in time
        """
        if pid <= 0:
            raise InvalidProcessId(pid)
        port_list = sorted(set(ports))
        logger.info("Stopping process %s (ports: %s)", pid, port_list or "none")
        await self.terminate(pid)
        await self.verifier.wait_for_shutdown(pid, port_list)


__all__ = ["ProcessKiller"]
