"""Graceful-then-forceful termination of a single process."""

from __future__ import annotations

import asyncio
import errno
import logging
import signal
from typing import Callable

import psutil

from ..errors import InvalidProcessId, PermissionDenied, ProcessNotFound, TerminationFailed
from .liveness import is_alive

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 0.1


class ProcessTerminator:
    """Sends SIGTERM, waits up to ``force_after`` seconds, then SIGKILL."""

    def __init__(
        self,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        liveness_probe: Callable[[int], bool] = is_alive,
    ):
        self.poll_interval = poll_interval
        self.liveness_probe = liveness_probe

    async def terminate(self, pid: int, force_after: float) -> None:
        """
        Stop ``pid`` gracefully, escalating to SIGKILL after ``force_after`` seconds.

        Args:
            pid: Target process id
            force_after: Grace period; ``<= 0`` returns right after SIGTERM

        Raises:
            InvalidProcessId: ``pid`` is not positive; no signal is sent
            ProcessNotFound: No such process when signalling
            PermissionDenied: The OS rejected the signal
            TerminationFailed: Signal delivery failed for another reason
        """
        if pid <= 0:
            raise InvalidProcessId(pid)

        logger.info("Sending SIGTERM to process %s", pid)
        send_signal(pid, signal.SIGTERM)
        if force_after <= 0:
            return

        loop = asyncio.get_running_loop()
        deadline = loop.time() + force_after
        while loop.time() < deadline:
            if not self.liveness_probe(pid):
                logger.info("Process %s exited after SIGTERM", pid)
                return
            await asyncio.sleep(self.poll_interval)

        if not self.liveness_probe(pid):
            return

        logger.info("Process %s still alive after %.1fs; sending SIGKILL", pid, force_after)
        try:
            send_signal(pid, signal.SIGKILL)
        except ProcessNotFound:  # policy_guard: allow-silent-handler
            logger.debug("Process %s exited before SIGKILL", pid)


def send_signal(pid: int, sig: int) -> None:
    """Deliver ``sig`` to ``pid``, translating OS failures into typed errors."""
    try:
        psutil.Process(pid).send_signal(sig)
    except psutil.NoSuchProcess as exc:
        raise ProcessNotFound(pid) from exc
    except psutil.AccessDenied as exc:
        raise PermissionDenied(pid) from exc
    except OSError as exc:
        if exc.errno == errno.EPERM:
            raise PermissionDenied(pid) from exc
        raise TerminationFailed(pid, exc.errno or -1) from exc
