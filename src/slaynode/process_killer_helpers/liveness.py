"""Zero-signal liveness probe."""

from __future__ import annotations

import logging

import psutil

logger = logging.getLogger(__name__)


def is_alive(pid: int) -> bool:
    """Return True while ``pid`` exists and has not been reaped to a zombie."""
    if pid <= 0 or not psutil.pid_exists(pid):
        return False
    try:
        return psutil.Process(pid).status() != psutil.STATUS_ZOMBIE
    except psutil.NoSuchProcess:  # policy_guard: allow-silent-handler
        return False
    except psutil.AccessDenied:  # policy_guard: allow-silent-handler
        # The pid exists; we just cannot inspect it.
        return True
