"""Helper modules for process termination."""

from .liveness import is_alive
from .port_probe import PortProbe
from .process_terminator import ProcessTerminator, send_signal
from .shutdown_verifier import ShutdownVerifier

__all__ = [
    "PortProbe",
    "ProcessTerminator",
    "ShutdownVerifier",
    "is_alive",
    "send_signal",
]
