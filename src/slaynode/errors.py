"""Error taxonomy for process collection and termination.

Every failure that should reach a human is one of these types. Each class
carries an ``ErrorKind`` so the error channel can publish ``(kind, message)``
without the subscriber having to inspect exception classes.

Exception classes support two patterns:
1. No-argument raise: raise MalformedOutput()
2. Contextual attributes: err = ProcessNotFound(pid=123); raise err
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable


class ErrorKind(str, Enum):
    COMMAND_EXECUTION_FAILED = "command_execution_failed"
    MALFORMED_OUTPUT = "malformed_output"
    INVALID_PROCESS_ID = "invalid_process_id"
    PROCESS_NOT_FOUND = "process_not_found"
    PERMISSION_DENIED = "permission_denied"
    TERMINATION_FAILED = "termination_failed"
    TIMEOUT_WAITING_FOR_SHUTDOWN = "timeout_waiting_for_shutdown"


class SlayNodeError(Exception):
    """Base exception for all process-intelligence errors.

    Supports keyword arguments that are stored as attributes for debugging.
    """

    kind: ErrorKind = ErrorKind.COMMAND_EXECUTION_FAILED

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = (self.__class__.__doc__ or "Process operation failed").strip()
        super().__init__(message)
        self.message = message
        for key, value in kwargs.items():
            setattr(self, key, value)


class CommandExecutionFailed(SlayNodeError):
    """An external tool exited with an unexpected status."""

    kind = ErrorKind.COMMAND_EXECUTION_FAILED

    def __init__(self, tool: str, exit_status: int, message: str = "") -> None:
        if not message:
            message = f"Command {tool} failed with status {exit_status}"
        super().__init__(message, tool=tool, exit_status=exit_status)


class MalformedOutput(SlayNodeError):
    """Could not parse the process list."""

    kind = ErrorKind.MALFORMED_OUTPUT


class InvalidProcessId(SlayNodeError):
    """Invalid process id."""

    kind = ErrorKind.INVALID_PROCESS_ID

    def __init__(self, pid: int) -> None:
        super().__init__(f"Invalid process id: {pid}", pid=pid)


class ProcessNotFound(SlayNodeError):
    """Process does not exist."""

    kind = ErrorKind.PROCESS_NOT_FOUND

    def __init__(self, pid: int) -> None:
        super().__init__(f"Process {pid} does not exist", pid=pid)


class PermissionDenied(SlayNodeError):
    """Not permitted to stop the process."""

    kind = ErrorKind.PERMISSION_DENIED

    def __init__(self, pid: int) -> None:
        super().__init__(f"Not permitted to stop process {pid}", pid=pid)


class TerminationFailed(SlayNodeError):
    """Could not stop the process."""

    kind = ErrorKind.TERMINATION_FAILED

    def __init__(self, pid: int, code: int) -> None:
        super().__init__(f"Could not stop process {pid} (errno: {code})", pid=pid, code=code)


class TimeoutWaitingForShutdown(SlayNodeError):
    """Process was signalled but shutdown could not be confirmed in time."""

    kind = ErrorKind.TIMEOUT_WAITING_FOR_SHUTDOWN

    def __init__(self, pid: int, ports: Iterable[int] = (), timeout: float = 0.0) -> None:
        port_list = sorted(set(ports))
        message = f"Process {pid} did not confirm shutdown within {timeout:g}s"
        if port_list:
            message += f" (ports: {', '.join(str(port) for port in port_list)})"
        super().__init__(message, pid=pid, ports=port_list, timeout=timeout)


__all__ = [
    "CommandExecutionFailed",
    "ErrorKind",
    "InvalidProcessId",
    "MalformedOutput",
    "PermissionDenied",
    "ProcessNotFound",
    "SlayNodeError",
    "TerminationFailed",
    "TimeoutWaitingForShutdown",
]
