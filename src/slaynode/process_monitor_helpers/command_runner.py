"""Run external process-table tools with a hard timeout."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ..errors import CommandExecutionFailed

logger = logging.getLogger(__name__)

MAX_OUTPUT_BYTES = 1024 * 1024
_TIMEOUT_STATUS = -1
_READ_CHUNK_BYTES = 64 * 1024


@dataclass(frozen=True)
class CommandResult:
    status: int
    stdout: str
    stderr: str = ""


class CommandRunner:
    """Executes one external command at a time and never waits longer than ``timeout_seconds``."""

    def __init__(self, timeout_seconds: float = 5.0, max_output_bytes: int = MAX_OUTPUT_BYTES):
        self.timeout_seconds = timeout_seconds
        self.max_output_bytes = max_output_bytes

    async def run(
        self,
        executable: str,
        arguments: Sequence[str],
        *,
        allow_failure: bool = False,
    ) -> CommandResult:
        """
        Run ``executable`` with ``arguments`` and capture its output.

        Args:
            executable: Tool path or name resolved on PATH
            arguments: Arguments passed verbatim, no shell involved
            allow_failure: Return non-zero statuses instead of raising

        Returns:
            CommandResult with decoded, size-capped stdout/stderr

        Raises:
            CommandExecutionFailed: When the tool cannot be started, times out,
                or exits non-zero without ``allow_failure``
        """
        tool = os.path.basename(executable)
        try:
            process = await asyncio.create_subprocess_exec(
                executable,
                *arguments,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise CommandExecutionFailed(tool, _TIMEOUT_STATUS, f"Failed to run {tool}: {exc}") from exc

        try:
            stdout, stderr = await asyncio.wait_for(self._capture(process), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as exc:
            _kill_quietly(process)
            await process.wait()
            raise CommandExecutionFailed(
                tool,
                _TIMEOUT_STATUS,
                f"Command {tool} timed out after {self.timeout_seconds:g}s",
            ) from exc
        except asyncio.CancelledError:
            _kill_quietly(process)
            await process.wait()
            raise

        status = process.returncode if process.returncode is not None else _TIMEOUT_STATUS
        result = CommandResult(
            status=status,
            stdout=self._decode(stdout),
            stderr=self._decode(stderr),
        )

        if status != 0:
            if not allow_failure:
                raise CommandExecutionFailed(tool, status)
            if result.stderr:
                logger.debug("%s returned status %s: %s", tool, status, result.stderr.strip())

        return result

    async def _capture(self, process: asyncio.subprocess.Process) -> Tuple[bytes, bytes]:
        stdout, stderr, _ = await asyncio.gather(
            self._read_capped(process.stdout),
            self._read_capped(process.stderr),
            process.wait(),
        )
        return stdout, stderr

    async def _read_capped(self, stream: Optional[asyncio.StreamReader]) -> bytes:
        """Drain ``stream`` to EOF, keeping at most ``max_output_bytes``."""
        if stream is None:
            return b""
        kept = bytearray()
        while True:
            chunk = await stream.read(_READ_CHUNK_BYTES)
            if not chunk:
                return bytes(kept)
            room = self.max_output_bytes - len(kept)
            if room > 0:
                kept.extend(chunk[:room])

    @staticmethod
    def _decode(payload: bytes) -> str:
        return payload.decode("utf-8", errors="replace")


def _kill_quietly(process: asyncio.subprocess.Process) -> None:
    try:
        process.kill()
    except ProcessLookupError:  # policy_guard: allow-silent-handler
        logger.debug("Command process %s already exited", process.pid)
