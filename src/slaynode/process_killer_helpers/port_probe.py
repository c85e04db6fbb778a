"""Check whether TCP ports still have a listener."""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional, Set

import psutil

from ..errors import CommandExecutionFailed
from ..process_monitor_helpers.command_runner import CommandRunner
from ..process_monitor_helpers.port_collector import extract_port, name_field

logger = logging.getLogger(__name__)

_NET_SCAN_EXECUTOR = ThreadPoolExecutor(max_workers=1, thread_name_prefix="slaynode-net-scan")


class PortProbe:
    """
    Reports which of a set of ports are still bound in LISTEN state.

    ``psutil.net_connections`` needs elevated privileges on macOS, so an
    ``AccessDenied`` there falls back to one ``lsof`` query.
    """

    def __init__(self, runner: Optional[CommandRunner] = None, lsof_path: str = "lsof"):
        self.runner = runner or CommandRunner()
        self.lsof_path = lsof_path

    async def bound_ports(self, ports: Iterable[int]) -> Set[int]:
        wanted = {port for port in ports if port > 0}
        if not wanted:
            return set()
        try:
            loop = asyncio.get_running_loop()
            listening = await loop.run_in_executor(_NET_SCAN_EXECUTOR, _listening_ports_psutil)
        except psutil.AccessDenied:  # policy_guard: allow-silent-handler
            logger.debug("net_connections denied; falling back to lsof")
            listening = await self._listening_ports_lsof(wanted)
        return wanted & listening

    async def _listening_ports_lsof(self, ports: Set[int]) -> Set[int]:
        arguments = ["-nP", "-sTCP:LISTEN"]
        for port in sorted(ports):
            arguments.append(f"-iTCP:{port}")
        result = await self.runner.run(self.lsof_path, arguments, allow_failure=True)
        if result.status not in (0, 1):
            raise CommandExecutionFailed("lsof", result.status)

        listening: Set[int] = set()
        for line in result.stdout.splitlines():
            columns = line.split()
            if len(columns) < 2 or columns[0] == "COMMAND":
                continue
            port = extract_port(name_field(columns))
            if port is not None:
                listening.add(port)
        return listening


def _listening_ports_psutil() -> Set[int]:
    listening: Set[int] = set()
    for connection in psutil.net_connections(kind="tcp"):
        if connection.status != psutil.CONN_LISTEN or not connection.laddr:
            continue
        listening.add(connection.laddr.port)
    return listening
