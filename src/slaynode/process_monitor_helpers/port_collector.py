"""Batched listening-socket lookup through ``lsof``."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from ..errors import CommandExecutionFailed
from .command_runner import CommandRunner

logger = logging.getLogger(__name__)

_ACCEPTED_STATUSES = (0, 1)
_MIN_LSOF_COLUMNS = 8


class PortCollector:
    """Resolves TCP listening ports for a batch of pids with a single lsof call."""

    def __init__(self, runner: CommandRunner, lsof_path: str = "lsof"):
        self.runner = runner
        self.lsof_path = lsof_path

    async def collect(self, pids: Iterable[int]) -> Dict[int, List[int]]:
        """
        Return listening ports keyed by pid.

        lsof exits with 1 when none of the pids hold a matching socket, so 0
        and 1 are both treated as success.

        Raises:
            CommandExecutionFailed: For any other lsof exit status
        """
        pid_list = sorted(set(pids))
        if not pid_list:
            return {}

        result = await self.runner.run(
            self.lsof_path,
            ["-Pan", "-p", ",".join(str(pid) for pid in pid_list), "-iTCP", "-sTCP:LISTEN"],
            allow_failure=True,
        )
        if result.status not in _ACCEPTED_STATUSES:
            raise CommandExecutionFailed("lsof", result.status)

        return parse_lsof_output(result.stdout)


def parse_lsof_output(output: str) -> Dict[int, List[int]]:
    ports_by_pid: Dict[int, set] = defaultdict(set)
    for line in output.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("COMMAND"):
            continue
        columns = stripped.split()
        if len(columns) < _MIN_LSOF_COLUMNS or not columns[1].isdecimal():
            continue
        port = extract_port(name_field(columns))
        if port is None:
            continue
        ports_by_pid[int(columns[1])].add(port)

    return {pid: sorted(ports) for pid, ports in ports_by_pid.items()}


def name_field(columns: List[str]) -> str:
    """Return the NAME column, which lsof follows with a separate ``(LISTEN)`` state column."""
    if len(columns) > 1 and columns[-1] == "(LISTEN)":
        return columns[-2]
    return columns[-1]


def extract_port(address: str) -> Optional[int]:
    """Pull the local port out of an lsof NAME field such as ``*:3000`` or ``127.0.0.1:5173->...``."""
    local = address.split("->", 1)[0].replace("(LISTEN)", "")
    if ":" not in local:
        return None
    candidate = local.rsplit(":", 1)[1].strip()
    if not candidate.isdecimal():
        return None
    return int(candidate)
