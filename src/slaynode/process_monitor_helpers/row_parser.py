"""Parse ``ps -axo pid=,etime=,command=`` output into process records."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from ..command_parser import make_context, tokenize
from ..command_parser_helpers.inference import infer_ports, infer_working_directory
from ..errors import MalformedOutput
from ..models import ProcessRecord
from ..process_classifier import classify

logger = logging.getLogger(__name__)

MAX_ROWS_PER_CYCLE = 1000


def parse_elapsed_time(etime: str) -> float:
    """
    Convert a ``ps`` elapsed-time field to seconds.

    Accepts ``SS``, ``MM:SS``, ``HH:MM:SS`` and ``DD-HH:MM:SS``. Anything
    malformed yields ``0``, which callers treat as "drop this row".
    """
    etime = etime.strip()
    days = 0
    if "-" in etime:
        day_part, _, etime = etime.partition("-")
        if not day_part.isdecimal() or etime.count(":") != 2:
            return 0.0
        days = int(day_part)

    parts = etime.split(":")
    if len(parts) > 3 or not all(part.isdecimal() for part in parts):
        return 0.0

    seconds = 0
    for part in parts:
        seconds = seconds * 60 + int(part)
    return float(days * 86400 + seconds)


def split_row(line: str) -> Optional[Tuple[int, str, str]]:
    """Split a ps row into pid, elapsed time and command, or ``None`` when the shape is wrong."""
    components = line.split(None, 2)
    if len(components) != 3 or not components[0].isdecimal():
        return None
    return int(components[0]), components[1], components[2].strip()


def parse_process_row(line: str, now: Optional[datetime] = None) -> Optional[ProcessRecord]:
    """
    Build a classified ``ProcessRecord`` from one ps row.

    Rows that do not have the ``pid etime command`` shape, have a
    non-positive pid, an elapsed time of zero (just started, not yet
    stable) or an empty command are skipped by returning ``None``.
    """
    row = split_row(line)
    if row is None:
        return None

    pid, etime, command = row
    if pid <= 0:
        return None

    elapsed = parse_elapsed_time(etime)
    if elapsed <= 0:
        return None

    tokens = tokenize(command)
    if not tokens:
        return None

    executable = tokens[0]
    working_directory = infer_working_directory(tokens)
    context = make_context(executable, tokens, working_directory)
    now = now or datetime.now()

    return ProcessRecord(
        pid=pid,
        executable=executable,
        command=command,
        arguments=tuple(tokens[1:]),
        ports=tuple(infer_ports(tokens)),
        uptime=elapsed,
        start_time=now - timedelta(seconds=elapsed),
        descriptor=classify(context),
        working_directory=working_directory,
    )


def parse_process_table(output: str, now: Optional[datetime] = None) -> List[ProcessRecord]:
    """
    Parse every usable row of a ps listing, examining at most ``MAX_ROWS_PER_CYCLE`` rows.

    Individual rows that cannot be used are skipped.

    Raises:
        MalformedOutput: When the listing has rows but none has the ps row shape
    """
    now = now or datetime.now()
    records: List[ProcessRecord] = []
    examined = 0
    shaped = 0
    for line in _limited_rows(output.splitlines()):
        examined += 1
        if split_row(line) is None:
            continue
        shaped += 1
        record = parse_process_row(line, now)
        if record is not None:
            records.append(record)

    if examined and not shaped:
        raise MalformedOutput(f"None of {examined} process rows had the expected shape")

    logger.debug("Parsed %d process rows (%d examined)", len(records), examined)
    return records


def _limited_rows(lines: Iterable[str]) -> Iterable[str]:
    examined = 0
    for line in lines:
        stripped = line.strip()
        if not stripped:
            continue
        if examined >= MAX_ROWS_PER_CYCLE:
            return
        examined += 1
        yield stripped
