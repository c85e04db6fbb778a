"""Process scanning functionality."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Callable, List, Optional

from ..errors import SlayNodeError
from ..models import ProcessRecord
from .command_runner import CommandRunner
from .dev_filter import is_likely_development_process
from .port_collector import PortCollector
from .row_parser import parse_process_table

logger = logging.getLogger(__name__)

PS_ARGUMENTS = ("-axo", "pid=,etime=,command=")

EnrichmentErrorHandler = Callable[[SlayNodeError], None]


class ProcessScanner:
    """Lists, filters, classifies and port-enriches development-server processes."""

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        *,
        ps_path: str = "ps",
        lsof_path: str = "lsof",
        on_enrichment_error: Optional[EnrichmentErrorHandler] = None,
    ):
        self.runner = runner or CommandRunner()
        self.ps_path = ps_path
        self.port_collector = PortCollector(self.runner, lsof_path)
        self.on_enrichment_error = on_enrichment_error

    async def collect(self) -> List[ProcessRecord]:
        """
        Run one collection cycle.

        Returns:
            Development-server candidates with live listening ports merged in

        Raises:
            CommandExecutionFailed: When the process listing itself fails
            MalformedOutput: When no listing row could be split into fields
        """
        logger.debug("Performing process collection...")
        start_time = time.time()

        result = await self.runner.run(self.ps_path, PS_ARGUMENTS)
        records = parse_process_table(result.stdout, datetime.now())
        candidates = [record for record in records if is_likely_development_process(record)]
        enriched = await self._enrich_ports(candidates)

        logger.debug(
            "Process collection completed in %.3fs, %d candidates of %d processes",
            time.time() - start_time,
            len(enriched),
            len(records),
        )
        return enriched

    async def _enrich_ports(self, records: List[ProcessRecord]) -> List[ProcessRecord]:
        if not records:
            return records
        try:
            ports_by_pid = await self.port_collector.collect(record.pid for record in records)
        except SlayNodeError as exc:  # policy_guard: allow-silent-handler
            logger.warning("Port lookup failed, publishing records without live ports: %s", exc)
            if self.on_enrichment_error is not None:
                self.on_enrichment_error(exc)
            return records

        return [
            record.with_ports(ports_by_pid[record.pid]) if record.pid in ports_by_pid else record
            for record in records
        ]
