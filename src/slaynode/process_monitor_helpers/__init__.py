"""Helper modules for ProcessMonitor."""

from .background_worker import BackgroundScanWorker
from .command_runner import CommandResult, CommandRunner
from .dev_filter import is_likely_development_process
from .lifecycle import LifecycleManager
from .port_collector import PortCollector, extract_port, parse_lsof_output
from .row_parser import parse_elapsed_time, parse_process_row, parse_process_table
from .scan_coordinator import ScanCoordinator
from .scanner import ProcessScanner

__all__ = [
    "BackgroundScanWorker",
    "CommandResult",
    "CommandRunner",
    "LifecycleManager",
    "PortCollector",
    "ProcessScanner",
    "ScanCoordinator",
    "extract_port",
    "is_likely_development_process",
    "parse_elapsed_time",
    "parse_lsof_output",
    "parse_process_row",
    "parse_process_table",
]
