"""Command-line front end: list, watch and stop development servers.

Usage:
    slaynode list
    slaynode watch [--interval SECONDS]
    slaynode stop PID
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Sequence, Tuple

from .config import MonitorSettings
from .controller import DevServerController, ProcessView
from .errors import ErrorKind
from .logging_config import setup_logging
from .preferences import PreferencesStore
from .process_killer import ProcessKiller
from .process_monitor import ProcessMonitor

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_UNCONFIRMED = 2


def build_controller(settings: MonitorSettings) -> DevServerController:
    """Wire the monitor, killer and preference store from ``settings``."""
    preferences = PreferencesStore.from_path(settings.preferences_path, default=settings.refresh_interval)
    monitor = ProcessMonitor(
        interval_seconds=preferences.refresh_interval,
        ps_path=settings.ps_path,
        lsof_path=settings.lsof_path,
        command_timeout=settings.command_timeout,
    )
    killer = ProcessKiller(
        grace_period=settings.grace_period,
        shutdown_timeout=settings.shutdown_timeout,
        lsof_path=settings.lsof_path,
        command_timeout=settings.command_timeout,
    )
    return DevServerController(monitor, killer, preferences)


def render(views: Sequence[ProcessView]) -> str:
    if not views:
        return "No development servers found."
    lines = []
    for view in views:
        marker = " (stopping)" if view.is_stopping else ""
        lines.append(f"{view.title}{marker}")
        lines.append(f"    {view.ports_description} · {view.details}")
        lines.append(f"    {view.subtitle}")
    return "\n".join(lines)


def _error_sink(errors: List[Tuple[ErrorKind, str]]):
    def _record(kind: ErrorKind, message: str) -> None:
        errors.append((kind, message))
        print(f"error: {message}", file=sys.stderr)

    return _record


async def run_list(controller: DevServerController) -> int:
    errors: List[Tuple[ErrorKind, str]] = []
    controller.subscribe_errors(_error_sink(errors))
    await controller.monitor.refresh()
    print(render(controller.views()))
    return EXIT_FAILURE if errors else EXIT_OK


async def run_watch(controller: DevServerController, interval: Optional[float]) -> int:
    controller.subscribe_errors(_error_sink([]))
    controller.subscribe(lambda views: print(render(views), end="\n\n", flush=True))
    if interval is not None:
        controller.set_interval(interval)
    controller.start()
    try:
        await asyncio.Event().wait()
    finally:
        await controller.stop()
    return EXIT_OK


async def run_stop(controller: DevServerController, pid: int) -> int:
    errors: List[Tuple[ErrorKind, str]] = []
    controller.subscribe_errors(_error_sink(errors))
    await controller.monitor.refresh()

    task = controller.request_stop(pid)
    if task is not None:
        await task

    if not errors:
        print(f"Stopped process {pid}.")
        return EXIT_OK
    if all(kind is ErrorKind.TIMEOUT_WAITING_FOR_SHUTDOWN for kind, _ in errors):
        return EXIT_UNCONFIRMED
    return EXIT_FAILURE


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="slaynode", description="Find and stop local Node.js development servers")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log collection details to stdout")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="Print the development servers running right now")

    watch = subparsers.add_parser("watch", help="Print the list every refresh interval")
    watch.add_argument("--interval", type=float, default=None, help="Refresh interval in seconds (2-30)")

    stop = subparsers.add_parser("stop", help="Stop a development server and wait for its ports to free up")
    stop.add_argument("pid", type=int)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(user_friendly=not args.verbose)

    controller = build_controller(MonitorSettings.from_env())
    try:
        if args.command == "list":
            return asyncio.run(run_list(controller))
        if args.command == "watch":
            return asyncio.run(run_watch(controller, args.interval))
        return asyncio.run(run_stop(controller, args.pid))
    except KeyboardInterrupt:  # policy_guard: allow-silent-handler
        logger.debug("Interrupted")
        return EXIT_OK
