"""Value types shared by the collector, classifier and controller."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import ClassVar, List, Optional, Tuple


class ServerCategory(str, Enum):
    WEB_FRAMEWORK = "webFramework"
    BUNDLER = "bundler"
    COMPONENT_WORKBENCH = "componentWorkbench"
    MOBILE = "mobile"
    BACKEND = "backend"
    MONOREPO = "monorepo"
    UTILITY = "utility"
    RUNTIME = "runtime"

    @property
    def display_name(self) -> str:
        return _CATEGORY_DISPLAY_NAMES[self]


_CATEGORY_DISPLAY_NAMES = {
    ServerCategory.WEB_FRAMEWORK: "Web framework",
    ServerCategory.BUNDLER: "Bundler",
    ServerCategory.COMPONENT_WORKBENCH: "Component workbench",
    ServerCategory.MOBILE: "Mobile",
    ServerCategory.BACKEND: "API/Backend",
    ServerCategory.MONOREPO: "Monorepo tool",
    ServerCategory.UTILITY: "Utility",
    ServerCategory.RUNTIME: "Runtime",
}


@dataclass(frozen=True)
class ServerDescriptor:
    """Classification result attached to a process record."""

    name: str
    display_name: str
    category: ServerCategory
    runtime: Optional[str] = None
    package_manager: Optional[str] = None
    script: Optional[str] = None
    details: Optional[str] = None
    port_hints: Tuple[int, ...] = ()

    UNKNOWN: ClassVar["ServerDescriptor"]

    def summary_details(self) -> List[str]:
        """Return the chips shown under a process title, most general first."""
        components = [self.category.display_name]

        if self.package_manager:
            if self.script:
                components.append(f"{self.package_manager} {self.script}")
            else:
                components.append(self.package_manager)
        elif self.script:
            components.append(self.script)

        if self.runtime:
            components.append(self.runtime)
        if self.details:
            components.append(self.details)
        return components


ServerDescriptor.UNKNOWN = ServerDescriptor(
    name="Node.js",
    display_name="Node.js",
    category=ServerCategory.RUNTIME,
    runtime="Node.js",
)


@dataclass(frozen=True)
class ProcessRecord:
    """One sampled OS process, rebuilt from scratch every collection cycle."""

    pid: int
    executable: str
    command: str
    arguments: Tuple[str, ...]
    ports: Tuple[int, ...]
    uptime: float
    start_time: datetime
    descriptor: ServerDescriptor
    working_directory: Optional[str] = None

    def __post_init__(self) -> None:
        if self.pid <= 0:
            raise ValueError(f"pid must be positive (got {self.pid})")

    @property
    def id(self) -> int:
        return self.pid

    def with_ports(self, extra_ports) -> "ProcessRecord":
        """Return a copy whose port set also contains ``extra_ports``."""
        merged = tuple(sorted(set(self.ports) | set(extra_ports)))
        return ProcessRecord(
            pid=self.pid,
            executable=self.executable,
            command=self.command,
            arguments=self.arguments,
            ports=merged,
            uptime=self.uptime,
            start_time=self.start_time,
            descriptor=self.descriptor,
            working_directory=self.working_directory,
        )


__all__ = ["ProcessRecord", "ServerCategory", "ServerDescriptor"]
