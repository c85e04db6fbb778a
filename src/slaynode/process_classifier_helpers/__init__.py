"""Helper modules for process classification."""

from .framework_table import FRAMEWORKS, FrameworkRule, match_framework
from .package_managers import (
    PACKAGE_MANAGER_WRAPPERS,
    extract_script_name,
    package_manager_for,
)
from .port_hints import port_hints_for_name
from .runtime_detection import detect_runtime

__all__ = [
    "FRAMEWORKS",
    "FrameworkRule",
    "PACKAGE_MANAGER_WRAPPERS",
    "detect_runtime",
    "extract_script_name",
    "match_framework",
    "package_manager_for",
    "port_hints_for_name",
]
