"""Shared configuration helpers and dataclasses."""

from .errors import ConfigurationError
from .runtime import (
    env_bool,
    env_float,
    env_int,
    env_seconds,
    env_str,
    reset_default_values,
)
from .settings import MonitorSettings

__all__ = [
    "ConfigurationError",
    "MonitorSettings",
    "env_bool",
    "env_float",
    "env_int",
    "env_seconds",
    "env_str",
    "reset_default_values",
]
