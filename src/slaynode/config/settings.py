"""Monitor settings gathered from the environment."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .runtime import env_seconds, env_str

DEFAULT_REFRESH_INTERVAL_SECONDS = 5.0
DEFAULT_COMMAND_TIMEOUT_SECONDS = 5.0
DEFAULT_SHUTDOWN_TIMEOUT_SECONDS = 10.0
DEFAULT_GRACE_PERIOD_SECONDS = 1.5
DEFAULT_PS_PATH = "ps"
DEFAULT_LSOF_PATH = "lsof"


@dataclass(frozen=True)
class MonitorSettings:
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL_SECONDS
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT_SECONDS
    shutdown_timeout: float = DEFAULT_SHUTDOWN_TIMEOUT_SECONDS
    grace_period: float = DEFAULT_GRACE_PERIOD_SECONDS
    ps_path: str = DEFAULT_PS_PATH
    lsof_path: str = DEFAULT_LSOF_PATH
    preferences_path: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "MonitorSettings":
        """Build settings from SLAYNODE_* variables, falling back to defaults."""
        preferences_raw = env_str("SLAYNODE_PREFERENCES_PATH")
        return cls(
            refresh_interval=env_seconds("SLAYNODE_REFRESH_INTERVAL", DEFAULT_REFRESH_INTERVAL_SECONDS),
            command_timeout=env_seconds("SLAYNODE_COMMAND_TIMEOUT", DEFAULT_COMMAND_TIMEOUT_SECONDS),
            shutdown_timeout=env_seconds("SLAYNODE_SHUTDOWN_TIMEOUT", DEFAULT_SHUTDOWN_TIMEOUT_SECONDS),
            grace_period=env_seconds("SLAYNODE_GRACE_PERIOD", DEFAULT_GRACE_PERIOD_SECONDS),
            ps_path=env_str("SLAYNODE_PS_PATH", DEFAULT_PS_PATH),
            lsof_path=env_str("SLAYNODE_LSOF_PATH", DEFAULT_LSOF_PATH),
            preferences_path=Path(preferences_raw).expanduser() if preferences_raw else None,
        )
