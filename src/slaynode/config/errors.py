"""Exception types for configuration handling."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union


class ConfigurationError(RuntimeError):
    """Raised when a SLAYNODE_* value is missing or malformed."""

    @classmethod
    def invalid_value(cls, name: str, value: Any, expected: str) -> "ConfigurationError":
        return cls(f"{name} must be {expected} (got {value!r})")

    @classmethod
    def missing_value(cls, name: str) -> "ConfigurationError":
        return cls(f"Required setting {name!r} is not set")

    @classmethod
    def unreadable_file(cls, path: Union[str, Path]) -> "ConfigurationError":
        return cls(f"Could not read settings file {path}")


__all__ = ["ConfigurationError"]
