"""Read SLAYNODE_* settings from the environment with ``.env`` fallback.

Lookup order for every variable:
1. the process environment
2. ``./.env``
3. ``~/.env``

The ``.env`` files are parsed once and cached until ``reset_default_values``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Optional, TypeVar

from .errors import ConfigurationError

T = TypeVar("T")

_TRUE_VALUES = {"1", "true", "t", "yes", "y", "on"}
_FALSE_VALUES = {"0", "false", "f", "no", "n", "off"}

_dotenv_cache: Optional[dict[str, str]] = None


def _dotenv_candidates() -> tuple[Path, ...]:
    return (Path(".env"), Path.home() / ".env")


def _dotenv_values() -> dict[str, str]:
    from .runtime_helpers import DotenvLoader

    global _dotenv_cache
    if _dotenv_cache is None:
        merged: dict[str, str] = {}
        for path in _dotenv_candidates():
            for key, value in DotenvLoader.load_from_file(path).items():
                merged.setdefault(key, value)
        _dotenv_cache = merged
    return _dotenv_cache


def reset_default_values() -> None:
    """Forget cached .env values so the next lookup re-reads them."""
    global _dotenv_cache
    _dotenv_cache = None


def _lookup(name: str, *, strip: bool, allow_blank: bool) -> Optional[str]:
    for candidate in (os.getenv(name), _dotenv_values().get(name)):
        if candidate is None:
            continue
        value = candidate.strip() if strip else candidate
        if value or allow_blank:
            return value
    return None


def env_str(
    name: str,
    or_value: Optional[str] = None,
    *,
    required: bool = False,
    strip: bool = True,
    allow_blank: bool = False,
) -> Optional[str]:
    """Return ``name`` as a string, or ``or_value`` when it is unset or blank."""
    value = _lookup(name, strip=strip, allow_blank=allow_blank)
    if value is None:
        if required:
            raise ConfigurationError.missing_value(name)
        return or_value
    return value


def _coerce(
    name: str,
    or_value: Optional[T],
    required: bool,
    converter: Callable[[str], T],
    expected: str,
) -> Optional[T]:
    raw = _lookup(name, strip=True, allow_blank=False)
    if raw is None:
        if required and or_value is None:
            raise ConfigurationError.missing_value(name)
        return or_value
    try:
        return converter(raw)
    except ValueError as exc:
        raise ConfigurationError.invalid_value(name, raw, expected) from exc


def _to_bool(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(raw)


def env_int(name: str, or_value: Optional[int] = None, *, required: bool = False) -> Optional[int]:
    return _coerce(name, or_value, required, int, "an integer")


def env_float(name: str, or_value: Optional[float] = None, *, required: bool = False) -> Optional[float]:
    return _coerce(name, or_value, required, float, "a number")


def env_bool(name: str, or_value: Optional[bool] = None, *, required: bool = False) -> Optional[bool]:
    """Accepts 1/0, true/false, yes/no, on/off and their one-letter forms."""
    return _coerce(name, or_value, required, _to_bool, "a boolean")


def env_seconds(name: str, or_value: Optional[float] = None, *, required: bool = False) -> Optional[float]:
    """Fetch a non-negative duration expressed in (possibly fractional) seconds."""
    value = env_float(name, or_value=or_value, required=required)
    if value is not None and value < 0:
        raise ConfigurationError.invalid_value(name, value, "a non-negative number of seconds")
    return value


__all__ = ["env_bool", "env_float", "env_int", "env_seconds", "env_str", "reset_default_values"]
