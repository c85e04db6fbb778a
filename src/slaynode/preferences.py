"""Persisted user preferences (only the refresh interval today)."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, MutableMapping, Optional, Protocol

import orjson

logger = logging.getLogger(__name__)

REFRESH_INTERVAL_KEY = "refreshInterval"
DEFAULT_REFRESH_INTERVAL = 5
MIN_REFRESH_INTERVAL = 2
MAX_REFRESH_INTERVAL = 30
_WRITE_EPSILON = 0.01


def clamp_interval(seconds: float) -> int:
    """Round and clamp a refresh interval into ``[2, 30]``."""
    return int(max(MIN_REFRESH_INTERVAL, min(MAX_REFRESH_INTERVAL, round(seconds))))


class PreferenceBackend(Protocol):
    def load(self) -> Dict[str, Any]: ...

    def save(self, values: Dict[str, Any]) -> None: ...


class MemoryBackend:
    """Keeps preferences in a plain mapping."""

    def __init__(self, values: Optional[MutableMapping[str, Any]] = None):
        self.values: MutableMapping[str, Any] = values if values is not None else {}

    def load(self) -> Dict[str, Any]:
        return dict(self.values)

    def save(self, values: Dict[str, Any]) -> None:
        self.values.clear()
        self.values.update(values)


class JsonFileBackend:
    """Stores preferences as a JSON object in a single file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Dict[str, Any]:
        try:
            payload = self.path.read_bytes()
        except FileNotFoundError:  # policy_guard: allow-silent-handler
            return {}
        try:
            data = orjson.loads(payload)
        except orjson.JSONDecodeError as exc:  # policy_guard: allow-silent-handler
            logger.warning("Ignoring unreadable preferences file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring preferences file %s: expected an object", self.path)
            return {}
        return data

    def save(self, values: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_bytes(orjson.dumps(values, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS))
        os.replace(tmp_path, self.path)


class PreferencesStore:
    """
    Reads and writes the refresh interval.

    The stored value is clamped to ``[2, 30]`` on load and on every write;
    a missing or non-numeric value loads as ``default``.
    """

    def __init__(self, backend: Optional[PreferenceBackend] = None, default: float = DEFAULT_REFRESH_INTERVAL):
        self.backend = backend if backend is not None else MemoryBackend()
        self.default = clamp_interval(default)
        self._values = self.backend.load()
        self._refresh_interval = self._load_interval()

    @classmethod
    def from_path(cls, path: Optional[Path], default: float = DEFAULT_REFRESH_INTERVAL) -> "PreferencesStore":
        backend: PreferenceBackend = JsonFileBackend(path) if path is not None else MemoryBackend()
        return cls(backend, default)

    @property
    def refresh_interval(self) -> int:
        return self._refresh_interval

    def set_refresh_interval(self, seconds: float) -> bool:
        """
        Clamp and persist ``seconds``.

        Returns:
            True when the stored value changed
        """
        value = clamp_interval(seconds)
        if abs(value - self._refresh_interval) < _WRITE_EPSILON:
            return False
        self._refresh_interval = value
        self._values[REFRESH_INTERVAL_KEY] = value
        self.backend.save(dict(self._values))
        logger.info("Refresh interval set to %ss", value)
        return True

    def _load_interval(self) -> int:
        raw = self._values.get(REFRESH_INTERVAL_KEY)
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            return self.default
        return clamp_interval(raw)


__all__ = [
    "DEFAULT_REFRESH_INTERVAL",
    "JsonFileBackend",
    "MAX_REFRESH_INTERVAL",
    "MIN_REFRESH_INTERVAL",
    "MemoryBackend",
    "PreferencesStore",
    "clamp_interval",
]
