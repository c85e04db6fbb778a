"""Parsing for .env-style settings files."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Tuple

from ..errors import ConfigurationError

_EXPORT_PREFIX = "export "
_QUOTES = ("'", '"')


class DotenvLoader:
    """Reads ``KEY=value`` lines; comments, blank lines and junk are skipped."""

    @staticmethod
    def load_from_file(path: Path) -> Dict[str, str]:
        """
        Load key-value pairs from a .env file.

        Returns:
            The declared variables, empty when the file is absent

        Raises:
            ConfigurationError: If the file exists but cannot be read
        """
        try:
            text = path.read_text()
        except FileNotFoundError:  # policy_guard: allow-silent-handler
            return {}
        except OSError as exc:
            raise ConfigurationError.unreadable_file(path) from exc
        return DotenvLoader.parse(text)

    @staticmethod
    def parse(text: str) -> Dict[str, str]:
        values: Dict[str, str] = {}
        for line in text.splitlines():
            entry = DotenvLoader._parse_line(line)
            if entry is not None:
                values[entry[0]] = entry[1]
        return values

    @staticmethod
    def _parse_line(line: str) -> Optional[Tuple[str, str]]:
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            return None
        if stripped.startswith(_EXPORT_PREFIX):
            stripped = stripped[len(_EXPORT_PREFIX) :]
        key, raw_value = (part.strip() for part in stripped.split("=", 1))
        if not key:
            return None
        return key, _unquote(raw_value)


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return value[1:-1]
    # Unquoted values may carry a trailing " # comment".
    comment_at = value.find(" #")
    return value[:comment_at].rstrip() if comment_at >= 0 else value
