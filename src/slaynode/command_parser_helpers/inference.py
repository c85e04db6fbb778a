"""Port and working-directory inference from command tokens."""

from __future__ import annotations

import os
import re
from typing import List, Optional, Sequence, Set

_PORT_FLAG_INLINE = re.compile(r"^--?(?:port|p)=?([0-9]+)$", re.IGNORECASE)
_PORT_FLAG_BARE = re.compile(r"^--?(?:port|p)$", re.IGNORECASE)
_PORT_NUMBER = re.compile(r"[0-9]+")

_DIRECTORY_FLAGS = ("--cwd", "--dir", "--working-dir")

_SCRIPT_SUFFIXES = (".js", ".mjs", ".cjs")
_SCRIPT_NAME_MARKERS = ("next", "vite", "nuxt")
_SCRIPT_PATH_MARKERS = ("/src/", "/server/")


def infer_ports(tokens: Sequence[str]) -> List[int]:
    """
    Collect ports mentioned on a command line.

    Two heuristics run on every token and their matches are unioned:
    port flags (``--port=N``, ``--port N``, ``-p=N``, ``-p N``, any case) and a
    trailing ``:N`` component (``host:port``, ``--inspect=127.0.0.1:9229``).
    The colon heuristic is recall-biased and will also pick up timestamp-like
    arguments. Ports are not range-checked here.

    Returns:
        Sorted list of distinct ports
    """
    collected: Set[int] = set()

    for index, token in enumerate(tokens):
        inline = _PORT_FLAG_INLINE.match(token)
        if inline:
            collected.add(int(inline.group(1)))
        elif _PORT_FLAG_BARE.match(token) and index + 1 < len(tokens):
            following = tokens[index + 1]
            if _PORT_NUMBER.fullmatch(following):
                collected.add(int(following))

        trailing = _trailing_colon_port(token)
        if trailing is not None:
            collected.add(trailing)

    return sorted(collected)


def _trailing_colon_port(token: str) -> Optional[int]:
    if ":" not in token:
        return None
    last = token.rsplit(":", 1)[1]
    if not _PORT_NUMBER.fullmatch(last):
        return None
    port = int(last)
    return port if port > 0 else None


def infer_working_directory(tokens: Sequence[str]) -> Optional[str]:
    """
    Guess the working directory of a process from its tokens.

    ``--cwd``/``--dir``/``--working-dir`` win, either as a flag followed by a
    value or as ``--flag=value``; the value is tilde-expanded. Otherwise the
    directory containing the first script-like token is returned, but only if
    that path exists on disk.
    """
    for index, token in enumerate(tokens):
        if token in _DIRECTORY_FLAGS:
            if index + 1 < len(tokens):
                return os.path.expanduser(tokens[index + 1])
            continue
        for flag in _DIRECTORY_FLAGS:
            prefix = f"{flag}="
            if token.startswith(prefix):
                return os.path.expanduser(token[len(prefix) :])

    script = first_script_token(tokens)
    if script is None:
        return None
    expanded = os.path.expanduser(script)
    if os.path.exists(expanded):
        return os.path.dirname(expanded)
    return None


def first_script_token(tokens: Sequence[str]) -> Optional[str]:
    """Return the first non-flag token that looks like a script or dev-server entry point."""
    for token in tokens:
        if token.startswith("-"):
            continue
        if "node_modules/.bin" in token:
            return token
        if token.endswith(_SCRIPT_SUFFIXES):
            return token
        if any(marker in token for marker in _SCRIPT_NAME_MARKERS):
            return token
        if any(marker in token for marker in _SCRIPT_PATH_MARKERS):
            return token
    return None
