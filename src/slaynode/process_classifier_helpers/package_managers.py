"""Package-manager wrapper recognition."""

from __future__ import annotations

import os
from typing import Optional, Sequence

# Wrapper executable -> canonical package manager.
PACKAGE_MANAGER_WRAPPERS = {
    "npm": "npm",
    "npx": "npm",
    "pnpm": "pnpm",
    "pnpx": "pnpm",
    "yarn": "yarn",
    "yarnx": "yarn",
    "bun": "bun",
    "bunx": "bun",
}

_SCRIPT_SUBCOMMANDS = ("run", "run-script", "dlx", "exec", "create")
_BUN_SCRIPT_SUBCOMMANDS = ("run", "wip")
_BARE_SCRIPT_MANAGERS = frozenset({"npm", "pnpm", "pnpx", "yarn", "yarnx", "bun", "bunx"})


def _executable_name(token: str) -> str:
    return os.path.basename(token).lower()


def package_manager_for(token: str) -> Optional[str]:
    """Return the canonical manager when ``token`` invokes a package-manager wrapper."""
    return PACKAGE_MANAGER_WRAPPERS.get(_executable_name(token))


def extract_script_name(tokens: Sequence[str]) -> Optional[str]:
    """
    Pull the script or package name a package-manager invocation refers to.

    ``npm run dev`` -> ``dev``, ``pnpm exec next dev`` -> ``next``,
    ``yarn dev`` -> ``dev``. Flags directly after the manager yield nothing.
    """
    if len(tokens) < 2:
        return None

    first = _executable_name(tokens[0])
    second = tokens[1].lower()
    following = tokens[2] if len(tokens) > 2 else None

    if second in _SCRIPT_SUBCOMMANDS:
        return following
    if first == "bun" and second in _BUN_SCRIPT_SUBCOMMANDS:
        return following
    if first in _BARE_SCRIPT_MANAGERS and not second.startswith("-"):
        return tokens[1]
    return None
