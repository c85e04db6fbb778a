"""Recall-biased heuristic for spotting development-server processes."""

from __future__ import annotations

from ..models import ProcessRecord

# Substrings of the executable token.
DEV_EXECUTABLE_MARKERS = (
    "node",
    "nodejs",
    "npm",
    "yarn",
    "pnpm",
    "npx",
    "yarnx",
    "pnpx",
    "next",
    "vite",
    "nuxt",
    "svelte",
    "remix",
    "astro",
    "webpack",
    "serve",
)

# Substrings of the full command line.
DEV_COMMAND_MARKERS = (
    " dev ",
    " start ",
    " serve ",
    " run dev",
    "run start",
    "run serve",
    "node_modules/.bin/",
)


def is_likely_development_process(record: ProcessRecord) -> bool:
    """False positives are acceptable here; missing a real dev server is not."""
    executable = record.executable.lower()
    if any(marker in executable for marker in DEV_EXECUTABLE_MARKERS):
        return True
    command = record.command.lower()
    return any(marker in command for marker in DEV_COMMAND_MARKERS)
