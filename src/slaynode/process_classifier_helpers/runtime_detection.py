"""Runtime detection from command tokens."""

from __future__ import annotations

from typing import Optional, Sequence

_RUNTIME_MARKERS = (
    ("deno", "Deno"),
    ("bun", "Bun"),
    ("node", "Node.js"),
)


def detect_runtime(lowered_tokens: Sequence[str]) -> Optional[str]:
    """Return the JavaScript runtime named anywhere in the tokens, preferring Deno, then Bun."""
    for marker, runtime in _RUNTIME_MARKERS:
        if any(marker in token for token in lowered_tokens):
            return runtime
    return None
