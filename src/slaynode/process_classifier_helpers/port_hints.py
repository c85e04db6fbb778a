"""Default ports guessed from a script or executable name."""

from __future__ import annotations

from typing import Tuple

# First matching row wins; mirrors the framework table's defaults.
_NAME_PORT_HINTS: Tuple[Tuple[Tuple[str, ...], Tuple[int, ...]], ...] = (
    (("next",), (3000,)),
    (("vite",), (5173,)),
    (("storybook",), (6006,)),
    (("expo", "metro"), (19000, 19006, 8081)),
    (("angular",), (4200,)),
    (("fastify", "express", "koa"), (3000, 4000)),
    (("react-scripts",), (3000,)),
    (("astro",), (4321,)),
    (("nuxt",), (3000,)),
    (("remix",), (3000,)),
    (("bun",), (3000,)),
    (("deno",), (8000,)),
)


def port_hints_for_name(name: str) -> Tuple[int, ...]:
    lowered = name.lower()
    if lowered == "ng":
        return (4200,)
    for fragments, hints in _NAME_PORT_HINTS:
        if any(fragment in lowered for fragment in fragments):
            return hints
    return ()
