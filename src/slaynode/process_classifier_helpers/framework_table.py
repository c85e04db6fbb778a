"""Ordered table of known frameworks, evaluated top to bottom."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from ..models import ServerCategory

TokenPredicate = Callable[[Sequence[str]], bool]
DetailsBuilder = Callable[[Sequence[str]], Optional[str]]

_SERVER_MODES = ("dev", "start", "serve", "preview", "build")


def mode_details(tokens: Sequence[str]) -> Optional[str]:
    """Return ``Mode: <MODE>`` for the first recognised mode token."""
    for token in tokens:
        if token in _SERVER_MODES:
            return f"Mode: {token.upper()}"
    return None


def expo_details(tokens: Sequence[str]) -> Optional[str]:
    if "start" in tokens:
        return "Mode: START"
    if "start:web" in tokens:
        return "Mode: WEB"
    return None


def _bun_serve(tokens: Sequence[str]) -> bool:
    has_bun = any(token == "bun" or "bunx" in token for token in tokens)
    has_serve = any("serve" in token for token in tokens)
    return has_bun and has_serve


@dataclass(frozen=True)
class FrameworkRule:
    """
    One row of the framework table.

    A row matches when any lowercased token contains one of ``substrings``,
    equals one of ``exact``, or satisfies ``predicate``.
    """

    name: str
    category: ServerCategory
    port_hints: Tuple[int, ...]
    substrings: Tuple[str, ...] = ()
    exact: Tuple[str, ...] = ()
    predicate: Optional[TokenPredicate] = None
    runtime: Optional[str] = "Node.js"
    default_script: Optional[str] = None
    details_builder: Optional[DetailsBuilder] = None

    def matches(self, lowered_tokens: Sequence[str]) -> bool:
        for token in lowered_tokens:
            if token in self.exact:
                return True
            if any(fragment in token for fragment in self.substrings):
                return True
        if self.predicate is not None:
            return self.predicate(lowered_tokens)
        return False

    def details(self, lowered_tokens: Sequence[str]) -> Optional[str]:
        if self.details_builder is None:
            return None
        return self.details_builder(lowered_tokens)


FRAMEWORKS: Tuple[FrameworkRule, ...] = (
    FrameworkRule("Next.js", ServerCategory.WEB_FRAMEWORK, (3000,), substrings=("next",), details_builder=mode_details),
    FrameworkRule("Vite", ServerCategory.BUNDLER, (5173,), substrings=("vite",), details_builder=mode_details),
    FrameworkRule("Nuxt", ServerCategory.WEB_FRAMEWORK, (3000,), substrings=("nuxt",), details_builder=mode_details),
    FrameworkRule(
        "SvelteKit",
        ServerCategory.WEB_FRAMEWORK,
        (5173,),
        substrings=("svelte-kit", "sveltekit"),
        details_builder=mode_details,
    ),
    FrameworkRule("Remix", ServerCategory.WEB_FRAMEWORK, (3000,), substrings=("remix",), details_builder=mode_details),
    FrameworkRule("Astro", ServerCategory.WEB_FRAMEWORK, (4321,), substrings=("astro",), details_builder=mode_details),
    FrameworkRule("NestJS", ServerCategory.BACKEND, (3000,), substrings=("@nestjs/cli",), exact=("nest",)),
    FrameworkRule("Express", ServerCategory.BACKEND, (3000, 4000), substrings=("express",)),
    FrameworkRule("Fastify", ServerCategory.BACKEND, (3000,), substrings=("fastify",)),
    FrameworkRule("Koa", ServerCategory.BACKEND, (3000,), substrings=("koa",)),
    FrameworkRule(
        "Storybook",
        ServerCategory.COMPONENT_WORKBENCH,
        (6006,),
        substrings=("storybook",),
        default_script="storybook",
    ),
    FrameworkRule("Webpack Dev Server", ServerCategory.BUNDLER, (8080, 3000), substrings=("webpack-dev-server",)),
    FrameworkRule(
        "Angular CLI",
        ServerCategory.WEB_FRAMEWORK,
        (4200,),
        substrings=("@angular/cli",),
        exact=("ng",),
        details_builder=mode_details,
    ),
    FrameworkRule("Create React App", ServerCategory.WEB_FRAMEWORK, (3000,), substrings=("react-scripts",)),
    FrameworkRule("Expo", ServerCategory.MOBILE, (19000, 19006, 8081), substrings=("expo",), details_builder=expo_details),
    FrameworkRule("React Native", ServerCategory.MOBILE, (8081, 19000), substrings=("react-native", "metro")),
    FrameworkRule("Turborepo", ServerCategory.MONOREPO, (), substrings=("turbo",), default_script="dev"),
    FrameworkRule("Nx", ServerCategory.MONOREPO, (), substrings=("nx",)),
    FrameworkRule("TSX", ServerCategory.UTILITY, (3000, 4000), substrings=("tsx",)),
    FrameworkRule("Nodemon", ServerCategory.UTILITY, (3000, 4000), substrings=("nodemon",)),
    FrameworkRule("Deno", ServerCategory.RUNTIME, (8000,), substrings=("deno",), runtime="Deno"),
    FrameworkRule("Bun", ServerCategory.RUNTIME, (3000,), predicate=_bun_serve, runtime="Bun"),
)


def match_framework(lowered_tokens: Sequence[str]) -> Optional[FrameworkRule]:
    """Return the first table row matching the tokens, if any."""
    for spec in FRAMEWORKS:
        if spec.matches(lowered_tokens):
            return spec
    return None
