"""Tests for heuristic process classification."""

import pytest

from slaynode.command_parser import make_context
from slaynode.models import ServerCategory, ServerDescriptor
from slaynode.process_classifier import classify


def _classify(*tokens):
    return classify(make_context(tokens[0] if tokens else "", tokens))


def test_next_dev_from_node_modules_bin():
    descriptor = _classify("node_modules/.bin/next", "dev")

    assert descriptor.display_name == "Next.js"
    assert descriptor.category is ServerCategory.WEB_FRAMEWORK
    assert descriptor.port_hints == (3000,)
    assert descriptor.details == "Mode: DEV"
    assert descriptor.runtime == "Node.js"


def test_pnpm_exec_is_unwrapped():
    descriptor = _classify("pnpm", "exec", "next", "dev")

    assert descriptor.package_manager == "pnpm"
    assert descriptor.script == "next"
    assert descriptor.display_name == "Next.js"
    assert descriptor.details == "Mode: DEV"


def test_nodemon_is_a_utility():
    descriptor = _classify("nodemon", "server.js")

    assert descriptor.category is ServerCategory.UTILITY
    assert descriptor.port_hints == (3000, 4000)


def test_classification_is_idempotent():
    tokens = ("npx", "vite", "--port", "4000")

    assert _classify(*tokens) == _classify(*tokens)


def test_empty_tokens_are_unknown():
    assert classify(make_context("", ())) is ServerDescriptor.UNKNOWN


@pytest.mark.parametrize(
    "tokens, name, category",
    [
        (("vite", "preview"), "Vite", ServerCategory.BUNDLER),
        (("node", "/app/node_modules/.bin/astro", "dev"), "Astro", ServerCategory.WEB_FRAMEWORK),
        (("nest", "start", "--watch"), "NestJS", ServerCategory.BACKEND),
        (("ng", "serve"), "Angular CLI", ServerCategory.WEB_FRAMEWORK),
        (("node", "node_modules/.bin/storybook", "dev", "-p", "6006"), "Storybook", ServerCategory.COMPONENT_WORKBENCH),
        (("node", "webpack-dev-server"), "Webpack Dev Server", ServerCategory.BUNDLER),
        (("node", "react-scripts", "start"), "Create React App", ServerCategory.WEB_FRAMEWORK),
        (("turbo", "run", "dev"), "Turborepo", ServerCategory.MONOREPO),
        (("deno", "task", "dev"), "Deno", ServerCategory.RUNTIME),
    ],
)
def test_known_frameworks(tokens, name, category):
    descriptor = _classify(*tokens)

    assert descriptor.name == name
    assert descriptor.category is category


def test_first_table_row_wins():
    # "next" precedes "vite" in the table.
    assert _classify("node", "next-vite-bridge.js").name == "Next.js"


def test_expo_details():
    assert _classify("expo", "start").details == "Mode: START"
    assert _classify("expo", "start:web").details == "Mode: WEB"
    assert _classify("expo", "start").category is ServerCategory.MOBILE


def test_deno_runtime_is_fixed():
    assert _classify("deno", "run", "server.ts").runtime == "Deno"


def test_bun_serve_matches_when_bun_is_not_the_wrapper():
    descriptor = _classify("env", "bun", "serve")

    assert descriptor.name == "Bun"
    assert descriptor.runtime == "Bun"
    assert descriptor.category is ServerCategory.RUNTIME


def test_bun_as_first_token_is_unwrapped_as_package_manager():
    descriptor = _classify("bun", "serve.ts")

    assert descriptor.package_manager == "bun"
    assert descriptor.script == "serve.ts"


def test_npm_run_script_without_framework_is_named_after_script():
    descriptor = _classify("npm", "run", "api")

    assert descriptor.name == "api"
    assert descriptor.category is ServerCategory.UTILITY
    assert descriptor.package_manager == "npm"
    assert descriptor.script == "api"


def test_bare_manager_falls_back_to_capitalized_name():
    descriptor = _classify("pnpm", "--version")

    assert descriptor.name == "Pnpm"
    assert descriptor.package_manager == "pnpm"
    assert descriptor.script is None


def test_wrapper_with_nothing_after_it_uses_executable_fallback():
    descriptor = _classify("yarn")

    assert descriptor.name == "yarn"
    assert descriptor.category is ServerCategory.RUNTIME
    assert descriptor.package_manager is None


def test_wrapper_recognised_by_basename():
    descriptor = _classify("/usr/local/bin/npm", "run", "dev")

    assert descriptor.package_manager == "npm"
    assert descriptor.script == "dev"


def test_script_fallback_names_after_file():
    descriptor = _classify("node", "/srv/api/server.js")

    assert descriptor.name == "server.js"
    assert descriptor.category is ServerCategory.UTILITY
    assert descriptor.script == "server.js"
    assert descriptor.runtime == "Node.js"


def test_executable_fallback():
    descriptor = _classify("node", "--version")

    assert descriptor.name == "node"
    assert descriptor.category is ServerCategory.RUNTIME
    assert descriptor.runtime == "Node.js"


def test_summary_details_orders_chips():
    descriptor = _classify("npm", "run", "dev", "--", "--port", "3000")

    assert descriptor.summary_details()[0] == descriptor.category.display_name
    assert "npm dev" in descriptor.summary_details()
