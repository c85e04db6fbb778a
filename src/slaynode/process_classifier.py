"""
Heuristic classification of Node-ecosystem processes.

``classify`` is a pure function of its ``CommandContext``: the same tokens
always yield the same descriptor. Rules are tried in order and the first one
that applies wins:

1. package-manager wrappers (``npm``, ``pnpm exec``, ``bunx`` ...) are
   unwrapped and the remainder classified on its own
2. the known-framework table
3. the first script-like token, named after its file name
4. the bare executable
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from .command_parser import CommandContext, make_context
from .command_parser_helpers.inference import first_script_token
from .models import ServerCategory, ServerDescriptor
from .process_classifier_helpers import (
    FrameworkRule,
    detect_runtime,
    extract_script_name,
    match_framework,
    package_manager_for,
    port_hints_for_name,
)

logger = logging.getLogger(__name__)


def classify(context: CommandContext) -> ServerDescriptor:
    """Map a tokenized command to a ``ServerDescriptor``."""
    if not context.tokens:
        return ServerDescriptor.UNKNOWN

    descriptor = _classify_package_manager_wrapper(context)
    if descriptor is not None:
        return descriptor

    descriptor = _classify_known_framework(context)
    if descriptor is not None:
        return descriptor

    runtime = detect_runtime(context.lowercased_tokens)
    script_token = first_script_token(context.tokens)
    if script_token is not None:
        name = os.path.basename(script_token)
        return ServerDescriptor(
            name=name,
            display_name=name,
            category=ServerCategory.UTILITY,
            runtime=runtime,
            script=name,
            port_hints=port_hints_for_name(name),
        )

    return ServerDescriptor(
        name=context.executable,
        display_name=context.executable,
        category=ServerCategory.RUNTIME,
        runtime=runtime,
        port_hints=port_hints_for_name(context.executable),
    )


def _classify_package_manager_wrapper(context: CommandContext) -> Optional[ServerDescriptor]:
    package_manager = package_manager_for(context.tokens[0])
    if package_manager is None:
        return None

    remaining = context.tokens[1:]
    if not remaining:
        return None

    nested = make_context(remaining[0], remaining, context.working_directory)
    script_name = extract_script_name(context.tokens)

    framework_descriptor = _classify_known_framework(nested)
    if framework_descriptor is not None:
        runtime = (
            framework_descriptor.runtime
            or detect_runtime(nested.lowercased_tokens)
            or detect_runtime(context.lowercased_tokens)
        )
        logger.debug("Unwrapped %s invocation as %s", package_manager, framework_descriptor.name)
        return ServerDescriptor(
            name=framework_descriptor.name,
            display_name=framework_descriptor.display_name,
            category=framework_descriptor.category,
            runtime=runtime,
            package_manager=package_manager,
            script=script_name or framework_descriptor.script,
            details=framework_descriptor.details,
            port_hints=framework_descriptor.port_hints,
        )

    runtime = detect_runtime(context.lowercased_tokens)
    if script_name is not None:
        return ServerDescriptor(
            name=script_name,
            display_name=script_name,
            category=ServerCategory.UTILITY,
            runtime=runtime,
            package_manager=package_manager,
            script=script_name,
            port_hints=port_hints_for_name(script_name),
        )

    manager_name = package_manager.capitalize()
    return ServerDescriptor(
        name=manager_name,
        display_name=manager_name,
        category=ServerCategory.UTILITY,
        runtime=runtime,
        package_manager=package_manager,
        port_hints=port_hints_for_name(package_manager),
    )


def _classify_known_framework(context: CommandContext) -> Optional[ServerDescriptor]:
    lowered = context.lowercased_tokens
    spec = match_framework(lowered)
    if spec is None:
        return None
    return _descriptor_for(spec, context)


def _descriptor_for(spec: FrameworkRule, context: CommandContext) -> ServerDescriptor:
    lowered = context.lowercased_tokens
    return ServerDescriptor(
        name=spec.name,
        display_name=spec.name,
        category=spec.category,
        runtime=spec.runtime or detect_runtime(lowered),
        script=spec.default_script,
        details=spec.details(lowered),
        port_hints=spec.port_hints,
    )


__all__ = ["classify"]
