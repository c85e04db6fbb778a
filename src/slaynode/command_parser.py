"""
Command-line tokenization for captured process command lines.

The input is a command line as reported by the process table, not shell
syntax to be re-evaluated, so there is no variable expansion, globbing or
subshell handling. Quoting and backslash escapes are honoured only so that
arguments containing spaces survive as single tokens.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .command_parser_helpers.inference import (
    first_script_token,
    infer_ports,
    infer_working_directory,
)
from .models import ServerDescriptor

__all__ = [
    "CommandContext",
    "descriptor_from_tokens",
    "first_script_token",
    "infer_ports",
    "infer_working_directory",
    "make_context",
    "tokenize",
]


def tokenize(command: str) -> List[str]:
    """
    Split ``command`` into shell-like tokens.

    Whitespace separates tokens outside quotes. Single and double quotes are
    mutually exclusive: a quote of the other kind inside an active quote is
    literal. A backslash escapes the next character unconditionally, even
    inside quotes, and is dropped from the output. An unterminated quote
    consumes the rest of the string.

    Args:
        command: Raw command line

    Returns:
        List of tokens, empty for blank input
    """
    tokens: List[str] = []
    current: List[str] = []
    in_single_quote = False
    in_double_quote = False
    escaping = False

    for character in command:
        if escaping:
            current.append(character)
            escaping = False
            continue

        if character == "\\":
            escaping = True
        elif character == '"' and not in_single_quote:
            in_double_quote = not in_double_quote
        elif character == "'" and not in_double_quote:
            in_single_quote = not in_single_quote
        elif character.isspace() and not in_single_quote and not in_double_quote:
            if current:
                tokens.append("".join(current))
                current = []
        else:
            current.append(character)

    if current:
        tokens.append("".join(current))

    return tokens


@dataclass(frozen=True)
class CommandContext:
    """Ephemeral input to classification."""

    executable: str
    tokens: Tuple[str, ...]
    working_directory: Optional[str] = None

    @property
    def arguments(self) -> Tuple[str, ...]:
        return self.tokens[1:]

    @property
    def lowercased_tokens(self) -> Tuple[str, ...]:
        return tuple(token.lower() for token in self.tokens)

    @property
    def lowercased_arguments(self) -> Tuple[str, ...]:
        return tuple(token.lower() for token in self.arguments)


def make_context(
    executable: str,
    tokens: Sequence[str],
    working_directory: Optional[str] = None,
) -> CommandContext:
    return CommandContext(
        executable=executable,
        tokens=tuple(tokens),
        working_directory=working_directory,
    )


def descriptor_from_tokens(tokens: Sequence[str], working_directory: Optional[str] = None) -> ServerDescriptor:
    """Classify a raw token list, using its first token as the executable."""
    # process_classifier imports this module at load time.
    from .process_classifier import classify

    executable = tokens[0] if tokens else ""
    return classify(make_context(executable, tokens, working_directory))
