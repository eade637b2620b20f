"""Parse a raw command line into environment, script name and arguments."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .context import CommandContext
from .environment import is_env_alias

# Leading -Dkey=value tokens; each must be followed by whitespace
_PROPERTY_RE = re.compile(r"^-D(\S+?)=(\S+)\s+")


@dataclass(frozen=True)
class CommandInvocation:
    """One parsed command.

    ``env`` is the alias token exactly as typed (``dev``/``prod``/``test``),
    ``script_name`` the command as typed minus one leading ``-``, ``args`` the
    rest of the line verbatim.
    """

    script_name: str | None = None
    args: str | None = None
    env: str | None = None
    properties: dict[str, str] = field(default_factory=dict)


def parse_property(text: str) -> tuple[str, str]:
    """Split ``key=value`` (``%20`` in the value becomes a space).

    Raises:
        ValueError: If there is no ``=`` or the key is empty
    """
    key, sep, value = text.partition("=")
    if not sep or not key.strip():
        raise ValueError(f"Expected key=value, got '{text}'")
    return key.strip(), value.strip().replace("%20", " ")


def extract_properties(line: str) -> tuple[dict[str, str], str]:
    """Split leading ``-Dkey=value`` tokens off ``line``.

    ``%20`` in values decodes to a space.

    Returns:
        (properties, remainder of the line)
    """
    properties: dict[str, str] = {}
    rest = line.lstrip()
    while True:
        match = _PROPERTY_RE.match(rest)
        if match is None:
            break
        key, value = parse_property(f"{match.group(1)}={match.group(2)}")
        properties[key] = value
        rest = rest[match.end() :]
    return properties, rest


def parse_invocation(line: str, context: CommandContext) -> CommandInvocation:
    """Parse ``[-Dkey=value ...] [env] <command> [args...]``.

    Properties are applied to ``context`` before anything else is parsed.
    A blank line (or one holding only properties and an env token) gives an
    invocation without a script name.
    """
    properties, rest = extract_properties(line.strip())
    for key, value in properties.items():
        context.set_property(key, value)

    tokens = rest.split()
    if not tokens:
        return CommandInvocation(properties=properties)

    index = 0
    env = None
    if is_env_alias(tokens[0]):
        env = tokens[0]
        index = 1

    if index >= len(tokens):
        return CommandInvocation(env=env, properties=properties)

    name = tokens[index]
    if name.startswith("-"):
        name = name[1:]

    # Everything after the command name, spacing kept
    parts = rest.split(None, index + 1)
    args = parts[index + 1].rstrip() if len(parts) > index + 1 else None
    return CommandInvocation(script_name=name, args=args or None, env=env, properties=properties)
