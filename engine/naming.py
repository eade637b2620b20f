"""Conversions between command names, script names and binding names."""

from __future__ import annotations

import re

_UPPER_RE = re.compile(r"(?<!^)(?=[A-Z])")


def script_name_from_command(command: str) -> str:
    """Convert a typed command to its script name.

    ``run-app`` -> ``RunApp``; ``clean`` -> ``Clean``; ``TestApp`` is unchanged.
    """
    parts = [p for p in command.split("-") if p]
    return "".join(p[:1].upper() + p[1:] for p in parts)


def command_from_script_name(script_name: str) -> str:
    """Convert a script name back to the hyphenated command (``CreateApp`` -> ``create-app``)."""
    return _UPPER_RE.sub("-", script_name).lower()


def property_name(name: str) -> str:
    """Lower-case the first letter (``DbMigration`` -> ``dbMigration``)."""
    if not name:
        return name
    if len(name) > 1 and name[:2].isupper():
        # Acronyms stay as they are (``URLMapping`` -> ``URLMapping``)
        return name
    return name[:1].lower() + name[1:]
