"""Plugin directory discovery."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from .naming import property_name
from .settings import Settings

PLUGIN_LOCATION_PREFIX = "gantry.plugin.location."
PLUGIN_DESCRIPTOR_SUFFIX = "Plugin.py"
PLUGIN_DESCRIPTOR_RE = re.compile(r"^(\S+)Plugin\.py$")


@dataclass(frozen=True)
class PluginDirectory:
    path: Path
    descriptor: Path | None = None


def is_plugin_dir(path: Path) -> bool:
    """A plugin directory is a visible directory whose name contains a hyphen."""
    return path.is_dir() and not path.name.startswith(".") and "-" in path.name


def list_plugin_dirs(root: Path) -> list[Path]:
    """Plugin directories directly under ``root`` (non-recursive, sorted)."""
    if not root.is_dir():
        return []
    return sorted(p for p in root.iterdir() if is_plugin_dir(p))


def list_known_plugin_dirs(settings: Settings) -> list[Path]:
    """Every plugin directory we know about.

    Order: global plugins, then project plugins, then explicit
    ``gantry.plugin.location.*`` entries from the build config. Explicit
    locations are taken as given, without the naming check.
    """
    dirs = list_plugin_dirs(settings.global_plugins_dir)
    dirs.extend(list_plugin_dirs(settings.project_plugins_dir))

    for key, value in settings.flatten_config().items():
        if key.startswith(PLUGIN_LOCATION_PREFIX) and value is not None:
            location = Path(str(value)).expanduser()
            if not location.is_absolute():
                location = settings.project_root / location
            dirs.append(location)

    return dirs


def find_plugin_descriptor(directory: Path) -> Path | None:
    """Return the first ``*Plugin.py`` file in ``directory``, if any."""
    if not directory.is_dir():
        return None
    matches = sorted(
        p for p in directory.iterdir() if p.is_file() and p.name.endswith(PLUGIN_DESCRIPTOR_SUFFIX)
    )
    return matches[0] if matches else None


def list_known_plugins(settings: Settings) -> list[PluginDirectory]:
    return [
        PluginDirectory(path=d, descriptor=find_plugin_descriptor(d))
        for d in list_known_plugin_dirs(settings)
    ]


def plugin_binding_name(descriptor: Path) -> str:
    """Binding name for a plugin descriptor (``DbMigrationPlugin.py`` -> ``dbMigrationPluginDir``).

    Raises:
        ValueError: If the file name does not look like a plugin descriptor
    """
    match = PLUGIN_DESCRIPTOR_RE.match(descriptor.name)
    if match is None:
        raise ValueError(f"Not a plugin descriptor: {descriptor.name}")
    return f"{property_name(match.group(1))}PluginDir"
