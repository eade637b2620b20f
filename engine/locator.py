"""Find command scripts across installation, project, user and plugin roots."""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import aiofiles.os

from utils import get_logger

from .naming import command_from_script_name
from .plugins import list_known_plugin_dirs
from .settings import Settings

logger = get_logger(__name__)

SCRIPT_FILE_RE = re.compile(r"^(?!_)\w+\.py$")
SCRIPT_SUFFIX = ".py"
OUTSIDE_PROJECT_MARKER = "_"


class ScriptOrigin(str, Enum):
    INSTALLATION = "installation"
    PROJECT = "project"
    USER = "user"
    PLUGIN = "plugin"


@dataclass(frozen=True)
class ScriptDescriptor:
    """One script file discovered on disk."""

    name: str
    origin: ScriptOrigin
    location: Path
    allowed_outside_project: bool = False
    plugin_dir: Path | None = None

    @property
    def command_name(self) -> str:
        return command_from_script_name(self.name)

    @classmethod
    def from_path(
        cls, path: Path, origin: ScriptOrigin, plugin_dir: Path | None = None
    ) -> ScriptDescriptor:
        stem = path.name[: -len(SCRIPT_SUFFIX)]
        allowed = stem.endswith(OUTSIDE_PROJECT_MARKER)
        if allowed:
            stem = stem[: -len(OUTSIDE_PROJECT_MARKER)]
        return cls(
            name=stem,
            origin=origin,
            location=path.absolute(),
            allowed_outside_project=allowed,
            plugin_dir=plugin_dir,
        )


def is_script_file(path: Path) -> bool:
    return bool(SCRIPT_FILE_RE.match(path.name)) and path.is_file()


async def list_script_files(scripts_dir: Path) -> list[Path]:
    """Script files directly under ``scripts_dir`` (non-recursive, sorted)."""
    if not await aiofiles.os.path.isdir(scripts_dir):
        return []

    def _collect() -> list[Path]:
        return sorted(p for p in scripts_dir.iterdir() if is_script_file(p))

    return await asyncio.to_thread(_collect)


class ScriptLocator:
    """Index script files and resolve command names to candidates.

    Also remembers every script marked as usable outside a project, for the
    guidance shown when a command is refused.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._allowed_outside: dict[Path, ScriptDescriptor] = {}

    async def _roots(self) -> list[tuple[Path, ScriptOrigin, Path | None]]:
        roots: list[tuple[Path, ScriptOrigin, Path | None]] = []
        installation_scripts = self.settings.installation_scripts_dir
        if installation_scripts is not None:
            roots.append((installation_scripts, ScriptOrigin.INSTALLATION, None))
        roots.append((self.settings.project_scripts_dir, ScriptOrigin.PROJECT, None))
        roots.append((self.settings.user_scripts_dir, ScriptOrigin.USER, None))

        plugin_dirs = await asyncio.to_thread(list_known_plugin_dirs, self.settings)
        for plugin_dir in plugin_dirs:
            roots.append((plugin_dir / "scripts", ScriptOrigin.PLUGIN, plugin_dir))
        return roots

    async def list_scripts(self) -> list[ScriptDescriptor]:
        """Every script in precedence order, one descriptor per physical file."""
        results: list[ScriptDescriptor] = []
        seen: set[Path] = set()
        for scripts_dir, origin, plugin_dir in await self._roots():
            for path in await list_script_files(scripts_dir):
                descriptor = ScriptDescriptor.from_path(path, origin, plugin_dir)
                resolved = descriptor.location.resolve()
                if resolved in seen:
                    continue
                seen.add(resolved)
                if descriptor.allowed_outside_project:
                    self._allowed_outside.setdefault(descriptor.location, descriptor)
                results.append(descriptor)
        return results

    async def find_candidates(self, name: str) -> tuple[ScriptDescriptor, ...]:
        """All scripts whose logical name equals ``name``, in precedence order."""
        candidates = tuple(s for s in await self.list_scripts() if s.name == name)
        logger.debug(f"Resolved '{name}' to {len(candidates)} candidate(s)")
        return candidates

    def allowed_outside_project_names(self) -> list[str]:
        """Sorted command names of the outside-project scripts discovered so far."""
        return sorted({d.command_name for d in self._allowed_outside.values()})
