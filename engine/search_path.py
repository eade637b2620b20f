"""Assemble the ordered, de-duplicated library search path for scripts."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Iterable

from utils import get_logger

from .errors import SearchPathError
from .plugins import list_known_plugin_dirs
from .settings import ARCHIVE_SUFFIXES, Settings

logger = get_logger(__name__)

# Supplied by the hosting runtime on its own; never put on the search path
HOSTED_ARCHIVE_RE = re.compile(r"^(standard|jstl)-\d.*$")

# Commands that change plugins on disk must not load plugin libraries
SKIP_PLUGIN_COMMANDS = frozenset({"InstallPlugin", "UninstallPlugin"})


def is_library_archive(path: Path) -> bool:
    return path.suffix.lower() in ARCHIVE_SUFFIXES and not HOSTED_ARCHIVE_RE.match(path.name)


def _entry(path: os.PathLike | str) -> Path:
    try:
        raw = os.fspath(path)
        if "\x00" in raw:
            raise ValueError("embedded null byte")
        return Path(raw).absolute()
    except (TypeError, ValueError, OSError) as e:
        raise SearchPathError(f"Invalid search path entry: {path!r}") from e


def _add_libs(directory: Path, search_path: list[Path], excludes: set[str]) -> None:
    """Append archives directly under ``directory`` whose basename is not excluded."""
    if not directory.is_dir():
        return
    for lib in sorted(directory.iterdir()):
        if lib.is_file() and is_library_archive(lib) and lib.name not in excludes:
            search_path.append(_entry(lib))


def build_search_path(
    settings: Settings,
    exclude_names: Iterable[str] = (),
    skip_plugins: bool = False,
) -> list[Path]:
    """Build the library search path for script execution.

    Order: script cache (only with an installation root), resources dir,
    compile dependencies, runtime dependencies, installation ``lib/``
    archives, then each plugin's ``lib/`` archives. Compile and runtime
    dependencies are de-duplicated by basename against ``exclude_names`` and
    each other. Plugin archives are filtered against that accumulated set
    only, so two plugins may both contribute an archive with the same
    basename.

    Args:
        settings: Settings for this process
        exclude_names: Basenames already provided by the host interpreter
        skip_plugins: Leave out plugin libraries

    Returns:
        Ordered list of search path entries

    Raises:
        SearchPathError: If an entry is not a usable path
    """
    excludes = set(exclude_names)
    search_path: list[Path] = []

    if settings.installation_root is not None:
        search_path.append(_entry(settings.script_cache_dir))

    if settings.resources_dir.exists():
        search_path.append(_entry(settings.resources_dir))

    for dep in settings.compile_dependencies:
        if dep.name not in excludes:
            search_path.append(_entry(dep))
            excludes.add(dep.name)

    for dep in settings.runtime_dependencies:
        entry = _entry(dep)
        if entry in search_path:
            continue
        if dep.name not in excludes:
            search_path.append(entry)
            excludes.add(dep.name)

    lib_dir = settings.installation_lib_dir
    if lib_dir is not None:
        _add_libs(lib_dir, search_path, excludes)

    if not skip_plugins:
        for plugin_dir in list_known_plugin_dirs(settings):
            # excludes is not extended here: plugins do not shadow each other
            _add_libs(plugin_dir / "lib", search_path, excludes)

    logger.debug(f"Search path has {len(search_path)} entries (skip_plugins={skip_plugins})")
    return search_path
