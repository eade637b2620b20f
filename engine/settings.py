"""Per-run view of the filesystem roots and declared dependencies."""

from __future__ import annotations

import importlib.metadata
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from utils import get_logger
from utils.runtime import get_runtime_dir, get_user_scripts_dir, get_work_dir

from .errors import ConfigLoadError

logger = get_logger(__name__)

PROJECT_MARKER_DIR = "gantry-app"
BUILD_CONFIG_FILE = Path(PROJECT_MARKER_DIR) / "conf" / "build-config.yaml"
ARCHIVE_SUFFIXES = (".zip", ".whl", ".egg")

# -D property keys understood by discover_settings()
HOME_KEY = "gantry.home"
BASE_DIR_KEY = "base.dir"
USER_HOME_KEY = "user.home"
WORK_DIR_KEY = "gantry.work.dir"


def get_version() -> str:
    try:
        return importlib.metadata.version("gantry-cli")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def flatten_config(config: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested mappings into dot-path keys.

    ``{"a": {"b": 1}}`` -> ``{"a.b": 1}``. Non-mapping values (lists included)
    are kept as leaves.
    """
    flat: dict[str, Any] = {}
    for key, value in config.items():
        path = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(flatten_config(value, prefix=f"{path}."))
        else:
            flat[path] = value
    return flat


def list_archives(directory: Path) -> list[Path]:
    """Library archives directly under ``directory`` (non-recursive, sorted)."""
    if not directory.is_dir():
        return []
    return sorted(
        p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in ARCHIVE_SUFFIXES
    )


@dataclass
class Settings:
    """Filesystem roots, dependency lists and build configuration for one process.

    Everything except ``config`` is fixed at construction; ``config`` is
    replaced by ``load_config()``.
    """

    project_root: Path
    user_home: Path
    installation_root: Path | None = None
    work_dir: Path | None = None
    version: str = field(default_factory=get_version)
    config: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.project_root = Path(self.project_root)
        self.user_home = Path(self.user_home)
        if self.installation_root is not None:
            self.installation_root = Path(self.installation_root)
        if self.work_dir is None:
            self.work_dir = Path(get_work_dir(self.version, str(self.user_home)))
        self.work_dir = Path(self.work_dir)

    # -- derived directories -------------------------------------------------

    @property
    def base_name(self) -> str:
        return self.project_root.name

    @property
    def project_work_dir(self) -> Path:
        return self.work_dir / "projects" / self.base_name

    @property
    def classes_dir(self) -> Path:
        return self.project_work_dir / "classes"

    @property
    def test_classes_dir(self) -> Path:
        return self.project_work_dir / "test-classes"

    @property
    def resources_dir(self) -> Path:
        return self.project_work_dir / "resources"

    @property
    def project_plugins_dir(self) -> Path:
        return self.project_work_dir / "plugins"

    @property
    def global_plugins_dir(self) -> Path:
        return self.work_dir / "global-plugins"

    @property
    def script_cache_dir(self) -> Path:
        return self.work_dir / "scriptCache"

    @property
    def installation_scripts_dir(self) -> Path | None:
        if self.installation_root is None:
            return None
        return self.installation_root / "scripts"

    @property
    def installation_lib_dir(self) -> Path | None:
        if self.installation_root is None:
            return None
        return self.installation_root / "lib"

    @property
    def project_scripts_dir(self) -> Path:
        return self.project_root / "scripts"

    @property
    def user_scripts_dir(self) -> Path:
        return Path(get_user_scripts_dir(str(self.user_home)))

    @property
    def build_config_path(self) -> Path:
        return self.project_root / BUILD_CONFIG_FILE

    # -- dependencies --------------------------------------------------------

    @property
    def compile_dependencies(self) -> list[Path]:
        """Project ``lib/`` archives followed by ``dependencies.compile`` entries."""
        return list_archives(self.project_root / "lib") + self._declared("compile")

    @property
    def runtime_dependencies(self) -> list[Path]:
        return self._declared("runtime")

    def _declared(self, scope: str) -> list[Path]:
        deps = self.config.get("dependencies") or {}
        entries = deps.get(scope) if isinstance(deps, Mapping) else None
        if not entries:
            return []
        if isinstance(entries, str):
            entries = [entries]
        result: list[Path] = []
        for entry in entries:
            path = Path(os.path.expanduser(str(entry)))
            result.append(path if path.is_absolute() else self.project_root / path)
        return result

    # -- configuration -------------------------------------------------------

    @property
    def app_version(self) -> str | None:
        value = self.flatten_config().get("app.version")
        return None if value is None else str(value)

    def flatten_config(self) -> dict[str, Any]:
        return flatten_config(self.config)

    def load_config(self) -> dict[str, Any]:
        """(Re)load the project's build configuration.

        A missing file yields an empty configuration.

        Raises:
            ConfigLoadError: If the file exists but cannot be read or parsed
        """
        path = self.build_config_path
        if not path.exists():
            self.config = {}
            return self.config

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigLoadError(path, str(e)) from e

        if not isinstance(data, dict):
            raise ConfigLoadError(path, "top level must be a mapping")

        self.config = data
        logger.info(f"Loaded build config from {path}")
        return self.config

    def is_project(self) -> bool:
        """True when the project root contains the project marker directory."""
        return (self.project_root / PROJECT_MARKER_DIR).is_dir()


def discover_settings(
    properties: Mapping[str, str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Build Settings from -D properties and the OS environment.

    Args:
        properties: Properties given with -Dkey=value (take precedence)
        environ: OS environment (default: os.environ)

    Returns:
        Settings for this process
    """
    properties = properties or {}
    environ = os.environ if environ is None else environ

    home = properties.get(HOME_KEY) or environ.get("GANTRY_HOME") or None
    base_dir = properties.get(BASE_DIR_KEY) or os.getcwd()
    user_home = properties.get(USER_HOME_KEY) or os.path.expanduser("~")
    work_dir = properties.get(WORK_DIR_KEY) or None

    settings = Settings(
        project_root=Path(base_dir).absolute(),
        user_home=Path(user_home),
        installation_root=Path(home).absolute() if home else None,
        work_dir=Path(work_dir) if work_dir else None,
    )
    logger.debug(
        f"Discovered settings: base={settings.project_root}, "
        f"home={settings.installation_root}, runtime={get_runtime_dir(str(settings.user_home))}"
    )
    return settings
