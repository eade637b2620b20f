"""Variables made available to a running script."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator, Sequence

from utils import get_logger

from .context import CommandContext
from .plugins import find_plugin_descriptor, list_known_plugins, plugin_binding_name
from .settings import Settings

logger = get_logger(__name__)


class ExecutionBinding:
    """Named variables shared between the engine and a script."""

    def __init__(self, variables: dict[str, Any] | None = None) -> None:
        self._variables: dict[str, Any] = dict(variables or {})

    def set_variable(self, name: str, value: Any) -> None:
        self._variables[name] = value

    def get_variable(self, name: str) -> Any:
        """Return a variable's value.

        Raises:
            KeyError: If the variable is not bound
        """
        return self._variables[name]

    def has_variable(self, name: str) -> bool:
        return name in self._variables

    def as_dict(self) -> dict[str, Any]:
        return dict(self._variables)

    def __getitem__(self, name: str) -> Any:
        return self._variables[name]

    def __contains__(self, name: object) -> bool:
        return name in self._variables

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)


def bind_execution_context(
    binding: ExecutionBinding,
    settings: Settings,
    context: CommandContext,
    search_path: Sequence[Path],
) -> ExecutionBinding:
    """Populate ``binding`` with the standard variables for one command.

    Adds ``<pluginName>PluginDir`` for the project itself (when it is a plugin)
    and for every known plugin that has a descriptor. Problems reading plugin
    descriptors only cost those bindings.
    """
    project_root = settings.project_root
    home = settings.installation_root

    binding.set_variable("gantrySettings", settings)
    binding.set_variable("basedir", str(project_root))
    binding.set_variable("baseFile", project_root)
    binding.set_variable("baseName", project_root.name)
    binding.set_variable("gantryHome", str(home) if home is not None else None)
    binding.set_variable("gantryVersion", settings.version)
    binding.set_variable("appVersion", settings.app_version)
    binding.set_variable("userHome", str(settings.user_home))
    binding.set_variable("gantryEnv", context.environment.name if context.environment else None)
    binding.set_variable("defaultEnv", context.default_env)
    binding.set_variable("buildConfig", settings.config)
    binding.set_variable("searchPath", list(search_path))
    binding.set_variable("cliArgs", context.cli_args)

    binding.set_variable("gantryWorkDir", str(settings.work_dir))
    binding.set_variable("projectWorkDir", str(settings.project_work_dir))
    binding.set_variable("scriptCacheDir", str(settings.script_cache_dir))
    binding.set_variable("classesDirPath", str(settings.classes_dir))
    binding.set_variable("testDirPath", str(settings.test_classes_dir))
    binding.set_variable("resourcesDirPath", str(settings.resources_dir))
    binding.set_variable("pluginsDirPath", str(settings.project_plugins_dir))
    binding.set_variable("globalPluginsDirPath", str(settings.global_plugins_dir))

    try:
        descriptors: list[Path] = []
        own = find_plugin_descriptor(project_root)
        if own is not None:
            descriptors.append(own)
        for plugin in list_known_plugins(settings):
            if plugin.descriptor is not None:
                descriptors.append(plugin.descriptor)

        for descriptor in descriptors:
            binding.set_variable(plugin_binding_name(descriptor), descriptor.parent)
    except (OSError, ValueError) as e:
        logger.debug(f"Skipping plugin directory bindings: {e}")

    return binding
