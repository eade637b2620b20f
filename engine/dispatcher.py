"""Resolve a command to a script and run it."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from pathlib import Path

from config import Config
from utils import get_logger, terminal_ui
from utils.runtime import get_history_file
from utils.tui.choice_prompt import ChoicePrompt
from utils.tui.input_handler import InputHandler

from .adapter import ScriptExecutionAdapter
from .binding import ExecutionBinding, bind_execution_context
from .context import CommandContext
from .environment import EnvironmentResolver
from .errors import ConfigLoadError
from .locator import ScriptDescriptor, ScriptLocator
from .naming import script_name_from_command
from .search_path import SKIP_PLUGIN_COMMANDS, build_search_path
from .settings import Settings

logger = get_logger(__name__)

INTERACTIVE_COMMAND = "interactive"
_NON_INTERACTIVE_RE = re.compile(r"^(?:-)?-non-interactive$")


@dataclass
class ScriptCacheEntry:
    """Candidates found for a script name, plus the binding reused for it."""

    candidates: tuple[ScriptDescriptor, ...]
    binding: ExecutionBinding = field(default_factory=ExecutionBinding)


def has_non_interactive_flag(args: str | None) -> bool:
    if not args:
        return False
    return any(_NON_INTERACTIVE_RE.match(arg) for arg in args.split())


class CommandDispatcher:
    """Execute commands, one at a time, for the lifetime of the process.

    Script resolutions and search paths are computed on first use and kept
    for the whole process; scripts and libraries are assumed not to change
    on disk while it runs.
    """

    def __init__(
        self,
        settings: Settings,
        context: CommandContext | None = None,
        locator: ScriptLocator | None = None,
        adapter: ScriptExecutionAdapter | None = None,
        resolver: EnvironmentResolver | None = None,
        input_handler=None,
    ) -> None:
        self.settings = settings
        self.context = context or CommandContext()
        self.locator = locator or ScriptLocator(settings)
        self.adapter = adapter or ScriptExecutionAdapter()
        self.resolver = resolver or EnvironmentResolver()
        self._input_handler = input_handler

        self.script_cache: dict[str, ScriptCacheEntry] = {}
        self._search_paths: dict[bool, list[Path]] = {}
        self._root: tuple[Path, ...] | None = None

    @property
    def input_handler(self):
        if self._input_handler is None:
            history = get_history_file() if Config.HISTORY_ENABLED else None
            self._input_handler = InputHandler(history_file=history)
        return self._input_handler

    @input_handler.setter
    def input_handler(self, handler) -> None:
        self._input_handler = handler

    def ensure_root(self) -> tuple[Path, ...]:
        """The interpreter's own import path, captured once."""
        if self._root is None:
            self._root = tuple(Path(p) for p in sys.path if p)
        return self._root

    def search_path(self, skip_plugins: bool = False) -> list[Path]:
        """Library search path, built once per process for each ``skip_plugins`` value."""
        if skip_plugins not in self._search_paths:
            exclude_names = {p.name for p in self.ensure_root()}
            self._search_paths[skip_plugins] = build_search_path(
                self.settings, exclude_names=exclude_names, skip_plugins=skip_plugins
            )
        return self._search_paths[skip_plugins]

    async def resolve(self, script_name: str) -> ScriptCacheEntry:
        """Candidates for ``script_name``; the first lookup is cached for good."""
        entry = self.script_cache.get(script_name)
        if entry is None:
            candidates = await self.locator.find_candidates(script_name)
            entry = ScriptCacheEntry(candidates=candidates)
            self.script_cache[script_name] = entry
        return entry

    async def execute(self, command: str, args: str | None = None, env: str | None = None) -> int:
        """Run one command.

        Args:
            command: Command or script name as typed (``run-app`` or ``RunApp``)
            args: Trailing arguments, space separated
            env: Environment alias typed before the command, if any

        Returns:
            Exit code: 0 success, 1 refused/ambiguous/invalid choice, -1 when
            the script needs a project and none is present, otherwise the
            script's own status

        Raises:
            ScriptNotFoundError: If nothing matches the command
        """
        self.ensure_root()
        script_name = script_name_from_command(command)

        environment, is_default = self.resolver.resolve(env, script_name, self.context.environment)
        self.context.set_environment(environment, is_default)

        if has_non_interactive_flag(args):
            self.context.non_interactive = True
        self.context.set_cli_args(args)

        try:
            self.settings.load_config()
        except ConfigLoadError as e:
            logger.warning(f"Build config not loaded: {e}")
            terminal_ui.print_warning(f"WARNING: There was an error loading the build config: {e}")

        if script_name.lower() == INTERACTIVE_COMMAND:
            if self.context.non_interactive:
                terminal_ui.print_error("You cannot use '--non-interactive' with interactive mode.")
                return 1

            from interactive import run_interactive_mode

            return await run_interactive_mode(self)

        return await self._call_script(script_name)

    async def _call_script(self, script_name: str) -> int:
        search_path = self.search_path(skip_plugins=script_name in SKIP_PLUGIN_COMMANDS)
        execution_path = [*search_path, self.settings.classes_dir]

        entry = await self.resolve(script_name)
        bind_execution_context(entry.binding, self.settings, self.context, search_path)

        candidates = entry.candidates
        if not candidates:
            terminal_ui.print_info("Running pre-compiled script")
            return self.adapter.run_compiled(script_name, entry.binding, execution_path)

        if len(candidates) == 1:
            script = candidates[0]
            if not script.allowed_outside_project and not self.settings.is_project():
                self._print_outside_project_help()
                return -1
        else:
            if self.context.non_interactive:
                terminal_ui.print_error(
                    "More than one script with the given name is available - "
                    "cannot continue in non-interactive mode."
                )
                return 1
            script = await self._choose_script(candidates)
            if script is None:
                return 1

        terminal_ui.print_info(f"Running script {script.location}")
        return self.adapter.run_script(script.location, entry.binding, execution_path)

    async def _choose_script(self, candidates: tuple[ScriptDescriptor, ...]) -> ScriptDescriptor | None:
        terminal_ui.print_info("Multiple options please select:")
        terminal_ui.print_menu([str(c.location) for c in candidates])

        valid = [str(i) for i in range(1, len(candidates) + 1)]
        selection = await ChoicePrompt("Enter #", valid).ask(self.input_handler)
        if selection is None:
            return None
        return candidates[int(selection) - 1]

    def _print_outside_project_help(self) -> None:
        console = terminal_ui.console
        console.print(f"{self.settings.project_root} does not appear to be part of a gantry project.")
        console.print("The following commands are supported outside of a project:")
        terminal_ui.print_command_list(self.locator.allowed_outside_project_names())
        console.print("Run 'gantry help' for a complete list of available scripts.")
