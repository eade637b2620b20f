"""Interactive mode: run command after command inside one process."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from engine.context import INTERACTIVE_MODE_KEY, STAGED_COMMAND_KEY, CommandContext
from engine.errors import ScriptNotFoundError
from engine.invocation import CommandInvocation, parse_invocation
from utils import get_log_file_path, get_logger, terminal_ui
from utils.tui.input_handler import InputHandler

if TYPE_CHECKING:
    from engine.dispatcher import CommandDispatcher

logger = get_logger(__name__)

READY_MESSAGE = (
    "Interactive mode ready, type your command name in to continue "
    "(hit ENTER to run the last command or 'exit' to quit):"
)
EXIT_COMMAND = "exit"


class InteractiveSession:
    """Read-execute loop sharing the dispatcher's caches.

    Each command starts from the context captured when the session began, so
    properties, environment pinning and arguments set by one command do not
    reach the next.
    """

    def __init__(self, dispatcher: CommandDispatcher):
        self.dispatcher = dispatcher
        self.context: CommandContext = dispatcher.context
        self.message_number = 0
        self.last_invocation: CommandInvocation | None = None
        self._snapshot: CommandContext | None = None

    @property
    def input_handler(self):
        return self.dispatcher.input_handler

    def _begin(self) -> None:
        self.context.interactive_mode = True
        self.context.set_property(INTERACTIVE_MODE_KEY, "true")
        # Environment chosen only because "interactive" has a default: let each command pick its own
        if self.context.default_env:
            self.context.clear_environment()
        self._snapshot = self.context.snapshot()

    async def _refresh_completions(self) -> None:
        handler = self.input_handler
        if isinstance(handler, InputHandler):
            scripts = await self.dispatcher.locator.list_scripts()
            handler.set_commands(s.command_name for s in scripts)

    async def _next_line(self) -> str:
        """Next staged command (``gantry.script.name<n>``) or a line from the user."""
        key = f"{STAGED_COMMAND_KEY}{self.message_number}"
        self.message_number += 1
        staged = self._snapshot.get_property(key) if self._snapshot else None
        if staged is not None:
            terminal_ui.print_info(f"> {staged}")
            return staged
        return await self.input_handler.prompt_async("gantry> ")

    async def _run_command(self, invocation: CommandInvocation) -> None:
        name = invocation.script_name
        started = time.perf_counter()
        try:
            exit_code = await self.dispatcher.execute(name, invocation.args, invocation.env)
        except ScriptNotFoundError as e:
            terminal_ui.print_error(f"Script not found: {e.script_name}")
            return
        except KeyboardInterrupt:
            terminal_ui.print_warning("Command interrupted by user.")
            return
        except Exception as e:
            logger.exception(f"Command {name} failed")
            terminal_ui.print_error(str(e), title=f"Error executing script {name}")
            return

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        terminal_ui.print_divider()
        terminal_ui.print_info(f"Command [{name}] completed in {elapsed_ms}ms with exit code {exit_code}")

    async def run(self) -> int:
        self._begin()
        await self._refresh_completions()
        terminal_ui.print_info(READY_MESSAGE)

        while True:
            terminal_ui.print_divider()
            try:
                line = (await self._next_line()).strip()
            except KeyboardInterrupt:
                terminal_ui.print_warning(f"Interrupted. Type '{EXIT_COMMAND}' to quit.")
                continue
            except EOFError:
                break

            self.context.restore(self._snapshot)

            if line == EXIT_COMMAND:
                break

            if line:
                self.last_invocation = parse_invocation(line, self.context)
            elif self.last_invocation is not None:
                # Blank line: run the previous command again, with its -D properties
                for key, value in self.last_invocation.properties.items():
                    self.context.set_property(key, value)

            if self.last_invocation is None or self.last_invocation.script_name is None:
                terminal_ui.print_warning("You must enter a command.")
                continue

            await self._run_command(self.last_invocation)

        log_file = get_log_file_path()
        if log_file:
            terminal_ui.print_log_location(log_file)
        return 0


async def run_interactive_mode(dispatcher: CommandDispatcher) -> int:
    """Run the interactive loop until 'exit'; returns 0."""
    session = InteractiveSession(dispatcher)
    return await session.run()
