"""Line input for interactive mode: history, command completion and styling."""

from typing import Iterable, List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.history import FileHistory, InMemoryHistory
from prompt_toolkit.styles import Style

from utils.tui.theme import Theme

# Words completed in front of the command name
ENV_TOKENS = ("dev", "prod", "test")


class CommandCompleter(Completer):
    """Complete environment tokens and command names at the start of a line."""

    def __init__(self, commands: Optional[Iterable[str]] = None):
        self.commands: List[str] = []
        self.set_commands(commands or [])

    def set_commands(self, commands: Iterable[str]) -> None:
        self.commands = sorted(set(commands) | {"exit"})

    def get_completions(self, document: Document, complete_event: CompleteEvent | None):
        words = document.text_before_cursor.split(" ")
        if len(words) > 2 or (len(words) == 2 and words[0] not in ENV_TOKENS):
            return
        current = words[-1]
        candidates = self.commands if len(words) == 2 else [*ENV_TOKENS, *self.commands]
        for candidate in candidates:
            if candidate.startswith(current) and candidate != current:
                yield Completion(candidate, start_position=-len(current))


class InputHandler:
    """Prompt for one line at a time, with history across sessions."""

    def __init__(
        self,
        history_file: Optional[str] = None,
        commands: Optional[Iterable[str]] = None,
    ):
        """Initialize input handler.

        Args:
            history_file: Path to history file (None for in-memory)
            commands: Command names offered for completion
        """
        history = FileHistory(history_file) if history_file else InMemoryHistory()
        self.completer = CommandCompleter(commands)
        self.session: PromptSession = PromptSession(
            history=history,
            completer=self.completer,
            complete_while_typing=False,
        )

    def set_commands(self, commands: Iterable[str]) -> None:
        self.completer.set_commands(commands)

    def get_style(self) -> Style:
        return Style.from_dict(Theme.get_prompt_toolkit_style())

    async def prompt_async(self, prompt_text: str = "> ") -> str:
        """Read one line asynchronously; raises EOFError on Ctrl+D."""
        result = await self.session.prompt_async(
            [("class:prompt", prompt_text)],
            style=self.get_style(),
        )
        return result.strip()
