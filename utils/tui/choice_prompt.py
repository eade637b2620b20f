"""Bounded prompt that only accepts one of a fixed set of answers."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, Sequence

from config import Config
from utils import terminal_ui


class LineReader(Protocol):
    async def prompt_async(self, prompt_text: str = "> ") -> str: ...


class MenuState(Enum):
    PROMPTING = "prompting"
    VALID_SELECTED = "valid_selected"
    EXHAUSTED = "exhausted"


class ChoicePrompt:
    """Ask until a valid answer is given or the attempts run out.

    PROMPTING -> VALID_SELECTED on a valid answer, PROMPTING -> EXHAUSTED after
    ``max_attempts`` invalid answers or when input ends.
    """

    def __init__(
        self,
        message: str,
        valid_responses: Sequence[str],
        max_attempts: int | None = None,
    ) -> None:
        self.message = message
        self.valid_responses = list(valid_responses)
        self.max_attempts = max_attempts if max_attempts is not None else Config.MENU_MAX_ATTEMPTS
        self.state = MenuState.PROMPTING
        self.attempts = 0
        self.selection: str | None = None

    @property
    def responses_text(self) -> str:
        return ",".join(self.valid_responses)

    @property
    def prompt_text(self) -> str:
        return f"{self.message} [{self.responses_text}] "

    def feed(self, line: str | None) -> MenuState:
        """Advance the state machine with one line of input."""
        if self.state is not MenuState.PROMPTING:
            return self.state

        self.attempts += 1
        answer = line.strip() if line is not None else None
        if answer in self.valid_responses:
            self.selection = answer
            self.state = MenuState.VALID_SELECTED
            return self.state

        terminal_ui.print_warning(
            f"Invalid option '{answer}' - must be one of: [{self.responses_text}]"
        )
        if self.attempts >= self.max_attempts:
            self.state = MenuState.EXHAUSTED
            terminal_ui.print_warning("No valid response entered - giving up asking.")
        return self.state

    async def ask(self, reader: LineReader) -> str | None:
        """Run the prompt to completion.

        Returns:
            The selected response, or None when no valid answer was given
        """
        while self.state is MenuState.PROMPTING:
            try:
                line = await reader.prompt_async(self.prompt_text)
            except (EOFError, KeyboardInterrupt):
                self.state = MenuState.EXHAUSTED
                break
            self.feed(line)
        return self.selection
