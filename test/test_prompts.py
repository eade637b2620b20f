"""Tests for the numbered-menu prompt and command completion."""

from conftest import FakeInputHandler
from prompt_toolkit.document import Document

from utils.tui.choice_prompt import ChoicePrompt, MenuState
from utils.tui.input_handler import CommandCompleter


def _complete(completer: CommandCompleter, text: str) -> list[str]:
    return [c.text for c in completer.get_completions(Document(text), None)]


class TestChoicePrompt:
    def test_valid_answer(self, console):
        prompt = ChoicePrompt("Enter #", ["1", "2"], max_attempts=3)
        assert prompt.feed(" 2 ") is MenuState.VALID_SELECTED
        assert prompt.selection == "2"
        assert console.lines == []

    def test_exhausted_after_max_attempts(self, console):
        prompt = ChoicePrompt("Enter #", ["1", "2"], max_attempts=2)
        assert prompt.feed("x") is MenuState.PROMPTING
        assert prompt.feed("") is MenuState.EXHAUSTED
        assert prompt.feed("1") is MenuState.EXHAUSTED
        assert prompt.selection is None
        assert console.lines[0] == "Invalid option 'x' - must be one of: [1,2]"
        assert console.lines[-1] == "No valid response entered - giving up asking."

    async def test_ask_stops_on_end_of_input(self, console):
        reader = FakeInputHandler(["7"])
        prompt = ChoicePrompt("Enter #", ["1", "2"], max_attempts=3)

        assert await prompt.ask(reader) is None
        assert prompt.state is MenuState.EXHAUSTED
        assert reader.prompts == ["Enter # [1,2] ", "Enter # [1,2] "]

    async def test_ask_returns_selection(self, console):
        prompt = ChoicePrompt("Enter #", ["1", "2", "3"], max_attempts=3)
        assert await prompt.ask(FakeInputHandler(["3"])) == "3"


class TestCommandCompleter:
    def test_completes_commands_and_env_tokens(self):
        completer = CommandCompleter(["run-app", "clean", "create-app"])
        assert _complete(completer, "c") == ["clean", "create-app"]
        assert _complete(completer, "d") == ["dev"]
        assert _complete(completer, "e") == ["exit"]

    def test_completes_command_after_env_token(self):
        completer = CommandCompleter(["run-app", "test-app"])
        assert _complete(completer, "prod r") == ["run-app"]
        assert _complete(completer, "run-app x") == []

    def test_set_commands_replaces_list(self):
        completer = CommandCompleter(["run-app"])
        completer.set_commands(["war"])
        assert _complete(completer, "") == ["dev", "prod", "test", "exit", "war"]
