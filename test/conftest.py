"""Shared fixtures for gantry tests."""

import textwrap
from pathlib import Path

import pytest

from engine.settings import PROJECT_MARKER_DIR, Settings
from utils import terminal_ui


class DummyConsole:
    def __init__(self):
        self.lines: list[str] = []

    def print(self, *args, **kwargs):  # noqa: ARG002
        self.lines.append(" ".join(str(a) for a in args))

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


class FakeInputHandler:
    """Feeds canned lines to prompt_async; EOFError once they run out."""

    def __init__(self, inputs: list[str]):
        self._inputs = iter(inputs)
        self.prompts: list[str] = []

    async def prompt_async(self, prompt_text: str = "> ") -> str:
        self.prompts.append(prompt_text)
        try:
            return next(self._inputs)
        except StopIteration:
            raise EOFError from None


@pytest.fixture
def console(monkeypatch):
    """Record everything printed through terminal_ui."""
    dummy = DummyConsole()
    monkeypatch.setattr(terminal_ui, "console", dummy)
    errors: list[tuple[str, str]] = []

    def fake_print_error(message: str, title: str = "Error") -> None:
        errors.append((title, message))
        dummy.lines.append(f"{title}: {message}")

    monkeypatch.setattr(terminal_ui, "print_error", fake_print_error)
    dummy.errors = errors
    return dummy


@pytest.fixture
def project_root(tmp_path) -> Path:
    root = tmp_path / "myapp"
    root.mkdir()
    return root


@pytest.fixture
def user_home(tmp_path) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def settings(project_root, user_home, tmp_path) -> Settings:
    return Settings(
        project_root=project_root,
        user_home=user_home,
        work_dir=tmp_path / "work",
        version="1.0",
    )


def make_project(root: Path) -> None:
    (root / PROJECT_MARKER_DIR).mkdir(parents=True, exist_ok=True)


def write_script(directory: Path, filename: str, body: str = "def default(binding):\n    return 0\n") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


def touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path
