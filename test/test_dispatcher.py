"""Tests for CommandDispatcher."""

import sys
import uuid

import pytest
from conftest import FakeInputHandler, make_project, touch, write_script

from config import Config
from engine.dispatcher import CommandDispatcher, has_non_interactive_flag
from engine.errors import ScriptNotFoundError

RECORDING_SCRIPT = """\
def default(binding):
    binding.set_variable("ranIn", gantryEnv)
    return {status}
"""


@pytest.fixture(autouse=True)
def _menu_attempts(monkeypatch):
    monkeypatch.setattr(Config, "MENU_MAX_ATTEMPTS", 3)


@pytest.fixture
def project(settings, project_root):
    make_project(project_root)
    return settings


def _dispatcher(settings, inputs=None) -> CommandDispatcher:
    return CommandDispatcher(settings, input_handler=FakeInputHandler(inputs or []))


def test_has_non_interactive_flag():
    assert has_non_interactive_flag("--non-interactive")
    assert has_non_interactive_flag("x -non-interactive y")
    assert not has_non_interactive_flag("--non-interactive-ish")
    assert not has_non_interactive_flag(None)


async def test_runs_project_script(project, project_root, console):
    write_script(project_root / "scripts", "RunApp.py", RECORDING_SCRIPT.format(status=4))
    dispatcher = _dispatcher(project)

    assert await dispatcher.execute("run-app") == 4
    assert dispatcher.script_cache["RunApp"].binding["ranIn"] == "development"
    assert "Running script" in console.text


async def test_default_environment_for_script(project, project_root, console):
    write_script(project_root / "scripts", "TestApp.py", RECORDING_SCRIPT.format(status=0))
    dispatcher = _dispatcher(project)

    await dispatcher.execute("test-app")

    assert dispatcher.script_cache["TestApp"].binding["ranIn"] == "test"
    assert dispatcher.context.default_env


async def test_explicit_environment_token(project, project_root, console):
    write_script(project_root / "scripts", "TestApp.py", RECORDING_SCRIPT.format(status=0))
    dispatcher = _dispatcher(project)

    await dispatcher.execute("test-app", env="prod")

    assert dispatcher.script_cache["TestApp"].binding["ranIn"] == "production"
    assert not dispatcher.context.default_env


async def test_not_found_raises(project, console):
    with pytest.raises(ScriptNotFoundError) as exc_info:
        await _dispatcher(project).execute(f"missing-{uuid.uuid4().hex[:8]}")
    assert exc_info.value.script_name.startswith("Missing")
    assert "Running pre-compiled script" in console.text


@pytest.mark.parametrize("command", ["foo.bar", "-", ".foo", "os.path"])
async def test_names_that_are_not_modules_are_not_found(project, console, command):
    with pytest.raises(ScriptNotFoundError):
        await _dispatcher(project).execute(command)


async def test_precompiled_script_from_classes_dir(project, console):
    name = f"Precompiled{uuid.uuid4().hex[:8]}"
    write_script(project.classes_dir, f"{name}.py", "def default(binding):\n    return 9\n")
    try:
        assert await _dispatcher(project).execute(name) == 9
    finally:
        sys.modules.pop(name, None)


async def test_outside_project_is_refused(settings, tmp_path, console):
    settings.installation_root = tmp_path / "install"
    scripts = settings.installation_scripts_dir
    write_script(scripts, "RunApp.py")
    write_script(scripts, "Help_.py")
    write_script(scripts, "CreateApp_.py")

    assert await _dispatcher(settings).execute("run-app") == -1

    text = console.text
    assert "does not appear to be part of a gantry project" in text
    assert text.index("\tcreate-app") < text.index("\thelp")
    assert "Run 'gantry help'" in text


async def test_outside_project_script_runs_anywhere(settings, tmp_path, console):
    settings.installation_root = tmp_path / "install"
    write_script(settings.installation_scripts_dir, "CreateApp_.py", "def default(binding):\n    return 0\n")

    assert await _dispatcher(settings).execute("create-app") == 0


async def test_ambiguous_in_non_interactive_mode(project, project_root, console):
    marker = project_root / "ran.txt"
    body = f"def default(binding):\n    open({str(marker)!r}, 'w').close()\n"
    write_script(project_root / "scripts", "Clean.py", body)
    write_script(project.user_scripts_dir, "Clean.py", body)
    dispatcher = _dispatcher(project)

    assert await dispatcher.execute("clean", args="--non-interactive") == 1
    assert not marker.exists()
    assert dispatcher.input_handler.prompts == []
    assert "cannot continue in non-interactive mode" in console.errors[0][1]


async def test_menu_selection(project, project_root, console):
    write_script(project_root / "scripts", "Clean.py", "def default(binding):\n    return 10\n")
    write_script(project.user_scripts_dir, "Clean.py", "def default(binding):\n    return 20\n")
    dispatcher = _dispatcher(project, inputs=["9", "2"])

    assert await dispatcher.execute("clean") == 20
    assert dispatcher.input_handler.prompts == ["Enter # [1,2] ", "Enter # [1,2] "]
    assert "Multiple options please select:" in console.text
    assert "Invalid option '9'" in console.text


async def test_menu_gives_up(project, project_root, console):
    write_script(project_root / "scripts", "Clean.py", "def default(binding):\n    return 10\n")
    write_script(project.user_scripts_dir, "Clean.py", "def default(binding):\n    return 20\n")
    dispatcher = _dispatcher(project, inputs=["x", "3", "0", "1"])

    assert await dispatcher.execute("clean") == 1
    assert len(dispatcher.input_handler.prompts) == 3
    assert "giving up asking" in console.text


async def test_resolution_is_cached(project, project_root, console):
    dispatcher = _dispatcher(project)
    write_script(project_root / "scripts", "Clean.py", "def default(binding):\n    return 1\n")
    assert await dispatcher.execute("clean") == 1
    first = dispatcher.script_cache["Clean"]

    write_script(project.user_scripts_dir, "Clean.py", "def default(binding):\n    return 2\n")

    assert await dispatcher.execute("clean") == 1
    assert await dispatcher.resolve("Clean") is first
    assert len(first.candidates) == 1


async def test_empty_resolution_is_cached(project, project_root, console):
    dispatcher = _dispatcher(project)
    name = f"Late{uuid.uuid4().hex[:8]}"
    with pytest.raises(ScriptNotFoundError):
        await dispatcher.execute(name)

    write_script(project_root / "scripts", f"{name}.py")

    assert dispatcher.script_cache[name].candidates == ()
    with pytest.raises(ScriptNotFoundError):
        await dispatcher.execute(name)


async def test_interactive_refuses_non_interactive_flag(project, console):
    assert await _dispatcher(project).execute("interactive", args="--non-interactive") == 1
    assert "cannot use '--non-interactive' with interactive mode" in console.errors[0][1]


async def test_bad_build_config_is_tolerated(project, project_root, console):
    write_script(project_root / "scripts", "Clean.py")
    project.build_config_path.parent.mkdir(parents=True, exist_ok=True)
    project.build_config_path.write_text("dependencies: [oops\n", encoding="utf-8")

    assert await _dispatcher(project).execute("clean") == 0
    assert "error loading the build config" in console.text


async def test_plugin_commands_skip_plugin_libraries(project, project_root, console):
    lib = touch(project.project_plugins_dir / "feeds-1.0" / "lib" / "rome.zip")
    write_script(project_root / "scripts", "InstallPlugin.py")
    write_script(project_root / "scripts", "Clean.py")
    dispatcher = _dispatcher(project)

    await dispatcher.execute("install-plugin")
    await dispatcher.execute("clean")

    assert lib not in dispatcher.script_cache["InstallPlugin"].binding["searchPath"]
    assert lib in dispatcher.script_cache["Clean"].binding["searchPath"]


async def test_cli_args_reach_binding(project, project_root, console):
    write_script(project_root / "scripts", "Clean.py")
    dispatcher = _dispatcher(project)

    await dispatcher.execute("clean", args="a b")

    assert dispatcher.script_cache["Clean"].binding["cliArgs"] == "a\nb"
