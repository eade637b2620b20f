"""Tests for search path assembly."""

from pathlib import Path

import pytest
from conftest import touch

from engine.errors import SearchPathError
from engine.search_path import build_search_path, is_library_archive
from engine.settings import Settings


@pytest.fixture
def installed(settings, tmp_path) -> Settings:
    settings.installation_root = tmp_path / "install"
    return settings


def test_is_library_archive():
    assert is_library_archive(Path("lib/a.zip"))
    assert is_library_archive(Path("lib/b.WHL"))
    assert not is_library_archive(Path("lib/standard-1.1.zip"))
    assert not is_library_archive(Path("lib/jstl-2.whl"))
    assert is_library_archive(Path("lib/standardized.zip"))
    assert not is_library_archive(Path("lib/readme.txt"))


def test_empty_settings_give_empty_path(settings):
    assert build_search_path(settings) == []


def test_ordering(installed, project_root, tmp_path):
    installed.resources_dir.mkdir(parents=True)
    touch(project_root / "lib" / "app.zip")
    installed.config = {"dependencies": {"runtime": [str(tmp_path / "rt" / "run.whl")]}}
    touch(installed.installation_lib_dir / "core.zip")
    touch(installed.installation_lib_dir / "standard-1.1.zip")
    plugin = installed.project_plugins_dir / "feeds-1.0"
    touch(plugin / "lib" / "rome.zip")

    assert build_search_path(installed) == [
        installed.script_cache_dir,
        installed.resources_dir,
        project_root / "lib" / "app.zip",
        tmp_path / "rt" / "run.whl",
        installed.installation_lib_dir / "core.zip",
        plugin / "lib" / "rome.zip",
    ]


def test_cache_dir_only_with_installation_root(settings):
    assert settings.script_cache_dir not in build_search_path(settings)


def test_basename_deduplication(installed, project_root, tmp_path):
    touch(project_root / "lib" / "shared.zip")
    installed.config = {
        "dependencies": {
            "compile": [str(tmp_path / "elsewhere" / "shared.zip")],
            "runtime": [str(project_root / "lib" / "shared.zip"), str(tmp_path / "host.zip")],
        }
    }
    touch(installed.installation_lib_dir / "shared.zip")

    path = build_search_path(installed, exclude_names=["host.zip"])

    assert path == [installed.script_cache_dir, project_root / "lib" / "shared.zip"]


def test_plugins_may_repeat_a_basename(settings):
    first = settings.global_plugins_dir / "a-plugin-1"
    second = settings.project_plugins_dir / "b-plugin-1"
    touch(first / "lib" / "common.zip")
    touch(second / "lib" / "common.zip")

    assert build_search_path(settings) == [
        first / "lib" / "common.zip",
        second / "lib" / "common.zip",
    ]


def test_plugins_respect_dependency_excludes(settings, project_root):
    touch(project_root / "lib" / "common.zip")
    touch(settings.project_plugins_dir / "b-plugin-1" / "lib" / "common.zip")

    assert build_search_path(settings) == [project_root / "lib" / "common.zip"]


def test_skip_plugins(settings):
    touch(settings.project_plugins_dir / "b-plugin-1" / "lib" / "x.zip")
    assert build_search_path(settings, skip_plugins=True) == []


def test_invalid_entry_raises(settings):
    settings.config = {"dependencies": {"compile": ["bad\x00.zip"]}}
    with pytest.raises(SearchPathError):
        build_search_path(settings)
