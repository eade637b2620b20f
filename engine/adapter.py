"""Boundary to the code that actually runs a script.

A script is a Python file (or an importable module on the search path) that
defines a ``default`` target. The target is called with the execution
binding and its return value becomes the command's exit status.
"""

from __future__ import annotations

import importlib
import runpy
import sys
from contextlib import contextmanager
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Iterator, Sequence

from utils import get_logger, terminal_ui

from .binding import ExecutionBinding
from .errors import ScriptNotFoundError

logger = get_logger(__name__)

DEFAULT_TARGET = "default"
SCRIPT_RUN_NAME = "__gantry_script__"


@contextmanager
def search_path_on_sys_path(search_path: Sequence[Path]) -> Iterator[None]:
    """Put ``search_path`` in front of ``sys.path`` for the duration of the block."""
    saved = list(sys.path)
    sys.path[:0] = [str(p) for p in search_path]
    importlib.invalidate_caches()
    try:
        yield
    finally:
        sys.path[:] = saved


def _exit_status(result: Any) -> int:
    if result is None:
        return 0
    return int(result)


class ScriptExecutionAdapter:
    """Run file scripts and precompiled script modules."""

    def _invoke(self, target: Callable[..., Any] | None, binding: ExecutionBinding, label: str) -> int:
        if not callable(target):
            terminal_ui.print_error(f"Script {label} does not define a '{DEFAULT_TARGET}' target")
            return 1
        return _exit_status(target(binding))

    def run_script(
        self, path: Path, binding: ExecutionBinding, search_path: Sequence[Path]
    ) -> int:
        """Execute the script file at ``path`` and call its default target."""
        logger.info(f"Running script {path}")
        init_globals = binding.as_dict()
        init_globals["binding"] = binding
        with search_path_on_sys_path(search_path):
            namespace = runpy.run_path(str(path), init_globals=init_globals, run_name=SCRIPT_RUN_NAME)
            return self._invoke(namespace.get(DEFAULT_TARGET), binding, str(path))

    def load_compiled(self, script_name: str) -> ModuleType:
        """Import the precompiled module for ``script_name``.

        ``<Name>_`` (a script usable outside a project) is tried before
        ``<Name>``. Must be called with the search path on ``sys.path``.

        Raises:
            ScriptNotFoundError: If neither module exists
        """
        # Dotted or empty names would import packages or fail before lookup
        if not script_name.isidentifier():
            raise ScriptNotFoundError(script_name)
        for module_name in (f"{script_name}_", script_name):
            try:
                return importlib.import_module(module_name)
            except ModuleNotFoundError as e:
                if e.name != module_name:
                    raise
                logger.debug(f"No precompiled module {module_name}")
        raise ScriptNotFoundError(script_name)

    def run_compiled(
        self, script_name: str, binding: ExecutionBinding, search_path: Sequence[Path]
    ) -> int:
        """Import a precompiled script module from the search path and run it."""
        with search_path_on_sys_path(search_path):
            module = self.load_compiled(script_name)
            logger.info(f"Running precompiled script {module.__name__}")
            return self._invoke(getattr(module, DEFAULT_TARGET, None), binding, module.__name__)
