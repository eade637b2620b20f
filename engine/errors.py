"""Exception types raised by the command engine."""


class GantryError(Exception):
    """Base class for engine failures."""

    pass


class ScriptNotFoundError(GantryError):
    """Raised when no script file or precompiled module matches a command."""

    def __init__(self, script_name: str):
        super().__init__(f"Script not found: {script_name}")
        self.script_name = script_name


class SearchPathError(GantryError):
    """Raised when the script search path cannot be assembled."""

    pass


class ConfigLoadError(GantryError):
    """Raised when the project build configuration cannot be read."""

    def __init__(self, path, reason: str):
        super().__init__(f"Could not load {path}: {reason}")
        self.path = path
        self.reason = reason
