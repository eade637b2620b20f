"""Command engine: locate scripts, assemble the search path and run commands."""

from .adapter import ScriptExecutionAdapter
from .binding import ExecutionBinding, bind_execution_context
from .context import CommandContext
from .dispatcher import CommandDispatcher, ScriptCacheEntry
from .environment import DEVELOPMENT, PRODUCTION, TEST, Environment, EnvironmentResolver
from .errors import ConfigLoadError, GantryError, ScriptNotFoundError, SearchPathError
from .invocation import CommandInvocation, parse_invocation
from .locator import ScriptDescriptor, ScriptLocator, ScriptOrigin
from .search_path import build_search_path
from .settings import Settings, discover_settings

__all__ = [
    "CommandContext",
    "CommandDispatcher",
    "CommandInvocation",
    "ConfigLoadError",
    "DEVELOPMENT",
    "Environment",
    "EnvironmentResolver",
    "ExecutionBinding",
    "GantryError",
    "PRODUCTION",
    "ScriptCacheEntry",
    "ScriptDescriptor",
    "ScriptExecutionAdapter",
    "ScriptLocator",
    "ScriptNotFoundError",
    "ScriptOrigin",
    "SearchPathError",
    "Settings",
    "TEST",
    "bind_execution_context",
    "build_search_path",
    "discover_settings",
    "parse_invocation",
]
