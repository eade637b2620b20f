"""Shared utilities: logging, terminal output and runtime paths."""

from . import terminal_ui
from .logger import get_log_file_path, get_logger, setup_logger

# Note: Runtime functions are NOT exported here to avoid circular imports.
# Import directly from utils.runtime when needed:
#   from utils.runtime import get_history_file, get_user_scripts_dir, etc.

__all__ = [
    "setup_logger",
    "get_logger",
    "get_log_file_path",
    "terminal_ui",
]
