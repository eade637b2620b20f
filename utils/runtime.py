"""Runtime directory management for gantry.

All per-user runtime data is stored under ~/.gantry/:
- config: Tool configuration file (created by config.py on first import)
- scripts/: User-level command scripts
- logs/: Log files (only created with --verbose)
- history: Interactive mode command history
- <version>/: Work directory (script cache, global plugins, project work dirs)
"""

import os

RUNTIME_DIR_NAME = ".gantry"


def get_runtime_dir(user_home: str | None = None) -> str:
    """Get the runtime directory path.

    Args:
        user_home: Home directory to resolve against (default: current user's)

    Returns:
        Path to ~/.gantry directory
    """
    home = user_home or os.path.expanduser("~")
    return os.path.join(home, RUNTIME_DIR_NAME)


def get_user_scripts_dir(user_home: str | None = None) -> str:
    """Get the user scripts directory path.

    Returns:
        Path to ~/.gantry/scripts/
    """
    return os.path.join(get_runtime_dir(user_home), "scripts")


def get_work_dir(version: str, user_home: str | None = None) -> str:
    """Get the versioned work directory path.

    Returns:
        Path to ~/.gantry/<version>/
    """
    return os.path.join(get_runtime_dir(user_home), version)


def get_log_dir() -> str:
    """Get the log directory path.

    Returns:
        Path to ~/.gantry/logs/
    """
    return os.path.join(get_runtime_dir(), "logs")


def get_history_file() -> str:
    """Get the command history file path.

    Returns:
        Path to ~/.gantry/history
    """
    return os.path.join(get_runtime_dir(), "history")


def ensure_runtime_dirs(create_logs: bool = False) -> None:
    """Ensure runtime directories exist.

    Creates:
    - ~/.gantry/scripts/
    - ~/.gantry/logs/ (only if create_logs=True)

    Args:
        create_logs: Whether to create the logs directory (for --verbose mode)
    """
    os.makedirs(get_user_scripts_dir(), exist_ok=True)

    if create_logs:
        os.makedirs(get_log_dir(), exist_ok=True)
