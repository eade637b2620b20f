"""Configuration management for gantry."""

import os

# Define path constants directly to avoid circular imports with utils
# (utils.terminal_ui imports Config, and utils.runtime is in the utils package)
_RUNTIME_DIR = os.path.join(os.path.expanduser("~"), ".gantry")
_CONFIG_FILE = os.path.join(_RUNTIME_DIR, "config")

# Default configuration template
_DEFAULT_CONFIG = """\
# gantry configuration

# Logging (only used with --verbose)
LOG_LEVEL=DEBUG

# Terminal output
TUI_THEME=dark
HISTORY_ENABLED=true

# How many times a numbered menu re-asks before giving up
MENU_MAX_ATTEMPTS=3
"""


def _load_config(path: str) -> dict[str, str]:
    """Parse a KEY=VALUE config file, skipping comments and blank lines."""
    cfg: dict[str, str] = {}
    if not os.path.isfile(path):
        return cfg
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, _, value = line.partition("=")
            # Strip inline comments (# ...) from the value
            if "#" in value:
                value = value[: value.index("#")]
            cfg[key.strip()] = value.strip()
    return cfg


def _ensure_config():
    """Ensure ~/.gantry/config exists, create with defaults if not."""
    if not os.path.exists(_CONFIG_FILE):
        os.makedirs(_RUNTIME_DIR, exist_ok=True)
        with open(_CONFIG_FILE, "w", encoding="utf-8") as f:
            f.write(_DEFAULT_CONFIG)


_ensure_config()
_cfg = _load_config(_CONFIG_FILE)


class Config:
    """Configuration for the gantry command runner.

    Access config values directly via Config.XXX.
    """

    # Logging Configuration
    # Note: Logging is controlled via the --verbose flag
    LOG_LEVEL = _cfg.get("LOG_LEVEL", "DEBUG").upper()

    # Terminal Configuration
    TUI_THEME = _cfg.get("TUI_THEME", "dark")  # "dark" or "light"
    HISTORY_ENABLED = _cfg.get("HISTORY_ENABLED", "true").lower() == "true"

    # Interactive menus
    MENU_MAX_ATTEMPTS = int(_cfg.get("MENU_MAX_ATTEMPTS", "3"))

    @classmethod
    def validate(cls):
        """Validate configuration values.

        Raises:
            ValueError: If a value is out of range
        """
        if cls.TUI_THEME not in ("dark", "light"):
            raise ValueError(
                f"TUI_THEME must be 'dark' or 'light', got '{cls.TUI_THEME}'. "
                "Please fix it in ~/.gantry/config."
            )
        if cls.MENU_MAX_ATTEMPTS < 1:
            raise ValueError("MENU_MAX_ATTEMPTS must be at least 1. Please fix it in ~/.gantry/config.")
