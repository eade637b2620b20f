"""Color themes shared by Rich output and prompt_toolkit input."""

from dataclasses import dataclass
from typing import Dict

from rich.style import Style
from rich.theme import Theme as RichTheme


@dataclass
class ThemeColors:
    """Color palette for a terminal theme."""

    primary: str  # Headers, prompts
    secondary: str  # Command names, menu numbers
    success: str
    warning: str
    error: str

    bg_primary: str
    bg_secondary: str

    text_primary: str
    text_secondary: str
    text_muted: str  # Dividers, timings


DARK_THEME = ThemeColors(
    primary="#00D9FF",
    secondary="#A78BFA",
    success="#10B981",
    warning="#F59E0B",
    error="#EF4444",
    bg_primary="#0D1117",
    bg_secondary="#161B22",
    text_primary="#F0F6FC",
    text_secondary="#8B949E",
    text_muted="#484F58",
)

LIGHT_THEME = ThemeColors(
    primary="#0969DA",
    secondary="#8250DF",
    success="#1A7F37",
    warning="#9A6700",
    error="#CF222E",
    bg_primary="#FFFFFF",
    bg_secondary="#F6F8FA",
    text_primary="#1F2328",
    text_secondary="#57606A",
    text_muted="#8C959F",
)


class Theme:
    """Terminal theme manager."""

    _current_theme: str = "dark"
    _themes: Dict[str, ThemeColors] = {
        "dark": DARK_THEME,
        "light": LIGHT_THEME,
    }

    @classmethod
    def get_colors(cls) -> ThemeColors:
        return cls._themes[cls._current_theme]

    @classmethod
    def set_theme(cls, name: str) -> None:
        """Set the current theme.

        Raises:
            ValueError: If theme name is invalid
        """
        if name not in cls._themes:
            raise ValueError(f"Unknown theme: {name}. Available: {list(cls._themes.keys())}")
        cls._current_theme = name

    @classmethod
    def get_rich_theme(cls) -> RichTheme:
        colors = cls.get_colors()
        return RichTheme(
            {
                "primary": Style(color=colors.primary),
                "secondary": Style(color=colors.secondary),
                "success": Style(color=colors.success),
                "warning": Style(color=colors.warning),
                "error": Style(color=colors.error),
                "text.muted": Style(color=colors.text_muted),
                "divider": Style(color=colors.text_muted),
                "command": Style(color=colors.secondary, bold=True),
            }
        )

    @classmethod
    def get_prompt_toolkit_style(cls) -> Dict[str, str]:
        colors = cls.get_colors()
        return {
            "prompt": f"{colors.primary} bold",
            "": colors.text_primary,
            "completion-menu": f"bg:{colors.bg_secondary} {colors.text_primary}",
            "completion-menu.completion.current": f"bg:{colors.primary} {colors.bg_primary}",
        }


def set_theme(name: str) -> None:
    """Set the current theme (convenience function)."""
    Theme.set_theme(name)
