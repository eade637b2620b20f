"""Terminal output for gantry, built on Rich.

Every user-facing message goes through this module so tests can swap
``console`` for a recording stand-in.
"""

from typing import Iterable, Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from config import Config
from utils.tui.theme import Theme, set_theme

set_theme(Config.TUI_THEME)

console = Console(theme=Theme.get_rich_theme(), highlight=False)


def _get_colors():
    return Theme.get_colors()


def print_header(title: str, subtitle: Optional[str] = None) -> None:
    """Print a formatted header panel.

    Args:
        title: Main title text
        subtitle: Optional subtitle text (may span several lines)
    """
    colors = _get_colors()
    content = f"[bold {colors.primary}]{title}[/bold {colors.primary}]"
    if subtitle:
        content += f"\n[{colors.text_secondary}]{subtitle}[/{colors.text_secondary}]"

    console.print(Panel(content, border_style=colors.primary, box=box.DOUBLE, padding=(0, 2)))


def print_error(message: str, title: str = "Error") -> None:
    """Print an error message in a panel.

    Args:
        message: Error message
        title: Error title (default: "Error")
    """
    colors = _get_colors()
    console.print(
        Panel(
            Text(message, style=colors.error),
            title=f"[bold {colors.error}]{title}[/bold {colors.error}]",
            border_style=colors.error,
            box=box.ROUNDED,
        )
    )


def print_warning(message: str) -> None:
    colors = _get_colors()
    console.print(Text(message, style=colors.warning))


def print_info(message: str) -> None:
    colors = _get_colors()
    console.print(Text(message, style=colors.primary))


def print_divider(width: int = 56) -> None:
    colors = _get_colors()
    console.print(Text("-" * width, style=colors.text_muted))


def print_command_list(names: Iterable[str], indent: str = "\t") -> None:
    """Print one command name per line."""
    colors = _get_colors()
    for name in names:
        console.print(Text(f"{indent}{name}", style=colors.secondary))


def print_menu(options: Sequence[str]) -> None:
    """Print a 1-based numbered menu."""
    colors = _get_colors()
    for number, option in enumerate(options, start=1):
        console.print(Text.assemble((f"[{number}] ", f"bold {colors.secondary}"), option))


def print_traceback(lines: Iterable[str]) -> None:
    """Print pre-formatted traceback lines without markup processing."""
    colors = _get_colors()
    console.print(Text("".join(lines).rstrip(), style=colors.text_secondary))


def print_log_location(log_file: str) -> None:
    colors = _get_colors()
    console.print()
    console.print(Text(f"Detailed logs: {log_file}", style=colors.text_muted))
