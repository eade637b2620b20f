"""Terminal UI pieces for gantry: themes and line input.

``utils.tui.choice_prompt`` is not re-exported here because it depends on
``utils.terminal_ui``, which itself imports this package.
"""

from utils.tui.input_handler import InputHandler
from utils.tui.theme import Theme, set_theme

__all__ = [
    "InputHandler",
    "Theme",
    "set_theme",
]
