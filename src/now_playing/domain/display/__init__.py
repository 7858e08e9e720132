"""Display domain - metadata formatting and the scrolling text buffer."""

from .formatter import (
    NO_PLAYER_MESSAGE,
    UNSUPPORTED,
    Controls,
    build_controls,
    choose_prefix,
    format_message,
    value_to_string,
)
from .scroll import ScrollBuffer, render

__all__ = [
    # Formatter
    "NO_PLAYER_MESSAGE",
    "UNSUPPORTED",
    "Controls",
    "build_controls",
    "choose_prefix",
    "format_message",
    "value_to_string",
    # Scroll
    "ScrollBuffer",
    "render",
]
