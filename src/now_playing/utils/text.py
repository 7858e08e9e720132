"""Terminal-column width helpers for status bar text.

Widths follow wcwidth: East-Asian wide and fullwidth characters take two
columns, everything printable takes one, and non-printable characters take none.
"""

from wcwidth import wcwidth


def char_width(char: str) -> int:
    """Display width of a single character (control characters count as 0)."""
    width = wcwidth(char)
    return width if width > 0 else 0


def display_width(text: str) -> int:
    """Display width of a string, counting wide characters as 2 columns.

    Examples:
        >>> display_width("Hi")
        2
        >>> display_width("日a")
        3
    """
    return sum(char_width(char) for char in text)
