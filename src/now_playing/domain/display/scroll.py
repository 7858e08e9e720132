"""Scrolling text buffer for the fixed-width status line."""

from dataclasses import dataclass

from now_playing.utils.text import char_width, display_width


def render(text: str, width: int) -> str:
    """Fit text into exactly ``width`` columns for printing.

    Characters are taken while they fit; a wide character that would overflow
    is dropped and the remainder is padded with spaces. Never mutates state,
    so rendering the same text twice gives the same result.

    Examples:
        >>> render("Hi", 10)
        'Hi        '
        >>> render("abcdef", 4)
        'abcd'
    """
    used = 0
    chars = []
    for char in text:
        w = char_width(char)
        if used + w > width:
            break
        used += w
        chars.append(char)

    return "".join(chars) + " " * (width - used)


@dataclass
class ScrollBuffer:
    """Text currently shown, advanced one character per tick."""

    display_text: str = ""

    def reset(self, message: str) -> None:
        """Start showing a new message from its beginning."""
        self.display_text = message

    def advance(self, width: int, paused: bool = False) -> None:
        """Advance the scroll by one step.

        Text wider than ``width`` rotates left by one character. Narrower text
        is padded with ``width - display_width`` spaces; the deficit is counted
        in columns, so a buffer holding wide characters ends up with fewer than
        ``width`` characters. Paused playback freezes the text.
        """
        if paused:
            return

        current = display_width(self.display_text)
        if current > width:
            self.display_text = self.display_text[1:] + self.display_text[:1]
        elif current < width:
            self.display_text += " " * (width - current)
