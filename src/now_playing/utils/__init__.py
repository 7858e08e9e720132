"""
Cross-cutting utilities for now-playing.

Contains:
- text: display width measurement
"""

from .text import char_width, display_width

__all__ = [
    "char_width",
    "display_width",
]
