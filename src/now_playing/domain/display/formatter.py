"""
Turns MPRIS metadata and playback status into the pieces of a status line.

The bar line has three parts: a prefix glyph picked per player, the scrolling
metadata text, and a suffix of clickable previous/play-pause/next buttons using
polybar action tags (``%{A:command:}label%{A}``).
"""

import math
from decimal import Decimal
from typing import Any, List, Mapping, NamedTuple, Optional

from loguru import logger

from now_playing.core.config import ControlChars, PlayerPrefixes
from now_playing.utils.text import display_width

NO_PLAYER_MESSAGE = "No player available"

# Projection result for metadata values that have no string form
UNSUPPORTED = ""


class Controls(NamedTuple):
    """Prefix glyph, control markup and whether playback is paused."""

    prefix: str
    suffix: str
    paused: bool


def _scalar_to_string(value: Any) -> Optional[str]:
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        if value.is_integer():
            return str(int(value))
        # positional notation, never 1e-07
        return format(Decimal(repr(value)), "f")
    if isinstance(value, str):
        return value
    return None


def value_to_string(value: Any) -> str:
    """Project a metadata value to a string.

    Lists (e.g. ``xesam:artist``) project their first element. Only one level is
    unwrapped; nested lists and any other unknown kind give ``UNSUPPORTED``.

    Examples:
        >>> value_to_string(["Artist A", "Artist B"])
        'Artist A'
        >>> value_to_string(240000000)
        '240000000'
    """
    if isinstance(value, (list, tuple)):
        if not value:
            return ""
        text = _scalar_to_string(value[0])
    else:
        text = _scalar_to_string(value)

    if text is None:
        logger.debug(f"Unsupported metadata value: {value!r}")
        return UNSUPPORTED
    return text


def format_message(
    metadata: Mapping[str, Any],
    fields: List[str],
    separator: str,
    width_threshold: int,
) -> str:
    """Join the configured metadata fields into the text to display.

    Fields are taken in configured order; missing or blank ones are skipped.
    Text wider than ``width_threshold`` gets one leading and two trailing spaces
    so the scrolled text has a gap where it wraps around.

    Args:
        metadata: MPRIS metadata record
        fields: Field names to show, e.g. ["xesam:title", "xesam:artist"]
        separator: Text placed between fields (padded with a space either side)
        width_threshold: Display width above which the text will scroll

    Returns:
        The formatted message (empty when no field has a value)
    """
    parts = []
    for name in fields:
        if name not in metadata:
            continue
        text = value_to_string(metadata[name]).strip()
        if text:
            parts.append(text)

    message = f" {separator} ".join(parts)
    if display_width(message) > width_threshold:
        message = f" {message}  "
    return message


def _button(action: str, glyph: str, player_name: Optional[str]) -> str:
    command = ["playerctl"]
    if player_name is not None:
        command += ["-p", player_name]
    command.append(action)
    return f"%{{A:{' '.join(command)} :}}{glyph}%{{A}}"


def choose_prefix(player_name: Optional[str], prefixes: PlayerPrefixes) -> str:
    """Pick the prefix glyph for a player.

    The first ``specific`` key that is a substring of the player name wins
    (keys are tried in config file order); otherwise the default glyph.
    """
    if player_name is None:
        return prefixes.default
    for key, glyph in prefixes.specific.items():
        if key in player_name:
            return glyph
    return prefixes.default


def build_controls(
    player_name: Optional[str],
    status: Optional[str],
    control_chars: ControlChars,
    prefixes: PlayerPrefixes,
) -> Controls:
    """Build the prefix glyph and the previous/play-pause/next markup.

    A pause button is shown only when ``status`` is exactly "Playing"; anything
    else (including no status) shows the play button and counts as paused.

    Args:
        player_name: Display name of the selected player, None without a player
        status: MPRIS PlaybackStatus, None without a player
        control_chars: Glyphs for the buttons
        prefixes: Prefix glyph table

    Returns:
        Controls(prefix, suffix, paused)
    """
    playing = status == "Playing"

    suffix = " " + _button("previous", control_chars.previous, player_name)
    if playing:
        suffix += " " + _button("pause", control_chars.pause, player_name)
    else:
        suffix += " " + _button("play", control_chars.play, player_name)
    suffix += " " + _button("next", control_chars.next, player_name)

    return Controls(
        prefix=choose_prefix(player_name, prefixes),
        suffix=suffix,
        paused=not playing,
    )
