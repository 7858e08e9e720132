"""
Configuration management for now-playing
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

from now_playing.exceptions import ConfigError


@dataclass(frozen=True)
class ControlChars:
    """Glyphs rendered for the clickable playback controls."""

    play: str = "▶"
    pause: str = "⏸"
    previous: str = "⏮"
    next: str = "⏭"


@dataclass(frozen=True)
class PlayerPrefixes:
    """Prefix glyphs shown in front of the scrolling text.

    ``specific`` maps a substring of the player display name to a glyph. Keys are
    tried in file order and the first match wins.
    """

    default: str = "♫"
    specific: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/now-playing/now-playing.log)
    )


@dataclass(frozen=True)
class Config:
    """Main configuration object."""

    message_display_len: int = 20  # Visible width of the scrolling text
    font_index: int = 1  # Polybar font index (1-based, one above the font-N value)
    update_delay: float = 0.3  # Seconds between ticks
    control_chars: ControlChars = field(default_factory=ControlChars)
    display_player_prefixes: PlayerPrefixes = field(default_factory=PlayerPrefixes)
    metadata_fields: List[str] = field(
        default_factory=lambda: ["xesam:title", "xesam:artist"]
    )
    metadata_seperator: str = "-"
    hide_output: bool = False
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "now-playing"
    return Path.home() / ".config" / "now-playing"


def get_config_path(override: Optional[str] = None) -> Path:
    """Get the main configuration file path.

    Args:
        override: Explicit path given on the command line

    Returns:
        The override (with ``~`` expanded) or XDG_CONFIG_HOME/now-playing/config.toml
    """
    if override:
        return Path(override).expanduser()
    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "now-playing"
    return Path.home() / ".local" / "share" / "now-playing"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# now-playing configuration

# Width of the scrolling text. Longer metadata scrolls.
message_display_len = 20

# Polybar font index. Should be 1 higher than the font-N value in the polybar config
font_index = 1

# Seconds between updates (also the scroll speed)
update_delay = 0.3

# MPRIS metadata fields, in display order
# See https://www.freedesktop.org/wiki/Specifications/mpris-spec/metadata/
metadata_fields = ["xesam:title", "xesam:artist"]

# Text placed between metadata fields
metadata_seperator = "-"

# Print an empty line when no player is available
hide_output = false

[control_chars]
play = "\\u25b6"
pause = "\\u23f8"
previous = "\\u23ee"
next = "\\u23ed"

[display_player_prefixes]
default = "\\u266b"

# Player name substring -> prefix glyph (first match wins)
[display_player_prefixes.specific]
spotify = "\\uf1bc"
firefox = "\\uf269"
chromium = "\\uf268"
vlc = "\\uf03d"

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/now-playing/now-playing.log)
# log_file = "/path/to/now-playing.log"
""".strip() + "\n"


def _require(data: Dict[str, Any], key: str, kind: type, default: Any) -> Any:
    """Fetch ``key`` from a TOML table, checking its type.

    Raises:
        ConfigError: If the value has the wrong type
    """
    value = data.get(key, default)
    # bool is an int subclass; never accept it for numeric settings
    if isinstance(value, bool) and kind is not bool:
        raise ConfigError(f"'{key}' must be {kind.__name__}, got bool")
    if kind is float and isinstance(value, int):
        value = float(value)
    if not isinstance(value, kind):
        raise ConfigError(
            f"'{key}' must be {kind.__name__}, got {type(value).__name__}"
        )
    return value


def _require_char(data: Dict[str, Any], key: str, default: str) -> str:
    value = _require(data, key, str, default)
    if len(value) != 1:
        raise ConfigError(f"'{key}' must be a single character, got {value!r}")
    return value


def _parse_control_chars(data: Dict[str, Any]) -> ControlChars:
    defaults = ControlChars()
    return ControlChars(
        play=_require_char(data, "play", defaults.play),
        pause=_require_char(data, "pause", defaults.pause),
        previous=_require_char(data, "previous", defaults.previous),
        next=_require_char(data, "next", defaults.next),
    )


def _parse_prefixes(data: Dict[str, Any]) -> PlayerPrefixes:
    defaults = PlayerPrefixes()
    specific = _require(data, "specific", dict, {})
    for key in specific:
        _require_char(specific, key, "")
    return PlayerPrefixes(
        default=_require_char(data, "default", defaults.default),
        specific=dict(specific),
    )


def _parse_logging(data: Dict[str, Any]) -> LoggingConfig:
    defaults = LoggingConfig()
    log_file = data.get("log_file")
    if log_file is not None:
        log_file = str(Path(_require(data, "log_file", str, None)).expanduser())
    level = _require(data, "level", str, defaults.level).upper()
    try:
        logger.level(level)
    except ValueError as e:
        raise ConfigError(f"'level' must be a log level name, got {level!r}") from e
    return LoggingConfig(
        level=level,
        log_file=log_file,
    )


def parse_config(toml_data: Dict[str, Any]) -> Config:
    """Build a Config from an already-parsed TOML document.

    Args:
        toml_data: Mapping returned by ``tomllib.load``

    Returns:
        Validated configuration

    Raises:
        ConfigError: If any value has the wrong type or is out of range
    """
    defaults = Config()

    message_display_len = _require(
        toml_data, "message_display_len", int, defaults.message_display_len
    )
    if message_display_len < 0:
        raise ConfigError("'message_display_len' must not be negative")

    font_index = _require(toml_data, "font_index", int, defaults.font_index)
    if font_index < 0:
        raise ConfigError("'font_index' must not be negative")

    update_delay = _require(toml_data, "update_delay", float, defaults.update_delay)
    if update_delay <= 0:
        raise ConfigError("'update_delay' must be greater than zero")

    metadata_fields = _require(
        toml_data, "metadata_fields", list, defaults.metadata_fields
    )
    if not all(isinstance(name, str) for name in metadata_fields):
        raise ConfigError("'metadata_fields' must be a list of strings")

    return Config(
        message_display_len=message_display_len,
        font_index=font_index,
        update_delay=update_delay,
        control_chars=_parse_control_chars(
            _require(toml_data, "control_chars", dict, {})
        ),
        display_player_prefixes=_parse_prefixes(
            _require(toml_data, "display_player_prefixes", dict, {})
        ),
        metadata_fields=list(metadata_fields),
        metadata_seperator=_require(
            toml_data, "metadata_seperator", str, defaults.metadata_seperator
        ),
        hide_output=_require(toml_data, "hide_output", bool, defaults.hide_output),
        logging=_parse_logging(_require(toml_data, "logging", dict, {})),
    )


def load_config(config_path: Path) -> Config:
    """Load configuration from file, writing the default file first if missing.

    Args:
        config_path: Location of the TOML config file

    Returns:
        Loaded configuration

    Raises:
        ConfigError: If the file cannot be created, read or parsed
    """
    if not config_path.exists():
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, "w", encoding="utf-8") as f:
                f.write(create_default_config())
        except OSError as e:
            raise ConfigError(
                f"failed to create config file ({config_path}): {e}"
            ) from e
        logger.info(f"Created default configuration at: {config_path}")

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"failed to open config file ({config_path}): {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"failed to parse config ({config_path}): {e}") from e

    return parse_config(toml_data)
