"""Core infrastructure layer - configuration, logging and output.

The core layer has no dependencies on the domain layer.
"""

from .config import (
    Config,
    ControlChars,
    LoggingConfig,
    PlayerPrefixes,
    create_default_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    load_config,
    parse_config,
)
from .output import configure_logging, emit_line, setup_loguru

__all__ = [
    # Config
    "Config",
    "ControlChars",
    "LoggingConfig",
    "PlayerPrefixes",
    "create_default_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "load_config",
    "parse_config",
    # Output
    "configure_logging",
    "emit_line",
    "setup_loguru",
]
