"""
Output for now-playing: loguru file logging and the status bar line emitter.

stdout belongs to the status bar, so log records only ever go to a file.
"""

import sys
from pathlib import Path
from typing import Optional, TextIO

from loguru import logger

from .config import LoggingConfig, get_data_dir


def get_log_file_path() -> Path:
    """Get the path to the log file."""
    return get_data_dir() / "now-playing.log"


def setup_loguru(log_file: Path, level: str = "INFO") -> None:
    """
    Configure loguru for file-only logging.

    Args:
        log_file: Path to log file
        level: Minimum level for file logging (DEBUG, INFO, WARNING, ERROR)
    """
    # Remove default handler (stderr)
    logger.remove()

    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        rotation="10 MB",
        retention=5,  # Keep 5 backup files
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
        enqueue=False,  # Synchronous writes
    )

    logger.info(f"Loguru initialized: {log_file} (level={level})")


def configure_logging(logging_config: LoggingConfig, level: Optional[str] = None) -> Path:
    """Set up logging from the [logging] config section.

    Args:
        logging_config: Logging section of the loaded config
        level: Level given on the command line, overrides the config

    Returns:
        Path of the log file in use
    """
    log_file = (
        Path(logging_config.log_file)
        if logging_config.log_file
        else get_log_file_path()
    )
    setup_loguru(log_file, (level or logging_config.level).upper())
    return log_file


def emit_line(line: str, stream: Optional[TextIO] = None) -> None:
    """Write one status line and flush so the bar picks it up immediately."""
    out = stream if stream is not None else sys.stdout
    out.write(line + "\n")
    out.flush()
