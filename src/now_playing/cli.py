"""
now-playing CLI - entry point

Prints one polybar line per tick. Send SIGUSR1 to switch to the next player.
"""

import argparse
import sys
from typing import List, Optional

from loguru import logger

from now_playing import __version__
from now_playing.exceptions import NowPlayingError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="now-playing",
        description="Scrolling MPRIS now-playing module for polybar",
    )
    parser.add_argument(
        "-c",
        "--config",
        help="Path to config.toml (default: ~/.config/now-playing/config.toml)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Override the [logging] level from the config",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the now-playing command."""
    args = build_parser().parse_args(argv)

    # log records only go to the file sink that run() sets up
    logger.remove()

    from now_playing.main import run

    try:
        run(config_override=args.config, log_level=args.log_level)
    except NowPlayingError as e:
        logger.exception("now-playing stopped on error")
        print(f"now-playing: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
