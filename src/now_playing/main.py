"""
now-playing - wiring for the status bar loop
"""

import queue
from typing import Optional

from loguru import logger

from now_playing.core import config
from now_playing.core.output import configure_logging
from now_playing.engine import Engine
from now_playing.exceptions import TransportError
from now_playing.signals import SignalSubscription


def run(config_override: Optional[str] = None, log_level: Optional[str] = None) -> None:
    """Load config, connect to the session bus and run until terminated.

    Args:
        config_override: Config file path from the command line
        log_level: Log level from the command line, overrides [logging].level

    Raises:
        ConfigError: If the config cannot be loaded
        TransportError: If dbus-python is missing or a bus call fails while running
    """
    # dbus-python is only needed for the real bus, keep it out of module import
    try:
        from now_playing.domain.players.mpris import SessionBusClient
    except ImportError as e:
        raise TransportError(
            "connect", "dbus-python is not installed (pip install now-playing[mpris])"
        ) from e

    config_path = config.get_config_path(config_override)
    cfg = config.load_config(config_path)
    log_file = configure_logging(cfg.logging, log_level)
    logger.info(f"Config loaded from {config_path}, logging to {log_file}")

    events: queue.SimpleQueue = queue.SimpleQueue()
    with SignalSubscription(events):
        engine = Engine(cfg, SessionBusClient())
        engine.run(events)

    logger.info("Stopped")
