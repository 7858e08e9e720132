"""
Player discovery on the session bus.

Player identities are MPRIS bus names such as ``org.mpris.MediaPlayer2.spotify``.
"""

from typing import List, Protocol

from loguru import logger

MPRIS_PREFIX = "org.mpris.mediaplayer2."

# org / mpris / MediaPlayer2
_NAMESPACE_SEGMENTS = 3


class BusNameSource(Protocol):
    """Anything that can list the names currently owned on the bus."""

    def list_names(self) -> List[str]: ...


def is_player_identity(bus_name: str) -> bool:
    """Check whether a bus name belongs to the MPRIS namespace (case-insensitive)."""
    return bus_name.lower().startswith(MPRIS_PREFIX)


def display_name(identity: str) -> str:
    """Get the short player name from its reverse-domain bus name.

    Drops the ``org.mpris.MediaPlayer2`` segments and keeps the rest, so
    instance suffixes survive: ``org.mpris.MediaPlayer2.chromium.instance42``
    becomes ``chromium.instance42``. Identities with fewer than four segments
    give an empty string.

    Examples:
        >>> display_name("org.mpris.MediaPlayer2.spotify")
        'spotify'
        >>> display_name("org.mpris.MediaPlayer2")
        ''
    """
    return ".".join(identity.split(".")[_NAMESPACE_SEGMENTS:])


class PlayerRegistry:
    """Enumerates media player identities through a bus client.

    The order of the returned identities is the bus order; nothing is sorted.
    Errors from the bus client (TransportError) are not caught here.
    """

    def __init__(self, bus: BusNameSource):
        self.bus = bus
        self._last_seen: List[str] = []

    def refresh(self) -> List[str]:
        """Take a fresh snapshot of the available player identities."""
        players = [name for name in self.bus.list_names() if is_player_identity(name)]

        if players != self._last_seen:
            logger.info(f"Players changed: {[display_name(p) for p in players]}")
            self._last_seen = players

        return list(players)
