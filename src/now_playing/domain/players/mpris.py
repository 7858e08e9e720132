"""
MPRIS2 access over the D-Bus session bus.

Wraps dbus-python so the rest of the package only sees plain Python values and
TransportError.
"""

from typing import Any, Dict, List, Optional

import dbus
from loguru import logger

from now_playing.exceptions import TransportError

MPRIS_PATH = "/org/mpris/MediaPlayer2"
PLAYER_IFACE = "org.mpris.MediaPlayer2.Player"
PROPS_IFACE = "org.freedesktop.DBus.Properties"
DBUS_NAME = "org.freedesktop.DBus"
DBUS_PATH = "/org/freedesktop/DBus"


def unwrap(value: Any) -> Any:
    """Convert a dbus-python value into the equivalent plain Python value.

    dbus.Boolean subclasses int rather than bool, so it is checked first.
    """
    if isinstance(value, dbus.Boolean):
        return bool(value)
    if isinstance(value, (dbus.Array, dbus.Struct, list, tuple)):
        return [unwrap(item) for item in value]
    if isinstance(value, (dbus.Dictionary, dict)):
        return {str(key): unwrap(item) for key, item in value.items()}
    if isinstance(value, str):
        # dbus.String, dbus.ObjectPath and dbus.Signature
        return str(value)
    if isinstance(value, float):
        return float(value)
    if isinstance(value, int):
        return int(value)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


class SessionBusClient:
    """Lists bus names and reads MPRIS player properties.

    The connection is opened lazily on first use and reused afterwards.
    """

    def __init__(self, bus: Optional[dbus.Bus] = None):
        self._bus = bus

    @property
    def bus(self) -> dbus.Bus:
        if self._bus is None:
            try:
                self._bus = dbus.SessionBus()
            except dbus.DBusException as e:
                raise TransportError("connect", f"cannot connect to session bus: {e}") from e
            logger.debug("Connected to session bus")
        return self._bus

    def list_names(self) -> List[str]:
        """List every name currently owned on the session bus."""
        try:
            proxy = self.bus.get_object(DBUS_NAME, DBUS_PATH)
            names = dbus.Interface(proxy, DBUS_NAME).ListNames()
        except dbus.DBusException as e:
            raise TransportError("ListNames", f"failed to list bus names: {e}") from e
        return [str(name) for name in names]

    def _get_player_property(self, identity: str, name: str) -> Any:
        try:
            proxy = self.bus.get_object(identity, MPRIS_PATH)
            props = dbus.Interface(proxy, PROPS_IFACE)
            return props.Get(PLAYER_IFACE, name)
        except dbus.DBusException as e:
            raise TransportError(
                f"Get({name})", f"failed to read {name} from {identity}: {e}"
            ) from e

    def get_playback_status(self, identity: str) -> str:
        """PlaybackStatus of a player: "Playing", "Paused" or "Stopped"."""
        return str(self._get_player_property(identity, "PlaybackStatus"))

    def get_metadata(self, identity: str) -> Dict[str, Any]:
        """Metadata of a player's current track as plain Python values."""
        metadata = self._get_player_property(identity, "Metadata")
        return {str(key): unwrap(value) for key, value in metadata.items()}
