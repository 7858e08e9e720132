"""Players domain - discovering MPRIS players and tracking the selected one.

This domain handles:
- Filtering session bus names down to MPRIS players
- Deriving short display names from bus names
- Keeping the selected player stable while players come and go

The D-Bus adapter lives in ``players.mpris`` and is imported on demand, since it
needs dbus-python.
"""

from .registry import (
    MPRIS_PREFIX,
    PlayerRegistry,
    display_name,
    is_player_identity,
)
from .selection import SelectionState, clamp_selection, move_selection

__all__ = [
    # Registry
    "MPRIS_PREFIX",
    "PlayerRegistry",
    "display_name",
    "is_player_identity",
    # Selection
    "SelectionState",
    "clamp_selection",
    "move_selection",
]
