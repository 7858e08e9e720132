"""
Selected-player tracking.

The player list is re-read from the bus on every tick and its order is not
stable, so the selection is remembered by display name and the index is
retargeted whenever the list changes.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger

from now_playing.exceptions import InvalidIndex

from .registry import display_name


def move_selection(current: int, delta: int, total_items: int) -> int:
    """Move selection by delta, wrapping around at both ends.

    Examples:
        >>> move_selection(current=1, delta=1, total_items=2)
        0
        >>> move_selection(current=0, delta=-1, total_items=3)
        2
    """
    if total_items == 0:
        return 0
    return (current + delta) % total_items


def clamp_selection(selection: int, total_items: int) -> int:
    """Clamp selection to valid range [0, total_items - 1].

    Examples:
        >>> clamp_selection(selection=5, total_items=3)
        2
        >>> clamp_selection(selection=5, total_items=0)
        0
    """
    if total_items == 0:
        return 0
    return max(0, min(selection, total_items - 1))


@dataclass
class SelectionState:
    """Ordered player identities plus the currently selected one.

    Invariant: when ``players`` is non-empty, ``0 <= index < len(players)``.
    ``last_player_name`` is the display name of the last known-good selection.
    """

    players: List[str] = field(default_factory=list)
    index: int = 0
    last_player_name: str = ""

    def name_at(self, index: int) -> Optional[str]:
        """Display name of the player at ``index``, or None when out of range."""
        if 0 <= index < len(self.players):
            return display_name(self.players[index])
        return None

    def current_name(self) -> Optional[str]:
        """Display name of the selected player, or None when there are no players."""
        return self.name_at(self.index)

    def current_identity(self) -> Optional[str]:
        """Bus name of the selected player, or None when there are no players."""
        if 0 <= self.index < len(self.players):
            return self.players[self.index]
        return None

    def reconcile(self, new_players: List[str]) -> None:
        """Replace the player list, keeping the remembered player selected.

        If the remembered name no longer sits at the current index, the index
        moves to the entry carrying that name (the last such entry when names
        repeat). The index is then clamped so it stays valid when the list
        shrank.
        """
        self.players = list(new_players)

        if self.last_player_name and self.current_name() != self.last_player_name:
            for i, identity in enumerate(self.players):
                if display_name(identity) == self.last_player_name:
                    self.index = i

        clamped = clamp_selection(self.index, len(self.players))
        if clamped != self.index:
            logger.debug(f"Selection index {self.index} clamped to {clamped}")
            self.index = clamped

    def advance(self) -> None:
        """Select the next player, wrapping around; no-op when there are none.

        Raises:
            InvalidIndex: If the new index does not resolve to a player name
        """
        if not self.players:
            return

        self.index = move_selection(self.index, 1, len(self.players))
        name = self.current_name()
        if name is None:
            raise InvalidIndex(self.index, len(self.players))

        self.last_player_name = name
        logger.info(f"Selected player {self.index}: {name}")

    def remember_current(self) -> str:
        """Remember the selected player's name as the known-good selection.

        Raises:
            InvalidIndex: If there is no player at the current index
        """
        name = self.current_name()
        if name is None:
            raise InvalidIndex(self.index, len(self.players))
        self.last_player_name = name
        return name
