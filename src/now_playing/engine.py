"""
The now-playing driver loop.

One Engine owns all mutable state: the player selection and the display state.
It reacts to timer ticks and to events delivered on a queue (next player,
terminate), handling each one to completion before waiting again.
"""

import queue
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Protocol

from loguru import logger

from now_playing.core.config import Config
from now_playing.core.output import emit_line
from now_playing.domain.display import (
    NO_PLAYER_MESSAGE,
    Controls,
    ScrollBuffer,
    build_controls,
    format_message,
    render,
)
from now_playing.domain.players import PlayerRegistry, SelectionState
from now_playing.exceptions import InvalidIndex


class Event(Enum):
    """Events delivered to the loop from outside (signal handlers)."""

    NEXT_PLAYER = auto()
    TERMINATE = auto()


class EngineState(Enum):
    RUNNING = auto()
    STOPPING = auto()


class PlayerBus(Protocol):
    """Session bus operations the engine needs."""

    def list_names(self) -> List[str]: ...

    def get_playback_status(self, identity: str) -> str: ...

    def get_metadata(self, identity: str) -> Dict[str, Any]: ...


class EventSource(Protocol):
    def get(self, block: bool = True, timeout: float = None) -> Event: ...


@dataclass
class DisplayState:
    """What the bar currently shows.

    ``message`` is the latest formatted metadata; ``buffer`` holds the scrolled
    copy and is only reset when ``message`` changes.
    """

    message: str = ""
    prefix: str = " "
    suffix: str = ""
    paused: bool = False
    buffer: ScrollBuffer = field(default_factory=ScrollBuffer)

    def apply_controls(self, controls: Controls) -> None:
        self.prefix = controls.prefix
        self.suffix = controls.suffix
        self.paused = controls.paused

    def set_message(self, message: str) -> bool:
        """Store a freshly formatted message; returns True if it changed."""
        if message == self.message:
            return False
        self.message = message
        self.buffer.reset(message)
        return True


class Engine:
    """Player selection and display-state engine.

    Args:
        config: Loaded configuration
        bus: Bus client providing player names, status and metadata
        output: Callable receiving each finished line
        clock: Monotonic clock used to schedule ticks
    """

    def __init__(
        self,
        config: Config,
        bus: PlayerBus,
        output: Callable[[str], None] = emit_line,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.bus = bus
        self.registry = PlayerRegistry(bus)
        self.selection = SelectionState()
        self.display = DisplayState()
        self.state = EngineState.RUNNING
        self._output = output
        self._clock = clock

        self.refresh_players()

    @property
    def has_players(self) -> bool:
        return bool(self.selection.players)

    def refresh_players(self) -> None:
        """Re-read the player list and keep the remembered player selected."""
        self.selection.reconcile(self.registry.refresh())

    def refresh_message(self) -> None:
        """Fetch metadata for the selected player and update the display state.

        Raises:
            TransportError: If reading status or metadata fails
            InvalidIndex: If the selection does not point at a player
        """
        cfg = self.config

        if not self.has_players:
            controls = build_controls(
                None, None, cfg.control_chars, cfg.display_player_prefixes
            )
            message = NO_PLAYER_MESSAGE
        else:
            identity = self.selection.current_identity()
            name = self.selection.current_name()
            if identity is None or name is None:
                raise InvalidIndex(self.selection.index, len(self.selection.players))

            status = self.bus.get_playback_status(identity)
            metadata = self.bus.get_metadata(identity)

            message = format_message(
                metadata,
                cfg.metadata_fields,
                cfg.metadata_seperator,
                cfg.message_display_len,
            )
            controls = build_controls(
                name, status, cfg.control_chars, cfg.display_player_prefixes
            )
            self.selection.remember_current()

        self.display.apply_controls(controls)
        if self.display.set_message(message):
            logger.debug(f"Message changed: {message!r}")

    def next_line(self) -> str:
        """Advance the scroll one step and compose the line to print.

        With ``hide_output`` set and no players the line is empty and the
        scroll does not move.
        """
        cfg = self.config
        if cfg.hide_output and not self.has_players:
            return ""

        self.display.buffer.advance(cfg.message_display_len, self.display.paused)
        text = render(self.display.buffer.display_text, cfg.message_display_len)
        return (
            f"{self.display.prefix} %{{T{cfg.font_index}}}{text}%{{T-}}"
            f"{self.display.suffix}"
        )

    def emit_line(self) -> None:
        self._output(self.next_line())

    def tick(self) -> None:
        """Timer tick: refresh players, refresh the message, print one line."""
        self.refresh_players()
        self.refresh_message()
        self.emit_line()

    def next_player(self) -> None:
        """Select the next player."""
        self.refresh_players()
        self.selection.advance()

    def handle_event(self, event: Event) -> None:
        """Dispatch one external event; anything but NEXT_PLAYER stops the loop."""
        if event is Event.NEXT_PLAYER:
            self.next_player()
        else:
            logger.info(f"Stopping on {event}")
            self.state = EngineState.STOPPING

    def run(self, events: EventSource) -> None:
        """Run until a terminate event arrives.

        Ticks are scheduled every ``update_delay`` seconds. A tick that comes
        due while the loop is busy fires as soon as it is free; missed ticks are
        not replayed.
        """
        delay = self.config.update_delay
        next_tick = self._clock() + delay
        logger.info(f"Engine running (update_delay={delay}s)")

        while self.state is EngineState.RUNNING:
            timeout = max(0.0, next_tick - self._clock())
            try:
                event = events.get(timeout=timeout)
            except queue.Empty:
                self.tick()
                next_tick = max(next_tick + delay, self._clock())
                continue

            self.handle_event(event)
