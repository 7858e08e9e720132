"""Tests for the now-playing engine."""

import queue
from dataclasses import replace
from typing import Any, Dict, List

import pytest

from now_playing.core.config import Config, ControlChars, PlayerPrefixes
from now_playing.domain.display import NO_PLAYER_MESSAGE
from now_playing.engine import Engine, EngineState, Event
from now_playing.exceptions import TransportError

SPOTIFY = "org.mpris.MediaPlayer2.spotify"
VLC = "org.mpris.MediaPlayer2.vlc"


class FakeBus:
    """In-memory stand-in for the session bus client."""

    def __init__(self, players: Dict[str, Dict[str, Any]] = None):
        # identity -> {"status": str, "metadata": dict}
        self.players = players or {}
        self.extra_names = ["org.freedesktop.DBus", ":1.12"]
        self.fail = False

    def list_names(self) -> List[str]:
        if self.fail:
            raise TransportError("ListNames")
        return self.extra_names + list(self.players)

    def get_playback_status(self, identity: str) -> str:
        return self.players[identity]["status"]

    def get_metadata(self, identity: str) -> Dict[str, Any]:
        return self.players[identity]["metadata"]


@pytest.fixture
def config() -> Config:
    return Config(
        message_display_len=10,
        font_index=2,
        update_delay=0.01,
        control_chars=ControlChars(play="P", pause="S", previous="<", next=">"),
        display_player_prefixes=PlayerPrefixes(
            default="*", specific={"spotify": "s"}
        ),
        metadata_fields=["xesam:title"],
        metadata_seperator="-",
        hide_output=False,
    )


@pytest.fixture
def lines() -> List[str]:
    return []


def make_engine(config: Config, bus: FakeBus, lines: List[str]) -> Engine:
    return Engine(config, bus, output=lines.append)


class TestNoPlayer:
    """Behaviour when no MPRIS player is on the bus."""

    def test_no_player_line(self, config, lines):
        """With no player the line shows the default glyph and a play button."""
        engine = make_engine(config, FakeBus(), lines)
        engine.tick()

        assert engine.display.message == NO_PLAYER_MESSAGE
        assert engine.display.paused is True
        assert lines == [
            "* %{T2}No player %{T-}"
            " %{A:playerctl previous :}<%{A}"
            " %{A:playerctl play :}P%{A}"
            " %{A:playerctl next :}>%{A}"
        ]

    def test_hide_output_prints_empty_line(self, config, lines):
        """hide_output prints an empty line when no player exists."""
        engine = make_engine(replace(config, hide_output=True), FakeBus(), lines)
        engine.tick()
        assert lines == [""]

    def test_no_player_message_does_not_scroll_while_paused(self, config, lines):
        """The no-player text is paused, so it never scrolls."""
        engine = make_engine(config, FakeBus(), lines)
        engine.tick()
        engine.tick()
        assert engine.display.buffer.display_text == NO_PLAYER_MESSAGE


class TestTick:
    """Tests for a regular tick with players present."""

    def test_short_title_rendered_padded(self, config, lines):
        """A short title is padded to the display width."""
        bus = FakeBus({SPOTIFY: {"status": "Paused", "metadata": {"xesam:title": "Hi"}}})
        engine = make_engine(config, bus, lines)
        engine.tick()

        assert engine.display.message == "Hi"
        assert lines[0].startswith("s %{T2}Hi        %{T-} ")
        assert "%{A:playerctl -p spotify play :}P%{A}" in lines[0]

    def test_playing_title_scrolls_each_tick(self, config, lines):
        """A long title moves one character per tick while playing."""
        bus = FakeBus(
            {SPOTIFY: {"status": "Playing", "metadata": {"xesam:title": "A long song title"}}}
        )
        engine = make_engine(config, bus, lines)

        engine.tick()
        assert engine.display.message == " A long song title  "
        assert "%{T2}A long son%{T-}" in lines[0]

        engine.tick()
        assert "%{T2} long song%{T-}" in lines[1]

    def test_unchanged_metadata_keeps_scroll_position(self, config, lines):
        """Scroll progress survives ticks with the same metadata."""
        bus = FakeBus(
            {SPOTIFY: {"status": "Playing", "metadata": {"xesam:title": "A long song title"}}}
        )
        engine = make_engine(config, bus, lines)
        for _ in range(3):
            engine.tick()

        assert engine.display.buffer.display_text.startswith("long song title")

    def test_changed_metadata_resets_scroll(self, config, lines):
        """New metadata restarts the scroll from the beginning."""
        bus = FakeBus(
            {SPOTIFY: {"status": "Playing", "metadata": {"xesam:title": "A long song title"}}}
        )
        engine = make_engine(config, bus, lines)
        engine.tick()
        engine.tick()

        bus.players[SPOTIFY]["metadata"] = {"xesam:title": "Another long title"}
        engine.tick()

        assert engine.display.message == " Another long title  "
        assert "%{T2}Another lo%{T-}" in lines[-1]

    def test_paused_player_does_not_scroll(self, config, lines):
        """A paused player keeps its text still."""
        bus = FakeBus(
            {SPOTIFY: {"status": "Paused", "metadata": {"xesam:title": "A long song title"}}}
        )
        engine = make_engine(config, bus, lines)
        engine.tick()
        engine.tick()

        assert engine.display.buffer.display_text == " A long song title  "

    def test_tick_remembers_selected_player(self, config, lines):
        """A tick remembers the selected player's name."""
        bus = FakeBus({VLC: {"status": "Paused", "metadata": {}}})
        engine = make_engine(config, bus, lines)
        engine.tick()
        assert engine.selection.last_player_name == "vlc"

    def test_transport_error_propagates(self, config, lines):
        """A bus failure aborts the tick before anything is printed."""
        bus = FakeBus()
        engine = make_engine(config, bus, lines)
        bus.fail = True
        with pytest.raises(TransportError):
            engine.tick()
        assert lines == []


class TestPlayerSelection:
    """Tests for switching players."""

    def make_bus(self) -> FakeBus:
        return FakeBus(
            {
                SPOTIFY: {"status": "Playing", "metadata": {"xesam:title": "One"}},
                VLC: {"status": "Paused", "metadata": {"xesam:title": "Two"}},
            }
        )

    def test_next_player_advances(self, config, lines):
        """Next player selects the second player without printing."""
        engine = make_engine(config, self.make_bus(), lines)
        engine.next_player()

        assert engine.selection.index == 1
        assert engine.selection.last_player_name == "vlc"
        assert lines == []

        engine.tick()
        assert engine.display.message == "Two"
        assert lines[0].startswith("* %{T2}Two")

    def test_selection_follows_player_after_reorder(self, config, lines):
        """The selected player stays selected when the bus reorders."""
        bus = self.make_bus()
        engine = make_engine(config, bus, lines)
        engine.next_player()

        # VLC now enumerates first
        bus.players = {VLC: bus.players[VLC], SPOTIFY: bus.players[SPOTIFY]}
        engine.tick()

        assert engine.selection.index == 0
        assert engine.display.message == "Two"

    def test_selected_player_disappears(self, config, lines):
        """Losing the selected player falls back to a remaining one."""
        bus = self.make_bus()
        engine = make_engine(config, bus, lines)
        engine.next_player()

        del bus.players[VLC]
        engine.tick()

        assert engine.selection.index == 0
        assert engine.display.message == "One"
        assert engine.selection.last_player_name == "spotify"

    def test_next_player_without_players_is_noop(self, config, lines):
        """Next player with no players does nothing."""
        engine = make_engine(config, FakeBus(), lines)
        engine.next_player()
        assert engine.selection.index == 0


class TestHandleEvent:
    """Tests for event dispatch."""

    def test_next_player_event(self, config, lines):
        """NEXT_PLAYER advances and keeps running."""
        engine = make_engine(
            config,
            FakeBus(
                {
                    SPOTIFY: {"status": "Paused", "metadata": {}},
                    VLC: {"status": "Paused", "metadata": {}},
                }
            ),
            lines,
        )
        engine.handle_event(Event.NEXT_PLAYER)
        assert engine.state is EngineState.RUNNING
        assert engine.selection.index == 1

    def test_terminate_event(self, config, lines):
        """TERMINATE moves the engine to STOPPING."""
        engine = make_engine(config, FakeBus(), lines)
        engine.handle_event(Event.TERMINATE)
        assert engine.state is EngineState.STOPPING


class ScriptedEvents:
    """Event source returning a fixed script; None entries mean a timeout."""

    def __init__(self, script):
        self.script = list(script)
        self.timeouts = []

    def get(self, block=True, timeout=None):
        self.timeouts.append(timeout)
        item = self.script.pop(0)
        if item is None:
            raise queue.Empty
        return item


class ClockedEvents(ScriptedEvents):
    """Scripted events that let a fake clock run out each timeout."""

    def __init__(self, script, now):
        super().__init__(script)
        self.now = now

    def get(self, block=True, timeout=None):
        try:
            return super().get(block, timeout)
        except queue.Empty:
            self.now["t"] += timeout
            raise


class TestRun:
    """Tests for the driver loop."""

    def test_timeouts_tick_and_terminate_stops(self, config, lines):
        """Each timeout ticks once; terminate ends the loop."""
        engine = make_engine(config, FakeBus(), lines)
        events = ScriptedEvents([None, None, Event.TERMINATE])

        engine.run(events)

        assert len(lines) == 2
        assert engine.state is EngineState.STOPPING
        assert events.script == []

    def test_next_player_event_does_not_print(self, config, lines):
        """Events are handled without printing a line."""
        bus = FakeBus(
            {
                SPOTIFY: {"status": "Paused", "metadata": {"xesam:title": "One"}},
                VLC: {"status": "Paused", "metadata": {"xesam:title": "Two"}},
            }
        )
        engine = make_engine(config, bus, lines)

        engine.run(ScriptedEvents([Event.NEXT_PLAYER, None, Event.TERMINATE]))

        assert len(lines) == 1
        assert "Two" in lines[0]

    def test_timeout_never_negative(self, config, lines):
        """An overdue deadline waits zero seconds, never a negative time."""
        clock_values = iter([0.0, 5.0, 5.0, 5.0, 5.0, 5.0])
        engine = Engine(
            config, FakeBus(), output=lines.append, clock=lambda: next(clock_values)
        )
        events = ScriptedEvents([Event.TERMINATE])

        engine.run(events)

        assert events.timeouts == [0.0]

    def test_late_tick_fires_at_once_without_replay(self, config, lines):
        """An overrunning tick fires the next one at once; missed ticks are not replayed."""
        now = {"t": 0.0}

        def slow_output(line):
            # only the first tick takes longer than the period
            if not lines:
                now["t"] += 3.5
            lines.append(line)

        engine = Engine(
            replace(config, update_delay=1.0),
            FakeBus(),
            output=slow_output,
            clock=lambda: now["t"],
        )
        events = ClockedEvents([None, None, Event.TERMINATE], now)

        engine.run(events)

        assert events.timeouts == [1.0, 0.0, 1.0]
        assert len(lines) == 2

    def test_with_real_queue(self, config, lines):
        """The loop works with a SimpleQueue as the event source."""
        engine = make_engine(config, FakeBus(), lines)
        events = queue.SimpleQueue()
        events.put(Event.NEXT_PLAYER)
        events.put(Event.TERMINATE)

        engine.run(events)

        assert lines == []
        assert engine.state is EngineState.STOPPING

    def test_transport_error_ends_run(self, config, lines):
        """A failing tick ends the loop with the error."""
        bus = FakeBus()
        engine = make_engine(config, bus, lines)
        bus.fail = True
        with pytest.raises(TransportError):
            engine.run(ScriptedEvents([None]))
