"""Tests for signal-to-event routing."""

import os
import queue
import signal

from now_playing.engine import Event
from now_playing.signals import SIGNAL_EVENTS, SignalSubscription


class TestSignalSubscription:
    """Tests for SignalSubscription."""

    def test_mapping(self):
        """SIGUSR1 selects the next player, SIGTERM and SIGINT terminate."""
        assert SIGNAL_EVENTS[signal.SIGUSR1] is Event.NEXT_PLAYER
        assert SIGNAL_EVENTS[signal.SIGTERM] is Event.TERMINATE
        assert SIGNAL_EVENTS[signal.SIGINT] is Event.TERMINATE

    def test_handler_queues_event(self):
        """The handler only queues the matching event."""
        events = queue.SimpleQueue()
        subscription = SignalSubscription(events)

        subscription._handle(signal.SIGUSR1, None)
        subscription._handle(signal.SIGTERM, None)

        assert events.get_nowait() is Event.NEXT_PLAYER
        assert events.get_nowait() is Event.TERMINATE

    def test_unknown_signal_terminates(self):
        """Unmapped signals are treated as terminate."""
        events = queue.SimpleQueue()
        SignalSubscription(events)._handle(signal.SIGHUP, None)
        assert events.get_nowait() is Event.TERMINATE

    def test_context_restores_previous_handlers(self):
        """Leaving the context puts the old handler back."""
        before = signal.getsignal(signal.SIGUSR1)
        with SignalSubscription(queue.SimpleQueue()) as subscription:
            assert signal.getsignal(signal.SIGUSR1) == subscription._handle
        assert signal.getsignal(signal.SIGUSR1) == before

    def test_real_signal_delivery(self):
        """A signal sent to the process ends up on the queue."""
        events = queue.SimpleQueue()
        with SignalSubscription(events):
            os.kill(os.getpid(), signal.SIGUSR1)
            assert events.get(timeout=1.0) is Event.NEXT_PLAYER
