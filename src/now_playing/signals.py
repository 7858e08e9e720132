"""POSIX signal plumbing: turn signals into engine events.

Handlers only put an event on the queue; the engine loop does the work. A
SimpleQueue is used because its put() is reentrant, which makes it safe to call
from a signal handler that interrupts the loop's own get().
"""

import queue
import signal
from typing import Any, Callable, Dict, Optional

from loguru import logger

from now_playing.engine import Event

SIGNAL_EVENTS: Dict[int, Event] = {
    signal.SIGUSR1: Event.NEXT_PLAYER,
    signal.SIGTERM: Event.TERMINATE,
    signal.SIGINT: Event.TERMINATE,
}


class SignalSubscription:
    """Routes SIGUSR1/SIGTERM/SIGINT onto an event queue while active.

    Use as a context manager; leaving it restores the previous handlers.
    """

    def __init__(self, events: queue.SimpleQueue):
        self.events = events
        self._previous: Dict[int, Optional[Callable[..., Any]]] = {}

    def _handle(self, signum: int, frame: Any) -> None:
        self.events.put(SIGNAL_EVENTS.get(signum, Event.TERMINATE))

    def install(self) -> None:
        for signum in SIGNAL_EVENTS:
            self._previous[signum] = signal.signal(signum, self._handle)
        logger.debug(f"Signal handlers installed: {sorted(SIGNAL_EVENTS)}")

    def close(self) -> None:
        for signum, previous in self._previous.items():
            signal.signal(signum, previous if previous is not None else signal.SIG_DFL)
        self._previous.clear()
        logger.debug("Signal handlers restored")

    def __enter__(self) -> "SignalSubscription":
        self.install()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
