"""Exceptions raised by the now-playing engine and its adapters."""


class NowPlayingError(Exception):
    """Base exception for now-playing errors."""

    pass


class ConfigError(NowPlayingError):
    """Raised when the configuration file is missing, unreadable or invalid."""

    pass


class TransportError(NowPlayingError):
    """Raised when a session bus call fails (listing names or reading properties)."""

    def __init__(self, operation: str, message: str = None):
        self.operation = operation
        super().__init__(message or f"D-Bus call failed: {operation}")


class InvalidIndex(NowPlayingError):
    """Raised when the selected player index does not point at a known player."""

    def __init__(self, index: int, player_count: int):
        self.index = index
        self.player_count = player_count
        super().__init__(f"invalid player index {index} (players: {player_count})")
