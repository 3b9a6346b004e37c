"""
Error types raised by the 2048 game core.

Every error carries a short ``kind`` string so that command-style callers can
report it without inspecting the class hierarchy.
"""


class GameError(Exception):
    """Base class for all recoverable game errors."""
    kind = "GameError"

    def __str__(self):
        message = super().__str__()
        return f"{self.kind}: {message}" if message else self.kind


class InvalidConfig(GameError, ValueError):
    kind = "InvalidConfig"


class OutOfBounds(GameError, IndexError):
    kind = "OutOfBounds"


class InvalidState(GameError):
    kind = "InvalidState"


class UndoUnavailable(GameError):
    kind = "UndoUnavailable"


class NoMoveAvailable(GameError):
    kind = "NoMoveAvailable"


class FeatureNotEnabled(GameError):
    kind = "FeatureNotEnabled"


class LockPoisoned(GameError):
    kind = "LockPoisoned"


class InvalidArgument(GameError, ValueError):
    kind = "InvalidArgument"
