"""
Serialized command interface over the game core.
"""

from .locking import Feature, PoisonableLock
from .game_service import CommandResult, GameService
