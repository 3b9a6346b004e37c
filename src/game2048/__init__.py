"""2048 game core: board, game, AI agents, replays and statistics."""

__version__ = "0.1.0"

# Import key components for convenient access
from .config import AI_PARAMS, GameConfig, set_seeds
from .errors import (GameError, InvalidConfig, OutOfBounds, InvalidState, UndoUnavailable,
                     NoMoveAvailable, FeatureNotEnabled, LockPoisoned, InvalidArgument)
from .environment import Board, Direction, Game, GameSnapshot, GameState, MoveOutcome, Spawn
from .agents import AIController, Algorithm
from .replay import Replay, ReplayPlayer, ReplayRecorder, replay_to_end
from .stats import SessionStats, StatisticsManager, summarize
from .service import CommandResult, GameService
