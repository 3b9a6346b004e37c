import time
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from ..config import AI_PARAMS, GameConfig
from ..errors import InvalidState, UndoUnavailable
from .board import Board, Direction

logger = logging.getLogger(__name__)


def _tile(value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValueError(f"tile values must be integers, got {value!r}")
    return int(value)


class GameState(Enum):
    PLAYING = "playing"
    WON = "won"
    GAME_OVER = "game_over"

    @property
    def is_terminal(self) -> bool:
        return self is not GameState.PLAYING


class Spawn(NamedTuple):
    row: int
    col: int
    value: int


class MoveOutcome(NamedTuple):
    moved: bool
    score_delta: int
    spawn: Optional[Spawn]
    state: GameState


@dataclass
class Score:
    current: int = 0
    best: int = 0

    def add(self, points: int) -> None:
        self.current += points
        if self.current > self.best:
            self.best = self.current

    def reset(self) -> None:
        self.current = 0


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable copy of everything needed to restore a game."""
    board: Tuple[Tuple[int, ...], ...]
    score: int
    best_score: int
    moves: int
    state: GameState
    started_at: float = 0.0
    ended_at: Optional[float] = None

    @property
    def size(self) -> int:
        return len(self.board)

    @property
    def max_tile(self) -> int:
        return max((max(row) for row in self.board), default=0)

    def to_dict(self) -> dict:
        return {
            "board": [list(row) for row in self.board],
            "score": self.score,
            "best_score": self.best_score,
            "moves": self.moves,
            "state": self.state.value,
            "max_tile": self.max_tile,
            "started_at": self.started_at,
            "ended_at": self.ended_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GameSnapshot":
        try:
            return cls(
                board=tuple(tuple(_tile(v) for v in row) for row in data["board"]),
                score=int(data["score"]),
                best_score=int(data.get("best_score", data["score"])),
                moves=int(data.get("moves", 0)),
                state=GameState(data.get("state", GameState.PLAYING.value)),
                started_at=float(data.get("started_at", 0.0)),
                ended_at=data.get("ended_at"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidState(f"malformed game snapshot: {e}") from e


@dataclass
class _UndoEntry:
    grid: np.ndarray
    score: int
    moves: int
    state: GameState
    ended_at: Optional[float] = None


class Game:
    """
    A single 2048 game: board, score, move counter, undo history and the
    random generator that spawns new tiles.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        self.config = config if config is not None else GameConfig()
        self.rng = np.random.default_rng(self.config.seed)
        self.score = Score()
        self.board = Board(self.config.board_size)
        self.state = GameState.PLAYING
        self.moves = 0
        self.started_at = time.time()
        self.ended_at = None
        self._history: List[_UndoEntry] = []
        self.new_game()

    # --- lifecycle ---

    def new_game(self) -> None:
        """Start over with two random tiles. The best score is kept."""
        self.board = Board(self.config.board_size)
        self.score.reset()
        self.state = GameState.PLAYING
        self.moves = 0
        self.started_at = time.time()
        self.ended_at = None
        self._history.clear()
        self.add_random_tile()
        self.add_random_tile()
        logger.debug("New %dx%d game started", self.config.board_size, self.config.board_size)
        # A 1x1 board is full and blocked from the start
        self._update_state()

    @property
    def duration(self) -> float:
        end = self.ended_at if self.ended_at is not None else time.time()
        return max(0.0, end - self.started_at)

    @property
    def is_over(self) -> bool:
        return self.state.is_terminal

    def max_tile(self) -> int:
        return self.board.max_tile()

    def valid_moves(self) -> List[Direction]:
        if self.state.is_terminal:
            return []
        return self.board.valid_moves()

    # --- tile spawning ---

    def add_random_tile(self) -> Optional[Spawn]:
        """Add a random tile (2 or 4) to an empty cell"""
        empty_cells = self.board.empty_cells()
        if not empty_cells:
            return None
        row, col = empty_cells[int(self.rng.integers(len(empty_cells)))]
        value = 4 if self.rng.random() < AI_PARAMS["spawn_four_probability"] else 2
        self.board.place_tile(row, col, value)
        return Spawn(row, col, value)

    # --- moves ---

    def make_move(self, direction, spawn: Optional[Spawn] = None) -> MoveOutcome:
        """
        Apply a move and spawn one tile if the board changed.

        Args:
            direction: Direction (or its name) to move toward
            spawn: Tile to place instead of a random one; replays use this
                to reproduce the original game exactly

        Returns:
            MoveOutcome with the score gained, the spawned tile and the new state
        """
        direction = Direction.parse(direction)
        if self.state.is_terminal:
            raise InvalidState(f"game is already finished ({self.state.value})")

        new_board, result = self.board.simulate(direction)
        if not result.moved:
            return MoveOutcome(False, 0, None, self.state)
        if spawn is not None:
            spawn = Spawn(*(int(v) for v in spawn))
            # Raises before anything is committed if the cell is taken
            new_board.place_tile(spawn.row, spawn.col, spawn.value)

        if self.config.allow_undo:
            self._history.append(self._undo_entry())
        self.board = new_board
        placed = spawn if spawn is not None else self.add_random_tile()
        self.score.add(result.score_delta)
        self.moves += 1
        self._update_state()
        return MoveOutcome(True, result.score_delta, placed, self.state)

    def _update_state(self) -> None:
        if self.board.max_tile() >= self.config.target_score:
            self.state = GameState.WON
        elif not self.board.has_moves():
            self.state = GameState.GAME_OVER
        else:
            return
        self.ended_at = time.time()
        logger.info("Game finished: %s, score %d, max tile %d after %d moves",
                    self.state.value, self.score.current, self.board.max_tile(), self.moves)

    # --- undo ---

    def _undo_entry(self) -> _UndoEntry:
        return _UndoEntry(self.board.as_array(), self.score.current, self.moves, self.state, self.ended_at)

    def _restore(self, entry: _UndoEntry) -> None:
        self.board = Board.from_rows(entry.grid)
        self.score.current = entry.score
        self.moves = entry.moves
        self.state = entry.state
        self.ended_at = entry.ended_at

    @property
    def can_undo(self) -> bool:
        return self.config.allow_undo and bool(self._history)

    def undo(self) -> None:
        """Revert the last move. The best score is not lowered."""
        if not self.config.allow_undo:
            raise UndoUnavailable("undo is disabled for this game")
        if not self._history:
            raise UndoUnavailable("no move to undo")
        self._restore(self._history.pop())

    # --- snapshots ---

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            board=tuple(tuple(row) for row in self.board.to_list()),
            score=self.score.current,
            best_score=self.score.best,
            moves=self.moves,
            state=self.state,
            started_at=self.started_at,
            ended_at=self.ended_at,
        )

    def load_state(self, snapshot: GameSnapshot) -> None:
        """
        Replace the game state with an externally supplied snapshot.

        The undo history is cleared; the best score only ever grows. A
        snapshot marked playing whose board is already won or blocked is
        finished on load.
        """
        if snapshot.size != self.config.board_size:
            raise InvalidState(
                f"board size {snapshot.size} does not match configured size {self.config.board_size}")
        self.board = Board.from_rows(snapshot.board)
        self.score.current = snapshot.score
        self.score.best = max(self.score.best, snapshot.best_score, snapshot.score)
        self.moves = snapshot.moves
        self.state = snapshot.state
        self.started_at = snapshot.started_at or time.time()
        self.ended_at = snapshot.ended_at
        self._history.clear()
        if self.state is GameState.PLAYING:
            self._update_state()

    def clone(self) -> "Game":
        """Independent copy sharing no mutable state with this game."""
        other = Game.__new__(Game)
        other.config = self.config
        other.rng = np.random.default_rng()
        other.rng.bit_generator.state = self.rng.bit_generator.state
        other.score = Score(self.score.current, self.score.best)
        other.board = self.board.copy()
        other.state = self.state
        other.moves = self.moves
        other.started_at = self.started_at
        other.ended_at = self.ended_at
        other._history = [
            _UndoEntry(e.grid.copy(), e.score, e.moves, e.state, e.ended_at) for e in self._history
        ]
        return other
