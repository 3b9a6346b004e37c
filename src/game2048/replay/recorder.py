"""
Replay recording.

A replay holds the game configuration, the snapshot the game started from and
every applied move together with the tile that spawned after it, which is all
that is needed to rebuild the game without the original random generator.
"""

import json
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..config import GameConfig
from ..environment.board import Direction
from ..environment.game import GameSnapshot, GameState, MoveOutcome, Spawn
from ..errors import InvalidState

logger = logging.getLogger(__name__)

REPLAY_FORMAT_VERSION = 1


@dataclass(frozen=True)
class MoveRecord:
    direction: Direction
    score_delta: int
    spawn: Optional[Spawn]
    board: Tuple[Tuple[int, ...], ...]

    def to_dict(self) -> dict:
        return {
            "direction": self.direction.name.lower(),
            "score_delta": self.score_delta,
            "spawn": list(self.spawn) if self.spawn is not None else None,
            "board": [list(row) for row in self.board],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MoveRecord":
        spawn = data.get("spawn")
        return cls(
            direction=Direction.parse(data["direction"]),
            score_delta=int(data["score_delta"]),
            spawn=Spawn(*(int(v) for v in spawn)) if spawn is not None else None,
            board=tuple(tuple(int(v) for v in row) for row in data["board"]),
        )


@dataclass(frozen=True)
class ReplaySummary:
    score: int
    moves: int
    max_tile: int
    state: GameState

    def to_dict(self) -> dict:
        return {"score": self.score, "moves": self.moves, "max_tile": self.max_tile, "state": self.state.value}

    @classmethod
    def from_dict(cls, data: dict) -> "ReplaySummary":
        return cls(int(data["score"]), int(data["moves"]), int(data["max_tile"]), GameState(data["state"]))


@dataclass(frozen=True)
class Replay:
    config: GameConfig
    initial: GameSnapshot
    moves: Tuple[MoveRecord, ...]
    summary: ReplaySummary

    def __len__(self):
        return len(self.moves)

    def to_dict(self) -> dict:
        return {
            "version": REPLAY_FORMAT_VERSION,
            "config": self.config.to_dict(),
            "initial": self.initial.to_dict(),
            "moves": [move.to_dict() for move in self.moves],
            "summary": self.summary.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Replay":
        version = data.get("version")
        if version != REPLAY_FORMAT_VERSION:
            raise InvalidState(f"unsupported replay version {version!r}")
        try:
            return cls(
                config=GameConfig.from_dict(data["config"]),
                initial=GameSnapshot.from_dict(data["initial"]),
                moves=tuple(MoveRecord.from_dict(m) for m in data["moves"]),
                summary=ReplaySummary.from_dict(data["summary"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidState(f"malformed replay: {e}") from e

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), **kwargs)

    @classmethod
    def from_json(cls, text: str) -> "Replay":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidState(f"replay is not valid JSON: {e}") from e
        return cls.from_dict(data)


class ReplayRecorder:
    """
    Collects the moves of one game.

    Recording is best-effort: once stopped, ``record`` silently does nothing.
    """

    def __init__(self, config: GameConfig, initial: GameSnapshot):
        self.config = config
        self.initial = initial
        self._moves: List[MoveRecord] = []
        self.active = True

    def __len__(self):
        return len(self._moves)

    def record(self, direction: Direction, outcome: MoveOutcome, board: GameSnapshot) -> None:
        if not self.active or not outcome.moved:
            return
        self._moves.append(MoveRecord(Direction.parse(direction), outcome.score_delta, outcome.spawn, board.board))

    def discard_last(self) -> None:
        """Forget the most recent move, used when that move is undone."""
        if self.active and self._moves:
            self._moves.pop()

    def stop(self) -> None:
        self.active = False

    def finish(self, final: GameSnapshot) -> Replay:
        """Stop recording and freeze everything recorded so far."""
        self.stop()
        summary = ReplaySummary(final.score, len(self._moves), final.max_tile, final.state)
        logger.info("Replay finished: %d moves, score %d, max tile %d", summary.moves, summary.score, summary.max_tile)
        return Replay(self.config, self.initial, tuple(self._moves), summary)
