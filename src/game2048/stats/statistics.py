import json
import time
import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from ..environment.game import Game, GameState
from ..errors import InvalidState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionStats:
    """Outcome of one finished game."""
    score: int
    moves: int
    duration: float
    max_tile: int
    won: bool
    started_at: float
    ended_at: float

    @classmethod
    def from_game(cls, game: Game) -> "SessionStats":
        if not game.is_over:
            raise InvalidState("session stats can only be taken from a finished game")
        ended_at = game.ended_at if game.ended_at is not None else time.time()
        return cls(
            score=game.score.current,
            moves=game.moves,
            duration=game.duration,
            max_tile=game.max_tile(),
            won=game.state is GameState.WON,
            started_at=game.started_at,
            ended_at=ended_at,
        )

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SessionStats":
        try:
            return cls(
                score=int(data["score"]),
                moves=int(data["moves"]),
                duration=float(data["duration"]),
                max_tile=int(data["max_tile"]),
                won=bool(data["won"]),
                started_at=float(data["started_at"]),
                ended_at=float(data["ended_at"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidState(f"malformed session stats: {e}") from e


@dataclass(frozen=True)
class StatisticsSummary:
    total_sessions: int = 0
    wins: int = 0
    win_rate: float = 0.0
    average_score: float = 0.0
    best_score: int = 0
    average_duration: float = 0.0
    average_moves: float = 0.0
    best_tile: int = 0
    tile_counts: Dict[int, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        data = asdict(self)
        # JSON object keys must be strings
        data["tile_counts"] = {str(tile): count for tile, count in sorted(self.tile_counts.items())}
        return data


def summarize(history: Iterable[SessionStats]) -> StatisticsSummary:
    """
    Aggregate a list of sessions. Pure function of its input; an empty
    history yields an all-zero summary.
    """
    sessions = list(history)
    if not sessions:
        return StatisticsSummary()
    scores = np.array([s.score for s in sessions], dtype=np.float64)
    wins = sum(1 for s in sessions if s.won)
    tile_counts: Dict[int, int] = {}
    for s in sessions:
        tile_counts[s.max_tile] = tile_counts.get(s.max_tile, 0) + 1
    return StatisticsSummary(
        total_sessions=len(sessions),
        wins=wins,
        win_rate=wins / len(sessions),
        average_score=float(np.mean(scores)),
        best_score=int(np.max(scores)),
        average_duration=float(np.mean([s.duration for s in sessions])),
        average_moves=float(np.mean([s.moves for s in sessions])),
        best_tile=max(s.max_tile for s in sessions),
        tile_counts=tile_counts,
    )


class StatisticsManager:
    """Append-only history of finished sessions."""

    def __init__(self, history: Optional[Iterable[SessionStats]] = None):
        self._history: List[SessionStats] = list(history) if history is not None else []

    def __len__(self):
        return len(self._history)

    @property
    def history(self) -> Tuple[SessionStats, ...]:
        return tuple(self._history)

    def record(self, session: SessionStats) -> None:
        self._history.append(session)
        logger.info("Recorded session #%d: score %d, max tile %d, %s",
                    len(self._history), session.score, session.max_tile, "won" if session.won else "lost")

    def summary(self) -> StatisticsSummary:
        return summarize(self._history)

    def print_summary(self) -> None:
        s = self.summary()
        print("\n====== Statistics Summary ======")
        print(f"Sessions: {s.total_sessions}")
        print(f"Win Rate: {s.win_rate * 100:.1f}% ({s.wins} wins)")
        print(f"Best Score: {s.best_score}")
        print(f"Average Score: {s.average_score:.2f}")
        print(f"Average Moves: {s.average_moves:.2f}")
        print(f"Average Duration: {s.average_duration:.2f}s")
        print(f"Best Max Tile: {s.best_tile}")
        for tile, count in sorted(s.tile_counts.items()):
            print(f"  {tile}: {count} games ({count / s.total_sessions * 100:.1f}%)")
        print("================================")

    def to_dict(self) -> dict:
        return {"sessions": [s.to_dict() for s in self._history]}

    @classmethod
    def from_dict(cls, data: dict) -> "StatisticsManager":
        try:
            sessions = data["sessions"]
        except (KeyError, TypeError) as e:
            raise InvalidState(f"malformed statistics: {e}") from e
        return cls(SessionStats.from_dict(s) for s in sessions)

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), **kwargs)

    @classmethod
    def from_json(cls, text: str) -> "StatisticsManager":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidState(f"statistics are not valid JSON: {e}") from e
        return cls.from_dict(data)
