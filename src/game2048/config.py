import random
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .errors import InvalidConfig



def set_seeds(seed: int = 42) -> None:
    random.seed(seed)
    np.random.seed(seed)


# External hyperparameters dictionary for the AI agents.
AI_PARAMS = {
    # Heuristic weights (evaluated on log2 tile values)
    "empty_weight": 2.7,
    "monotonicity_weight": 1.0,
    "smoothness_weight": 0.1,
    "corner_weight": 1.5,
    "merge_weight": 0.7,
    "max_tile_weight": 1.0,
    # Expectimax
    "expectimax_depth": 3,  # plies: max -> chance -> max
    # Monte Carlo tree search
    "mcts_playouts": 100,
    "mcts_playout_depth": 20,
    "mcts_exploration": 1.4,
    # Tile spawning
    "spawn_four_probability": 0.1,
}


def _is_power_of_two(value: int) -> bool:
    return value > 0 and (value & (value - 1)) == 0


@dataclass(frozen=True)
class GameConfig:
    """
    Immutable configuration of a single game.

    Args:
        board_size: Number of rows (and columns) of the board
        target_score: Tile value that wins the game
        allow_undo: Whether undo snapshots are kept
        seed: Optional seed for the tile spawning generator
    """
    board_size: int = 4
    target_score: int = 2048
    allow_undo: bool = True
    seed: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.board_size, bool) or not isinstance(self.board_size, int) or self.board_size <= 0:
            raise InvalidConfig(f"board_size must be a positive integer, got {self.board_size!r}")
        if isinstance(self.target_score, bool) or not isinstance(self.target_score, int) \
                or self.target_score < 4 or not _is_power_of_two(self.target_score):
            raise InvalidConfig(f"target_score must be a power of two >= 4, got {self.target_score!r}")

    def to_dict(self) -> dict:
        return {
            "board_size": self.board_size,
            "target_score": self.target_score,
            "allow_undo": self.allow_undo,
            "seed": self.seed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GameConfig":
        try:
            return cls(
                board_size=data["board_size"],
                target_score=data.get("target_score", 2048),
                allow_undo=data.get("allow_undo", True),
                seed=data.get("seed"),
            )
        except (KeyError, TypeError) as e:
            raise InvalidConfig(f"malformed config: {e}") from e
