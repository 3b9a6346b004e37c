from typing import List, Optional

import numpy as np

from ..config import AI_PARAMS
from ..environment.board import Board, Direction
from ..errors import NoMoveAvailable


def random_spawn(board: Board, rng: np.random.Generator) -> Optional[tuple]:
    """Place a 2 (90%) or 4 (10%) on a random empty cell of ``board``."""
    empty_cells = board.empty_cells()
    if not empty_cells:
        return None
    row, col = empty_cells[int(rng.integers(len(empty_cells)))]
    value = 4 if rng.random() < AI_PARAMS["spawn_four_probability"] else 2
    board.place_tile(row, col, value)
    return row, col, value


class BaseAgent:
    """Base class for move-selection strategies."""
    name = "base"

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)

    def legal_moves(self, board: Board) -> List[Direction]:
        moves = board.valid_moves()
        if not moves:
            raise NoMoveAvailable("no direction changes the board")
        return moves

    def get_move(self, board: Board) -> Direction:
        """
        Pick the next move for ``board``.

        Raises:
            NoMoveAvailable: when no direction changes the board
        """
        raise NotImplementedError
