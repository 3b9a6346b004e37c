import logging
from typing import Dict, Optional, Tuple

import numpy as np

from ..config import AI_PARAMS
from ..environment.board import Board, Direction
from ..environment.heuristics import evaluate_board
from .base_agent import BaseAgent

logger = logging.getLogger(__name__)


class ExpectimaxAgent(BaseAgent):
    """
    Bounded-depth expectimax search.

    Max layers try every direction; chance layers average over every empty
    cell (uniformly) receiving a 2 or a 4 with their spawn probabilities.
    Leaves are scored with ``evaluate_board``.
    """
    name = "expectimax"

    def __init__(self, depth: Optional[int] = None, seed: Optional[int] = None):
        super().__init__(seed)
        self.depth = depth if depth is not None else AI_PARAMS["expectimax_depth"]
        self.transposition_table: Dict[Tuple[bytes, int, bool], float] = {}
        self.nodes = 0

    def get_move(self, board: Board) -> Direction:
        legal = self.legal_moves(board)
        # Cache is per search; values depend on the remaining depth only
        self.transposition_table = {}
        self.nodes = 0
        max_value = float("-inf")
        best_action = legal[0]
        for action in legal:
            next_board, result = board.simulate(action)
            value = result.score_delta + self._expectimax(next_board.as_array(), self.depth - 1, is_max=False)
            if value > max_value:
                max_value = value
                best_action = action
        logger.debug("Expectimax picked %s (value %.2f, %d nodes)", best_action.name, max_value, self.nodes)
        return best_action

    def _expectimax(self, state: np.ndarray, depth: int, is_max: bool) -> float:
        self.nodes += 1
        if depth <= 0:
            return evaluate_board(state)

        state_hash = (state.tobytes(), depth, is_max)
        if state_hash in self.transposition_table:
            return self.transposition_table[state_hash]

        if is_max:  # Player's move: maximize reward.
            board = Board.from_rows(state)
            value = float("-inf")
            for action in Direction:
                next_board, result = board.simulate(action)
                if result.moved:
                    value = max(value, result.score_delta
                                + self._expectimax(next_board.as_array(), depth - 1, is_max=False))
            if value == float("-inf"):
                # Terminal position
                value = evaluate_board(state)
        else:  # Chance node: average over possible new tile placements.
            empty_cells = np.transpose(np.where(state == 0))
            if len(empty_cells) == 0:
                return evaluate_board(state)
            p_four = AI_PARAMS["spawn_four_probability"]
            p = 1.0 / len(empty_cells)
            value = 0.0
            for i, j in empty_cells:
                state[i, j] = 2
                value += (1 - p_four) * p * self._expectimax(state.copy(), depth - 1, is_max=True)
                state[i, j] = 4
                value += p_four * p * self._expectimax(state.copy(), depth - 1, is_max=True)
                state[i, j] = 0  # Restore cell.
        self.transposition_table[state_hash] = value
        return value
