import logging

from ..environment.board import Board, Direction
from ..environment.heuristics import evaluate_board
from .base_agent import BaseAgent

logger = logging.getLogger(__name__)


class GreedyAgent(BaseAgent):
    """
    One-ply lookahead: every legal direction is simulated and scored by the
    merge reward plus the heuristic value of the resulting board.
    """
    name = "greedy"

    def get_move(self, board: Board) -> Direction:
        best_value = float("-inf")
        best_action = None
        for action in self.legal_moves(board):
            next_board, result = board.simulate(action)
            value = result.score_delta + evaluate_board(next_board.as_array())
            # Strict comparison keeps the first direction on ties
            if value > best_value:
                best_value = value
                best_action = action
        logger.debug("Greedy picked %s (value %.2f)", best_action.name, best_value)
        return best_action
