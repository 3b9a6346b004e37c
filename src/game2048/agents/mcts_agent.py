"""
Monte Carlo Tree Search agent for 2048.

The root is expanded with one child per legal move. UCB1 decides which child
receives the next randomized playout, and the move with the highest average
playout outcome is returned.
"""

import math
import logging
from typing import Dict, Optional

from ..config import AI_PARAMS
from ..environment.board import Board, Direction
from ..environment.heuristics import evaluate_board
from .base_agent import BaseAgent, random_spawn

logger = logging.getLogger(__name__)


class MCTSNode:
    """
    Search node holding the statistics of the playouts that went through it.
    """
    def __init__(self, parent=None, action=None):
        self.visit_count = 0
        self.value_sum = 0.0
        self.children: Dict[Direction, "MCTSNode"] = {}
        self.parent = parent
        self.action = action  # Action that led to this node

    def expanded(self):
        return bool(self.children)

    def value(self):
        """Average value of all simulations through this node."""
        if self.visit_count == 0:
            return 0.0
        return self.value_sum / self.visit_count

    def expand(self, actions):
        for action in actions:
            self.children[action] = MCTSNode(parent=self, action=action)

    def select_child(self, exploration: float, value_scale: float):
        """
        Pick the child maximizing UCB1. Unvisited children come first, in
        direction order.
        """
        best_score = -float('inf')
        best_child = None
        for child in self.children.values():
            if child.visit_count == 0:
                return child
            exploitation = child.value() / value_scale
            exploration_term = exploration * math.sqrt(math.log(self.visit_count) / child.visit_count)
            score = exploitation + exploration_term
            if score > best_score:
                best_score = score
                best_child = child
        return best_child

    def backup(self, value):
        """Propagate the value up the tree."""
        node = self
        while node is not None:
            node.visit_count += 1
            node.value_sum += value
            node = node.parent


class MCTSAgent(BaseAgent):
    name = "mcts"

    def __init__(self, num_playouts: Optional[int] = None, playout_depth: Optional[int] = None,
                 exploration: Optional[float] = None, seed: Optional[int] = None):
        super().__init__(seed)
        self.num_playouts = num_playouts if num_playouts is not None else AI_PARAMS["mcts_playouts"]
        self.playout_depth = playout_depth if playout_depth is not None else AI_PARAMS["mcts_playout_depth"]
        self.exploration = exploration if exploration is not None else AI_PARAMS["mcts_exploration"]
        self.last_root: Optional[MCTSNode] = None

    def get_move(self, board: Board) -> Direction:
        legal = self.legal_moves(board)
        if len(legal) == 1:
            return legal[0]

        root = MCTSNode()
        root.expand(legal)
        value_scale = 1.0
        for _ in range(max(self.num_playouts, len(legal))):
            child = root.select_child(self.exploration, value_scale)
            value = self._playout(board, child.action)
            value_scale = max(value_scale, abs(value))
            child.backup(value)

        self.last_root = root
        best = max(root.children.values(), key=lambda c: (c.value(), -list(Direction).index(c.action)))
        logger.debug("MCTS picked %s (avg %.2f over %d playouts)", best.action.name, best.value(), best.visit_count)
        return best.action

    def _playout(self, board: Board, first_action: Direction) -> float:
        """
        Play ``first_action`` and then random legal moves until the game ends
        or the depth limit is reached.

        Returns:
            Score gained along the playout plus the heuristic value of the
            final board
        """
        current, result = board.simulate(first_action)
        total = float(result.score_delta)
        random_spawn(current, self.rng)
        directions = list(Direction)
        for _ in range(self.playout_depth):
            # First direction (in random order) that changes the board
            for index in self.rng.permutation(len(directions)):
                result = current.apply_move(directions[index])
                if result.moved:
                    break
            else:
                break
            total += result.score_delta
            random_spawn(current, self.rng)
        return total + evaluate_board(current.as_array())
