"""
Move-selection agents and the controller that runs them.
"""

from .base_agent import BaseAgent
from .greedy_agent import GreedyAgent
from .expectimax_agent import ExpectimaxAgent
from .mcts_agent import MCTSAgent, MCTSNode
from .ai_controller import AIController, AIMoveResult, Algorithm, create_agent
