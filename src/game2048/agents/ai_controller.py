import logging
from enum import Enum
from typing import NamedTuple, Optional

from ..config import GameConfig
from ..environment.board import Direction
from ..environment.game import Game, GameSnapshot, MoveOutcome
from ..errors import InvalidArgument, NoMoveAvailable
from .base_agent import BaseAgent
from .expectimax_agent import ExpectimaxAgent
from .greedy_agent import GreedyAgent
from .mcts_agent import MCTSAgent

logger = logging.getLogger(__name__)


class Algorithm(Enum):
    GREEDY = "greedy"
    EXPECTIMAX = "expectimax"
    MCTS = "mcts"

    @classmethod
    def parse(cls, name) -> "Algorithm":
        if isinstance(name, Algorithm):
            return name
        if isinstance(name, str):
            try:
                return cls(name.strip().lower())
            except ValueError:
                pass
        valid = ", ".join(a.value for a in cls)
        raise InvalidArgument(f"unknown algorithm {name!r} (expected one of: {valid})")


AGENTS = {
    Algorithm.GREEDY: GreedyAgent,
    Algorithm.EXPECTIMAX: ExpectimaxAgent,
    Algorithm.MCTS: MCTSAgent,
}


def create_agent(algorithm, seed: Optional[int] = None, **kwargs) -> BaseAgent:
    return AGENTS[Algorithm.parse(algorithm)](seed=seed, **kwargs)


class AIMoveResult(NamedTuple):
    direction: Direction
    outcome: MoveOutcome
    snapshot: GameSnapshot


class AIController:
    """
    Drives a private clone of a game with one of the move-selection agents.

    The controller never sees the caller's game. Callers hand it a snapshot
    with ``sync`` and copy the returned result back themselves.
    """

    def __init__(self, config: GameConfig, algorithm, **agent_kwargs):
        self.algorithm = Algorithm.parse(algorithm)
        self.config = config
        self.agent = create_agent(self.algorithm, seed=config.seed, **agent_kwargs)
        self.game = Game(config)

    def sync(self, snapshot: GameSnapshot) -> None:
        """Replace the private game state with a copy of ``snapshot``."""
        self.game.load_state(snapshot)

    def snapshot(self) -> GameSnapshot:
        return self.game.snapshot()

    def select_move(self) -> Direction:
        if self.game.is_over:
            raise NoMoveAvailable(f"game is finished ({self.game.state.value})")
        return self.agent.get_move(self.game.board)

    def step(self) -> AIMoveResult:
        """Select a move and apply it to the private game."""
        direction = self.select_move()
        outcome = self.game.make_move(direction)
        logger.debug("%s moved %s (+%d)", self.algorithm.value, direction.name, outcome.score_delta)
        return AIMoveResult(direction, outcome, self.game.snapshot())
