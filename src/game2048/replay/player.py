import logging
from typing import Optional

from ..environment.game import Game
from ..errors import InvalidState
from .recorder import MoveRecord, Replay

logger = logging.getLogger(__name__)


class ReplayPlayer:
    """
    Hands out the moves of a replay one at a time, in recorded order.

    The sequence cannot be rewound; build a new player to start over.
    """

    def __init__(self, replay: Replay):
        self.replay = replay
        self.position = 0

    def __iter__(self):
        return self

    def __next__(self) -> MoveRecord:
        move = self.next_move()
        if move is None:
            raise StopIteration
        return move

    @property
    def has_more(self) -> bool:
        return self.position < len(self.replay.moves)

    @property
    def remaining(self) -> int:
        return len(self.replay.moves) - self.position

    def next_move(self) -> Optional[MoveRecord]:
        """Next recorded move, or None once the log is exhausted."""
        if not self.has_more:
            return None
        move = self.replay.moves[self.position]
        self.position += 1
        return move

    def new_game(self) -> Game:
        """Fresh game positioned at the replay's initial state."""
        game = Game(self.replay.config)
        game.load_state(self.replay.initial)
        return game

    def apply_next(self, game: Game) -> Optional[MoveRecord]:
        """
        Replay the next move on ``game`` using the recorded spawn.

        Raises:
            InvalidState: if the game diverges from the recorded board; the
                game is left untouched
        """
        move = self.next_move()
        if move is None:
            return None
        board, result = game.board.simulate(move.direction)
        if result.moved and move.spawn is not None:
            board.place_tile(move.spawn.row, move.spawn.col, move.spawn.value)
        if not result.moved or tuple(tuple(row) for row in board.to_list()) != move.board:
            raise InvalidState(f"replay diverged at move {self.position}")
        game.make_move(move.direction, spawn=move.spawn)
        return move


def replay_to_end(replay: Replay) -> Game:
    """Re-run a whole replay and return the resulting game."""
    player = ReplayPlayer(replay)
    game = player.new_game()
    while player.has_more:
        player.apply_next(game)
    logger.debug("Replayed %d moves, final score %d", len(replay), game.score.current)
    return game
