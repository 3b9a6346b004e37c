import pytest

from game2048.config import GameConfig
from game2048.environment.game import Game, GameSnapshot, GameState


def snapshot_of(rows, score=0, state=GameState.PLAYING):
    return GameSnapshot(
        board=tuple(tuple(row) for row in rows),
        score=score,
        best_score=score,
        moves=0,
        state=state,
    )


def game_with_board(rows, **config_kwargs):
    """Game whose board is exactly ``rows``."""
    config_kwargs.setdefault("board_size", len(rows))
    config_kwargs.setdefault("seed", 7)
    game = Game(GameConfig(**config_kwargs))
    game.load_state(snapshot_of(rows))
    return game


@pytest.fixture
def config():
    return GameConfig(board_size=4, target_score=2048, allow_undo=True, seed=1234)


@pytest.fixture
def two_twos():
    return [
        [2, 2, 0, 0],
        [0, 0, 0, 0],
        [0, 0, 0, 0],
        [0, 0, 0, 0],
    ]


@pytest.fixture
def blocked_board():
    return [
        [2, 4, 2, 4],
        [4, 2, 4, 2],
        [2, 4, 2, 4],
        [4, 2, 4, 2],
    ]


@pytest.fixture
def make_snapshot():
    return snapshot_of


@pytest.fixture
def make_game():
    return game_with_board
