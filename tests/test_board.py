import numpy as np
import pytest

from game2048.environment.board import Board, Direction, merge_row
from game2048.errors import InvalidArgument, InvalidConfig, InvalidState, OutOfBounds


@pytest.mark.parametrize("row, expected, score", [
    ([2, 2, 2, 2], [4, 4, 0, 0], 8),
    ([2, 2, 4, 4], [4, 8, 0, 0], 12),
    ([4, 4, 8, 0], [8, 8, 0, 0], 8),
    ([2, 0, 2, 4], [4, 4, 0, 0], 4),
    ([0, 0, 0, 0], [0, 0, 0, 0], 0),
    ([2, 4, 8, 16], [2, 4, 8, 16], 0),
])
def test_merge_row(row, expected, score):
    new_row, gained, merged = merge_row(np.array(row))
    assert new_row.tolist() == expected
    assert gained == score
    assert sum(merged) == score


def test_merge_happens_from_leading_edge():
    board = Board.from_rows([
        [2, 2, 2, 0],
        [0, 0, 0, 0],
        [0, 0, 0, 0],
        [0, 0, 0, 0],
    ])
    board.apply_move(Direction.RIGHT)
    assert board.to_list()[0] == [0, 0, 2, 4]


def test_vertical_moves():
    rows = [
        [2, 0, 0, 0],
        [2, 0, 0, 0],
        [4, 0, 0, 0],
        [0, 0, 0, 0],
    ]
    up = Board.from_rows(rows)
    result = up.apply_move(Direction.UP)
    assert [up.get(r, 0) for r in range(4)] == [4, 4, 0, 0]
    assert result.moved and result.score_delta == 4

    down = Board.from_rows(rows)
    down.apply_move(Direction.DOWN)
    assert [down.get(r, 0) for r in range(4)] == [0, 0, 4, 4]


@pytest.mark.parametrize("direction", list(Direction))
def test_no_legal_slide_leaves_board_unchanged(direction, blocked_board):
    board = Board.from_rows(blocked_board)
    before = board.copy()
    result = board.apply_move(direction)
    assert result.moved is False
    assert result.score_delta == 0
    assert board == before


def test_move_toward_full_edge_is_not_a_move():
    board = Board.from_rows([
        [2, 0, 0, 0],
        [4, 0, 0, 0],
        [0, 0, 0, 0],
        [0, 0, 0, 0],
    ])
    assert not board.can_move(Direction.LEFT)
    assert set(board.valid_moves()) == {Direction.RIGHT, Direction.DOWN}


def test_simulate_does_not_touch_board(two_twos):
    board = Board.from_rows(two_twos)
    moved, result = board.simulate(Direction.LEFT)
    assert result.moved
    assert board.to_list() == two_twos
    assert moved.get(0, 0) == 4


def test_get_out_of_bounds():
    board = Board(4)
    with pytest.raises(OutOfBounds):
        board.get(4, 0)
    with pytest.raises(OutOfBounds):
        board.get(0, -1)
    # Also an IndexError for callers using builtin handling
    with pytest.raises(IndexError):
        board.get(10, 10)


def test_invalid_construction():
    with pytest.raises(InvalidConfig):
        Board(0)
    with pytest.raises(InvalidState):
        Board.from_rows([[2, 3], [0, 0]])
    with pytest.raises(InvalidState):
        Board.from_rows([[2, 2, 0], [0, 0, 0]])
    with pytest.raises(InvalidState):
        Board.from_rows([[1, 0], [0, 0]])
    with pytest.raises(InvalidState):
        Board.from_rows([[2.5, 0], [0, 0]])
    with pytest.raises(InvalidState):
        Board.from_rows([[True, False], [False, False]])
    with pytest.raises(InvalidConfig):
        Board(True)


def test_place_tile_rules():
    board = Board(2)
    board.place_tile(0, 0, 2)
    with pytest.raises(InvalidState):
        board.place_tile(0, 0, 4)
    with pytest.raises(InvalidState):
        board.place_tile(1, 1, 6)
    with pytest.raises(OutOfBounds):
        board.place_tile(2, 0, 2)


def test_board_queries(blocked_board):
    board = Board.from_rows([
        [0, 2, 0, 0],
        [0, 0, 64, 0],
        [0, 0, 0, 0],
        [8, 0, 0, 0],
    ])
    assert board.max_tile() == 64
    assert board.tile_sum() == 74
    assert len(board.empty_cells()) == 13
    assert board.has_moves()
    assert not Board.from_rows(blocked_board).has_moves()


def test_direction_parse():
    assert Direction.parse("left") is Direction.LEFT
    assert Direction.parse(" Up ") is Direction.UP
    assert Direction.parse(2) is Direction.DOWN
    assert Direction.parse(Direction.RIGHT) is Direction.RIGHT
    with pytest.raises(InvalidArgument):
        Direction.parse("diagonal")
    with pytest.raises(InvalidArgument):
        Direction.parse(7)
