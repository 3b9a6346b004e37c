import pytest

from game2048.agents import (AIController, Algorithm, ExpectimaxAgent, GreedyAgent, MCTSAgent,
                             create_agent)
from game2048.config import GameConfig
from game2048.environment.board import Board, Direction
from game2048.environment.game import GameState
from game2048.environment.heuristics import evaluate_board
from game2048.errors import InvalidArgument, NoMoveAvailable

OPEN_BOARD = [
    [2, 4, 0, 0],
    [0, 2, 0, 0],
    [0, 0, 8, 0],
    [0, 0, 0, 2],
]


def fast_agents():
    return [
        GreedyAgent(seed=0),
        ExpectimaxAgent(depth=2, seed=0),
        MCTSAgent(num_playouts=24, playout_depth=8, seed=0),
    ]


def test_algorithm_parse():
    assert Algorithm.parse("greedy") is Algorithm.GREEDY
    assert Algorithm.parse(" MCTS ") is Algorithm.MCTS
    assert Algorithm.parse(Algorithm.EXPECTIMAX) is Algorithm.EXPECTIMAX
    for bad in ("random", "", None, 3):
        with pytest.raises(InvalidArgument):
            Algorithm.parse(bad)


def test_create_agent_types():
    assert isinstance(create_agent("greedy"), GreedyAgent)
    assert isinstance(create_agent("expectimax", depth=1), ExpectimaxAgent)
    assert isinstance(create_agent("mcts", num_playouts=4), MCTSAgent)


@pytest.mark.parametrize("agent", fast_agents(), ids=lambda a: a.name)
def test_agents_return_legal_move(agent):
    board = Board.from_rows(OPEN_BOARD)
    move = agent.get_move(board)
    assert move in board.valid_moves()
    # Searching must not modify the board
    assert board.to_list() == OPEN_BOARD


@pytest.mark.parametrize("agent", fast_agents(), ids=lambda a: a.name)
def test_agents_report_no_move(agent, blocked_board):
    with pytest.raises(NoMoveAvailable):
        agent.get_move(Board.from_rows(blocked_board))


def test_agents_choose_among_few_legal_moves():
    board = Board.from_rows([
        [2, 4, 8, 0],
        [4, 8, 16, 32],
        [8, 16, 32, 64],
        [16, 32, 64, 128],
    ])
    assert set(board.valid_moves()) == {Direction.UP, Direction.RIGHT}
    for agent in fast_agents():
        assert agent.get_move(board) in board.valid_moves()


def test_mcts_is_deterministic_for_a_seed():
    board = Board.from_rows(OPEN_BOARD)
    first = MCTSAgent(num_playouts=30, playout_depth=10, seed=5).get_move(board)
    second = MCTSAgent(num_playouts=30, playout_depth=10, seed=5).get_move(board)
    assert first == second


def test_mcts_visits_every_candidate():
    agent = MCTSAgent(num_playouts=20, playout_depth=5, seed=1)
    board = Board.from_rows(OPEN_BOARD)
    agent.get_move(board)
    children = agent.last_root.children
    assert set(children) == set(board.valid_moves())
    assert all(child.visit_count >= 1 for child in children.values())
    assert sum(child.visit_count for child in children.values()) == 20


def test_expectimax_takes_the_winning_merge():
    agent = ExpectimaxAgent(depth=2)
    board = Board.from_rows([
        [2, 4, 2, 4],
        [4, 2, 4, 2],
        [2, 4, 2, 4],
        [4, 2, 1024, 1024],
    ])
    assert agent.get_move(board) in (Direction.LEFT, Direction.RIGHT)


def test_heuristic_prefers_empty_space():
    crowded = [[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 0]]
    roomy = [[2, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]
    assert evaluate_board(roomy) > evaluate_board(crowded)


def test_controller_step_uses_private_game(make_snapshot):
    config = GameConfig(seed=3)
    controller = AIController(config, "mcts", num_playouts=16, playout_depth=5)
    snapshot = make_snapshot(OPEN_BOARD)
    controller.sync(snapshot)
    result = controller.step()
    assert result.outcome.moved
    assert result.direction in Board.from_rows(OPEN_BOARD).valid_moves()
    assert result.snapshot.board != snapshot.board
    assert result.snapshot.moves == 1
    # The borrowed snapshot is untouched
    assert [list(row) for row in snapshot.board] == OPEN_BOARD


def test_controller_no_move_on_finished_game(make_snapshot, blocked_board):
    controller = AIController(GameConfig(seed=3), "mcts", num_playouts=8)
    controller.sync(make_snapshot(blocked_board, state=GameState.GAME_OVER))
    with pytest.raises(NoMoveAvailable):
        controller.step()


def test_controller_rejects_unknown_algorithm():
    with pytest.raises(InvalidArgument):
        AIController(GameConfig(), "minimax")
