import dataclasses

import pytest

from game2048.config import GameConfig
from game2048.environment.board import Direction
from game2048.environment.game import Game
from game2048.errors import InvalidState
from game2048.replay import Replay, ReplayPlayer, ReplayRecorder, replay_to_end

DIRECTIONS = [Direction.LEFT, Direction.DOWN, Direction.RIGHT, Direction.UP]


def record_game(config, steps=80):
    game = Game(config)
    recorder = ReplayRecorder(config, game.snapshot())
    for step in range(steps):
        if game.is_over:
            break
        direction = DIRECTIONS[step % 4]
        outcome = game.make_move(direction)
        recorder.record(direction, outcome, game.snapshot())
    return game, recorder.finish(game.snapshot())


@pytest.fixture
def recorded():
    return record_game(GameConfig(seed=2024))


def test_recorder_keeps_moves_in_order(recorded):
    game, replay = recorded
    assert len(replay) == game.moves
    assert replay.summary.score == game.score.current
    assert replay.summary.max_tile == game.max_tile()
    assert replay.summary.moves == game.moves
    assert replay.moves[-1].board == tuple(tuple(r) for r in game.board.to_list())


def test_replay_reproduces_final_state(recorded):
    game, replay = recorded
    replayed = replay_to_end(replay)
    assert replayed.board == game.board
    assert replayed.score.current == game.score.current
    assert replayed.max_tile() == replay.summary.max_tile
    assert replayed.state is game.state


def test_replay_survives_json_exchange(recorded):
    game, replay = recorded
    restored = Replay.from_json(replay.to_json())
    assert restored == replay
    assert replay_to_end(restored).board == game.board


def test_player_yields_moves_then_stops(recorded):
    _, replay = recorded
    player = ReplayPlayer(replay)
    seen = list(player)
    assert seen == list(replay.moves)
    assert not player.has_more
    assert player.next_move() is None
    # Exhausted players stay exhausted
    assert list(player) == []


def test_player_detects_divergence(recorded):
    _, replay = recorded
    first = replay.moves[0]
    bad_board = tuple(tuple(0 for _ in row) for row in first.board)
    tampered = dataclasses.replace(replay, moves=(dataclasses.replace(first, board=bad_board),) + replay.moves[1:])
    player = ReplayPlayer(tampered)
    game = player.new_game()
    before = game.snapshot()
    with pytest.raises(InvalidState):
        player.apply_next(game)
    # A diverging step leaves the game as it was
    assert game.snapshot() == before


def test_stopped_recorder_ignores_moves():
    config = GameConfig(seed=8)
    game = Game(config)
    recorder = ReplayRecorder(config, game.snapshot())
    recorder.stop()
    for direction in Direction:
        outcome = game.make_move(direction)
        recorder.record(direction, outcome, game.snapshot())
    assert len(recorder) == 0


def test_discard_last():
    config = GameConfig(seed=8)
    game = Game(config)
    recorder = ReplayRecorder(config, game.snapshot())
    for direction in DIRECTIONS * 2:
        outcome = game.make_move(direction)
        recorder.record(direction, outcome, game.snapshot())
    recorded = len(recorder)
    recorder.discard_last()
    assert len(recorder) == max(recorded - 1, 0)


def test_unsupported_version(recorded):
    _, replay = recorded
    data = replay.to_dict()
    data["version"] = 99
    with pytest.raises(InvalidState):
        Replay.from_dict(data)
    with pytest.raises(InvalidState):
        Replay.from_json("{not json")
