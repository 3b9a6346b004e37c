"""
Command-style interface to the game core.

Every command takes the service lock, performs one state transition and
returns a ``CommandResult``; errors come back as human-readable strings
instead of exceptions.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Optional

from ..agents.ai_controller import AIController, Algorithm
from ..config import GameConfig
from ..environment.game import Game, GameSnapshot, MoveOutcome
from ..errors import GameError, InvalidArgument
from ..replay.player import ReplayPlayer
from ..replay.recorder import Replay, ReplayRecorder
from ..stats.statistics import SessionStats, StatisticsManager
from .locking import Feature, PoisonableLock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    ok: bool
    payload: Any = None
    error: Optional[str] = None

    @classmethod
    def success(cls, payload: Any = None) -> "CommandResult":
        return cls(True, payload, None)

    @classmethod
    def failure(cls, error) -> "CommandResult":
        return cls(False, None, str(error))

    def to_dict(self) -> dict:
        if self.ok:
            return {"ok": True, "payload": self.payload}
        return {"ok": False, "error": self.error}


class GameService:
    """
    Owns the primary game and its optional AI, recording and playback
    features. Callers only ever receive copies of the game state.
    """

    COMMANDS = (
        "get_state",
        "new_game",
        "apply_move",
        "undo",
        "load_state",
        "enable_ai",
        "disable_ai",
        "request_ai_move",
        "start_recording",
        "stop_recording",
        "load_replay",
        "play_next_replay_step",
        "stop_replay",
        "get_statistics_summary",
        "export_statistics",
    )

    def __init__(self, config: Optional[GameConfig] = None, statistics: Optional[StatisticsManager] = None,
                 agent_params: Optional[dict] = None):
        """
        Args:
            config: Configuration of every game this service plays
            statistics: Existing session history to extend
            agent_params: Per-algorithm agent arguments, e.g. ``{"mcts": {"num_playouts": 50}}``
        """
        self.config = config if config is not None else GameConfig()
        self._lock = PoisonableLock()
        self._game = Game(self.config)
        self._statistics = statistics if statistics is not None else StatisticsManager()
        self._ai: Feature[AIController] = Feature("AI")
        self._recorder: Feature[ReplayRecorder] = Feature("recording")
        self._player: Feature[ReplayPlayer] = Feature("replay playback")
        self._agent_params = agent_params or {}
        self._session_recorded = False
        self._record_session()

    # --- plumbing ---

    def _run(self, operation, *args, **kwargs) -> CommandResult:
        try:
            with self._lock:
                payload = operation(*args, **kwargs)
        except GameError as e:
            logger.debug("%s failed: %s", operation.__name__.lstrip("_"), e)
            return CommandResult.failure(e)
        except Exception as e:
            # The lock is now poisoned; report instead of crashing the caller
            logger.exception("Unexpected error in %s", operation.__name__.lstrip("_"))
            return CommandResult.failure(f"InternalError: {e}")
        return CommandResult.success(payload)

    def reset_lock(self) -> None:
        self._lock.clear()

    def dispatch(self, name: str, **kwargs) -> CommandResult:
        """Invoke a command by name, e.g. ``dispatch("apply_move", direction="left")``."""
        if name not in self.COMMANDS:
            return CommandResult.failure(InvalidArgument(f"unknown command {name!r}"))
        command = getattr(self, name)
        try:
            inspect.signature(command).bind(**kwargs)
        except TypeError as e:
            return CommandResult.failure(InvalidArgument(f"{name}: {e}"))
        return command(**kwargs)

    def _state_payload(self) -> dict:
        payload = self._game.snapshot().to_dict()
        payload.update({
            "can_undo": self._game.can_undo,
            "ai": self._ai.get().algorithm.value if self._ai.enabled else None,
            "recording": self._recorder.enabled,
            "replay_remaining": self._player.get().remaining if self._player.enabled else None,
        })
        return payload

    def _after_move(self, direction, outcome: MoveOutcome) -> None:
        if not outcome.moved:
            return
        if self._recorder.enabled:
            self._recorder.get().record(direction, outcome, self._game.snapshot())
        self._record_session()

    def _record_session(self) -> None:
        if self._game.is_over and not self._session_recorded:
            self._statistics.record(SessionStats.from_game(self._game))
            self._session_recorded = True

    def _restart_recording(self) -> None:
        if self._recorder.enabled:
            self._recorder.enable(ReplayRecorder(self.config, self._game.snapshot()))
            logger.info("Recording restarted from the new game state")

    # --- game commands ---

    def get_state(self) -> CommandResult:
        return self._run(self._state_payload)

    def new_game(self) -> CommandResult:
        return self._run(self._new_game)

    def _new_game(self):
        self._game.new_game()
        self._session_recorded = False
        self._record_session()
        self._restart_recording()
        return self._state_payload()

    def apply_move(self, direction) -> CommandResult:
        return self._run(self._apply_move, direction)

    def _apply_move(self, direction):
        outcome = self._game.make_move(direction)
        self._after_move(direction, outcome)
        payload = self._state_payload()
        payload.update({"moved": outcome.moved, "score_delta": outcome.score_delta})
        return payload

    def undo(self) -> CommandResult:
        return self._run(self._undo)

    def _undo(self):
        self._game.undo()
        if self._recorder.enabled:
            recorder = self._recorder.get()
            if len(recorder):
                recorder.discard_last()
            else:
                # Undone past the recording start
                self._restart_recording()
        return self._state_payload()

    def load_state(self, snapshot) -> CommandResult:
        return self._run(self._load_state, snapshot)

    def _load_state(self, snapshot):
        if isinstance(snapshot, dict):
            snapshot = GameSnapshot.from_dict(snapshot)
        elif not isinstance(snapshot, GameSnapshot):
            raise InvalidArgument(f"expected a GameSnapshot or dict, got {type(snapshot).__name__}")
        self._game.load_state(snapshot)
        # Loaded finished games are not new sessions
        self._session_recorded = self._game.is_over
        self._restart_recording()
        return self._state_payload()

    # --- AI commands ---

    def enable_ai(self, algorithm) -> CommandResult:
        return self._run(self._enable_ai, algorithm)

    def _enable_ai(self, algorithm):
        algorithm = Algorithm.parse(algorithm)
        controller = AIController(self.config, algorithm, **self._agent_params.get(algorithm.value, {}))
        self._ai.enable(controller)
        logger.info("AI enabled: %s", controller.algorithm.value)
        return self._state_payload()

    def disable_ai(self) -> CommandResult:
        return self._run(self._disable_ai)

    def _disable_ai(self):
        if self._ai.disable() is not None:
            logger.info("AI disabled")
        return self._state_payload()

    def request_ai_move(self) -> CommandResult:
        return self._run(self._request_ai_move)

    def _request_ai_move(self):
        controller = self._ai.get()
        # Borrow a snapshot in, apply the controller's result out
        controller.sync(self._game.snapshot())
        result = controller.step()
        outcome = self._game.make_move(result.direction, spawn=result.outcome.spawn)
        self._after_move(result.direction, outcome)
        payload = self._state_payload()
        payload.update({
            "direction": result.direction.name.lower(),
            "moved": outcome.moved,
            "score_delta": outcome.score_delta,
        })
        return payload

    # --- replay commands ---

    def start_recording(self) -> CommandResult:
        return self._run(self._start_recording)

    def _start_recording(self):
        self._recorder.enable(ReplayRecorder(self.config, self._game.snapshot()))
        logger.info("Recording started at move %d", self._game.moves)
        return self._state_payload()

    def stop_recording(self) -> CommandResult:
        return self._run(self._stop_recording)

    def _stop_recording(self):
        replay = self._recorder.get().finish(self._game.snapshot())
        self._recorder.disable()
        return replay.to_dict()

    def load_replay(self, replay) -> CommandResult:
        return self._run(self._load_replay, replay)

    def _load_replay(self, replay):
        if isinstance(replay, str):
            replay = Replay.from_json(replay)
        elif isinstance(replay, dict):
            replay = Replay.from_dict(replay)
        elif not isinstance(replay, Replay):
            raise InvalidArgument(f"expected a Replay, dict or JSON string, got {type(replay).__name__}")
        self._game.load_state(replay.initial)
        self._session_recorded = True  # Replayed sessions are not counted again
        self._player.enable(ReplayPlayer(replay))
        self._restart_recording()
        logger.info("Replay loaded: %d moves", len(replay))
        return self._state_payload()

    def play_next_replay_step(self) -> CommandResult:
        return self._run(self._play_next_replay_step)

    def _play_next_replay_step(self):
        player = self._player.get()
        move = player.apply_next(self._game)
        if move is not None:
            self._after_move(move.direction, MoveOutcome(True, move.score_delta, move.spawn, self._game.state))
        payload = self._state_payload()
        payload.update({
            "has_more": player.has_more,
            "direction": move.direction.name.lower() if move is not None else None,
        })
        return payload

    def stop_replay(self) -> CommandResult:
        return self._run(self._stop_replay)

    def _stop_replay(self):
        self._player.disable()
        return self._state_payload()

    # --- statistics commands ---

    def get_statistics_summary(self) -> CommandResult:
        return self._run(lambda: self._statistics.summary().to_dict())

    def export_statistics(self) -> CommandResult:
        return self._run(self._statistics.to_dict)
