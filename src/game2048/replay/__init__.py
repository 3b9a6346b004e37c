"""
Replay recording and deterministic playback.
"""

from .recorder import MoveRecord, Replay, ReplayRecorder, ReplaySummary, REPLAY_FORMAT_VERSION
from .player import ReplayPlayer, replay_to_end
