"""
Visualization utilities for 2048 sessions and replays.
"""

from .game_analysis import plot_statistics, visualize_replay
