"""
Board evaluation heuristics shared by the AI agents.

All terms work on log2 tile values so that a 2048 tile does not drown out
everything else on the board.
"""

import numpy as np

from ..config import AI_PARAMS


def log_board(board: np.ndarray) -> np.ndarray:
    board = np.asarray(board, dtype=np.float64)
    # Avoid log(0) by setting zeros to 1 (log2(1) == 0)
    safe_board = np.where(board > 0, board, 1)
    return np.log2(safe_board)


def compute_monotonicity(log_grid: np.ndarray) -> float:
    """
    Penalty for rows and columns that go up and down.

    For every line the smaller of the increasing and decreasing totals is the
    penalty, so a perfectly monotone line scores 0.
    """
    penalty = 0.0
    for lines in (log_grid, log_grid.T):
        diffs = np.diff(lines, axis=1)
        increasing = np.sum(np.where(diffs > 0, diffs, 0), axis=1)
        decreasing = np.sum(np.where(diffs < 0, -diffs, 0), axis=1)
        penalty += float(np.sum(np.minimum(increasing, decreasing)))
    return -penalty


def compute_smoothness(log_grid: np.ndarray) -> float:
    """Negative sum of differences between adjacent non-empty tiles."""
    smoothness = 0.0
    horizontal = (log_grid[:, :-1] > 0) & (log_grid[:, 1:] > 0)
    smoothness -= float(np.sum(np.abs(log_grid[:, :-1] - log_grid[:, 1:])[horizontal]))
    vertical = (log_grid[:-1, :] > 0) & (log_grid[1:, :] > 0)
    smoothness -= float(np.sum(np.abs(log_grid[:-1, :] - log_grid[1:, :])[vertical]))
    return smoothness


def compute_merge_potential(log_grid: np.ndarray) -> float:
    """Sum of log values of adjacent equal tiles."""
    horizontal = (log_grid[:, :-1] == log_grid[:, 1:]) & (log_grid[:, 1:] > 0)
    vertical = (log_grid[:-1, :] == log_grid[1:, :]) & (log_grid[1:, :] > 0)
    return float(np.sum(log_grid[:, 1:][horizontal]) + np.sum(log_grid[1:, :][vertical]))


def compute_corner_bonus(log_grid: np.ndarray) -> float:
    """Bonus when the largest tile sits in a corner."""
    max_tile = float(np.max(log_grid))
    if max_tile == 0:
        return 0.0
    last = log_grid.shape[0] - 1
    corners = [log_grid[0, 0], log_grid[0, last], log_grid[last, 0], log_grid[last, last]]
    return max_tile if max(corners) == max_tile else 0.0


def evaluate_board(board: np.ndarray, params: dict = None) -> float:
    """
    Heuristic value of a board, larger is better.

    Args:
        board: Grid of raw tile values
        params: Weight overrides, defaults to ``AI_PARAMS``
    """
    weights = AI_PARAMS if params is None else {**AI_PARAMS, **params}
    board = np.asarray(board)
    log_grid = log_board(board)
    empty = float(np.sum(board == 0))
    return (
        weights["empty_weight"] * empty
        + weights["monotonicity_weight"] * compute_monotonicity(log_grid)
        + weights["smoothness_weight"] * compute_smoothness(log_grid)
        + weights["merge_weight"] * compute_merge_potential(log_grid)
        + weights["corner_weight"] * compute_corner_bonus(log_grid)
        + weights["max_tile_weight"] * float(np.max(log_grid))
    )
