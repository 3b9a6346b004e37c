"""
Game analysis plots for 2048.
This module draws statistics histories and board sequences taken from replays.
"""

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from ...replay.recorder import Replay

# 2048 color scheme
TILE_COLORS = {
    0: '#CCC0B3',  # Empty tile
    2: '#EEE4DA',
    4: '#EDE0C8',
    8: '#F2B179',
    16: '#F59563',
    32: '#F67C5F',
    64: '#F65E3B',
    128: '#EDCF72',
    256: '#EDCC61',
    512: '#EDC850',
    1024: '#EDC53F',
    2048: '#EDC22E',
}
DARK_TILE = '#3C3A32'


def plot_statistics(history, filename='statistics.png'):
    """
    Plot score, max tile and duration of every recorded session.

    Args:
        history: Sequence of SessionStats
        filename: Output file name
    """
    if not history:
        return None
    scores = [s.score for s in history]
    max_tiles = [s.max_tile for s in history]
    durations = [s.duration for s in history]
    moves = [s.moves for s in history]
    sessions = np.arange(1, len(history) + 1)

    fig, ((ax1, ax2), (ax3, ax4)) = plt.subplots(2, 2, figsize=(15, 10))
    ax1.plot(sessions, scores, label='Score', alpha=0.6)
    ax1.plot(sessions, np.cumsum(scores) / sessions, label='Running Average', linewidth=2)
    ax1.set_title('Score per Session')
    ax1.set_xlabel('Session')
    ax1.set_ylabel('Score')
    ax1.legend()

    ax2.plot(sessions, max_tiles, marker='o')
    ax2.set_yscale('log', base=2)
    ax2.set_title('Maximum Tile Reached')
    ax2.set_xlabel('Session')
    ax2.set_ylabel('Max Tile')

    ax3.plot(sessions, moves, color='purple')
    ax3.set_title('Moves per Session')
    ax3.set_xlabel('Session')
    ax3.set_ylabel('Moves')

    ax4.plot(sessions, durations, color='orange')
    ax4.set_title('Session Duration')
    ax4.set_xlabel('Session')
    ax4.set_ylabel('Seconds')

    plt.tight_layout()
    plt.savefig(filename)
    plt.close(fig)
    return filename


def visualize_replay(replay: Replay, filename='replay.png', max_boards=9):
    """
    Draw boards sampled evenly along a replay, initial board included.

    Args:
        replay: Replay to draw
        filename: Output file name
        max_boards: Maximum number of boards in the grid
    """
    boards = [np.array(replay.initial.board)] + [np.array(m.board) for m in replay.moves]
    if len(boards) > max_boards:
        indices = np.linspace(0, len(boards) - 1, max_boards, dtype=int)
    else:
        indices = np.arange(len(boards))
    grid_size = int(np.ceil(np.sqrt(len(indices))))

    fig, axes = plt.subplots(grid_size, grid_size, figsize=(4 * grid_size, 4 * grid_size), squeeze=False)
    axes = axes.flatten()
    for ax in axes:
        ax.axis('off')
    for ax, index in zip(axes, indices):
        _draw_board(ax, boards[index])
        ax.set_title(f"Step {index}")

    s = replay.summary
    plt.suptitle(f'Replay: Score = {s.score}, Max Tile = {s.max_tile}, Moves = {s.moves}', fontsize=16)
    plt.tight_layout(rect=[0, 0, 1, 0.95])
    plt.savefig(filename)
    plt.close(fig)
    return filename


def _draw_board(ax, board):
    size = board.shape[0]
    for row in range(size):
        for col in range(size):
            val = int(board[row, col])
            ax.add_patch(plt.Rectangle((col, size - 1 - row), 0.95, 0.95,
                                       color=TILE_COLORS.get(val, DARK_TILE)))
            if val > 0:
                ax.text(col + 0.475, size - 1 - row + 0.475, str(val), ha='center', va='center',
                        color='#776E65' if val <= 4 else '#F9F6F2', fontsize=12, fontweight='bold')
    ax.set_xlim(0, size)
    ax.set_ylim(0, size)
    ax.set_aspect('equal')
