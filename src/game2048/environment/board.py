"""
Square 2048 board with directional slide-and-merge.

Moves are implemented once, as a leftward merge of every row, and applied to
the other directions by rotating the grid with ``np.rot90`` first.
"""

from enum import Enum
from typing import List, NamedTuple, Sequence, Tuple

import numpy as np

from ..errors import InvalidArgument, InvalidConfig, InvalidState, OutOfBounds


class Direction(Enum):
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    @property
    def rotation(self) -> int:
        """Number of counter-clockwise quarter turns that make this move a left move."""
        return _ROTATIONS[self]

    @classmethod
    def parse(cls, value) -> "Direction":
        """Accept a Direction, its name (any case) or its integer value."""
        if isinstance(value, Direction):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        elif isinstance(value, (int, np.integer)) and not isinstance(value, bool):
            try:
                return cls(int(value))
            except ValueError:
                pass
        raise InvalidArgument(f"unknown direction {value!r}")


_ROTATIONS = {
    Direction.LEFT: 0,
    Direction.UP: 1,
    Direction.RIGHT: 2,
    Direction.DOWN: 3,
}


class MoveResult(NamedTuple):
    moved: bool
    score_delta: int
    merged_values: Tuple[int, ...] = ()


def merge_row(row: np.ndarray) -> Tuple[np.ndarray, int, List[int]]:
    """
    Slide a single row to the left and merge equal neighbours.

    Tiles are scanned from the leading (left) edge and each tile takes part in
    at most one merge, so ``[2, 2, 2, 2]`` becomes ``[4, 4, 0, 0]`` and
    ``[4, 4, 8, 0]`` becomes ``[8, 8, 0, 0]``.

    Returns:
        The new row, the score gained and the list of merged tile values
    """
    size = len(row)
    filtered = row[row != 0]
    merged = []
    merged_values = []
    score = 0
    i = 0
    while i < len(filtered):
        if i + 1 < len(filtered) and filtered[i] == filtered[i + 1]:
            merged_val = int(filtered[i]) * 2
            merged.append(merged_val)
            merged_values.append(merged_val)
            score += merged_val
            i += 2
        else:
            merged.append(int(filtered[i]))
            i += 1
    new_row = np.array(merged, dtype=np.int64)
    new_row = np.pad(new_row, (0, size - len(new_row)), 'constant')
    return new_row, score, merged_values


def _is_tile_value(value: int) -> bool:
    return value == 0 or (value >= 2 and (value & (value - 1)) == 0)


class Board:
    """Fixed-size square grid of tiles; 0 marks an empty cell."""

    def __init__(self, size: int = 4):
        if isinstance(size, bool) or not isinstance(size, (int, np.integer)) or size <= 0:
            raise InvalidConfig(f"board size must be positive, got {size!r}")
        self.size = int(size)
        self._grid = np.zeros((self.size, self.size), dtype=np.int64)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Board":
        """Build a board from nested rows, validating shape and tile values."""
        try:
            grid = np.array(rows)
        except (TypeError, ValueError) as e:
            raise InvalidState(f"malformed board: {e}") from e
        if grid.dtype.kind not in "iu":
            raise InvalidState(f"tile values must be integers, got {grid.dtype} data")
        grid = grid.astype(np.int64)
        if grid.ndim != 2 or grid.shape[0] != grid.shape[1] or grid.shape[0] == 0:
            raise InvalidState(f"board must be a non-empty square grid, got shape {grid.shape}")
        bad = [int(v) for v in np.unique(grid) if not _is_tile_value(int(v))]
        if bad:
            raise InvalidState(f"tile values must be 0 or powers of two >= 2, got {bad}")
        board = cls(grid.shape[0])
        board._grid = grid
        return board

    def _check_bounds(self, row: int, col: int) -> None:
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise OutOfBounds(f"({row}, {col}) is outside a {self.size}x{self.size} board")

    def get(self, row: int, col: int) -> int:
        self._check_bounds(row, col)
        return int(self._grid[row, col])

    def place_tile(self, row: int, col: int, value: int) -> None:
        """Put a tile on an empty cell. Only the owning game spawns tiles."""
        self._check_bounds(row, col)
        if value < 2 or not _is_tile_value(value):
            raise InvalidState(f"cannot place tile value {value}")
        if self._grid[row, col] != 0:
            raise InvalidState(f"cell ({row}, {col}) is not empty")
        self._grid[row, col] = value

    def _moved_grid(self, direction: Direction) -> Tuple[np.ndarray, MoveResult]:
        k = direction.rotation
        rotated = np.rot90(self._grid, k=k).copy()
        total_score = 0
        merged_values = []
        for i in range(self.size):
            new_row, score, merged = merge_row(rotated[i])
            rotated[i] = new_row
            total_score += score
            merged_values.extend(merged)
        new_grid = np.rot90(rotated, k=-k).copy()
        moved = not np.array_equal(new_grid, self._grid)
        return new_grid, MoveResult(moved, total_score, tuple(merged_values))

    def apply_move(self, direction: Direction) -> MoveResult:
        """
        Slide and merge every line toward ``direction``.

        Returns:
            MoveResult; when nothing moves the board is left unchanged
        """
        new_grid, result = self._moved_grid(Direction.parse(direction))
        if result.moved:
            self._grid = new_grid
        return result

    def simulate(self, direction: Direction) -> Tuple["Board", MoveResult]:
        """Apply a move to a copy, leaving this board untouched."""
        new_grid, result = self._moved_grid(Direction.parse(direction))
        board = Board(self.size)
        board._grid = new_grid
        return board, result

    def can_move(self, direction: Direction) -> bool:
        return self._moved_grid(Direction.parse(direction))[1].moved

    def valid_moves(self) -> List[Direction]:
        return [d for d in Direction if self.can_move(d)]

    def has_moves(self) -> bool:
        if np.any(self._grid == 0):
            return True
        # Full board: any equal neighbour allows a merge
        if np.any(self._grid[:, :-1] == self._grid[:, 1:]):
            return True
        return bool(np.any(self._grid[:-1, :] == self._grid[1:, :]))

    def max_tile(self) -> int:
        return int(self._grid.max())

    def tile_sum(self) -> int:
        return int(self._grid.sum())

    def empty_cells(self) -> List[Tuple[int, int]]:
        return [(int(r), int(c)) for r, c in zip(*np.where(self._grid == 0))]

    def as_array(self) -> np.ndarray:
        """Copy of the grid as a numpy array."""
        return self._grid.copy()

    def to_list(self) -> List[List[int]]:
        return self._grid.tolist()

    def copy(self) -> "Board":
        board = Board(self.size)
        board._grid = self._grid.copy()
        return board

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return self.size == other.size and np.array_equal(self._grid, other._grid)

    def __repr__(self):
        return f"Board({self.to_list()})"

    def render(self) -> str:
        """Plain text rendering, as the console renderer prints it."""
        width = max(5, len(str(self.max_tile())) + 2)
        line = "-" * ((width + 1) * self.size + 1)
        out = [line]
        for row in self._grid:
            cells = ["".center(width) if cell == 0 else str(int(cell)).center(width) for cell in row]
            out.append("|" + "|".join(cells) + "|")
            out.append(line)
        return "\n".join(out)
