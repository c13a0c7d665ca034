from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from .pieces import Piece


Coordinate = Tuple[int, int]

EMPTY = 0


def empty_board(size: int) -> np.ndarray:
    return np.zeros((size, size), dtype=np.int8)


def can_place(board: np.ndarray, piece: Piece, row: int, col: int) -> bool:
    """True if every block of `piece` anchored at (row, col) lands on an empty in-bounds cell."""
    size = board.shape[0]
    for r, c in piece.cells_at(row, col):
        if r < 0 or r >= size or c < 0 or c >= size:
            return False
        if board[r, c] != EMPTY:
            return False
    return True


@dataclass
class LineClearResult:
    board: np.ndarray
    lines_cleared: int
    intersections: int
    cleared_positions: List[Coordinate] = field(default_factory=list)


def clear_lines(board: np.ndarray) -> LineClearResult:
    """Empty every full row and column of a copy of `board`.

    Rows are emptied first. Columns are emptied second, and each column cell
    whose row was already emptied as a full row counts as one intersection.
    """
    size = board.shape[0]
    updated = board.copy()
    filled = board != EMPTY
    full_rows = np.all(filled, axis=1)
    full_cols = np.all(filled, axis=0)

    lines_cleared = int(full_rows.sum()) + int(full_cols.sum())
    intersections = 0
    cleared: List[Coordinate] = []

    for row in np.flatnonzero(full_rows):
        updated[row, :] = EMPTY
        cleared.extend((int(row), col) for col in range(size))

    for col in np.flatnonzero(full_cols):
        crossing = full_rows & (updated[:, col] == EMPTY)
        intersections += int(np.count_nonzero(crossing))
        updated[:, col] = EMPTY
        cleared.extend((row, int(col)) for row in range(size) if not full_rows[row])

    return LineClearResult(
        board=updated,
        lines_cleared=lines_cleared,
        intersections=intersections,
        cleared_positions=cleared,
    )


class GameGrid:
    """Square board of color-tagged cells.

    The grid uses 0 for empty cells and `Color` values for filled cells.
    """

    def __init__(self, size: int) -> None:
        self.size = int(size)
        self.grid = empty_board(self.size)

    def reset(self) -> None:
        self.grid.fill(EMPTY)

    def can_place(self, piece: Piece, row: int, col: int) -> bool:
        return can_place(self.grid, piece, row, col)

    def place(self, piece: Piece, row: int, col: int) -> int:
        """Paint the piece's cells with its color. Assumes the position is validated."""
        for r, c in piece.cells_at(row, col):
            self.grid[r, c] = int(piece.color)
        return piece.size

    def clear_lines(self) -> LineClearResult:
        result = clear_lines(self.grid)
        self.grid = result.board
        return result

    def valid_anchors(self, piece: Piece) -> List[Coordinate]:
        return [
            (row, col)
            for row in range(self.size)
            for col in range(self.size)
            if can_place(self.grid, piece, row, col)
        ]
