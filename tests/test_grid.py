from __future__ import annotations

import numpy as np
import pytest

from block_puzzle.game import EMPTY, Color, GameGrid, can_place, clear_lines

from tests.helpers import make_piece

N = 8


@pytest.mark.parametrize(
    "row,col,expected",
    [
        (-1, 0, False),
        (0, -1, False),
        (0, 0, True),
        (N - 2, N - 2, True),
        (N - 1, N - 2, False),
        (N - 2, N - 1, False),
        (N - 1, N - 1, False),
        (N, 0, False),
        (0, N, False),
    ],
)
def test_can_place_square_at_boundaries(empty: np.ndarray, row: int, col: int, expected: bool) -> None:
    square = make_piece([(0, 0), (0, 1), (1, 0), (1, 1)])
    assert can_place(empty, square, row, col) is expected


@pytest.mark.parametrize("row,col", [(-1, -1), (-1, 0), (0, N), (N, N), (N - 1, N)])
def test_single_block_out_of_bounds(empty: np.ndarray, row: int, col: int) -> None:
    assert not can_place(empty, make_piece([(0, 0)]), row, col)


@pytest.mark.parametrize("row,col", [(0, 0), (0, N - 1), (N - 1, 0), (N - 1, N - 1)])
def test_single_block_in_corners(empty: np.ndarray, row: int, col: int) -> None:
    assert can_place(empty, make_piece([(0, 0)]), row, col)


def test_can_place_rejects_occupied_cell(empty: np.ndarray) -> None:
    empty[3, 4] = int(Color.GREEN)
    bar = make_piece([(0, 0), (0, 1), (0, 2)])
    assert not can_place(empty, bar, 3, 2)
    assert can_place(empty, bar, 3, 5)
    assert can_place(empty, bar, 2, 2)


def test_can_place_does_not_mutate(empty: np.ndarray) -> None:
    before = empty.copy()
    can_place(empty, make_piece([(0, 0), (1, 0)]), 0, 0)
    assert np.array_equal(before, empty)


def test_full_board_rejects_everything(full: np.ndarray) -> None:
    piece = make_piece([(0, 0)])
    assert not any(can_place(full, piece, r, c) for r in range(N) for c in range(N))


def test_clear_lines_without_full_lines(empty: np.ndarray) -> None:
    empty[0, :7] = int(Color.RED)
    empty[:7, 5] = int(Color.RED)
    result = clear_lines(empty)
    assert result.lines_cleared == 0
    assert result.intersections == 0
    assert result.cleared_positions == []
    assert np.array_equal(result.board, empty)


def test_clear_one_row_and_one_column(empty: np.ndarray) -> None:
    board = empty
    board[2, :] = int(Color.RED)
    board[:, 5] = int(Color.YELLOW)
    board[6, 1] = int(Color.CYAN)
    original = board.copy()

    result = clear_lines(board)

    assert result.lines_cleared == 2
    assert result.intersections == 1
    assert not result.board[2, :].any()
    assert not result.board[:, 5].any()
    assert result.board[6, 1] == int(Color.CYAN)
    assert int(np.count_nonzero(result.board)) == 1
    # the input is left untouched
    assert np.array_equal(board, original)
    assert len(result.cleared_positions) == 15
    assert len(set(result.cleared_positions)) == 15


def test_clear_counts_each_crossing_once(empty: np.ndarray) -> None:
    board = empty
    board[[1, 4], :] = int(Color.PURPLE)
    board[:, [0, 3, 7]] = int(Color.ORANGE)
    result = clear_lines(board)
    assert result.lines_cleared == 5
    assert result.intersections == 6
    assert not result.board.any()


def test_clear_rows_only(empty: np.ndarray) -> None:
    empty[0, :] = int(Color.RED)
    empty[7, :] = int(Color.RED)
    empty[3, 3] = int(Color.BLUE)
    result = clear_lines(empty)
    assert result.lines_cleared == 2
    assert result.intersections == 0
    assert result.board[3, 3] == int(Color.BLUE)
    assert result.cleared_positions[:N] == [(0, c) for c in range(N)]


def test_clear_full_board(full: np.ndarray) -> None:
    result = clear_lines(full)
    assert result.lines_cleared == 2 * N
    assert result.intersections == N * N
    assert (result.board == EMPTY).all()


def test_game_grid_place_and_clear() -> None:
    grid = GameGrid(N)
    bar = make_piece([(0, 0), (0, 1), (0, 2), (0, 3)], color=Color.GREEN)
    assert grid.place(bar, 0, 0) == 4
    assert grid.place(bar, 0, 4) == 4
    assert grid.grid[0, 0] == int(Color.GREEN)
    result = grid.clear_lines()
    assert result.lines_cleared == 1
    assert not grid.grid.any()


def test_game_grid_valid_anchors() -> None:
    grid = GameGrid(N)
    bar = make_piece([(0, 0), (1, 0), (2, 0), (3, 0)])
    anchors = grid.valid_anchors(bar)
    assert len(anchors) == (N - 3) * N
    assert (N - 4, N - 1) in anchors
    assert (N - 3, 0) not in anchors
