"""Immutable session snapshots and their JSON-compatible encoding.

The encoded form mirrors what the browser game kept in its cookies: the board
as rows of color names (or ``null`` for empty cells), the offered pieces as
``{"id", "color", "blocks"}`` objects, and the score and streak counters.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .grid import EMPTY
from .pieces import Color, Piece


class SnapshotError(ValueError):
    """Raised when persisted session data cannot be decoded."""


@dataclass(frozen=True, eq=False)
class SessionState:
    board: np.ndarray
    pieces: Tuple[Piece, ...]
    score: int
    streak: int
    high_score: int
    game_over: bool

    def __post_init__(self) -> None:
        board = np.array(self.board, dtype=np.int8, copy=True)
        board.setflags(write=False)
        object.__setattr__(self, "board", board)
        object.__setattr__(self, "pieces", tuple(self.pieces))

    @property
    def size(self) -> int:
        return int(self.board.shape[0])

    def cell(self, row: int, col: int) -> Optional[Color]:
        value = int(self.board[row, col])
        return None if value == EMPTY else Color(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SessionState):
            return NotImplemented
        return (
            np.array_equal(self.board, other.board)
            and self.pieces == other.pieces
            and self.score == other.score
            and self.streak == other.streak
            and self.high_score == other.high_score
            and self.game_over == other.game_over
        )


def encode_piece(piece: Piece) -> Dict[str, Any]:
    return {
        "id": piece.id,
        "color": piece.color.tag,
        "blocks": [[r, c] for r, c in piece.blocks],
    }


def encode_state(state: SessionState) -> Dict[str, Any]:
    grid: List[List[Optional[str]]] = [
        [None if int(v) == EMPTY else Color(int(v)).tag for v in row] for row in state.board
    ]
    return {
        "grid": grid,
        "score": int(state.score),
        "streak": int(state.streak),
        "high_score": int(state.high_score),
        "shapes": [encode_piece(p) for p in state.pieces],
    }


def dumps(state: SessionState) -> str:
    return json.dumps(encode_state(state))


def _non_negative_int(data: Dict[str, Any], key: str, default: Optional[int] = None) -> int:
    if key not in data:
        if default is None:
            raise SnapshotError(f"missing field {key!r}")
        return default
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise SnapshotError(f"field {key!r} must be a non-negative integer, got {value!r}")
    return value


def _decode_color(tag: Any) -> Color:
    try:
        return Color.from_tag(tag)
    except KeyError as exc:
        raise SnapshotError(f"unknown color {tag!r}") from exc


def _decode_offset(value: Any) -> Tuple[int, int]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise SnapshotError(f"block offset must be a [row, col] pair, got {value!r}")
    for v in value:
        if isinstance(v, bool) or not isinstance(v, int):
            raise SnapshotError(f"block offset must hold integers, got {value!r}")
    return int(value[0]), int(value[1])


def decode_piece(data: Any) -> Piece:
    if not isinstance(data, dict):
        raise SnapshotError(f"piece must be an object, got {type(data).__name__}")
    blocks_data = data.get("blocks")
    if not isinstance(blocks_data, list):
        raise SnapshotError(f"piece blocks must be a list, got {blocks_data!r}")
    blocks = tuple(_decode_offset(v) for v in blocks_data)
    try:
        return Piece(id=str(data["id"]), color=_decode_color(data["color"]), blocks=blocks)
    except SnapshotError:
        raise
    except (KeyError, TypeError, ValueError) as exc:
        raise SnapshotError(f"invalid piece {data!r}: {exc}") from exc


def decode_board(rows: Any, size: int) -> np.ndarray:
    if not isinstance(rows, list) or len(rows) != size:
        raise SnapshotError(f"grid must have {size} rows")
    board = np.zeros((size, size), dtype=np.int8)
    for r, row in enumerate(rows):
        if not isinstance(row, list) or len(row) != size:
            raise SnapshotError(f"grid row {r} must have {size} cells")
        for c, tag in enumerate(row):
            if tag is not None:
                board[r, c] = int(_decode_color(tag))
    return board


def decode_state(data: Any, size: int, max_pieces: Optional[int] = None) -> SessionState:
    """Decode an encoded snapshot. `game_over` is left False for the caller to recompute."""
    if not isinstance(data, dict):
        raise SnapshotError("snapshot must be an object")
    if "grid" not in data or "shapes" not in data:
        raise SnapshotError("snapshot needs 'grid' and 'shapes'")
    board = decode_board(data["grid"], size)
    shapes = data["shapes"]
    if not isinstance(shapes, list) or len(shapes) == 0:
        raise SnapshotError("snapshot must offer at least one shape")
    if max_pieces is not None and len(shapes) > max_pieces:
        raise SnapshotError(f"snapshot offers {len(shapes)} shapes, at most {max_pieces} allowed")
    pieces = tuple(decode_piece(p) for p in shapes)
    score = _non_negative_int(data, "score")
    streak = _non_negative_int(data, "streak", default=0)
    high_score = _non_negative_int(data, "high_score", default=0)
    return SessionState(
        board=board,
        pieces=pieces,
        score=score,
        streak=streak,
        high_score=max(high_score, score),
        game_over=False,
    )


def loads(text: str | bytes, size: int, max_pieces: Optional[int] = None) -> SessionState:
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise SnapshotError(f"snapshot is not valid JSON: {exc}") from exc
    return decode_state(data, size, max_pieces)
