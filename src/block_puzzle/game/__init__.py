"""Game module for the 8x8 block puzzle.

Exports the game-state engine and supporting classes:
- ShapeCatalog: Weighted, randomly rotated and colored piece generation
- GameGrid: Board representation, placement checks and line clearing
- ScoringRules: Placement, line, intersection and streak scoring
- GameSession: Session state machine and snapshot publishing
"""

from .pieces import (
    Color,
    Piece,
    PieceTemplate,
    ShapeCatalog,
    SHAPE_TEMPLATES,
    normalize_blocks,
    rotate_blocks,
)
from .grid import EMPTY, GameGrid, LineClearResult, can_place, clear_lines, empty_board
from .rules import ScoreResult, ScoringRules
from .snapshot import SessionState, SnapshotError, decode_state, dumps, encode_state, loads
from .core import GameConfig, GameSession, PlacementOutcome, SessionStatus, is_game_over

__all__ = [
    "Color",
    "Piece",
    "PieceTemplate",
    "ShapeCatalog",
    "SHAPE_TEMPLATES",
    "normalize_blocks",
    "rotate_blocks",
    "EMPTY",
    "GameGrid",
    "LineClearResult",
    "can_place",
    "clear_lines",
    "empty_board",
    "ScoreResult",
    "ScoringRules",
    "SessionState",
    "SnapshotError",
    "decode_state",
    "dumps",
    "encode_state",
    "loads",
    "GameConfig",
    "GameSession",
    "PlacementOutcome",
    "SessionStatus",
    "is_game_over",
]
