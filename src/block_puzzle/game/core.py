from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Tuple

import numpy as np

from .grid import GameGrid, can_place
from .pieces import Piece, ShapeCatalog
from .rules import ScoringRules, round_half_up
from .snapshot import SessionState, SnapshotError, decode_state, loads

logger = logging.getLogger(__name__)

Observer = Callable[[SessionState], None]


class SessionStatus(Enum):
    ACTIVE = "active"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    grid_size: int = 8
    pieces_per_set: int = 3
    random_seed: Optional[int] = None


@dataclass
class PlacementOutcome:
    accepted: bool
    state: SessionState
    points: int = 0
    lines_cleared: int = 0
    intersections: int = 0
    cleared_positions: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def intersection(self) -> bool:
        return self.intersections > 0


def is_game_over(board: np.ndarray, pieces: Sequence[Piece]) -> bool:
    """True when no piece fits at any anchor on the board."""
    size = board.shape[0]
    for piece in pieces:
        for row in range(size):
            for col in range(size):
                if can_place(board, piece, row, col):
                    return False
    return len(pieces) > 0


class GameSession:
    """Owns the board, offered pieces, score and streak of one player.

    All mutation goes through `place_piece`, `reset` and `clear_high_score`.
    Readers get immutable `SessionState` snapshots from `state` or by
    subscribing an observer, which is called after every successful change.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        catalog: Optional[ShapeCatalog] = None,
        high_score: int = 0,
        state: Optional[SessionState] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.catalog = catalog or ShapeCatalog(rng=random.Random(self.config.random_seed))
        self.grid = GameGrid(self.config.grid_size)
        self.pieces: List[Piece] = []
        self.score = 0
        self.streak = 0
        self.high_score = int(high_score)
        self.status = SessionStatus.ACTIVE
        self._observers: List[Observer] = []
        if state is None:
            self._start_fresh()
        else:
            self._load(state)

    @classmethod
    def from_snapshot(
        cls,
        data: Any,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        catalog: Optional[ShapeCatalog] = None,
    ) -> "GameSession":
        """Restore a session from an encoded snapshot (a dict or its JSON text).

        Raises SnapshotError on bad data.
        """
        config = config or GameConfig()
        if isinstance(data, (str, bytes, bytearray)):
            restored = loads(data, config.grid_size, config.pieces_per_set)
        else:
            restored = decode_state(data, config.grid_size, config.pieces_per_set)
        return cls(config, rules, catalog, state=restored)

    @classmethod
    def restore_or_new(
        cls,
        data: Any,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        catalog: Optional[ShapeCatalog] = None,
    ) -> "GameSession":
        """Restore from `data` when it decodes, otherwise start a fresh session."""
        if data is None:
            return cls(config, rules, catalog)
        try:
            return cls.from_snapshot(data, config, rules, catalog)
        except SnapshotError as exc:
            logger.warning("discarding saved session: %s", exc)
            return cls(config, rules, catalog)

    @property
    def game_over(self) -> bool:
        return self.status is SessionStatus.GAME_OVER

    @property
    def state(self) -> SessionState:
        return SessionState(
            board=self.grid.grid,
            pieces=tuple(self.pieces),
            score=self.score,
            streak=self.streak,
            high_score=self.high_score,
            game_over=self.game_over,
        )

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _publish(self) -> SessionState:
        snapshot = self.state
        for observer in list(self._observers):
            observer(snapshot)
        return snapshot

    def _start_fresh(self) -> None:
        self.grid.reset()
        self.score = 0
        self.streak = 0
        self.pieces = self.catalog.generate(self.config.pieces_per_set)
        self.status = SessionStatus.ACTIVE

    def _load(self, restored: SessionState) -> None:
        self.grid.grid = np.array(restored.board, dtype=np.int8, copy=True)
        self.pieces = list(restored.pieces)
        self.score = restored.score
        self.streak = restored.streak
        self.high_score = max(self.high_score, restored.high_score)
        self._check_game_over()

    def _check_game_over(self) -> None:
        if is_game_over(self.grid.grid, self.pieces):
            self.status = SessionStatus.GAME_OVER
            self.high_score = max(self.high_score, self.score)
            logger.debug("game over with score %d", self.score)

    def reset(self) -> SessionState:
        self._start_fresh()
        logger.debug("session reset, high score %d", self.high_score)
        return self._publish()

    def clear_high_score(self) -> SessionState:
        self.high_score = 0
        return self._publish()

    def valid_placements(self) -> List[Tuple[int, int, int]]:
        """Every (piece_idx, row, col) that would be accepted."""
        if self.game_over:
            return []
        actions: List[Tuple[int, int, int]] = []
        for piece_idx, piece in enumerate(self.pieces):
            for row, col in self.grid.valid_anchors(piece):
                actions.append((piece_idx, row, col))
        return actions

    def place_piece(self, piece_idx: int, row: int, col: int) -> PlacementOutcome:
        if self.game_over:
            return PlacementOutcome(accepted=False, state=self.state)
        if piece_idx < 0 or piece_idx >= len(self.pieces):
            return PlacementOutcome(accepted=False, state=self.state)
        piece = self.pieces[piece_idx]
        if not self.grid.can_place(piece, row, col):
            return PlacementOutcome(accepted=False, state=self.state)

        blocks = self.grid.place(piece, row, col)
        cleared = self.grid.clear_lines()
        result = self.rules.score(blocks, cleared.lines_cleared, cleared.intersections, self.streak)

        self.score = round_half_up(self.score + result.points)
        self.streak = result.streak
        if self.score > self.high_score:
            self.high_score = self.score

        self.pieces.pop(piece_idx)
        if len(self.pieces) == 0:
            self.pieces = self.catalog.generate(self.config.pieces_per_set)

        if cleared.lines_cleared:
            logger.debug(
                "cleared %d line(s), %d intersection(s), streak %d, +%d",
                cleared.lines_cleared,
                cleared.intersections,
                self.streak,
                result.points,
            )
        self._check_game_over()

        return PlacementOutcome(
            accepted=True,
            state=self._publish(),
            points=result.points,
            lines_cleared=cleared.lines_cleared,
            intersections=cleared.intersections,
            cleared_positions=cleared.cleared_positions,
        )
