from __future__ import annotations

import random
from typing import Sequence, Tuple

from block_puzzle.game import Color, Piece, PieceTemplate, ShapeCatalog


def make_piece(blocks: Sequence[Tuple[int, int]], color: Color = Color.RED, piece_id: str = "p") -> Piece:
    return Piece(id=piece_id, color=color, blocks=tuple(blocks))


def single_block_catalog(seed: int = 0) -> ShapeCatalog:
    """Catalog that only ever produces 1x1 pieces."""
    return ShapeCatalog(templates=(PieceTemplate(((0, 0),), 1),), rng=random.Random(seed))
