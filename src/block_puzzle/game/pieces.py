from __future__ import annotations

import random
import uuid
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Optional, Sequence, Tuple


Offset = Tuple[int, int]
Blocks = Tuple[Offset, ...]


class Color(IntEnum):
    RED = 1
    BLUE = 2
    GREEN = 3
    YELLOW = 4
    PURPLE = 5
    ORANGE = 6
    CYAN = 7

    @property
    def tag(self) -> str:
        return self.name.lower()

    @classmethod
    def from_tag(cls, tag: str) -> "Color":
        return cls[str(tag).upper()]


def rotate_blocks(blocks: Iterable[Offset]) -> List[Offset]:
    """Rotate offsets 90 degrees clockwise: (r, c) -> (-c, r)."""
    return [(-c, r) for r, c in blocks]


def normalize_blocks(blocks: Iterable[Offset]) -> Blocks:
    """Shift offsets so the minimum row and minimum column are both zero."""
    blocks = list(blocks)
    min_row = min(r for r, _ in blocks)
    min_col = min(c for _, c in blocks)
    return tuple((r - min_row, c - min_col) for r, c in blocks)


@dataclass(frozen=True)
class PieceTemplate:
    blocks: Blocks
    weight: int


@dataclass(frozen=True)
class Piece:
    """A placeable shape: block offsets relative to its top-left anchor."""

    id: str
    color: Color
    blocks: Blocks

    def __post_init__(self) -> None:
        if len(self.blocks) == 0:
            raise ValueError("piece must have at least one block")
        if len(set(self.blocks)) != len(self.blocks):
            raise ValueError(f"piece {self.id} has duplicate blocks")
        if min(r for r, _ in self.blocks) != 0 or min(c for _, c in self.blocks) != 0:
            raise ValueError(f"piece {self.id} blocks are not normalized")

    @property
    def size(self) -> int:
        return len(self.blocks)

    def bounding_box(self) -> Tuple[int, int]:
        """(height, width) of the piece."""
        return (
            max(r for r, _ in self.blocks) + 1,
            max(c for _, c in self.blocks) + 1,
        )

    def cells_at(self, row: int, col: int) -> List[Offset]:
        return [(row + r, col + c) for r, c in self.blocks]


SHAPE_TEMPLATES: Tuple[PieceTemplate, ...] = (
    # 1 block
    PieceTemplate(((0, 0),), 1),
    # 2 blocks
    PieceTemplate(((0, 0), (0, 1)), 2),
    PieceTemplate(((0, 0), (1, 0)), 2),
    # 3 blocks
    PieceTemplate(((0, 0), (0, 1), (0, 2)), 3),
    PieceTemplate(((0, 0), (1, 0), (2, 0)), 3),
    PieceTemplate(((0, 0), (0, 1), (1, 0)), 3),
    PieceTemplate(((0, 0), (0, 1), (1, 1)), 3),
    # 4 blocks
    PieceTemplate(((0, 0), (0, 1), (0, 2), (0, 3)), 2),  # I
    PieceTemplate(((0, 0), (1, 0), (2, 0), (3, 0)), 2),  # I (vertical)
    PieceTemplate(((0, 0), (0, 1), (1, 0), (1, 1)), 3),  # O
    PieceTemplate(((0, 1), (1, 0), (1, 1), (1, 2)), 2),  # T
    PieceTemplate(((0, 0), (1, 0), (1, 1), (2, 1)), 2),  # Z
    PieceTemplate(((0, 1), (1, 0), (1, 1), (2, 0)), 2),  # S
    PieceTemplate(((0, 0), (1, 0), (2, 0), (2, 1)), 2),  # L
    PieceTemplate(((0, 1), (1, 1), (2, 0), (2, 1)), 2),  # J
    # 5 blocks
    PieceTemplate(((0, 0), (0, 1), (0, 2), (1, 0), (2, 0)), 1),  # big L
    PieceTemplate(((0, 0), (1, 0), (2, 0), (0, 1), (0, 2)), 1),  # big L
    PieceTemplate(((0, 0), (0, 1), (0, 2), (1, 1), (2, 1)), 1),  # big T
)


class ShapeCatalog:
    """Weighted source of randomly rotated, colored pieces."""

    def __init__(
        self,
        templates: Sequence[PieceTemplate] = SHAPE_TEMPLATES,
        rng: Optional[random.Random] = None,
        colors: Sequence[Color] = tuple(Color),
    ) -> None:
        if len(templates) == 0:
            raise ValueError("catalog needs at least one template")
        self.templates = tuple(templates)
        self.colors = tuple(colors)
        self.rng = rng or random.Random()
        self.total_weight = sum(t.weight for t in self.templates)

    def choose_template(self) -> PieceTemplate:
        value = self.rng.random() * self.total_weight
        for template in self.templates:
            value -= template.weight
            if value <= 0:
                return template
        return self.templates[0]

    def _new_id(self) -> str:
        return str(uuid.UUID(int=self.rng.getrandbits(128), version=4))

    def make_piece(self, template: PieceTemplate, rotations: int, color: Color) -> Piece:
        blocks: List[Offset] = list(template.blocks)
        for _ in range(rotations % 4):
            blocks = rotate_blocks(blocks)
        return Piece(id=self._new_id(), color=color, blocks=normalize_blocks(blocks))

    def generate(self, count: int) -> List[Piece]:
        pieces: List[Piece] = []
        for _ in range(count):
            template = self.choose_template()
            rotations = self.rng.randrange(4)
            color = self.rng.choice(self.colors)
            pieces.append(self.make_piece(template, rotations, color))
        return pieces

    def max_extent(self) -> int:
        """Largest bounding-box side over all templates (rotation invariant)."""
        extent = 0
        for template in self.templates:
            blocks = normalize_blocks(template.blocks)
            extent = max(extent, max(r for r, _ in blocks) + 1, max(c for _, c in blocks) + 1)
        return extent
