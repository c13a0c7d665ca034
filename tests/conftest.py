from __future__ import annotations

import numpy as np
import pytest

from block_puzzle.game import Color


@pytest.fixture
def empty() -> np.ndarray:
    return np.zeros((8, 8), dtype=np.int8)


@pytest.fixture
def full() -> np.ndarray:
    return np.full((8, 8), int(Color.BLUE), dtype=np.int8)
