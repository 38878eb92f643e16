from __future__ import annotations

import pytest

from pairleroy.core.board import Board
from pairleroy.core.topology import HexGrid, build_grid
from pairleroy.engine.models import BoardConfig
from pairleroy.engine.rng import Xorshift32


@pytest.fixture
def grid_r1() -> HexGrid:
    """Radius-1 grid; the center (0, 0) is tile index 3."""
    return build_grid(1)


@pytest.fixture
def board_r1(grid_r1: HexGrid) -> Board:
    return Board.empty_board(grid_r1)


@pytest.fixture
def rng() -> Xorshift32:
    return Xorshift32(12345)


@pytest.fixture
def all_mono_config() -> BoardConfig:
    """Every tile mono, every unit color 0."""
    return BoardConfig(radius=1, types_pct=[100, 0, 0], color_pct=[100, 0, 0, 0], seed=99)
