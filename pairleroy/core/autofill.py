"""Synchronous auto-fill: place palette combos ring by ring until stuck.

Each step places at most one tile. The board is filled from the center
outward; inside a ring, tiles are tried in angular order so the board grows
in a visually stable way.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from pairleroy.core.board import Board, can_place, commit_placement
from pairleroy.core.edges import normalize_rotation_step, oriented_edges, rotation_steps
from pairleroy.core.palette import PaletteEntry
from pairleroy.core.types import Placement

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 12


class AutoFillStatus(str, Enum):
    PLACED = "placed"
    DONE = "done"      # board is full
    HALT = "halt"      # no palette draw fits anywhere


def attempt_placement_with_palette(
    board: Board,
    palette: list[PaletteEntry],
) -> Placement | None:
    """Commit the first palette entry that fits the innermost ring with room.

    Entries are tried in palette order, each with its current rotation first.
    The chosen entry keeps the rotation it was placed with.
    """
    for ring in board.grid.rings:
        available = [idx for idx in ring if idx in board.empty]
        if not available:
            continue
        for entry in palette:
            preferred = normalize_rotation_step(entry.combo, entry.rotation_step)
            order = [preferred] + [s for s in rotation_steps(entry.combo) if s != preferred]
            for step in order:
                edges = oriented_edges(entry.combo, step)
                for tile_index in available:
                    if not can_place(board, tile_index, edges):
                        continue
                    placement = commit_placement(board, tile_index, entry.combo, step)
                    entry.rotation_step = step
                    return placement
    return None


@dataclass
class AutoFiller:
    """Stepwise auto-fill state for one board."""

    board: Board
    draw_palette: Callable[[], list[PaletteEntry]]
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    pending_palette: list[PaletteEntry] | None = None

    def step(self) -> AutoFillStatus:
        """Place one tile, drawing up to ``max_attempts`` palettes."""
        if self.board.is_full:
            return AutoFillStatus.DONE

        palette = self.pending_palette
        self.pending_palette = None
        for attempt in range(self.max_attempts):
            if not palette:
                palette = self.draw_palette()
                if not palette:
                    return AutoFillStatus.HALT
            placement = attempt_placement_with_palette(self.board, palette)
            if placement is not None:
                logger.debug(
                    f"[auto-fill] placed tile {placement.tile_index} "
                    f"step={placement.rotation_step} attempt={attempt + 1}"
                )
                self.pending_palette = self.draw_palette()
                return AutoFillStatus.PLACED
            palette = None

        logger.info(
            f"[auto-fill] halted with {len(self.board.empty)} empty tiles "
            f"after {self.max_attempts} palettes"
        )
        return AutoFillStatus.HALT

    def run(self, max_steps: int | None = None) -> AutoFillStatus:
        """Step until the board is full, the filler halts or ``max_steps`` is hit."""
        limit = max_steps if max_steps is not None else len(self.board.empty)
        status = AutoFillStatus.DONE if self.board.is_full else AutoFillStatus.HALT
        for _ in range(limit):
            status = self.step()
            if status != AutoFillStatus.PLACED:
                return status
        if self.board.is_full:
            return AutoFillStatus.DONE
        return status

    def reset(self) -> None:
        self.pending_palette = None
