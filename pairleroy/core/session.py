"""BoardSession: the entry point a front end drives for one board.

A session owns the static topology for its radius, the live board, the
seeded random stream, the current palette and the auto-fill state. All
randomness (palette draws, layout synthesis) comes from the one stream, so a
session created with a fixed seed replays identically.
"""

from __future__ import annotations

import logging

from pairleroy.config import Settings, settings as default_settings
from pairleroy.core.autofill import AutoFiller, AutoFillStatus
from pairleroy.core.board import (
    Board,
    clear_board,
    commit_placement,
    dominant_color_for_junction,
    find_edge_conflicts,
    ready_junctions,
    remove_placement,
    validate_placement,
)
from pairleroy.core.edges import next_rotation_step, normalize_rotation_step, oriented_edges
from pairleroy.core.generation import LayoutEntry, generate_layout
from pairleroy.core.palette import PaletteEntry, create_palette, sample_combo
from pairleroy.core.topology import build_grid, compute_junctions
from pairleroy.core.types import BiCombo, Junction, MonoCombo, Placement, TriCombo
from pairleroy.engine.errors import ConfigurationError, InvalidPlacementError
from pairleroy.engine.models import BoardConfig
from pairleroy.engine.rng import RandomSource, Xorshift32, random_seed

logger = logging.getLogger(__name__)


class BoardSession:
    """One board under construction."""

    def __init__(
        self,
        config: BoardConfig,
        app_settings: Settings | None = None,
        rng: RandomSource | None = None,
    ) -> None:
        self.config = config
        self.settings = app_settings or default_settings
        self.grid = build_grid(config.radius)
        self.junctions: list[Junction] = compute_junctions(
            self.grid.tiles,
            self.settings.tile_size,
            precision=self.settings.junction_precision,
        )
        self.board = Board.empty_board(self.grid)
        if rng is None:
            rng = Xorshift32(config.seed if config.seed is not None else random_seed())
        self.rng = rng
        self.palette: list[PaletteEntry] = []
        self.auto_filler = AutoFiller(
            board=self.board,
            draw_palette=self.regenerate_palette,
            max_attempts=self.settings.autofill_max_attempts,
        )
        self.regenerate_palette()

    # ── Configuration ──

    def reconfigure(self, config: BoardConfig) -> None:
        """Apply new percentages/palette colors to the same board.

        Placements are kept; only the palette is redrawn. A different radius
        needs a new session.
        """
        if config.radius != self.config.radius:
            raise ConfigurationError(
                f"Cannot change radius from {self.config.radius} to {config.radius} "
                "on an existing board; start a new session"
            )
        self.config = config
        self.regenerate_palette()

    # ── Palette ──

    def draw_combo(self) -> MonoCombo | BiCombo | TriCombo:
        return sample_combo(self.config.types_pct, self.config.color_pct, self.rng)

    def regenerate_palette(self) -> list[PaletteEntry]:
        self.palette = create_palette(
            self.config.types_pct,
            self.config.color_pct,
            self.rng,
            size=self.settings.palette_size,
        )
        return self.palette

    def rotate_palette_entry(self, palette_index: int) -> int:
        entry = self.palette[palette_index]
        entry.rotation_step = next_rotation_step(entry.combo, entry.rotation_step)
        return entry.rotation_step

    def check_palette_placement(self, palette_index: int, tile_index: int) -> str | None:
        """Rejection reason for placing a palette entry on a tile, or None."""
        entry = self.palette[palette_index]
        edges = oriented_edges(entry.combo, entry.rotation_step)
        return validate_placement(self.board, tile_index, edges)

    # ── Placement ──

    def try_place(
        self,
        tile_index: int,
        combo: MonoCombo | BiCombo | TriCombo,
        rotation_step: int | None = None,
    ) -> Placement | None:
        """Commit ``combo`` if the validator accepts it; None if rejected."""
        step = normalize_rotation_step(combo, rotation_step or 0)
        try:
            placement = commit_placement(self.board, tile_index, combo, step)
        except InvalidPlacementError as e:
            logger.debug(f"Placement rejected on tile {tile_index}: {e.message}")
            return None
        logger.debug(f"Placed {combo.type.name} {combo.colors} on tile {tile_index} step={step}")
        return placement

    def place_from_palette(self, palette_index: int, tile_index: int) -> Placement | None:
        """Place a palette entry; on success its slot is refilled with a fresh draw."""
        entry = self.palette[palette_index]
        placement = self.try_place(tile_index, entry.combo, entry.rotation_step)
        if placement is None:
            return None
        replacement = self.draw_combo()
        self.palette[palette_index] = PaletteEntry(combo=replacement)
        return placement

    def remove(self, tile_index: int) -> Placement | None:
        removed = remove_placement(self.board, tile_index)
        if removed is not None:
            logger.debug(f"Removed tile {tile_index}")
        return removed

    def clear(self) -> None:
        clear_board(self.board)
        self.auto_filler.reset()
        logger.info("Board cleared")

    # ── Auto-fill ──

    def step_auto_fill(self) -> AutoFillStatus:
        return self.auto_filler.step()

    def run_auto_fill(self, max_steps: int | None = None) -> AutoFillStatus:
        return self.auto_filler.run(max_steps)

    # ── Generation ──

    def generate_layout(self, strategy: str | None = None) -> list[LayoutEntry]:
        """Full-board combo layout drawn from this session's stream."""
        return generate_layout(
            self.config,
            grid=self.grid,
            rng=self.rng,
            strategy=strategy,
            app_settings=self.settings,
        )

    # ── Derived state ──

    def ready_junctions(self) -> list[Junction]:
        return ready_junctions(self.board, self.junctions)

    def dominant_color(self, junction: Junction) -> int | None:
        return dominant_color_for_junction(self.board, junction)

    def edge_conflicts(self) -> list[tuple[int, int, int]]:
        return find_edge_conflicts(self.board)
