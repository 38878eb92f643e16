"""Percentages -> exact quotas -> one oriented combo per tile."""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict

from pairleroy.config import Settings, settings as default_settings
from pairleroy.core.apportion import apportion_largest_remainder
from pairleroy.core.combos import (
    assign_combos_backtracking,
    synthesize_combo_set,
    tile_types_from_quota,
)
from pairleroy.core.edges import oriented_edges, rotation_steps
from pairleroy.core.topology import HexGrid, build_grid
from pairleroy.core.types import (
    UNITS_PER_TILE,
    BiCombo,
    Combo,
    MonoCombo,
    OrientedEdges,
    TileType,
    TriCombo,
)
from pairleroy.engine.errors import ConfigurationError
from pairleroy.engine.models import BoardConfig
from pairleroy.engine.rng import RandomSource, Xorshift32, random_seed

logger = logging.getLogger(__name__)


class SynthesisStrategy(str, Enum):
    CASCADE = "cascade"
    BACKTRACK = "backtrack"


class Quotas(BaseModel):
    """Exact integer targets derived from a config's percentages."""

    model_config = ConfigDict(frozen=True)

    type_counts: tuple[int, int, int]  # mono, bi, tri
    color_units: tuple[int, ...]

    @property
    def tile_count(self) -> int:
        return sum(self.type_counts)

    def tile_types(self) -> list[TileType]:
        return tile_types_from_quota(self.type_counts)


class LayoutEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    tile_index: int
    combo: Combo
    rotation_step: int
    edges: OrientedEdges


def compute_quotas(config: BoardConfig, tile_count: int) -> Quotas:
    type_counts = apportion_largest_remainder(tile_count, config.types_pct)
    color_units = apportion_largest_remainder(UNITS_PER_TILE * tile_count, config.color_pct)
    return Quotas(type_counts=tuple(type_counts), color_units=tuple(color_units))


def parse_strategy(value: str | SynthesisStrategy) -> SynthesisStrategy:
    try:
        return SynthesisStrategy(value)
    except ValueError:
        choices = ", ".join(s.value for s in SynthesisStrategy)
        raise ConfigurationError(f"Unknown synthesis strategy {value!r} (expected {choices})") from None


def synthesize(
    quotas: Quotas,
    rng: RandomSource,
    strategy: SynthesisStrategy = SynthesisStrategy.CASCADE,
    app_settings: Settings | None = None,
) -> list[MonoCombo | BiCombo | TriCombo]:
    """Combos parallel to ``quotas.tile_types()`` using the chosen strategy."""
    app_settings = app_settings or default_settings
    tile_types = quotas.tile_types()
    if strategy == SynthesisStrategy.BACKTRACK:
        return assign_combos_backtracking(
            tile_types,
            quotas.color_units,
            rng,
            max_backtracks=app_settings.max_backtracks,
        )
    return synthesize_combo_set(
        tile_types,
        quotas.color_units,
        rng,
        reshuffle_attempts=app_settings.reshuffle_attempts,
    )


def generate_layout(
    config: BoardConfig,
    grid: HexGrid | None = None,
    rng: RandomSource | None = None,
    strategy: SynthesisStrategy | str | None = None,
    app_settings: Settings | None = None,
) -> list[LayoutEntry]:
    """Materialize a full board: one combo and rotation per tile, in tile order.

    After synthesis, each non-mono tile draws its rotation step from ``rng``
    in tile order.
    """
    app_settings = app_settings or default_settings
    if grid is None:
        grid = build_grid(config.radius)
    if rng is None:
        rng = Xorshift32(config.seed if config.seed is not None else random_seed())
    strategy = parse_strategy(strategy or app_settings.synthesis_strategy)

    quotas = compute_quotas(config, len(grid.tiles))
    logger.info(
        f"Generating radius-{grid.radius} layout: types={list(quotas.type_counts)} "
        f"units={list(quotas.color_units)} strategy={strategy.value}"
    )
    combos = synthesize(quotas, rng, strategy, app_settings)

    layout: list[LayoutEntry] = []
    for tile_index, combo in enumerate(combos):
        steps = rotation_steps(combo)
        step = steps[0] if len(steps) == 1 else steps[int(rng.next() * len(steps))]
        layout.append(LayoutEntry(
            tile_index=tile_index,
            combo=combo,
            rotation_step=step,
            edges=oriented_edges(combo, step),
        ))
    return layout
