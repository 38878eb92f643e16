"""Random combo draws for the interactive palette.

Unlike the generation pipeline, palette draws only follow the percentages in
expectation: each draw picks a tile type and then its colors independently,
weighted by the configured percentages.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel

from pairleroy.config import settings
from pairleroy.core.edges import rotation_steps
from pairleroy.core.types import BiCombo, Combo, MonoCombo, TileType, TriCombo
from pairleroy.engine.rng import RandomSource


class PaletteEntry(BaseModel):
    """A combo offered to the player together with its current rotation."""

    combo: Combo
    rotation_step: int = 0


def pick_weighted(weights: Sequence[float], rng: RandomSource) -> int:
    """Index drawn proportionally to the positive weights.

    Returns 0 without drawing when no weight is positive.
    """
    positive = [(i, w) for i, w in enumerate(weights) if w > 0]
    if not positive:
        return 0
    r = rng.next() * sum(w for _i, w in positive)
    for idx, weight in positive:
        r -= weight
        if r <= 0:
            return idx
    return positive[-1][0]


def _pick_color(
    color_pct: Sequence[float],
    rng: RandomSource,
    exclude: Sequence[int] = (),
    allow_fallback: bool = True,
) -> int:
    weights = [0 if i in exclude else p for i, p in enumerate(color_pct)]
    if not any(w > 0 for w in weights):
        if allow_fallback:
            weights = list(color_pct)
        else:
            pool = [i for i in range(len(color_pct)) if i not in exclude]
            if not pool:
                return 0
            return pool[int(rng.next() * len(pool))]
    return pick_weighted(weights, rng)


def sample_combo(
    types_pct: Sequence[float],
    color_pct: Sequence[float],
    rng: RandomSource,
) -> MonoCombo | BiCombo | TriCombo:
    """Draw one combo: type by ``types_pct``, then distinct colors by ``color_pct``.

    When the weighted colors run out, remaining picks fall back to a uniform
    choice among the colors not used yet, so bi and tri combos always carry
    distinct colors.
    """
    tile_type = TileType(pick_weighted(types_pct, rng) + 1)

    if tile_type == TileType.MONO:
        return MonoCombo(color=_pick_color(color_pct, rng))

    if tile_type == TileType.BI:
        major = _pick_color(color_pct, rng)
        minor = _pick_color(color_pct, rng, exclude=[major], allow_fallback=False)
        return BiCombo(major=major, minor=minor)

    colors: list[int] = []
    for _ in range(3):
        colors.append(_pick_color(color_pct, rng, exclude=colors, allow_fallback=False))
    return TriCombo(first=colors[0], second=colors[1], third=colors[2])


def create_palette(
    types_pct: Sequence[float],
    color_pct: Sequence[float],
    rng: RandomSource,
    size: int | None = None,
) -> list[PaletteEntry]:
    """Draw ``size`` entries, ``settings.palette_size`` by default."""
    if size is None:
        size = settings.palette_size
    entries: list[PaletteEntry] = []
    for _ in range(size):
        combo = sample_combo(types_pct, color_pct, rng)
        entries.append(PaletteEntry(combo=combo, rotation_step=rotation_steps(combo)[0]))
    return entries
