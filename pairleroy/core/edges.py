"""Expand a combo into per-edge colors and rotate it.

Bi and tri patterns repeat every two edge positions, so rotations move in
steps of 120 degrees: rotation step ``k`` shifts the pattern by ``2 * k``.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from pairleroy.core.types import (
    EDGE_COUNT,
    BiCombo,
    MonoCombo,
    OrientedEdges,
    TileType,
    TriCombo,
)

MONO_STEPS: tuple[int, ...] = (0,)
MULTI_STEPS: tuple[int, ...] = (0, 1, 2)


def combo_to_edges(combo: MonoCombo | BiCombo | TriCombo) -> OrientedEdges:
    """Unrotated edge colors: mono fills all six, bi is 4+2, tri is 2+2+2."""
    if combo.type == TileType.MONO:
        return (combo.color,) * EDGE_COUNT
    if combo.type == TileType.BI:
        maj, mn = combo.major, combo.minor
        return (maj, mn, mn, maj, maj, maj)
    a, b, c = combo.colors
    return (a, b, b, c, c, a)


def rotate_edges(edges: Sequence[int], steps: int) -> OrientedEdges:
    """Cyclic left shift by ``steps`` edge positions."""
    s = steps % EDGE_COUNT
    edges = tuple(edges)
    return edges[s:] + edges[:s]


def rotation_steps(combo: MonoCombo | BiCombo | TriCombo) -> tuple[int, ...]:
    return MONO_STEPS if combo.type == TileType.MONO else MULTI_STEPS


def normalize_rotation_step(combo: MonoCombo | BiCombo | TriCombo, raw_step: int | float | None) -> int:
    """Coerce any step value into one of the combo's valid rotation steps.

    Even values whose half is valid are read as edge-position offsets.
    """
    steps = rotation_steps(combo)
    if raw_step in steps:
        return int(raw_step)
    if isinstance(raw_step, (int, float)) and raw_step % 2 == 0 and raw_step / 2 in steps:
        return int(raw_step / 2)
    count = len(steps)
    idx = round(raw_step) if isinstance(raw_step, (int, float)) and math.isfinite(raw_step) else 0
    return steps[idx % count]


def next_rotation_step(combo: MonoCombo | BiCombo | TriCombo, current_step: int) -> int:
    steps = rotation_steps(combo)
    current = normalize_rotation_step(combo, current_step)
    return steps[(steps.index(current) + 1) % len(steps)]


def oriented_edges(combo: MonoCombo | BiCombo | TriCombo, step: int) -> OrientedEdges:
    """Edge colors of ``combo`` placed with rotation step ``step``."""
    base = combo_to_edges(combo)
    if combo.type == TileType.MONO:
        return base
    steps = rotation_steps(combo)
    normalized = normalize_rotation_step(combo, step)
    return rotate_edges(base, steps.index(normalized) * 2)
