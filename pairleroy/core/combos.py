"""Combo synthesis: assign a concrete combo to every tile from integer quotas.

Two strategies solve the same problem:

* :func:`synthesize_combo_set` runs a cascade of capped apportionments
  (mono, then bi-major, then bi-minor / tri units) over a 4-color palette and
  only draws randomness for shuffling. This is the path used to generate
  boards.
* :func:`assign_combos_backtracking` is a depth-first search over weighted
  color draws that works for any palette size.

Both consume a color-unit vector exactly: every tile takes 3 units, split
3 (mono), 2+1 (bi) or 1+1+1 (tri).
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator, Sequence

from pairleroy.core.apportion import apportion_with_caps
from pairleroy.core.types import (
    UNITS_PER_TILE,
    BiCombo,
    MonoCombo,
    TileType,
    TriCombo,
    make_combo,
)
from pairleroy.engine.errors import (
    BacktrackLimitError,
    ConfigurationError,
    InfeasibleQuotaError,
)
from pairleroy.engine.models import PALETTE_SIZE
from pairleroy.engine.rng import RandomSource, seeded_shuffle

logger = logging.getLogger(__name__)

UNIT_PATTERNS: dict[TileType, tuple[int, ...]] = {
    TileType.MONO: (3,),
    TileType.BI: (2, 1),
    TileType.TRI: (1, 1, 1),
}

DEFAULT_RESHUFFLE_ATTEMPTS = 50
DEFAULT_MAX_BACKTRACKS = 5000
DEFAULT_SAMPLE_ROUNDS = 6


def tile_types_from_quota(type_counts: Sequence[int]) -> list[TileType]:
    """Expand (mono, bi, tri) counts into a per-tile type list."""
    mono, bi, tri = type_counts
    return [TileType.MONO] * mono + [TileType.BI] * bi + [TileType.TRI] * tri


def unit_totals(
    combos: Sequence[MonoCombo | BiCombo | TriCombo],
    palette_size: int = PALETTE_SIZE,
) -> list[int]:
    """Per-color unit usage of a combo set."""
    totals = [0] * palette_size
    for combo in combos:
        for color, units in zip(combo.colors, combo.units):
            totals[color] += units
    return totals


def _check_unit_total(tile_types: Sequence[TileType], color_units: Sequence[int]) -> None:
    if any(u < 0 for u in color_units):
        raise ConfigurationError(f"Color units must be non-negative, got {list(color_units)}")
    expected = UNITS_PER_TILE * len(tile_types)
    if sum(color_units) != expected:
        raise ConfigurationError(
            f"Color units total {sum(color_units)} but {len(tile_types)} tiles need {expected}"
        )


def _expand_counts(counts: Sequence[int]) -> list[int]:
    items: list[int] = []
    for color, count in enumerate(counts):
        items.extend([color] * count)
    return items


def _nonzero(counts: Sequence[int]) -> int:
    return sum(1 for v in counts if v > 0)


# ── Cascading apportionment ──

def _spread_tri_units(minor: list[int], tri: list[int]) -> None:
    """Trade minor units for tri units until 3 colors can feed tri tiles.

    Each trade moves one unit of a tri-less color from the minor pool into the
    tri pool and one unit of the most abundant tri color back, so both pool
    totals are preserved.
    """
    for i in range(len(tri)):
        if _nonzero(tri) >= 3:
            return
        if tri[i] != 0 or minor[i] <= 0:
            continue
        donors = [j for j in range(len(tri)) if tri[j] >= 2]
        if not donors:
            return
        j = max(donors, key=lambda c: tri[c])
        minor[i] -= 1
        tri[i] += 1
        tri[j] -= 1
        minor[j] += 1


def _has_self_pair(majors: Sequence[int], minors: Sequence[int]) -> bool:
    return any(maj == mn for maj, mn in zip(majors, minors))


def _repair_self_pairs(majors: list[int], minors: list[int]) -> None:
    """Swap minor colors between bi tiles until no tile pairs a color with itself."""
    for i in range(len(majors)):
        if majors[i] != minors[i]:
            continue
        for j in range(len(minors)):
            if j != i and minors[j] != majors[i] and minors[i] != majors[j]:
                minors[i], minors[j] = minors[j], minors[i]
                break
        else:
            raise InfeasibleQuotaError(
                f"Cannot pair bi major {majors[i]} with a distinct minor color"
            )


def _build_tri_triples(counts: list[int], tri_count: int) -> list[tuple[int, int, int]]:
    """Repeatedly take the three most abundant colors, ties by color order."""
    triples: list[tuple[int, int, int]] = []
    for _ in range(tri_count):
        avail = sorted(
            (c for c in range(len(counts)) if counts[c] > 0),
            key=lambda c: counts[c],
            reverse=True,
        )
        if len(avail) < 3:
            raise InfeasibleQuotaError(
                f"Tri tile needs 3 distinct colors, only {len(avail)} left in {counts}"
            )
        triple = (avail[0], avail[1], avail[2])
        for c in triple:
            counts[c] -= 1
        triples.append(triple)
    return triples


def synthesize_combo_set(
    tile_types: Sequence[TileType],
    color_units: Sequence[int],
    rng: RandomSource,
    reshuffle_attempts: int = DEFAULT_RESHUFFLE_ATTEMPTS,
) -> list[MonoCombo | BiCombo | TriCombo]:
    """Assign one combo per tile so per-color unit usage equals ``color_units``.

    ``tile_types[i]`` fixes the kind of tile ``i``; the returned list is
    parallel to it. Randomness is used only to shuffle color picks and the
    order tiles of each kind receive them, in this order: bi majors, bi
    minors, bi-minor reshuffles, then mono, bi and tri tile positions.

    Raises:
        ConfigurationError: wrong palette size or unit total.
        InfeasibleQuotaError: caps, tri colors or bi pairs cannot be satisfied.
    """
    if len(color_units) != PALETTE_SIZE:
        raise ConfigurationError(
            f"Cascading synthesis needs {PALETTE_SIZE} colors, got {len(color_units)}"
        )
    _check_unit_total(tile_types, color_units)

    n_colors = len(color_units)
    mono_count = sum(1 for t in tile_types if t == TileType.MONO)
    bi_count = sum(1 for t in tile_types if t == TileType.BI)
    tri_count = sum(1 for t in tile_types if t == TileType.TRI)

    remaining = list(color_units)

    # Phase 1: mono tiles take 3 units of one color
    mono_colors = apportion_with_caps(mono_count, remaining, [u // 3 for u in remaining])
    for c in range(n_colors):
        remaining[c] -= 3 * mono_colors[c]

    # Phase 2: bi majors take 2 units
    bi_major = apportion_with_caps(bi_count, remaining, [u // 2 for u in remaining])
    for c in range(n_colors):
        remaining[c] -= 2 * bi_major[c]

    # Phase 3: what is left feeds one minor unit per bi tile and 3 units per tri tile
    if sum(remaining) != bi_count + 3 * tri_count:
        raise InfeasibleQuotaError(
            f"Remaining units {remaining} do not match {bi_count} bi minors + {tri_count} tri tiles"
        )
    bi_minor = apportion_with_caps(bi_count, remaining, remaining)
    tri_units = [v - m for v, m in zip(remaining, bi_minor)]

    if tri_count > 0:
        _spread_tri_units(bi_minor, tri_units)
        if _nonzero(tri_units) < 3:
            raise InfeasibleQuotaError(
                f"Tri tiles need at least 3 colors, tri units are {tri_units}"
            )

    monos = _expand_counts(mono_colors)
    majors = _expand_counts(bi_major)
    minors = _expand_counts(bi_minor)
    seeded_shuffle(majors, rng)
    seeded_shuffle(minors, rng)
    for _ in range(reshuffle_attempts):
        if not _has_self_pair(majors, minors):
            break
        seeded_shuffle(minors, rng)
    if _has_self_pair(majors, minors):
        logger.debug("Reshuffles left self-paired bi tiles; repairing by swap")
        _repair_self_pairs(majors, minors)

    triples = _build_tri_triples(list(tri_units), tri_count)

    positions: dict[TileType, list[int]] = {t: [] for t in TileType}
    for idx, tile_type in enumerate(tile_types):
        positions[tile_type].append(idx)
    for tile_type in (TileType.MONO, TileType.BI, TileType.TRI):
        seeded_shuffle(positions[tile_type], rng)

    combos: list = [None] * len(tile_types)
    for k, idx in enumerate(positions[TileType.MONO]):
        combos[idx] = MonoCombo(color=monos[k])
    for k, idx in enumerate(positions[TileType.BI]):
        combos[idx] = BiCombo(major=majors[k], minor=minors[k])
    for k, idx in enumerate(positions[TileType.TRI]):
        first, second, third = triples[k]
        combos[idx] = TriCombo(first=first, second=second, third=third)

    logger.debug(
        f"Synthesized {mono_count} mono / {bi_count} bi / {tri_count} tri combos "
        f"from units {list(color_units)}"
    )
    return combos


# ── Backtracking search ──

def choose_k_distinct_colors(
    counts: Sequence[int],
    k: int,
    rng: RandomSource,
) -> list[int] | None:
    """Draw ``k`` distinct colors weighted by ``counts``, without replacement."""
    avail = [i for i, c in enumerate(counts) if c > 0]
    if len(avail) < k:
        return None
    chosen: list[int] = []
    local = list(counts)
    for _ in range(k):
        pool = [(i, local[i]) for i in avail if local[i] > 0 and i not in chosen]
        total = sum(w for _i, w in pool)
        if not pool or total == 0:
            return None
        r = rng.next() * total
        pick = pool[0][0]
        for i, w in pool:
            r -= w
            if r <= 0:
                pick = i
                break
        chosen.append(pick)
        local[pick] -= 1
    return chosen


def _canonical(tile_type: TileType, colors: Sequence[int]) -> tuple[int, ...]:
    # Tri units are symmetric; bi keeps major first.
    if tile_type == TileType.TRI:
        return tuple(sorted(colors))
    return tuple(colors)


def assign_combos_backtracking(
    tile_types: Sequence[TileType],
    color_units: Sequence[int],
    rng: RandomSource,
    max_backtracks: int = DEFAULT_MAX_BACKTRACKS,
    sample_rounds: int = DEFAULT_SAMPLE_ROUNDS,
) -> list[MonoCombo | BiCombo | TriCombo]:
    """Depth-first assignment for any palette size.

    Tiles needing more distinct colors go first. Each tile tries a shuffled set
    of weighted color draws, then every other feasible color choice ranked by
    abundance; counts are restored when a branch fails. The search keeps its
    own stack of candidate iterators, so board size is not bounded by the
    interpreter recursion limit.

    Raises:
        BacktrackLimitError: more than ``max_backtracks`` failed nodes.
        InfeasibleQuotaError: the search space is exhausted.
    """
    _check_unit_total(tile_types, color_units)

    n_colors = len(color_units)
    order = sorted(range(len(tile_types)), key=lambda i: int(tile_types[i]), reverse=True)
    counts = list(color_units)
    result: list[tuple[int, ...] | None] = [None] * len(tile_types)
    backtracks = 0

    def candidates_for(tile_type: TileType) -> list[tuple[int, ...]]:
        k = int(tile_type)
        found: dict[tuple[int, ...], None] = {}
        for _ in range(sample_rounds):
            picked = choose_k_distinct_colors(counts, k, rng)
            if picked is None:
                break
            found.setdefault(_canonical(tile_type, picked), None)
        candidates = list(found)
        seeded_shuffle(candidates, rng)

        # Whatever the draws missed follows, most abundant colors first
        ranked = sorted(
            (i for i in range(n_colors) if counts[i] > 0),
            key=lambda i: counts[i],
            reverse=True,
        )
        for colors in itertools.permutations(ranked, k):
            key = _canonical(tile_type, colors)
            if key not in found:
                found[key] = None
                candidates.append(key)
        return candidates

    # frames[pos] holds the untried candidates of the tile at order[pos]
    frames: list[Iterator[tuple[int, ...]]] = []
    pos = 0
    while pos < len(order):
        idx = order[pos]
        tile_type = tile_types[idx]
        pattern = UNIT_PATTERNS[tile_type]
        if len(frames) == pos:
            frames.append(iter(candidates_for(tile_type)))

        previous = result[idx]
        if previous is not None:
            for c, u in zip(previous, pattern):
                counts[c] += u
            result[idx] = None

        for colors in frames[pos]:
            if all(counts[c] >= u for c, u in zip(colors, pattern)):
                for c, u in zip(colors, pattern):
                    counts[c] -= u
                result[idx] = colors
                break

        if result[idx] is not None:
            pos += 1
            continue

        frames.pop()
        backtracks += 1
        if backtracks > max_backtracks:
            raise BacktrackLimitError(
                f"Gave up after {backtracks} backtracks assigning colors {list(color_units)}",
                backtracks=backtracks,
            )
        if pos == 0:
            raise InfeasibleQuotaError(
                f"No color assignment satisfies units {list(color_units)} for these tiles"
            )
        pos -= 1

    logger.debug(f"Backtracking assignment finished after {backtracks} backtracks")
    return [make_combo(tile_types[i], result[i]) for i in range(len(tile_types))]
