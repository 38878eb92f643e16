"""Hex grid topology: axial tiles, neighbor table, rings and junctions.

Tiles use pointy-top axial coordinates. Direction ``d`` in ``HEX_DIRECTIONS``
is the neighbor sharing edge ``d``; the tile on the other side sees the same
edge as ``(d + 3) % 6``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from functools import lru_cache

from pairleroy.core.types import Junction, Tile
from pairleroy.engine.errors import ConfigurationError, TopologyError

# Axial neighbor offsets (dq, dr), one per edge direction.
HEX_DIRECTIONS: list[tuple[int, int]] = [
    (-1, 1), (-1, 0), (0, -1), (1, -1), (1, 0), (0, 1),
]

NO_NEIGHBOR = -1

ALL_VERTICES: tuple[int, ...] = (0, 1, 2, 3, 4, 5)
ALTERNATING_VERTICES: tuple[int, ...] = (0, 2, 4)

SQRT3 = math.sqrt(3)


def opposite_direction(direction: int) -> int:
    return (direction + 3) % 6


def tile_count_for_radius(radius: int) -> int:
    return 3 * radius * (radius + 1) + 1


def generate_grid(radius: int) -> list[Tile]:
    """Enumerate every tile with max(|q|, |r|, |s|) <= radius, q outer, r inner."""
    if radius < 0:
        raise ConfigurationError(f"Board radius must be non-negative, got {radius}")
    tiles: list[Tile] = []
    for q in range(-radius, radius + 1):
        r1 = max(-radius, -q - radius)
        r2 = min(radius, -q + radius)
        for r in range(r1, r2 + 1):
            tiles.append(Tile.axial(q, r))
    return tiles


def build_index_map(tiles: list[Tile]) -> dict[tuple[int, int], int]:
    index_map: dict[tuple[int, int], int] = {}
    for idx, tile in enumerate(tiles):
        if tile.key in index_map:
            raise TopologyError(
                f"Duplicate coordinate {tile.key} at indices {index_map[tile.key]} and {idx}"
            )
        index_map[tile.key] = idx
    return index_map


def build_neighbors(tiles: list[Tile]) -> list[tuple[int, ...]]:
    """Map each tile index to its 6 neighbor indices (``NO_NEIGHBOR`` off-board)."""
    index_map = build_index_map(tiles)
    return [
        tuple(index_map.get((t.q + dq, t.r + dr), NO_NEIGHBOR) for dq, dr in HEX_DIRECTIONS)
        for t in tiles
    ]


# ── Geometry ──

def axial_to_pixel(q: int, r: int, size: float) -> tuple[float, float]:
    return size * SQRT3 * (q + r / 2), size * 1.5 * r


def hex_vertices(q: int, r: int, size: float) -> list[tuple[float, float]]:
    """The 6 corner points of hex (q, r), at angles 60*i - 30 degrees."""
    cx, cy = axial_to_pixel(q, r, size)
    verts: list[tuple[float, float]] = []
    for i in range(6):
        angle = math.radians(60 * i - 30)
        verts.append((cx + size * math.cos(angle), cy + size * math.sin(angle)))
    return verts


def hex_distance(tile: Tile) -> int:
    return max(abs(tile.q), abs(tile.r), abs(tile.s))


def hex_distance_between(a: Tile, b: Tile) -> int:
    return max(abs(a.q - b.q), abs(a.r - b.r), abs(a.s - b.s))


def tile_angle(tile: Tile) -> float:
    x, y = axial_to_pixel(tile.q, tile.r, 1)
    return math.atan2(y, x)


def classify_rings(tiles: list[Tile]) -> list[list[int]]:
    """Bucket tile indices by distance from the origin, each ring sorted by angle."""
    rings: list[list[int]] = []
    for idx, tile in enumerate(tiles):
        dist = hex_distance(tile)
        while len(rings) <= dist:
            rings.append([])
        rings[dist].append(idx)
    angles = [tile_angle(t) for t in tiles]
    for ring in rings:
        ring.sort(key=lambda i: angles[i])
    return rings


def compute_junctions(
    tiles: list[Tile],
    size: float,
    vertices: tuple[int, ...] = ALL_VERTICES,
    precision: int = 1000,
) -> list[Junction]:
    """Group tile corners by rounded position and keep those shared by 3 tiles.

    ``vertices`` selects which corners of each hex are considered;
    ``ALTERNATING_VERTICES`` restricts to the lattice of every other corner.
    """
    groups: dict[tuple[int, int], dict] = {}
    for idx, tile in enumerate(tiles):
        verts = hex_vertices(tile.q, tile.r, size)
        for vi in vertices:
            vx, vy = verts[vi]
            key = (round(vx * precision), round(vy * precision))
            group = groups.get(key)
            if group is None:
                groups[key] = {"x": vx, "y": vy, "entries": [(idx, vi)]}
            else:
                group["entries"].append((idx, vi))

    junctions: list[Junction] = []
    for key, group in groups.items():
        unique_tiles: list[int] = []
        for tile_idx, _vi in group["entries"]:
            if tile_idx not in unique_tiles:
                unique_tiles.append(tile_idx)
        if len(unique_tiles) >= 3:
            junctions.append(Junction(
                key=key,
                x=group["x"],
                y=group["y"],
                tiles=tuple(unique_tiles[:3]),
                entries=tuple(group["entries"]),
            ))
    return junctions


# ── Grid bundle ──

@dataclass(frozen=True)
class HexGrid:
    """Static topology for one board size, shared by every board of that size."""

    radius: int
    tiles: list[Tile]
    neighbors: list[tuple[int, ...]]
    rings: list[list[int]]
    index_map: dict[tuple[int, int], int] = field(repr=False)

    def __len__(self) -> int:
        return len(self.tiles)

    def index_of(self, q: int, r: int) -> int:
        """Tile index at (q, r), or ``NO_NEIGHBOR`` if off-board."""
        return self.index_map.get((q, r), NO_NEIGHBOR)


@lru_cache(maxsize=16)
def build_grid(radius: int) -> HexGrid:
    tiles = generate_grid(radius)
    return HexGrid(
        radius=radius,
        tiles=tiles,
        neighbors=build_neighbors(tiles),
        rings=classify_rings(tiles),
        index_map=build_index_map(tiles),
    )
