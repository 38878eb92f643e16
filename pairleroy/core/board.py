"""Board state, placement validation and commit/remove.

Rules for placing a tile:
1. The tile must be empty
2. Every occupied neighbor must show the same color on the shared edge
3. At least one neighbor must be occupied, unless the board is empty
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from pairleroy.core.edges import normalize_rotation_step, oriented_edges
from pairleroy.core.topology import NO_NEIGHBOR, HexGrid, opposite_direction
from pairleroy.core.types import (
    EDGE_COUNT,
    BiCombo,
    Junction,
    MonoCombo,
    OrientedEdges,
    Placement,
    TriCombo,
)
from pairleroy.engine.errors import InvalidPlacementError


@dataclass
class Board:
    """Mutable occupancy of one grid. Owned by the caller."""

    grid: HexGrid
    placements: list[Placement | None]
    edges: list[OrientedEdges | None]
    empty: set[int]
    placed_count: int = 0

    @classmethod
    def empty_board(cls, grid: HexGrid) -> Board:
        n = len(grid.tiles)
        return cls(
            grid=grid,
            placements=[None] * n,
            edges=[None] * n,
            empty=set(range(n)),
        )

    def has_tile(self, tile_index: int) -> bool:
        return 0 <= tile_index < len(self.placements)

    def is_occupied(self, tile_index: int) -> bool:
        return self.placements[tile_index] is not None

    @property
    def is_full(self) -> bool:
        return not self.empty


def validate_placement(
    board: Board,
    tile_index: int,
    candidate_edges: Sequence[int],
) -> str | None:
    """Validate a placement. Return the rejection reason or None if valid."""
    if not board.has_tile(tile_index):
        return f"Tile {tile_index} is not on the board"
    if len(candidate_edges) != EDGE_COUNT:
        return f"Expected {EDGE_COUNT} edge colors, got {len(candidate_edges)}"
    if board.is_occupied(tile_index):
        return f"Tile {tile_index} is already occupied"

    has_neighbor = False
    for direction, neighbor_idx in enumerate(board.grid.neighbors[tile_index]):
        if neighbor_idx == NO_NEIGHBOR:
            continue
        neighbor_edges = board.edges[neighbor_idx]
        if neighbor_edges is None:
            continue
        has_neighbor = True
        if neighbor_edges[opposite_direction(direction)] != candidate_edges[direction]:
            return (
                f"Edge {direction} of tile {tile_index} does not match "
                f"neighbor {neighbor_idx}"
            )

    # First placement is exempt
    if not has_neighbor and board.placed_count > 0:
        return f"Tile {tile_index} must be adjacent to a placed tile"
    return None


def can_place(board: Board, tile_index: int, candidate_edges: Sequence[int]) -> bool:
    return validate_placement(board, tile_index, candidate_edges) is None


def commit_placement(
    board: Board,
    tile_index: int,
    combo: MonoCombo | BiCombo | TriCombo,
    rotation_step: int = 0,
) -> Placement:
    """Place ``combo`` on ``tile_index``.

    Raises:
        InvalidPlacementError: if the oriented edges are rejected.
    """
    step = normalize_rotation_step(combo, rotation_step)
    edges = oriented_edges(combo, step)
    error = validate_placement(board, tile_index, edges)
    if error is not None:
        raise InvalidPlacementError(error, tile_index=tile_index)

    placement = Placement(tile_index=tile_index, combo=combo, rotation_step=step, edges=edges)
    board.placements[tile_index] = placement
    board.edges[tile_index] = edges
    board.empty.discard(tile_index)
    board.placed_count += 1
    return placement


def remove_placement(board: Board, tile_index: int) -> Placement | None:
    """Return a tile to the empty set. Returns the removed placement, if any.

    Indices off the board are ignored and return None.
    """
    if not board.has_tile(tile_index):
        return None
    placement = board.placements[tile_index]
    board.placements[tile_index] = None
    board.edges[tile_index] = None
    board.empty.add(tile_index)
    if placement is not None:
        board.placed_count = max(0, board.placed_count - 1)
    return placement


def clear_board(board: Board) -> None:
    n = len(board.placements)
    board.placements = [None] * n
    board.edges = [None] * n
    board.empty = set(range(n))
    board.placed_count = 0


def neighbor_placement_count(board: Board, tile_index: int) -> int:
    return sum(
        1 for idx in board.grid.neighbors[tile_index]
        if idx != NO_NEIGHBOR and board.is_occupied(idx)
    )


def find_edge_conflicts(board: Board) -> list[tuple[int, int, int]]:
    """Every (tile, direction, neighbor) whose shared edge colors disagree."""
    conflicts: list[tuple[int, int, int]] = []
    for tile_index, edges in enumerate(board.edges):
        if edges is None:
            continue
        for direction, neighbor_idx in enumerate(board.grid.neighbors[tile_index]):
            if neighbor_idx == NO_NEIGHBOR or neighbor_idx < tile_index:
                continue
            neighbor_edges = board.edges[neighbor_idx]
            if neighbor_edges is None:
                continue
            if edges[direction] != neighbor_edges[opposite_direction(direction)]:
                conflicts.append((tile_index, direction, neighbor_idx))
    return conflicts


# ── Junctions ──

def is_junction_ready(board: Board, junction: Junction) -> bool:
    """A junction is ready once all three of its tiles are placed."""
    contributing = {idx for idx, _vi in junction.entries if board.placements[idx] is not None}
    if len(contributing) >= 3:
        return True
    return sum(1 for idx in junction.tiles if board.placements[idx] is not None) >= 3


def ready_junctions(board: Board, junctions: Sequence[Junction]) -> list[Junction]:
    return [j for j in junctions if is_junction_ready(board, j)]


def dominant_color_for_junction(board: Board, junction: Junction) -> int | None:
    """Most common primary color among the junction's placed tiles (first seen wins ties)."""
    counts: Counter[int] = Counter()
    for idx in junction.tiles:
        placement = board.placements[idx]
        if placement is None:
            continue
        counts[placement.combo.colors[0]] += 1
    if not counts:
        return None
    return max(counts, key=lambda c: counts[c])
