"""Tests for placement validation, commit/remove and junction state."""

from __future__ import annotations

import pytest

from pairleroy.core.board import (
    Board,
    can_place,
    clear_board,
    commit_placement,
    dominant_color_for_junction,
    find_edge_conflicts,
    is_junction_ready,
    neighbor_placement_count,
    ready_junctions,
    remove_placement,
    validate_placement,
)
from pairleroy.core.edges import oriented_edges
from pairleroy.core.topology import build_grid, compute_junctions
from pairleroy.core.types import BiCombo, MonoCombo, Placement
from pairleroy.engine.errors import InvalidPlacementError

CENTER = 3
WEST = 0  # (-1, 0), direction 1 from the center


def _force(board: Board, tile_index: int, color: int) -> None:
    """Put a mono tile on the board without validation."""
    edges = (color,) * 6
    board.placements[tile_index] = Placement(
        tile_index=tile_index, combo=MonoCombo(color=color), rotation_step=0, edges=edges,
    )
    board.edges[tile_index] = edges
    board.empty.discard(tile_index)
    board.placed_count += 1


class TestBootstrap:
    def test_empty_board_accepts_any_tile(self, board_r1: Board) -> None:
        for idx in range(7):
            assert validate_placement(board_r1, idx, (0, 1, 1, 0, 0, 0)) is None

    def test_radius_zero_single_tile(self) -> None:
        board = Board.empty_board(build_grid(0))
        commit_placement(board, 0, BiCombo(major=1, minor=2), 1)
        assert board.is_full
        assert board.placed_count == 1


class TestValidatePlacement:
    def test_occupied_rejected(self, board_r1: Board) -> None:
        commit_placement(board_r1, CENTER, MonoCombo(color=0))
        err = validate_placement(board_r1, CENTER, (0,) * 6)
        assert err is not None
        assert "already occupied" in err

    def test_matching_neighbor_accepted(self, board_r1: Board) -> None:
        commit_placement(board_r1, CENTER, MonoCombo(color=0))
        assert can_place(board_r1, WEST, (0,) * 6)

    def test_mismatched_neighbor_rejected(self, board_r1: Board) -> None:
        commit_placement(board_r1, CENTER, MonoCombo(color=0))
        err = validate_placement(board_r1, WEST, (1,) * 6)
        assert err is not None
        assert "does not match" in err

    def test_only_shared_edge_matters(self, board_r1: Board) -> None:
        # Center edge 1 is the minor color, facing WEST's edge 4
        commit_placement(board_r1, CENTER, BiCombo(major=0, minor=1), 0)
        assert can_place(board_r1, WEST, (2, 2, 2, 2, 1, 2))
        assert not can_place(board_r1, WEST, (1, 1, 1, 1, 0, 1))

    def test_detached_tile_rejected(self) -> None:
        grid = build_grid(2)
        board = Board.empty_board(grid)
        commit_placement(board, grid.index_of(0, 0), MonoCombo(color=0))
        err = validate_placement(board, grid.index_of(2, 0), (0,) * 6)
        assert err is not None
        assert "adjacent" in err

    def test_off_board_and_bad_length(self, board_r1: Board) -> None:
        assert "not on the board" in validate_placement(board_r1, 7, (0,) * 6)
        assert "Expected 6" in validate_placement(board_r1, 0, (0,) * 5)

    def test_validation_does_not_mutate(self, board_r1: Board) -> None:
        commit_placement(board_r1, CENTER, MonoCombo(color=0))
        before = (list(board_r1.edges), set(board_r1.empty), board_r1.placed_count)
        validate_placement(board_r1, WEST, (1,) * 6)
        validate_placement(board_r1, WEST, (0,) * 6)
        assert (list(board_r1.edges), set(board_r1.empty), board_r1.placed_count) == before


class TestCommitAndRemove:
    def test_commit_records_oriented_edges(self, board_r1: Board) -> None:
        combo = BiCombo(major=2, minor=3)
        placement = commit_placement(board_r1, CENTER, combo, 2)
        assert placement.edges == oriented_edges(combo, 2)
        assert board_r1.edges[CENTER] == placement.edges
        assert CENTER not in board_r1.empty

    def test_commit_normalizes_step(self, board_r1: Board) -> None:
        placement = commit_placement(board_r1, CENTER, BiCombo(major=2, minor=3), 4)
        assert placement.rotation_step == 2

    def test_invalid_commit_raises(self, board_r1: Board) -> None:
        commit_placement(board_r1, CENTER, MonoCombo(color=0))
        with pytest.raises(InvalidPlacementError) as exc:
            commit_placement(board_r1, WEST, MonoCombo(color=1))
        assert exc.value.tile_index == WEST
        assert board_r1.placed_count == 1

    def test_remove_and_clear(self, board_r1: Board) -> None:
        commit_placement(board_r1, CENTER, MonoCombo(color=0))
        commit_placement(board_r1, WEST, MonoCombo(color=0))
        assert neighbor_placement_count(board_r1, CENTER) == 1

        removed = remove_placement(board_r1, WEST)
        assert removed is not None and removed.tile_index == WEST
        assert remove_placement(board_r1, WEST) is None
        assert board_r1.placed_count == 1
        assert WEST in board_r1.empty

        clear_board(board_r1)
        assert board_r1.placed_count == 0
        assert board_r1.empty == set(range(7))
        assert all(e is None for e in board_r1.edges)

    @pytest.mark.parametrize("tile_index", [-1, -7, 7, 100])
    def test_remove_off_board_is_ignored(self, board_r1: Board, tile_index: int) -> None:
        for idx in range(7):
            _force(board_r1, idx, 0)
        assert board_r1.is_full

        assert remove_placement(board_r1, tile_index) is None
        assert board_r1.placed_count == 7
        assert board_r1.empty == set()
        assert board_r1.is_full
        assert all(p is not None for p in board_r1.placements)


class TestEdgeConsistency:
    def test_committed_board_has_no_conflicts(self, board_r1: Board) -> None:
        commit_placement(board_r1, CENTER, MonoCombo(color=1))
        for idx in board_r1.grid.rings[1]:
            commit_placement(board_r1, idx, MonoCombo(color=1))
        assert board_r1.is_full
        assert find_edge_conflicts(board_r1) == []

    def test_forced_conflict_detected(self, board_r1: Board) -> None:
        _force(board_r1, CENTER, 0)
        _force(board_r1, WEST, 1)
        assert find_edge_conflicts(board_r1) == [(WEST, 4, CENTER)]


class TestJunctions:
    def test_ready_once_three_tiles_placed(self, board_r1: Board) -> None:
        junctions = compute_junctions(board_r1.grid.tiles, 1.0)
        junction = junctions[0]
        a, b, c = junction.tiles
        _force(board_r1, a, 0)
        _force(board_r1, b, 0)
        assert not is_junction_ready(board_r1, junction)
        _force(board_r1, c, 0)
        assert is_junction_ready(board_r1, junction)
        assert junction in ready_junctions(board_r1, junctions)

    def test_full_board_all_ready(self, board_r1: Board) -> None:
        for idx in range(7):
            _force(board_r1, idx, 2)
        junctions = compute_junctions(board_r1.grid.tiles, 1.0)
        assert ready_junctions(board_r1, junctions) == junctions

    def test_dominant_color(self, board_r1: Board) -> None:
        junction = compute_junctions(board_r1.grid.tiles, 1.0)[0]
        a, b, c = junction.tiles
        assert dominant_color_for_junction(board_r1, junction) is None
        _force(board_r1, a, 3)
        _force(board_r1, b, 1)
        # Tie keeps the first tile's color
        assert dominant_color_for_junction(board_r1, junction) == 3
        _force(board_r1, c, 1)
        assert dominant_color_for_junction(board_r1, junction) == 1
