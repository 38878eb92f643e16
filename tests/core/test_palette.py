"""Tests for weighted palette draws."""

from __future__ import annotations

from pairleroy.config import settings
from pairleroy.core.palette import create_palette, pick_weighted, sample_combo
from pairleroy.core.types import BiCombo, MonoCombo, TileType, TriCombo
from pairleroy.engine.rng import Xorshift32


def test_pick_weighted_no_positive_weight_draws_nothing():
    rng = Xorshift32(3)
    assert pick_weighted([0, 0, 0], rng) == 0
    assert rng.calls == 0


def test_pick_weighted_single_option():
    rng = Xorshift32(3)
    assert all(pick_weighted([0, 5, 0], rng) == 1 for _ in range(20))


def test_pick_weighted_covers_all_positive():
    rng = Xorshift32(17)
    seen = {pick_weighted([1, 0, 1, 1], rng) for _ in range(200)}
    assert seen == {0, 2, 3}


def test_sample_combo_follows_type_weights():
    rng = Xorshift32(21)
    for _ in range(30):
        assert isinstance(sample_combo([100, 0, 0], [25, 25, 25, 25], rng), MonoCombo)
        assert isinstance(sample_combo([0, 100, 0], [25, 25, 25, 25], rng), BiCombo)
        assert isinstance(sample_combo([0, 0, 100], [25, 25, 25, 25], rng), TriCombo)


def test_single_color_still_gives_distinct_colors():
    rng = Xorshift32(8)
    for _ in range(30):
        bi = sample_combo([0, 100, 0], [100, 0, 0, 0], rng)
        assert bi.major == 0 and bi.minor != 0

        tri = sample_combo([0, 0, 100], [100, 0, 0, 0], rng)
        assert tri.first == 0
        assert len(set(tri.colors)) == 3


def test_create_palette():
    palette = create_palette([40, 40, 20], [25, 25, 25, 25], Xorshift32(5))
    assert len(palette) == settings.palette_size
    assert all(entry.rotation_step == 0 for entry in palette)
    assert all(entry.combo.type in TileType for entry in palette)


def test_create_palette_is_deterministic():
    a = create_palette([40, 40, 20], [25, 25, 25, 25], Xorshift32(5), size=6)
    b = create_palette([40, 40, 20], [25, 25, 25, 25], Xorshift32(5), size=6)
    assert a == b
