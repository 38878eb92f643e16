"""Tests for the seeded xorshift32 stream."""

from __future__ import annotations

import pytest

from pairleroy.engine.errors import ConfigurationError
from pairleroy.engine.rng import RandomSource, Xorshift32, random_seed, seeded_shuffle


class TestXorshift32:
    def test_first_value_from_seed_one(self) -> None:
        rng = Xorshift32(1)
        value = rng.next()
        assert rng.state == 270369
        assert value == 270369 / 2**32
        assert rng.calls == 1

    def test_values_in_unit_interval(self) -> None:
        rng = Xorshift32(987654321)
        for _ in range(1000):
            value = rng.next()
            assert 0 <= value < 1

    def test_same_seed_same_stream(self) -> None:
        a = Xorshift32(42)
        b = Xorshift32(42)
        assert [a.next() for _ in range(50)] == [b.next() for _ in range(50)]

    def test_different_seeds_diverge(self) -> None:
        a = Xorshift32(42)
        b = Xorshift32(43)
        assert [a.next() for _ in range(5)] != [b.next() for _ in range(5)]

    def test_zero_seed_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            Xorshift32(0)

    def test_seed_masked_to_32_bits(self) -> None:
        with pytest.raises(ConfigurationError):
            Xorshift32(2**32)
        assert Xorshift32(2**32 + 5).seed == 5

    def test_satisfies_protocol(self) -> None:
        assert isinstance(Xorshift32(1), RandomSource)


def test_random_seed_is_nonzero_32_bit():
    for _ in range(20):
        seed = random_seed()
        assert 0 < seed < 2**32


def test_seeded_shuffle_is_permutation_and_deterministic():
    items = list(range(20))
    first = seeded_shuffle(list(items), Xorshift32(5))
    second = seeded_shuffle(list(items), Xorshift32(5))
    assert sorted(first) == items
    assert first == second


def test_seeded_shuffle_draws_once_per_position():
    rng = Xorshift32(5)
    seeded_shuffle(list(range(10)), rng)
    assert rng.calls == 9

    rng = Xorshift32(5)
    seeded_shuffle([], rng)
    seeded_shuffle(["only"], rng)
    assert rng.calls == 0
