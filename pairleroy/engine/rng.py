"""Seeded pseudo-random stream shared by every randomized step of the core.

The stream is a plain xorshift32 generator. Callers that need reproducible
boards hand the same seed to :class:`Xorshift32`; the number and order of
``next()`` calls made by the core is part of its contract, so ``calls`` can be
inspected in tests to pin it down.
"""

from __future__ import annotations

import secrets
from typing import Protocol, runtime_checkable

from pairleroy.engine.errors import ConfigurationError

_MASK_32 = 0xFFFFFFFF
_SCALE = 0x100000000


@runtime_checkable
class RandomSource(Protocol):
    """Anything that yields floats in [0, 1)."""

    def next(self) -> float:
        ...


class Xorshift32:
    """xorshift32 stream (shifts 13, 17, 5) over a 32-bit state."""

    def __init__(self, seed: int) -> None:
        state = seed & _MASK_32
        if state == 0:
            raise ConfigurationError("RNG seed must be nonzero modulo 2**32")
        self.seed = state
        self._state = state
        self.calls = 0

    def next(self) -> float:
        x = self._state
        x ^= (x << 13) & _MASK_32
        x ^= x >> 17
        x ^= (x << 5) & _MASK_32
        self._state = x
        self.calls += 1
        return x / _SCALE

    @property
    def state(self) -> int:
        return self._state

    def __repr__(self) -> str:
        return f"Xorshift32(seed={self.seed}, calls={self.calls})"


def random_seed() -> int:
    """Draw a nonzero 32-bit seed from the OS entropy pool."""
    seed = 0
    while seed == 0:
        seed = secrets.randbits(32)
    return seed


def seeded_shuffle(items: list, rng: RandomSource) -> list:
    """Fisher-Yates shuffle in place, one draw per position from the end."""
    for i in range(len(items) - 1, 0, -1):
        j = int(rng.next() * (i + 1))
        items[i], items[j] = items[j], items[i]
    return items
