"""Turn percentage or weight vectors into integer counts with an exact total.

Both functions are largest-remainder (Hamilton) apportionments. Ties between
equal fractional parts go to the lower index.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from pairleroy.engine.errors import CapacityExceededError, ConfigurationError


def apportion_largest_remainder(total: int, percentages: Sequence[float]) -> list[int]:
    """Split ``total`` proportionally to ``percentages``; the result sums to ``total``."""
    weight_sum = sum(percentages)
    if weight_sum <= 0:
        raise ConfigurationError(
            f"Percentages must have a positive total, got {list(percentages)}"
        )
    raw = [(p / weight_sum) * total for p in percentages]
    base = [math.floor(x) for x in raw]
    remaining = total - sum(base)
    by_fraction = sorted(range(len(raw)), key=lambda i: raw[i] - base[i], reverse=True)
    for k in range(remaining):
        base[by_fraction[k]] += 1
    return base


def apportion_with_caps(
    total: int,
    weights: Sequence[float],
    caps: Sequence[int],
) -> list[int]:
    """Largest-remainder apportionment where entry ``i`` never exceeds ``caps[i]``.

    Units the remainder pass cannot place are pushed into any entry with spare
    capacity, lowest index first.

    Raises:
        CapacityExceededError: if ``sum(caps) < total``.
    """
    n = len(weights)
    if len(caps) != n:
        raise ConfigurationError(f"Expected {n} caps, got {len(caps)}")
    if sum(caps) < total:
        raise CapacityExceededError(
            f"Cannot fit {total} units under caps {list(caps)}", total=total, caps=list(caps)
        )

    weight_sum = sum(weights) or 1
    raw = [total * (w / weight_sum) for w in weights]
    base = [0] * n
    remaining = total
    for i in range(n):
        base[i] = min(math.floor(raw[i]), caps[i])
        remaining -= base[i]

    by_fraction = sorted(range(n), key=lambda i: raw[i] - math.floor(raw[i]), reverse=True)
    for i in by_fraction:
        if remaining <= 0:
            break
        if base[i] < caps[i]:
            base[i] += 1
            remaining -= 1

    for i in range(n):
        if remaining <= 0:
            break
        take = min(caps[i] - base[i], remaining)
        base[i] += take
        remaining -= take

    if remaining != 0:
        raise CapacityExceededError(
            f"Apportionment left {remaining} of {total} units unplaced under caps {list(caps)}",
            total=total,
            caps=list(caps),
        )
    return base
