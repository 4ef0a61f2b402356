"""Top-N selection over scored candidates."""

from __future__ import annotations

from typing import Sequence, TypeVar


T = TypeVar("T")


def select_top(candidates: Sequence[tuple[T, float]], n: int) -> list[tuple[T, float]]:
    """Return the `n` highest-scoring `(entity, score)` pairs, best first.

    The sort is stable: ties keep their incoming order. `n` larger than the
    candidate count returns everything; `n == 0` returns an empty list.
    """
    n = int(n)
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    if n == 0:
        return []
    ranked = sorted(candidates, key=lambda c: float(c[1]), reverse=True)
    return ranked[:n]
