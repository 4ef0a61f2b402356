"""Pairwise similarity metrics over two rating sets.

Both metrics work on the *common pairs* of two rating sets: every pair
(rA, rB) that belongs to two different entities and refers to the same key of
the opposite kind (same movie when comparing users, same rater when comparing
movies). Pairs are enumerated like a nested loop, so repeated ratings count
once per pair.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Callable, Dict, Sequence

import numpy as np

from ..errors import UnsupportedMetricError
from ..store.ratings import Rating


class EntityKind(str, Enum):
    USER = "user"
    ITEM = "item"

    def owner(self, r: Rating) -> int:
        return r.userId if self is EntityKind.USER else r.itemId

    def key(self, r: Rating) -> int:
        """Opposite-kind key two ratings must share to be compared."""
        return r.itemId if self is EntityKind.USER else r.userId


class SimilarityMetric(str, Enum):
    EUCLIDEAN = "EUCLIDEAN"
    PEARSON = "PEARSON"

    @property
    def code(self) -> int:
        return _METRIC_CODES[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: "SimilarityMetric | str") -> "SimilarityMetric":
        """Resolve an identifier such as "PEARSON" (case-insensitive)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise UnsupportedMetricError(value)


_METRIC_CODES: Dict[SimilarityMetric, int] = {
    SimilarityMetric.EUCLIDEAN: 1,
    SimilarityMetric.PEARSON: 2,
}


def common_pairs(
    target: Sequence[Rating],
    candidate: Sequence[Rating],
    kind: EntityKind = EntityKind.USER,
) -> tuple[np.ndarray, np.ndarray]:
    """Return aligned score arrays (target side, candidate side) for all common pairs."""
    by_key: dict[int, list[Rating]] = {}
    for rb in candidate:
        by_key.setdefault(kind.key(rb), []).append(rb)

    a: list[float] = []
    b: list[float] = []
    for ra in target:
        for rb in by_key.get(kind.key(ra), ()):
            if kind.owner(ra) == kind.owner(rb):
                continue
            a.append(float(ra.score))
            b.append(float(rb.score))

    return np.asarray(a, dtype=np.float64), np.asarray(b, dtype=np.float64)


def euclidean_from_pairs(a: np.ndarray, b: np.ndarray) -> float:
    """1 / (1 + sum of squared differences); 0 when nothing is shared."""
    if a.size == 0:
        return 0.0
    sum_squared_diff = float(np.sum((a - b) ** 2))
    return 1.0 / (1.0 + sum_squared_diff)


def pearson_from_pairs(a: np.ndarray, b: np.ndarray) -> float:
    """Pearson correlation over aligned score arrays.

    Returns 0.0 when nothing is shared or when either side is constant
    (the correlation is undefined there). Invariant under scaling and shifting
    either side.
    """
    if a.size == 0:
        return 0.0
    # Exact test for constant sides; centered sums of squares can leave residue.
    if np.ptp(a) == 0 or np.ptp(b) == 0:
        return 0.0

    da = a - a.mean()
    db = b - b.mean()
    var1 = float(np.sum(da**2))
    var2 = float(np.sum(db**2))
    if var1 <= 0.0 or var2 <= 0.0:
        return 0.0
    denominator = math.sqrt(var1 * var2)
    if denominator == 0.0 or not math.isfinite(denominator):
        return 0.0

    sim = float(np.sum(da * db)) / denominator
    if not math.isfinite(sim):
        return 0.0
    # Rounding can push |r| a hair past 1.
    return float(min(1.0, max(-1.0, sim)))


PairFn = Callable[[np.ndarray, np.ndarray], float]

METRIC_FUNCTIONS: Dict[SimilarityMetric, PairFn] = {
    SimilarityMetric.EUCLIDEAN: euclidean_from_pairs,
    SimilarityMetric.PEARSON: pearson_from_pairs,
}


def similarity_from_pairs(metric: SimilarityMetric | str, a: np.ndarray, b: np.ndarray) -> float:
    return METRIC_FUNCTIONS[SimilarityMetric.parse(metric)](a, b)


def compute_similarity(
    metric: SimilarityMetric | str,
    target: Sequence[Rating],
    candidate: Sequence[Rating],
    kind: EntityKind = EntityKind.USER,
) -> float:
    a, b = common_pairs(target, candidate, kind)
    return similarity_from_pairs(metric, a, b)


def euclidean_similarity(
    target: Sequence[Rating],
    candidate: Sequence[Rating],
    kind: EntityKind = EntityKind.USER,
) -> float:
    return compute_similarity(SimilarityMetric.EUCLIDEAN, target, candidate, kind)


def pearson_similarity(
    target: Sequence[Rating],
    candidate: Sequence[Rating],
    kind: EntityKind = EntityKind.USER,
) -> float:
    return compute_similarity(SimilarityMetric.PEARSON, target, candidate, kind)
