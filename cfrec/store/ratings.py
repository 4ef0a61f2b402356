"""Rating records and the per-user / per-item rating indices."""

from __future__ import annotations

from typing import Iterable, NamedTuple

import pandas as pd


class Rating(NamedTuple):
    """One user's score for one movie. Scores are unbounded reals."""

    userId: int
    itemId: int
    score: float

    def same_user(self, other: "Rating") -> bool:
        return self.userId == other.userId

    def same_item(self, other: "Rating") -> bool:
        return self.itemId == other.itemId


class RatingStore:
    """The complete loaded rating set plus two derived indices.

    Indices are built once, in a single pass, and never mutated afterwards;
    any change in the underlying data means building a new store.
    """

    def __init__(self, ratings: Iterable[Rating]) -> None:
        self._ratings: tuple[Rating, ...] = tuple(ratings)

        by_user: dict[int, list[Rating]] = {}
        by_item: dict[int, list[Rating]] = {}
        for r in self._ratings:
            by_user.setdefault(r.userId, []).append(r)
            by_item.setdefault(r.itemId, []).append(r)

        self._by_user: dict[int, tuple[Rating, ...]] = {k: tuple(v) for k, v in by_user.items()}
        self._by_item: dict[int, tuple[Rating, ...]] = {k: tuple(v) for k, v in by_item.items()}

    @classmethod
    def from_frame(cls, ratings: pd.DataFrame) -> "RatingStore":
        """Build from a ratings table with columns UserId, MovieId, Rating."""
        required = {"UserId", "MovieId", "Rating"}
        missing = required - set(ratings.columns)
        if missing:
            raise ValueError(f"ratings missing required columns: {sorted(missing)}")

        records = zip(
            ratings["UserId"].astype("int64").tolist(),
            ratings["MovieId"].astype("int64").tolist(),
            ratings["Rating"].astype(float).tolist(),
        )
        return cls(Rating(int(u), int(m), float(s)) for u, m, s in records)

    def __len__(self) -> int:
        return len(self._ratings)

    def load(self) -> tuple[Rating, ...]:
        return self._ratings

    def ratings_by_user(self, user_id: int) -> tuple[Rating, ...]:
        return self._by_user.get(int(user_id), ())

    def ratings_by_item(self, item_id: int) -> tuple[Rating, ...]:
        return self._by_item.get(int(item_id), ())

    def items_rated_by(self, user_id: int) -> set[int]:
        return {r.itemId for r in self.ratings_by_user(user_id)}

    def user_groups(self) -> dict[int, tuple[Rating, ...]]:
        return dict(self._by_user)

    def item_groups(self) -> dict[int, tuple[Rating, ...]]:
        return dict(self._by_item)
