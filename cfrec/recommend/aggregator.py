"""Similarity-weighted rating aggregation.

Every recommendation mode reduces to a stream of contributions
`(candidateId, rating, weight)`. A candidate's predicted score is

    sum(rating * weight) / sum(weight)

over its contributions with weight > 0. The builders below only decide which
contributions a mode produces.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping, Sequence

import pandas as pd

from ..similarity.engine import SimilarityScore
from ..store.ratings import Rating, RatingStore


Contribution = tuple[int, float, float]


@dataclass(frozen=True)
class ScoredCandidate:
    candidateId: int
    score: float
    support: int


def weighted_average(contributions: Iterable[Contribution]) -> list[ScoredCandidate]:
    """Aggregate contributions per candidate, preserving first-discovered order."""
    df = pd.DataFrame.from_records(list(contributions), columns=["candidateId", "rating", "weight"])
    if df.empty:
        return []

    df = df[df["weight"] > 0.0].copy()
    if df.empty:
        return []

    df["weighted"] = df["weight"].astype(float) * df["rating"].astype(float)
    agg = df.groupby("candidateId", sort=False, as_index=False).agg(
        weighted_sum=("weighted", "sum"),
        weight_sum=("weight", "sum"),
        support=("weight", "size"),
    )
    agg["score"] = agg["weighted_sum"] / agg["weight_sum"]

    return [
        ScoredCandidate(candidateId=int(cid), score=float(score), support=int(support))
        for cid, score, support in zip(agg["candidateId"], agg["score"], agg["support"])
    ]


def user_based_contributions(
    neighbors: Sequence[SimilarityScore],
    store: RatingStore,
    exclude_items: set[int],
) -> Iterator[Contribution]:
    """Neighbor users' ratings on items the target has not rated, weighted by user similarity."""
    for n in neighbors:
        if n.similarity <= 0.0:
            continue
        for r in store.ratings_by_user(n.entityId):
            if r.itemId in exclude_items:
                continue
            yield int(r.itemId), float(r.score), float(n.similarity)


def item_neighbor_contributions(
    neighbors: Sequence[SimilarityScore],
    store: RatingStore,
) -> Iterator[Contribution]:
    """Each similar movie's own ratings, weighted by that movie's similarity to the seed."""
    for n in neighbors:
        if n.similarity <= 0.0:
            continue
        for r in store.ratings_by_item(n.entityId):
            yield int(r.itemId), float(r.score), float(n.similarity)


def item_based_contributions(
    target_ratings: Sequence[Rating],
    item_neighbors: Mapping[int, Sequence[SimilarityScore]],
    exclude_items: set[int],
) -> Iterator[Contribution]:
    """Item-based CF: for each movie j the user rated with score r, every unrated movie i
    similar to j contributes (i, r, sim(i, j)).

    `item_neighbors` maps j -> similarity of every other movie to j.
    """
    for r in target_ratings:
        for n in item_neighbors.get(r.itemId, ()):
            if n.similarity <= 0.0 or n.entityId in exclude_items:
                continue
            yield int(n.entityId), float(r.score), float(n.similarity)
