"""Request pipeline: reload the dataset, score similarity, aggregate, select top N."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Callable, Optional

from ..data import RawRatingsData, load_raw_data
from ..errors import DatasetError, NoRatingsForTargetError
from ..recommend.aggregator import (
    ScoredCandidate,
    item_based_contributions,
    item_neighbor_contributions,
    user_based_contributions,
    weighted_average,
)
from ..recommend.selection import select_top
from ..similarity.engine import SimilarityScore, positive_neighbors, score_against_all
from ..similarity.metrics import EntityKind, SimilarityMetric
from ..store.catalog import CatalogStore, Movie, User
from ..store.ratings import RatingStore

logger = logging.getLogger(__name__)

Loader = Callable[[], RawRatingsData]


@dataclass(frozen=True)
class RankedUser:
    userId: int
    name: str
    score: float


@dataclass(frozen=True)
class RankedMovie:
    movieId: int
    title: str
    year: Optional[int]
    score: float


@dataclass(frozen=True)
class DatasetSnapshot:
    """Stores built for exactly one request."""

    ratings: RatingStore
    catalog: CatalogStore


def _check_results(results: int) -> int:
    n = int(results)
    if n < 0:
        raise ValueError(f"results must be non-negative, got {n}")
    return n


class CollaborativeRecommender:
    """User-based and item-based collaborative filtering over a ratings dataset.

    Every public operation reloads the dataset through `loader` and recomputes
    all similarities from scratch; nothing is cached between calls, so results
    always reflect the files as they are at request time.
    """

    def __init__(self, *, data_dir: Path | None = None, loader: Loader | None = None) -> None:
        if loader is None:
            if data_dir is None:
                raise ValueError("CollaborativeRecommender needs data_dir or loader")
            loader = partial(load_raw_data, Path(data_dir))
        self.data_dir = Path(data_dir) if data_dir is not None else None
        self._loader = loader

    def load_snapshot(self) -> DatasetSnapshot:
        """Read the dataset and build per-request stores; read or validation failures raise `DatasetError`."""
        try:
            data = self._loader()
        except (FileNotFoundError, ValueError) as exc:
            logger.error("Dataset load failed (data_dir=%s): %s", self.data_dir, exc)
            raise DatasetError(self.data_dir, str(exc)) from exc
        return DatasetSnapshot(
            ratings=RatingStore.from_frame(data.ratings),
            catalog=CatalogStore.from_frames(data.users, data.movies),
        )

    # ----- Catalog listings -----

    def list_users(self) -> list[User]:
        return self.load_snapshot().catalog.users()

    def list_movies(self) -> list[Movie]:
        return self.load_snapshot().catalog.movies()

    # ----- User-user -----

    def _user_similarities(
        self, snap: DatasetSnapshot, user_id: int, metric: SimilarityMetric
    ) -> list[SimilarityScore]:
        return score_against_all(
            user_id,
            snap.ratings.user_groups(),
            [u.userId for u in snap.catalog.users()],
            metric,
            EntityKind.USER,
        )

    def top_matching_users(self, user_id: int, similarity: SimilarityMetric | str, results: int) -> list[RankedUser]:
        """Every other user ranked by similarity to `user_id`."""
        metric = SimilarityMetric.parse(similarity)
        n = _check_results(results)
        t0 = time.perf_counter()

        snap = self.load_snapshot()
        scores = self._user_similarities(snap, user_id, metric)

        candidates: list[tuple[RankedUser, float]] = []
        for s in scores:
            user = snap.catalog.get_user(s.entityId)
            if user is None:
                continue
            candidates.append((RankedUser(userId=user.userId, name=user.name, score=s.similarity), s.similarity))

        out = [u for u, _ in select_top(candidates, n)]
        self._log("top_matching_users", "userId", user_id, metric, n, len(out), t0)
        return out

    def recommended_movies(self, user_id: int, similarity: SimilarityMetric | str, results: int) -> list[RankedMovie]:
        """User-based CF: similarity-weighted ratings of positively similar users on unrated movies."""
        metric = SimilarityMetric.parse(similarity)
        n = _check_results(results)
        t0 = time.perf_counter()

        snap = self.load_snapshot()
        neighbors = positive_neighbors(self._user_similarities(snap, user_id, metric))
        rated = snap.ratings.items_rated_by(user_id)

        scored = weighted_average(user_based_contributions(neighbors, snap.ratings, rated))
        out = self._select_movies(snap, scored, n)
        self._log("recommended_movies", "userId", user_id, metric, n, len(out), t0)
        return out

    # ----- Movie-movie -----

    def _movie_similarities(
        self, snap: DatasetSnapshot, movie_id: int, metric: SimilarityMetric
    ) -> list[SimilarityScore]:
        return score_against_all(
            movie_id,
            snap.ratings.item_groups(),
            [m.movieId for m in snap.catalog.movies()],
            metric,
            EntityKind.ITEM,
        )

    def similar_movies(self, movie_id: int, similarity: SimilarityMetric | str, results: int) -> list[RankedMovie]:
        """Every other movie ranked by similarity to the seed movie (shared raters)."""
        metric = SimilarityMetric.parse(similarity)
        n = _check_results(results)
        t0 = time.perf_counter()

        snap = self.load_snapshot()
        scores = self._movie_similarities(snap, movie_id, metric)
        out = self._select_movies(
            snap,
            [ScoredCandidate(candidateId=s.entityId, score=s.similarity, support=s.common) for s in scores],
            n,
        )
        self._log("similar_movies", "movieId", movie_id, metric, n, len(out), t0)
        return out

    def recommended_movies_for_movie(
        self, movie_id: int, similarity: SimilarityMetric | str, results: int
    ) -> list[RankedMovie]:
        """Positively similar movies, each scored by its own ratings weighted by its similarity to the seed."""
        metric = SimilarityMetric.parse(similarity)
        n = _check_results(results)
        t0 = time.perf_counter()

        snap = self.load_snapshot()
        neighbors = positive_neighbors(self._movie_similarities(snap, movie_id, metric))
        scored = weighted_average(item_neighbor_contributions(neighbors, snap.ratings))
        out = self._select_movies(snap, scored, n)
        self._log("recommended_movies_for_movie", "movieId", movie_id, metric, n, len(out), t0)
        return out

    def item_based_recommended_movies(
        self, user_id: int, similarity: SimilarityMetric | str, results: int
    ) -> list[RankedMovie]:
        """Item-based CF for a user: unrated movies scored by the user's ratings on similar movies."""
        metric = SimilarityMetric.parse(similarity)
        n = _check_results(results)
        t0 = time.perf_counter()

        snap = self.load_snapshot()
        target_ratings = snap.ratings.ratings_by_user(user_id)
        if not target_ratings:
            raise NoRatingsForTargetError(EntityKind.USER.value, int(user_id))
        rated = snap.ratings.items_rated_by(user_id)

        item_neighbors: dict[int, list[SimilarityScore]] = {}
        for item_id in dict.fromkeys(r.itemId for r in target_ratings):
            item_neighbors[item_id] = self._movie_similarities(snap, item_id, metric)

        scored = weighted_average(item_based_contributions(target_ratings, item_neighbors, rated))
        out = self._select_movies(snap, scored, n)
        self._log("item_based_recommended_movies", "userId", user_id, metric, n, len(out), t0)
        return out

    # ----- helpers -----

    @staticmethod
    def _select_movies(snap: DatasetSnapshot, scored: list[ScoredCandidate], n: int) -> list[RankedMovie]:
        candidates: list[tuple[RankedMovie, float]] = []
        for c in scored:
            movie = snap.catalog.get_movie(c.candidateId)
            if movie is None:
                continue
            ranked = RankedMovie(movieId=movie.movieId, title=movie.title, year=movie.year, score=float(c.score))
            candidates.append((ranked, float(c.score)))
        return [m for m, _ in select_top(candidates, n)]

    @staticmethod
    def _log(op: str, target_key: str, target_id: int, metric: SimilarityMetric, n: int, returned: int, t0: float) -> None:
        logger.info(
            "%s %s=%d similarity=%s results=%d | returned=%d total_s=%.4f",
            op,
            target_key,
            int(target_id),
            metric.value,
            n,
            returned,
            time.perf_counter() - t0,
        )
