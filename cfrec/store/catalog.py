"""User and movie catalog with lookup by identity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import pandas as pd


@dataclass(frozen=True)
class User:
    userId: int
    name: str


@dataclass(frozen=True)
class Movie:
    movieId: int
    title: str
    year: Optional[int] = None


def _optional_int(value: Any) -> Optional[int]:
    if value is None or pd.isna(value):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class CatalogStore:
    """In-memory view of users and movies, keyed by identity.

    Dicts preserve file order, which is the order `users()` / `movies()` return.
    """

    users_by_id: dict[int, User]
    movies_by_id: dict[int, Movie]

    @classmethod
    def from_frames(cls, users: pd.DataFrame, movies: pd.DataFrame) -> "CatalogStore":
        """Build lookup maps from the users (UserId, Name) and movies (MovieId, Title, Year) tables."""
        users_by_id: dict[int, User] = {}
        for uid, name in zip(users["UserId"].astype("int64").tolist(), users["Name"].tolist()):
            users_by_id[int(uid)] = User(userId=int(uid), name=("" if pd.isna(name) else str(name)))

        movies_by_id: dict[int, Movie] = {}
        for mid, title, year in zip(
            movies["MovieId"].astype("int64").tolist(),
            movies["Title"].tolist(),
            movies["Year"].tolist(),
        ):
            movies_by_id[int(mid)] = Movie(
                movieId=int(mid),
                title=("" if pd.isna(title) else str(title)),
                year=_optional_int(year),
            )

        return cls(users_by_id=users_by_id, movies_by_id=movies_by_id)

    def get_user(self, user_id: int) -> User | None:
        return self.users_by_id.get(int(user_id))

    def get_movie(self, movie_id: int) -> Movie | None:
        return self.movies_by_id.get(int(movie_id))

    def users(self) -> list[User]:
        return list(self.users_by_id.values())

    def movies(self) -> list[Movie]:
        return list(self.movies_by_id.values())

