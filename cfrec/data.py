from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Tuple

import pandas as pd

from .paths import ProjectPaths


logger = logging.getLogger(__name__)

DELIMITER = ";"


@dataclass(frozen=True)
class RawRatingsData:
    users: pd.DataFrame
    movies: pd.DataFrame
    ratings: pd.DataFrame


REQUIRED_COLUMNS: Dict[str, Tuple[str, ...]] = {
    "users": ("UserId", "Name"),
    "movies": ("MovieId", "Title", "Year"),
    "ratings": ("UserId", "MovieId", "Rating"),
}


def _read_table(path: Path, dtype: dict[str, str]) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"Dataset file not found: {path}")
    df = pd.read_csv(path, sep=DELIMITER, skipinitialspace=True)
    df.columns = [str(c).strip() for c in df.columns]
    present = {c: t for c, t in dtype.items() if c in df.columns}
    return df.astype(present)


def load_raw_data(raw_dir: Path) -> RawRatingsData:
    """Load the users/movies/ratings tables from a directory.

    Notes
    -----
    Files are `;`-delimited with a header row. Dtypes are set explicitly so
    that ids compare as ints and ratings are always float64. `Year` is kept
    nullable since some catalogs leave it blank.
    """
    paths = ProjectPaths.from_data_dir(raw_dir)
    users = _read_table(paths.users_csv, {"UserId": "int64", "Name": "string"})
    movies = _read_table(paths.movies_csv, {"MovieId": "int64", "Title": "string", "Year": "Int64"})
    ratings = _read_table(paths.ratings_csv, {"UserId": "int64", "MovieId": "int64", "Rating": "float64"})

    data = RawRatingsData(users=users, movies=movies, ratings=ratings)
    validate_schema(data)
    logger.debug(
        "Loaded dataset from %s: users=%d movies=%d ratings=%d",
        paths.data_dir,
        len(users),
        len(movies),
        len(ratings),
    )
    return data


def validate_schema(data: RawRatingsData) -> None:
    """Validate required columns and identity uniqueness.

    Rating values are deliberately not range-checked, and ratings that point at
    unknown users/movies are only reported: aggregation skips them later.
    """
    for name, cols in REQUIRED_COLUMNS.items():
        df = getattr(data, name)
        missing = [c for c in cols if c not in df.columns]
        if missing:
            raise ValueError(f"{name}.csv missing columns: {missing}")

    if data.users["UserId"].duplicated().any():
        raise ValueError("users.csv has duplicate UserId values")

    if data.movies["MovieId"].duplicated().any():
        raise ValueError("movies.csv has duplicate MovieId values")

    if data.ratings["Rating"].isna().any():
        raise ValueError("ratings.csv has empty Rating values")

    user_ids = set(data.users["UserId"].astype("int64").tolist())
    movie_ids = set(data.movies["MovieId"].astype("int64").tolist())
    dangling_users = set(data.ratings["UserId"].astype("int64").tolist()) - user_ids
    dangling_movies = set(data.ratings["MovieId"].astype("int64").tolist()) - movie_ids

    if dangling_users:
        logger.warning("ratings.csv references %d UserIds not in users.csv", len(dangling_users))
    if dangling_movies:
        logger.warning("ratings.csv references %d MovieIds not in movies.csv", len(dangling_movies))
