from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Sequence

import pytest

# Ensure `import cfrec...` works when pytest uses importlib import mode.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))


# Classic "critics" ratings: 7 users x 6 movies.
CRITICS_USERS = [
    (1, "Lisa"),
    (2, "Gene"),
    (3, "Michael"),
    (4, "Claudia"),
    (5, "Mick"),
    (6, "Jack"),
    (7, "Toby"),
]

CRITICS_MOVIES = [
    (1, "Lady in the Water", 2006),
    (2, "Snakes on a Plane", 2006),
    (3, "Just My Luck", 2006),
    (4, "Superman Returns", 2006),
    (5, "You, Me and Dupree", 2006),
    (6, "The Night Listener", 2006),
]

CRITICS_RATINGS = [
    (1, 1, 2.5), (1, 2, 3.5), (1, 3, 3.0), (1, 4, 3.5), (1, 5, 2.5), (1, 6, 3.0),
    (2, 1, 3.0), (2, 2, 3.5), (2, 3, 1.5), (2, 4, 5.0), (2, 6, 3.0), (2, 5, 3.5),
    (3, 1, 2.5), (3, 2, 3.0), (3, 4, 3.5), (3, 6, 4.0),
    (4, 2, 3.5), (4, 3, 3.0), (4, 6, 4.5), (4, 4, 4.0), (4, 5, 2.5),
    (5, 1, 3.0), (5, 2, 4.0), (5, 3, 2.0), (5, 4, 3.0), (5, 6, 3.0), (5, 5, 2.0),
    (6, 1, 3.0), (6, 2, 4.0), (6, 6, 3.0), (6, 4, 5.0), (6, 5, 3.5),
    (7, 2, 4.5), (7, 5, 1.0), (7, 4, 4.0),
]


DatasetWriter = Callable[..., Path]


def _write_rows(path: Path, header: str, rows: Sequence[Sequence[object]]) -> None:
    lines = [header] + [";".join("" if v is None else str(v) for v in row) for row in rows]
    path.write_text("\n".join(lines) + "\n")


@pytest.fixture
def write_dataset(tmp_path: Path) -> DatasetWriter:
    """Write users/movies/ratings tables (`;`-delimited) into a fresh directory."""

    def _write(
        users: Sequence[Sequence[object]],
        movies: Sequence[Sequence[object]],
        ratings: Sequence[Sequence[object]],
        *,
        name: str = "raw",
    ) -> Path:
        out = tmp_path / name
        out.mkdir(parents=True, exist_ok=True)
        _write_rows(out / "users.csv", "UserId;Name", users)
        _write_rows(out / "movies.csv", "MovieId;Title;Year", movies)
        _write_rows(out / "ratings.csv", "UserId;MovieId;Rating", ratings)
        return out

    return _write


@pytest.fixture
def critics_dir(write_dataset: DatasetWriter) -> Path:
    return write_dataset(CRITICS_USERS, CRITICS_MOVIES, CRITICS_RATINGS, name="critics")
