from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
import pytest

from cfrec.data import load_raw_data
from cfrec.paths import ProjectPaths
from cfrec.store.catalog import CatalogStore
from cfrec.store.ratings import Rating, RatingStore


def test_load_raw_data_reads_semicolon_tables(critics_dir: Path) -> None:
    data = load_raw_data(critics_dir)

    assert len(data.users) == 7
    assert len(data.movies) == 6
    assert len(data.ratings) == 35
    assert data.ratings["Rating"].dtype == "float64"
    # Commas inside titles survive the `;` delimiter.
    assert "You, Me and Dupree" in data.movies["Title"].tolist()


def test_load_raw_data_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_raw_data(tmp_path)


def test_load_raw_data_rejects_duplicate_ids(write_dataset) -> None:
    raw = write_dataset([(1, "Ann"), (1, "Bob")], [(1, "Heat", 1995)], [(1, 1, 4.0)])
    with pytest.raises(ValueError, match="duplicate UserId"):
        load_raw_data(raw)


def test_load_raw_data_rejects_missing_columns(write_dataset) -> None:
    raw = write_dataset([(1, "Ann")], [(1, "Heat", 1995)], [(1, 1, 4.0)])
    (raw / "movies.csv").write_text("MovieId;Title\n1;Heat\n")
    with pytest.raises(ValueError, match="movies.csv missing columns"):
        load_raw_data(raw)


def test_load_raw_data_allows_any_rating_value_and_warns_on_dangling_refs(
    write_dataset, caplog: pytest.LogCaptureFixture
) -> None:
    raw = write_dataset(
        [(1, "Ann")],
        [(1, "Heat", None)],
        [(1, 1, -3.5), (1, 99, 12.0), (5, 1, 2.0)],
    )
    with caplog.at_level(logging.WARNING, logger="cfrec.data"):
        data = load_raw_data(raw)

    assert data.ratings["Rating"].tolist() == [-3.5, 12.0, 2.0]
    assert "UserIds not in users.csv" in caplog.text
    assert "MovieIds not in movies.csv" in caplog.text


def test_rating_store_indices_preserve_insertion_order() -> None:
    ratings = [Rating(2, 10, 1.0), Rating(1, 20, 2.0), Rating(2, 30, 3.0), Rating(1, 10, 4.0)]
    store = RatingStore(ratings)

    assert store.load() == tuple(ratings)
    assert len(store) == 4
    assert [r.itemId for r in store.ratings_by_user(2)] == [10, 30]
    assert [r.userId for r in store.ratings_by_item(10)] == [2, 1]
    assert store.ratings_by_user(99) == ()
    assert store.ratings_by_item(99) == ()
    assert store.items_rated_by(1) == {20, 10}
    assert store.items_rated_by(99) == set()


def test_rating_helpers() -> None:
    a = Rating(1, 10, 3.0)
    assert a.same_user(Rating(1, 11, 1.0))
    assert a.same_item(Rating(2, 10, 1.0))
    assert not a.same_user(Rating(2, 10, 3.0))


def test_rating_store_from_frame() -> None:
    df = pd.DataFrame({"UserId": [1, 2], "MovieId": [5, 5], "Rating": [4.5, 2]})
    store = RatingStore.from_frame(df)
    assert store.load() == (Rating(1, 5, 4.5), Rating(2, 5, 2.0))

    with pytest.raises(ValueError):
        RatingStore.from_frame(df.drop(columns=["Rating"]))


def test_catalog_store_lookup(critics_dir: Path, write_dataset) -> None:
    data = load_raw_data(critics_dir)
    catalog = CatalogStore.from_frames(data.users, data.movies)

    assert [u.name for u in catalog.users()][:2] == ["Lisa", "Gene"]
    assert catalog.get_user(7).name == "Toby"
    assert catalog.get_user(99) is None
    assert catalog.get_movie(4).title == "Superman Returns"
    assert catalog.get_movie(4).year == 2006
    assert catalog.get_movie(99) is None

    raw = write_dataset([(1, "Ann")], [(1, "Heat", None)], [(1, 1, 4.0)], name="no_year")
    data = load_raw_data(raw)
    assert CatalogStore.from_frames(data.users, data.movies).get_movie(1).year is None


def test_project_paths_point_at_the_three_tables(tmp_path: Path) -> None:
    paths = ProjectPaths.from_repo_root(tmp_path, data_dir="data/raw")
    assert paths.data_dir == (tmp_path / "data" / "raw").resolve()
    assert paths.users_csv.name == "users.csv"
    assert paths.movies_csv.parent == paths.data_dir
    assert ProjectPaths.from_data_dir(paths.data_dir) == paths


def test_load_raw_data_names_the_missing_table(critics_dir: Path) -> None:
    (critics_dir / "ratings.csv").unlink()
    with pytest.raises(FileNotFoundError, match="ratings.csv"):
        load_raw_data(critics_dir)
