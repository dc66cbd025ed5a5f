"""Tests for loading rating data from CSV files."""

from pathlib import Path

import pandas as pd
import pytest

from simrec.exceptions import DataLoadError, DuplicateItemError, UnknownItemError
from simrec.recommender.store import POLICY_OBSERVED, Item, RatingRecord
from simrec.recommender.utils import load_items_csv, load_ratings_csv, load_store_from_dir


def _write_csv(path: Path, rows) -> Path:
    pd.DataFrame(rows).to_csv(path, index=False)
    return path


def test_load_items_csv(data_dir: Path):
    items = load_items_csv(data_dir / "items.csv")

    assert items == [
        Item(id=1, title="Movie One"),
        Item(id=2, title="Movie Two"),
        Item(id=3, title="Movie Three"),
    ]


def test_load_ratings_csv(data_dir: Path, scenario_ratings):
    records = load_ratings_csv(data_dir / "ratings.csv")

    assert records == scenario_ratings
    assert all(isinstance(record.user_id, int) for record in records)
    assert all(isinstance(record.score, float) for record in records)


def test_movie_id_column_alias_and_extra_columns(tmp_path: Path):
    items_path = _write_csv(tmp_path / "movies.csv", [{"movieId": 7, "title": "Seven"}])
    ratings_path = _write_csv(
        tmp_path / "ratings.csv",
        [{"userId": 1, "movieId": 7, "rating": 3.5, "timestamp": 964982703}],
    )

    assert load_items_csv(items_path) == [Item(id=7, title="Seven")]
    assert load_ratings_csv(ratings_path) == [RatingRecord(user_id=1, item_id=7, score=3.5)]


def test_missing_file_raises_filenotfounderror(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_items_csv(tmp_path / "nope.csv")


def test_missing_columns_raise_data_load_error(tmp_path: Path):
    path = _write_csv(tmp_path / "ratings.csv", [{"userId": 1, "itemId": 2}])

    with pytest.raises(DataLoadError, match="missing required columns"):
        load_ratings_csv(path)


def test_non_numeric_values_raise_data_load_error(tmp_path: Path):
    path = _write_csv(
        tmp_path / "ratings.csv",
        [
            {"userId": 1, "itemId": 2, "rating": 4.0},
            {"userId": 1, "itemId": 3, "rating": "great"},
        ],
    )

    with pytest.raises(DataLoadError, match="rating"):
        load_ratings_csv(path)


@pytest.mark.parametrize("bad_rating", ["inf", "-inf", "Infinity"])
def test_non_finite_ratings_raise_data_load_error(tmp_path: Path, bad_rating):
    path = tmp_path / "ratings.csv"
    path.write_text(f"userId,itemId,rating\n1,1,4.0\n2,1,{bad_rating}\n")

    with pytest.raises(DataLoadError, match="non-finite"):
        load_ratings_csv(path)


def test_load_store_rejects_non_finite_ratings(tmp_path: Path):
    (tmp_path / "items.csv").write_text("itemId,title\n1,A\n")
    (tmp_path / "ratings.csv").write_text("userId,itemId,rating\n1,1,inf\n2,1,inf\n")

    with pytest.raises(DataLoadError):
        load_store_from_dir(tmp_path)


def test_fractional_ids_raise_data_load_error(tmp_path: Path):
    path = _write_csv(tmp_path / "items.csv", [{"itemId": 1.5, "title": "Half"}])

    with pytest.raises(DataLoadError, match="integers"):
        load_items_csv(path)


def test_empty_file_raises_data_load_error(tmp_path: Path):
    path = tmp_path / "items.csv"
    path.write_text("")

    with pytest.raises(DataLoadError):
        load_items_csv(path)


def test_load_store_from_dir(data_dir: Path):
    store = load_store_from_dir(data_dir)

    assert store.is_built
    assert store.all_user_ids() == [1, 2, 3]
    assert store.num_items == 3
    assert store.num_ratings == 7
    assert store.get_profile(3).ratings[3].title == "Movie Three"


def test_load_store_from_dir_with_observed_policy(tmp_path: Path):
    _write_csv(tmp_path / "items.csv", [{"itemId": 1, "title": "A"}])
    _write_csv(
        tmp_path / "ratings.csv",
        [{"userId": 2, "itemId": 1, "rating": 4.0}, {"userId": 5, "itemId": 1, "rating": 1.0}],
    )

    store = load_store_from_dir(tmp_path, user_policy=POLICY_OBSERVED)

    assert store.all_user_ids() == [2, 5]


def test_load_store_from_missing_dir(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_store_from_dir(tmp_path / "missing")


def test_load_store_rejects_duplicate_items(tmp_path: Path):
    _write_csv(tmp_path / "items.csv", [{"itemId": 1, "title": "A"}, {"itemId": 1, "title": "B"}])
    _write_csv(tmp_path / "ratings.csv", [{"userId": 1, "itemId": 1, "rating": 4.0}])

    with pytest.raises(DuplicateItemError):
        load_store_from_dir(tmp_path)


def test_load_store_rejects_ratings_for_unknown_items(tmp_path: Path):
    _write_csv(tmp_path / "items.csv", [{"itemId": 1, "title": "A"}])
    _write_csv(tmp_path / "ratings.csv", [{"userId": 1, "itemId": 2, "rating": 4.0}])

    with pytest.raises(UnknownItemError):
        load_store_from_dir(tmp_path)
