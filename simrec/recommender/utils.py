"""Utility functions for loading rating data.

This module reads the item catalog and rating records from CSV files and
assembles a built :class:`~simrec.recommender.store.RatingStore` from them.
"""

import logging
from pathlib import Path
from typing import Dict, List, Union

import pandas as pd

from simrec.exceptions import DataLoadError
from simrec.recommender.store import (
    POLICY_CONTIGUOUS,
    Item,
    RatingRecord,
    RatingStore,
    build_store,
)

# Configure module logger
logger = logging.getLogger(__name__)

# Data filenames
ITEMS_FILENAME = "items.csv"
RATINGS_FILENAME = "ratings.csv"

# Column names, plus the MovieLens-style aliases accepted for them
ITEM_ID_COL = "itemId"
TITLE_COL = "title"
USER_ID_COL = "userId"
RATING_COL = "rating"
COLUMN_ALIASES: Dict[str, str] = {"movieId": ITEM_ID_COL}

PathLike = Union[str, Path]


def _read_csv(csv_path: PathLike, required_columns: List[str]) -> pd.DataFrame:
    csv_file = Path(csv_path)
    if not csv_file.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    logger.info(f"Loading CSV from {csv_path}")
    try:
        df = pd.read_csv(csv_file)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise DataLoadError(str(csv_path), str(e)) from e

    renames = {alias: name for alias, name in COLUMN_ALIASES.items() if name not in df.columns}
    df = df.rename(columns=renames)

    missing = set(required_columns) - set(df.columns)
    if missing:
        raise DataLoadError(str(csv_path), f"CSV missing required columns: {sorted(missing)}")

    return df[required_columns]


def _to_numeric(df: pd.DataFrame, column: str, csv_path: PathLike, integer: bool) -> pd.Series:
    values = pd.to_numeric(df[column], errors="coerce")
    invalid = values.isna() | values.isin([float("inf"), float("-inf")])
    if invalid.any():
        first_row = int(invalid.idxmax())
        raise DataLoadError(
            str(csv_path),
            f"column '{column}' has {int(invalid.sum())} non-numeric or non-finite value(s), "
            f"first at row {first_row}",
        )
    if integer:
        if not (values == values.round()).all():
            raise DataLoadError(str(csv_path), f"column '{column}' must contain integers")
        values = values.astype("int64")
    return values


def load_items_csv(csv_path: PathLike) -> List[Item]:
    """Load the item catalog from a CSV file with ``itemId,title`` columns.

    ``movieId`` is accepted in place of ``itemId``.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
        DataLoadError: If columns are missing or ids are not integers.
    """
    df = _read_csv(csv_path, [ITEM_ID_COL, TITLE_COL])
    item_ids = _to_numeric(df, ITEM_ID_COL, csv_path, integer=True)
    titles = df[TITLE_COL].fillna("").astype(str)

    items = [Item(id=int(item_id), title=title) for item_id, title in zip(item_ids, titles)]
    logger.info(f"Loaded {len(items)} items")
    return items


def load_ratings_csv(csv_path: PathLike) -> List[RatingRecord]:
    """Load rating records from a CSV file with ``userId,itemId,rating`` columns.

    ``movieId`` is accepted in place of ``itemId``. Extra columns such as
    ``timestamp`` are ignored.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
        DataLoadError: If columns are missing or values are not numeric.
    """
    df = _read_csv(csv_path, [USER_ID_COL, ITEM_ID_COL, RATING_COL])
    user_ids = _to_numeric(df, USER_ID_COL, csv_path, integer=True)
    item_ids = _to_numeric(df, ITEM_ID_COL, csv_path, integer=True)
    scores = _to_numeric(df, RATING_COL, csv_path, integer=False)

    records = [
        RatingRecord(user_id=int(user_id), item_id=int(item_id), score=float(score))
        for user_id, item_id, score in zip(user_ids, item_ids, scores)
    ]

    logger.info(f"Loaded {len(records)} rating records")
    if records:
        logger.info(f"Unique users: {user_ids.nunique()}")
        logger.info(f"Unique items rated: {item_ids.nunique()}")

    return records


def load_store_from_dir(
    data_dir: PathLike,
    user_policy: str = POLICY_CONTIGUOUS,
    items_filename: str = ITEMS_FILENAME,
    ratings_filename: str = RATINGS_FILENAME,
) -> RatingStore:
    """Read ``items.csv`` and ``ratings.csv`` from ``data_dir`` and build a store.

    Raises:
        FileNotFoundError: If the directory or either CSV file is missing.
        DataLoadError: If either file cannot be parsed.
        DuplicateItemError: If the catalog repeats an item id.
        UnknownItemError: If a rating references an item not in the catalog.

    Example:
        >>> store = load_store_from_dir("data")
        >>> print(f"Users: {store.num_users}, items: {store.num_items}")
    """
    data_path = Path(data_dir)
    if not data_path.exists():
        raise FileNotFoundError(f"Data directory does not exist: {data_dir}")

    logger.info(f"Loading rating data from {data_dir}")

    items = load_items_csv(data_path / items_filename)
    ratings = load_ratings_csv(data_path / ratings_filename)
    store = build_store(items, ratings, user_policy=user_policy)

    logger.info(f"Number of users: {store.num_users}")
    logger.info(f"Number of items: {store.num_items}")
    logger.info(f"Number of ratings: {store.num_ratings}")

    return store

