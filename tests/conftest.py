"""Shared fixtures for the SimRec tests."""

import random
import sys
from pathlib import Path
from typing import Generator, List

import pandas as pd
import pytest

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from simrec.api import state
from simrec.api.metrics import metrics_service
from simrec.config import Settings
from simrec.recommender.store import Item, RatingRecord, RatingStore, build_store


@pytest.fixture
def scenario_items() -> List[Item]:
    return [
        Item(id=1, title="Movie One"),
        Item(id=2, title="Movie Two"),
        Item(id=3, title="Movie Three"),
    ]


@pytest.fixture
def scenario_ratings() -> List[RatingRecord]:
    """Three users, three items.

    U1: {M1: 5, M2: 3}, U2: {M1: 4, M2: 2, M3: 5}, U3: {M1: 1, M3: 3}
    """
    return [
        RatingRecord(user_id=1, item_id=1, score=5.0),
        RatingRecord(user_id=1, item_id=2, score=3.0),
        RatingRecord(user_id=2, item_id=1, score=4.0),
        RatingRecord(user_id=2, item_id=2, score=2.0),
        RatingRecord(user_id=2, item_id=3, score=5.0),
        RatingRecord(user_id=3, item_id=1, score=1.0),
        RatingRecord(user_id=3, item_id=3, score=3.0),
    ]


@pytest.fixture
def scenario_store(scenario_items, scenario_ratings) -> RatingStore:
    return build_store(scenario_items, scenario_ratings)


@pytest.fixture
def random_store() -> RatingStore:
    """A larger reproducible store: 30 users, 40 items, half-star ratings."""
    rng = random.Random(7)
    items = [Item(id=item_id, title=f"Item {item_id}") for item_id in range(1, 41)]

    pairs = set()
    for user_id in range(1, 31):
        for item_id in rng.sample(range(1, 41), rng.randint(1, 12)):
            pairs.add((user_id, item_id))

    ratings = [
        RatingRecord(user_id=user_id, item_id=item_id, score=rng.randint(1, 10) / 2)
        for user_id, item_id in sorted(pairs)
    ]
    return build_store(items, ratings)


@pytest.fixture
def data_dir(tmp_path: Path, scenario_items, scenario_ratings) -> Path:
    """Directory holding the scenario as items.csv and ratings.csv."""
    pd.DataFrame(
        [{"itemId": item.id, "title": item.title} for item in scenario_items]
    ).to_csv(tmp_path / "items.csv", index=False)
    pd.DataFrame(
        [
            {"userId": r.user_id, "itemId": r.item_id, "rating": r.score}
            for r in scenario_ratings
        ]
    ).to_csv(tmp_path / "ratings.csv", index=False)
    return tmp_path


@pytest.fixture
def service_state(scenario_store: RatingStore, data_dir: Path) -> Generator[RatingStore, None, None]:
    """Install the scenario store and settings as the service state."""
    state.set_settings(Settings(data_dir=data_dir))
    state.set_store(scenario_store)
    metrics_service.reset()

    yield scenario_store

    state.set_store(None)
    state.set_settings(None)
    metrics_service.reset()
