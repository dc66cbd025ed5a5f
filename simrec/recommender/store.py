"""In-memory rating store.

Holds the item catalog and raw rating records, and derives per-user rating
profiles exactly once. After :meth:`RatingStore.build_profiles` the store is
read-only and can be shared between request handlers without locking.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple

from simrec.exceptions import (
    DuplicateItemError,
    InconsistentStateError,
    InvalidParameterError,
    UnknownItemError,
    UnknownUserError,
)

# Configure module logger
logger = logging.getLogger(__name__)

# User id policies for build_profiles()
POLICY_CONTIGUOUS = "contiguous"
POLICY_OBSERVED = "observed"
USER_POLICIES = (POLICY_CONTIGUOUS, POLICY_OBSERVED)


@dataclass(frozen=True)
class Item:
    id: int
    title: str


@dataclass(frozen=True)
class RatingRecord:
    user_id: int
    item_id: int
    score: float


@dataclass(frozen=True)
class Rating:
    """A single rating inside a user profile, with the item title resolved."""

    item_id: int
    title: str
    score: float


@dataclass(frozen=True)
class UserProfile:
    user_id: int
    name: str
    ratings: Mapping[int, Rating] = field(default_factory=dict)


def user_display_name(user_id: int) -> str:
    return f"User {user_id}"


class RatingStore:
    """Immutable catalog of items, ratings and derived user profiles.

    Build it in three steps, in order: ``load_items``, ``load_ratings`` and
    ``build_profiles``. Reads are only valid after the last step.
    """

    def __init__(self, user_policy: str = POLICY_CONTIGUOUS):
        if user_policy not in USER_POLICIES:
            raise InvalidParameterError(
                "user_policy", user_policy, f"must be one of {USER_POLICIES}"
            )
        self.user_policy = user_policy
        self._items: Dict[int, Item] = {}
        self._records: Tuple[RatingRecord, ...] = ()
        self._profiles: Dict[int, UserProfile] = {}
        self._rating_counts: Dict[int, int] = {}
        self._raters: Dict[int, Tuple[Tuple[int, float], ...]] = {}
        self._items_loaded = False
        self._ratings_loaded = False
        self._built = False

    @property
    def is_built(self) -> bool:
        return self._built

    def _check_not_built(self, operation: str) -> None:
        if self._built:
            raise InconsistentStateError(
                f"Cannot {operation}: rating store is already built",
                details={"operation": operation},
            )

    def _check_built(self) -> None:
        if not self._built:
            raise InconsistentStateError("Rating store has not been built yet")

    def load_items(self, records: Iterable[Item]) -> None:
        """Populate the id-keyed item catalog.

        Raises:
            DuplicateItemError: If two records share an id.
        """
        self._check_not_built("load items")

        catalog: Dict[int, Item] = {}
        for item in records:
            if item.id in catalog:
                raise DuplicateItemError(item.id)
            catalog[item.id] = item

        self._items = catalog
        self._items_loaded = True
        logger.info("Loaded item catalog", extra={"num_items": len(catalog)})

    def load_ratings(self, records: Iterable[RatingRecord]) -> None:
        """Store raw rating records. Must be called after :meth:`load_items`.

        Raises:
            InconsistentStateError: If the item catalog is not loaded yet.
            UnknownItemError: If a record references an item not in the catalog.
        """
        self._check_not_built("load ratings")
        if not self._items_loaded:
            raise InconsistentStateError("Items must be loaded before ratings")

        loaded = tuple(records)
        for record in loaded:
            if record.item_id not in self._items:
                raise UnknownItemError(
                    record.item_id,
                    details={"item_id": record.item_id, "user_id": record.user_id},
                )

        self._records = loaded
        self._ratings_loaded = True
        logger.info("Loaded rating records", extra={"num_ratings": len(loaded)})

    def _user_ids_to_build(self, records_by_user: Mapping[int, List[RatingRecord]]) -> List[int]:
        if not records_by_user:
            return []
        if self.user_policy == POLICY_CONTIGUOUS:
            # Ids 1..max are all materialized; gaps become empty profiles
            return sorted(set(range(1, max(records_by_user) + 1)) | set(records_by_user))
        return sorted(records_by_user)

    def build_profiles(self) -> None:
        """Derive one profile per user and the per-item rating counts.

        Users are built in increasing id order. Which ids are materialized
        depends on ``user_policy``.
        """
        self._check_not_built("build profiles")
        if not self._ratings_loaded:
            raise InconsistentStateError("Ratings must be loaded before building profiles")

        records_by_user: Dict[int, List[RatingRecord]] = {}
        for record in self._records:
            records_by_user.setdefault(record.user_id, []).append(record)

        profiles: Dict[int, UserProfile] = {}
        counts: Dict[int, int] = {}
        raters: Dict[int, List[Tuple[int, float]]] = {}
        for user_id in self._user_ids_to_build(records_by_user):
            ratings: Dict[int, Rating] = {}
            for record in records_by_user.get(user_id, []):
                counts[record.item_id] = counts.get(record.item_id, 0) + 1
                title = self._items[record.item_id].title
                ratings[record.item_id] = Rating(record.item_id, title, record.score)
            for item_id, rating in ratings.items():
                raters.setdefault(item_id, []).append((user_id, rating.score))

            profiles[user_id] = UserProfile(
                user_id=user_id,
                name=user_display_name(user_id),
                ratings=MappingProxyType(ratings),
            )

        self._profiles = profiles
        self._rating_counts = counts
        self._raters = {item_id: tuple(pairs) for item_id, pairs in raters.items()}
        self._built = True

        empty = sum(1 for profile in profiles.values() if not profile.ratings)
        logger.info(
            "Built user profiles",
            extra={
                "num_users": len(profiles),
                "num_empty_profiles": empty,
                "num_rated_items": len(counts),
                "user_policy": self.user_policy,
            },
        )

    def get_profile(self, user_id: int) -> UserProfile:
        self._check_built()
        try:
            return self._profiles[user_id]
        except KeyError:
            raise UnknownUserError(user_id) from None

    def has_user(self, user_id: int) -> bool:
        return user_id in self._profiles

    def get_item(self, item_id: int) -> Item:
        try:
            return self._items[item_id]
        except KeyError:
            raise UnknownItemError(item_id) from None

    def rating_count(self, item_id: int) -> int:
        """Number of ratings referencing ``item_id`` (0 if never rated)."""
        return self._rating_counts.get(item_id, 0)

    def raters(self, item_id: int) -> Tuple[Tuple[int, float], ...]:
        """(user_id, score) pairs for every user who rated ``item_id``, by ascending user id."""
        return self._raters.get(item_id, ())

    def all_user_ids(self) -> List[int]:
        self._check_built()
        return sorted(self._profiles)

    def all_item_ids(self) -> List[int]:
        return sorted(self._items)

    def users(self) -> List[Dict[str, object]]:
        """List every profile as ``{"userId", "name"}``, ordered by id."""
        return [
            {"userId": user_id, "name": self._profiles[user_id].name}
            for user_id in self.all_user_ids()
        ]

    @property
    def num_ratings(self) -> int:
        return len(self._records)

    @property
    def num_items(self) -> int:
        return len(self._items)

    @property
    def num_users(self) -> int:
        return len(self._profiles)


def build_store(
    items: Iterable[Item],
    ratings: Iterable[RatingRecord],
    user_policy: str = POLICY_CONTIGUOUS,
) -> RatingStore:
    """Load items and ratings into a new store and build its profiles."""
    store = RatingStore(user_policy=user_policy)
    store.load_items(items)
    store.load_ratings(ratings)
    store.build_profiles()
    return store
