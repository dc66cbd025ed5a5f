"""User-user similarity.

Similarity is the inverse squared Euclidean distance over the items both
users rated: ``1 / (1 + sum((a - b) ** 2))``, or ``0`` when they share no
rated item.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from simrec.recommender.ranking import rank_descending
from simrec.recommender.store import RatingStore, UserProfile

# Configure module logger
logger = logging.getLogger(__name__)

METRIC_EUCLIDEAN = "euclidean"
SUPPORTED_METRICS = (METRIC_EUCLIDEAN,)


@dataclass(frozen=True)
class SimilarityResult:
    user_id: int
    name: str
    similarity: float


def euclidean_similarity(user_a: UserProfile, user_b: UserProfile) -> float:
    """Inverse squared Euclidean distance between two profiles.

    Only items rated by both users contribute. The result is in ``(0, 1]``
    when they share at least one item, and exactly ``0`` otherwise.
    """
    # Sorted so the float sum is identical for (a, b) and (b, a)
    shared = sorted(user_a.ratings.keys() & user_b.ratings.keys())
    if not shared:
        return 0.0

    distance = 0.0
    for item_id in shared:
        distance += (user_a.ratings[item_id].score - user_b.ratings[item_id].score) ** 2

    return 1 / (1 + distance)


def _similarity_rank_key(result: SimilarityResult) -> Tuple[float, ...]:
    return (result.similarity, -result.user_id)


def rank_similar_users(store: RatingStore, target_user_id: int) -> List[SimilarityResult]:
    """Rank every other user by similarity to ``target_user_id``.

    Returns the whole population except the target, most similar first.
    Equal similarities are ordered by ascending user id.

    Raises:
        UnknownUserError: If the target user has no profile.
    """
    target = store.get_profile(target_user_id)

    results = []
    for user_id in store.all_user_ids():
        if user_id == target_user_id:
            continue
        other = store.get_profile(user_id)
        results.append(
            SimilarityResult(
                user_id=user_id,
                name=other.name,
                similarity=euclidean_similarity(target, other),
            )
        )

    ranked = rank_descending(results, key=_similarity_rank_key)

    logger.debug(
        "Ranked similar users",
        extra={"user_id": target_user_id, "num_neighbors": len(ranked)},
    )

    return ranked
