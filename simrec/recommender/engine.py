"""Weighted item aggregation over a similarity ranking.

For each candidate item, every other user who rated it contributes
``rating * similarity`` weighted by their similarity to the target user. The
item's score is the similarity-weighted average of those ratings.
"""

import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from simrec.exceptions import InconsistentStateError
from simrec.recommender.ranking import rank_descending
from simrec.recommender.similarity import SimilarityResult
from simrec.recommender.store import RatingStore

# Configure module logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemRecommendation:
    item_id: int
    weighted_score_sum: float
    similarity_score_sum: float
    score: float
    num_ratings: int


def _recommendation_rank_key(recommendation: ItemRecommendation) -> Tuple[float, ...]:
    return (recommendation.score, recommendation.num_ratings, -recommendation.item_id)


def _score_item(
    store: RatingStore,
    item_id: int,
    target_user_id: int,
    similarity_by_user: Dict[int, float],
) -> ItemRecommendation:
    weighted_score_sum = 0.0
    similarity_score_sum = 0.0

    for user_id, rating_score in store.raters(item_id):
        if user_id == target_user_id:
            continue

        try:
            similarity = similarity_by_user[user_id]
        except KeyError:
            raise InconsistentStateError(
                f"User {user_id} rated item {item_id} but is missing from the "
                f"similarity ranking for user {target_user_id}",
                details={
                    "user_id": user_id,
                    "item_id": item_id,
                    "target_user_id": target_user_id,
                },
            ) from None

        weighted = rating_score * similarity

        # Zero-similarity neighbors and non-positive weights carry no signal
        if similarity > 0 and weighted > 0:
            weighted_score_sum += weighted
            similarity_score_sum += similarity

    if similarity_score_sum == 0:
        score = 0.0
    else:
        score = weighted_score_sum / similarity_score_sum

    return ItemRecommendation(
        item_id=item_id,
        weighted_score_sum=weighted_score_sum,
        similarity_score_sum=similarity_score_sum,
        score=score,
        num_ratings=store.rating_count(item_id),
    )


def recommend(
    store: RatingStore,
    target_user_id: int,
    ranked_neighbors: Sequence[SimilarityResult],
    min_ratings: int,
) -> List[ItemRecommendation]:
    """Score every catalog item the target user has not rated yet.

    Args:
        store: Built rating store.
        target_user_id: User to recommend items for.
        ranked_neighbors: Full similarity ranking for ``target_user_id``, as
            returned by ``rank_similar_users``. Every user who rated a
            candidate item must be present.
        min_ratings: Items with fewer ratings in total are skipped.

    Returns:
        All candidate items, highest score first. Equal scores prefer the
        item with more ratings, then the lower item id.

    Raises:
        UnknownUserError: If the target user has no profile.
        InconsistentStateError: If a rater is missing from ``ranked_neighbors``.
    """
    start_time = time.time()

    target = store.get_profile(target_user_id)
    similarity_by_user = {result.user_id: result.similarity for result in ranked_neighbors}

    candidates = []
    for item_id in store.all_item_ids():
        if store.rating_count(item_id) < min_ratings:
            continue
        if item_id in target.ratings:
            continue
        candidates.append(_score_item(store, item_id, target_user_id, similarity_by_user))

    ranked = rank_descending(candidates, key=_recommendation_rank_key)

    logger.debug(
        "Aggregated item scores",
        extra={
            "user_id": target_user_id,
            "min_ratings": min_ratings,
            "num_candidates": len(ranked),
            "compute_time_ms": round((time.time() - start_time) * 1000, 2),
        },
    )

    return ranked
