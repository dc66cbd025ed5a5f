"""Module for answering recommendation requests.

Validates request parameters, runs the similarity ranking and item
aggregation against a built rating store, and shapes the truncated, rounded
results returned by the API and the CLI.
"""

import logging
import time
from dataclasses import dataclass
from typing import Dict, List

from simrec.exceptions import InvalidParameterError
from simrec.recommender.engine import recommend
from simrec.recommender.similarity import (
    METRIC_EUCLIDEAN,
    SUPPORTED_METRICS,
    rank_similar_users,
)
from simrec.recommender.store import RatingStore

# Configure module logger
logger = logging.getLogger(__name__)

# Default parameters
DEFAULT_RESULT_COUNT = 3
DEFAULT_MIN_RATINGS = 1
SCORE_DECIMALS = 4


@dataclass(frozen=True)
class RecommendationParams:
    """Validated parameters for a single request.

    Attributes:
        user_id: Target user.
        result_count: Maximum number of entries to return. Must be >= 1.
        min_ratings: Minimum total ratings for an item to be recommended.
            Must be >= 0.
        metric: Similarity metric name. Only "euclidean" is supported.
    """

    user_id: int
    result_count: int = DEFAULT_RESULT_COUNT
    min_ratings: int = DEFAULT_MIN_RATINGS
    metric: str = METRIC_EUCLIDEAN

    def __post_init__(self) -> None:
        for name in ("user_id", "result_count", "min_ratings"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidParameterError(name, value, "must be an integer")
        if self.result_count < 1:
            raise InvalidParameterError("result_count", self.result_count, "must be at least 1")
        if self.min_ratings < 0:
            raise InvalidParameterError("min_ratings", self.min_ratings, "must not be negative")
        if self.metric not in SUPPORTED_METRICS:
            raise InvalidParameterError(
                "metric", self.metric, f"must be one of {SUPPORTED_METRICS}"
            )


def similar_users(store: RatingStore, params: RecommendationParams) -> List[Dict]:
    """Get the users most similar to ``params.user_id``.

    Returns:
        Up to ``result_count`` dictionaries with keys ``name``, ``userId`` and
        ``similarity`` (rounded to 4 decimals), most similar first.

    Raises:
        UnknownUserError: If the user is not in the store.
    """
    start_time = time.time()

    ranked = rank_similar_users(store, params.user_id)
    results = [
        {
            "name": result.name,
            "userId": result.user_id,
            "similarity": round(result.similarity, SCORE_DECIMALS),
        }
        for result in ranked[: params.result_count]
    ]

    logger.info(
        "Similar users generated",
        extra={
            "user_id": params.user_id,
            "num_results": len(results),
            "population": len(ranked),
            "total_time_ms": round((time.time() - start_time) * 1000, 2),
        },
    )

    return results


def recommended_items(store: RatingStore, params: RecommendationParams) -> List[Dict]:
    """Get item recommendations for ``params.user_id``.

    Returns:
        Up to ``result_count`` dictionaries with keys ``title``, ``itemId``,
        ``numRatings`` and ``score`` (rounded to 4 decimals), best first.

    Raises:
        UnknownUserError: If the user is not in the store.
    """
    start_time = time.time()

    ranked_neighbors = rank_similar_users(store, params.user_id)
    scoring_start = time.time()
    recommendations = recommend(
        store,
        params.user_id,
        ranked_neighbors,
        min_ratings=params.min_ratings,
    )
    scoring_time = time.time() - scoring_start

    results = [
        {
            "title": store.get_item(recommendation.item_id).title,
            "itemId": recommendation.item_id,
            "numRatings": recommendation.num_ratings,
            "score": round(recommendation.score, SCORE_DECIMALS),
        }
        for recommendation in recommendations[: params.result_count]
    ]

    logger.info(
        "Recommendations generated",
        extra={
            "user_id": params.user_id,
            "min_ratings": params.min_ratings,
            "num_results": len(results),
            "num_candidates": len(recommendations),
            "scoring_time_ms": round(scoring_time * 1000, 2),
            "total_time_ms": round((time.time() - start_time) * 1000, 2),
        },
    )

    return results


def batch_recommend_for_users(
    store: RatingStore,
    user_ids: List[int],
    result_count: int = DEFAULT_RESULT_COUNT,
    min_ratings: int = DEFAULT_MIN_RATINGS,
) -> Dict[int, List[Dict]]:
    """Generate recommendations for multiple users.

    Unknown users get an empty list instead of failing the whole batch.

    Raises:
        InvalidParameterError: If ``result_count`` or ``min_ratings`` is invalid.

    Example:
        >>> results = batch_recommend_for_users(store, [1, 2, 3], result_count=5)
        >>> for user_id, items in results.items():
        ...     print(f"User {user_id}: {[item['itemId'] for item in items]}")
    """
    logger.info(
        f"Generating batch recommendations for {len(user_ids)} users, "
        f"result_count={result_count}"
    )

    results: Dict[int, List[Dict]] = {}
    for user_id in user_ids:
        params = RecommendationParams(
            user_id=user_id, result_count=result_count, min_ratings=min_ratings
        )
        if not store.has_user(user_id):
            logger.warning(f"User {user_id} not found in rating data")
            results[user_id] = []
            continue
        results[user_id] = recommended_items(store, params)

    logger.info(f"Batch recommendations completed for {len(results)} users")

    return results
