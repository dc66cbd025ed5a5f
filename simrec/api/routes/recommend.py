"""Recommendation endpoints for the SimRec API.

This module provides API endpoints for generating item recommendations from
the ratings of similar users, and for rebuilding the rating store from disk.
"""

import logging
import time
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from simrec.api.metrics import OPERATION_RECOMMENDED_ITEMS, metrics_service
from simrec.api.state import get_settings, get_store, load_store
from simrec.recommender.infer import RecommendationParams, recommended_items
from simrec.recommender.similarity import METRIC_EUCLIDEAN

# Configure module logger
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(
    prefix="/recommend",
    tags=["recommendations"],
)


class RecommendedItem(BaseModel):
    title: str
    itemId: int
    numRatings: int
    score: float


class RecommendationResponse(BaseModel):
    """Response model for recommendation requests.

    Attributes:
        user_id: The user ID for which recommendations were generated.
        similarity: Similarity metric used to weight neighbors.
        results: Requested number of results.
        min_ratings: Minimum number of ratings an item needed.
        data: Recommended items, best first.
    """

    user_id: int = Field(..., description="User ID for recommendations")
    similarity: str = Field(default=METRIC_EUCLIDEAN, description="Similarity metric")
    results: int = Field(..., description="Requested number of results")
    min_ratings: int = Field(..., description="Minimum ratings per item")
    data: List[RecommendedItem] = Field(..., description="Recommended items")


@router.get("/{user_id}", response_model=RecommendationResponse)
def get_recommendations(
    user_id: int,
    results: Optional[int] = Query(None, description="Number of items to return"),
    min_ratings: Optional[int] = Query(
        None, description="Minimum number of ratings an item needs"
    ),
    similarity: str = Query(METRIC_EUCLIDEAN, description="Similarity metric"),
) -> RecommendationResponse:
    """Get item recommendations for a user.

    Scores every item the user has not rated by the ratings of all other
    users, weighted by their similarity to this user.

    Args:
        user_id: User ID for which to generate recommendations.
        results: Number of recommendations to return.
        min_ratings: Items with fewer ratings in total are not recommended.
        similarity: Similarity metric; only "euclidean" is supported.

    Returns:
        RecommendationResponse with the best scored items first.

    Raises:
        UnknownUserError: If the user is not in the rating data (404).
        InvalidParameterError: If a parameter is out of range (400).

    Example:
        GET /recommend/42?results=5&min_ratings=3
        Returns the top 5 items rated by at least 3 users for user 42.
    """
    store = get_store()
    settings = get_settings()
    if results is None:
        results = settings.default_results
    if min_ratings is None:
        min_ratings = settings.default_min_ratings

    params = RecommendationParams(
        user_id=user_id,
        result_count=results,
        min_ratings=min_ratings,
        metric=similarity,
    )

    logger.info(
        f"Generating recommendations for user {user_id}, "
        f"results={results}, min_ratings={min_ratings}"
    )

    start_time = time.time()
    try:
        data = recommended_items(store, params)
    except Exception:
        metrics_service.record(OPERATION_RECOMMENDED_ITEMS, 0.0, success=False)
        raise
    metrics_service.record(OPERATION_RECOMMENDED_ITEMS, (time.time() - start_time) * 1000)

    return RecommendationResponse(
        user_id=user_id,
        similarity=similarity,
        results=results,
        min_ratings=min_ratings,
        data=[RecommendedItem(**entry) for entry in data],
    )


@router.post("/reload-data")
def reload_data() -> Dict[str, object]:
    """Rebuild the rating store from the configured data directory.

    The new store replaces the old one only once it is fully built, so a
    failed reload keeps serving the previous data.
    """
    logger.info("Reloading rating data...")
    try:
        store = load_store()
    except FileNotFoundError as e:
        logger.error(f"Failed to reload rating data: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Failed to reload rating data: {e}",
        )
    return {
        "status": "Rating data reloaded successfully",
        "num_users": store.num_users,
        "num_items": store.num_items,
        "num_ratings": store.num_ratings,
    }
