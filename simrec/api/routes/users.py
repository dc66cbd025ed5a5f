"""User endpoints for the SimRec API.

Lists the users in the rating store and ranks the users most similar to a
given user.
"""

import logging
import time
from typing import List, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from simrec.api.metrics import OPERATION_SIMILAR_USERS, metrics_service
from simrec.api.state import get_settings, get_store
from simrec.recommender.infer import RecommendationParams, similar_users
from simrec.recommender.similarity import METRIC_EUCLIDEAN

# Configure module logger
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(
    prefix="/users",
    tags=["users"],
)


class UserSummary(BaseModel):
    userId: int
    name: str


class UsersResponse(BaseModel):
    msg: str = "All users"
    res: List[UserSummary]


class SimilarUser(BaseModel):
    name: str
    userId: int
    similarity: float = Field(..., ge=0.0, le=1.0, description="Similarity in [0, 1]")


class SimilarUsersResponse(BaseModel):
    """Response model for similar-user requests.

    Attributes:
        user_id: The user the ranking was computed for.
        similarity: Similarity metric used.
        results: Requested number of results.
        data: Most similar users first.
    """

    user_id: int
    similarity: str
    results: int
    data: List[SimilarUser]


@router.get("", response_model=UsersResponse)
def get_all_users() -> UsersResponse:
    """List every user in the rating store."""
    store = get_store()
    return UsersResponse(res=[UserSummary(**user) for user in store.users()])


@router.get("/{user_id}/similar", response_model=SimilarUsersResponse)
def get_similar_users(
    user_id: int,
    results: Optional[int] = Query(None, description="Number of users to return"),
    similarity: str = Query(METRIC_EUCLIDEAN, description="Similarity metric"),
) -> SimilarUsersResponse:
    """Get the users whose ratings are most similar to ``user_id``.

    Example:
        GET /users/1/similar?results=3
        Returns the 3 users most similar to user 1.
    """
    store = get_store()
    if results is None:
        results = get_settings().default_results

    params = RecommendationParams(user_id=user_id, result_count=results, metric=similarity)

    start_time = time.time()
    try:
        data = similar_users(store, params)
    except Exception:
        metrics_service.record(OPERATION_SIMILAR_USERS, 0.0, success=False)
        raise
    metrics_service.record(OPERATION_SIMILAR_USERS, (time.time() - start_time) * 1000)

    return SimilarUsersResponse(
        user_id=user_id,
        similarity=similarity,
        results=results,
        data=[SimilarUser(**entry) for entry in data],
    )
