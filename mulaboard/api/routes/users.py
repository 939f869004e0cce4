"""Received-feedback overview for a signed-in user."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from mulaboard.api.auth import get_acting_user_id, verify_api_key
from mulaboard.api.dependencies import (
    get_feedback_repository,
    get_period_repository,
    get_user_repository,
)
from mulaboard.api.models import (
    BadgeItem,
    ErrorResponse,
    FeedbackItem,
    RatingSummary,
    UserFeedbackResponse,
)
from mulaboard.badges.calculator import build_user_stats, calculate_earned_badges
from mulaboard.feedback.repository import FeedbackRepository
from mulaboard.periods.repository import ReviewPeriodRepository
from mulaboard.ratings.classifier import aggregate_ratings
from mulaboard.users.repository import UserRepository

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get(
    "/users/{user_id}/feedback",
    response_model=UserFeedbackResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid API key or missing user"},
        403: {"model": ErrorResponse, "description": "Not your feedback"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
    summary="Get received feedback",
    description=(
        "Approved feedback the user received, optionally for one review "
        "period, with the tier summary, category averages and earned badges."
    ),
)
async def get_user_feedback(
    user_id: str,
    period_id: str | None = Query(default=None, description="Only this review period"),
    _api_key: str = Depends(verify_api_key),
    acting_user_id: str = Depends(get_acting_user_id),
    feedback_repo: FeedbackRepository = Depends(get_feedback_repository),
    user_repo: UserRepository = Depends(get_user_repository),
    period_repo: ReviewPeriodRepository = Depends(get_period_repository),
) -> UserFeedbackResponse:
    if acting_user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only view feedback you received",
        )

    user = await user_repo.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    feedback = await feedback_repo.list_for_target(user_id, period_id)

    # Badges consider the whole history, not only the requested period
    history = feedback if period_id is None else await feedback_repo.list_for_target(user_id)
    periods = await period_repo.list_ordered()
    history_stats = build_user_stats(history, periods)
    stats = build_user_stats(feedback, periods)

    summary = aggregate_ratings(f.mula_rating for f in feedback).to_dict()

    return UserFeedbackResponse(
        user_id=user_id,
        review_period_id=period_id,
        feedback=[FeedbackItem(**f.to_dict()) for f in feedback],
        summary=RatingSummary(**summary),
        average_score=stats.average_score,
        category_averages=stats.category_averages,
        badges=[BadgeItem(**b.to_dict()) for b in calculate_earned_badges(history_stats)],
    )
