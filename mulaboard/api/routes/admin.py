"""Moderation and abuse-analysis endpoints for admins."""

import math

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from mulaboard.api.auth import get_acting_user_id, verify_api_key
from mulaboard.api.dependencies import (
    get_attempt_repository,
    get_feedback_config,
    get_feedback_repository,
    get_feedback_service,
)
from mulaboard.api.models import (
    AdminFeedbackItem,
    AdminFeedbackResponse,
    AttemptStatsResponse,
    ErrorResponse,
    ModerationRequest,
    Pagination,
)
from mulaboard.eligibility.repository import AttemptRepository
from mulaboard.feedback.config import FeedbackConfig
from mulaboard.feedback.repository import FeedbackRepository
from mulaboard.feedback.schemas import VALID_MODERATION_STATUSES
from mulaboard.feedback.service import FeedbackService
from mulaboard.ratings.schemas import VALID_MULA_RATINGS

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/admin", dependencies=[Depends(verify_api_key)])


@router.get(
    "/feedback",
    response_model=AdminFeedbackResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid API key"},
        422: {"model": ErrorResponse, "description": "Invalid filter parameter"},
    },
    summary="List feedback for moderation",
)
async def list_feedback(
    moderation_status: str | None = Query(default=None, alias="status"),
    mula_rating: str | None = Query(default=None),
    user_id: str | None = Query(default=None),
    period_id: str | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1, le=100),
    feedback_repo: FeedbackRepository = Depends(get_feedback_repository),
    config: FeedbackConfig = Depends(get_feedback_config),
) -> AdminFeedbackResponse:
    if moderation_status is not None and moderation_status not in VALID_MODERATION_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=(
                f"Invalid status {moderation_status!r}. "
                f"Must be one of: {sorted(VALID_MODERATION_STATUSES)}"
            ),
        )
    if mula_rating is not None and mula_rating not in VALID_MULA_RATINGS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=(
                f"Invalid mula_rating {mula_rating!r}. "
                f"Must be one of: {sorted(VALID_MULA_RATINGS)}"
            ),
        )

    page_size = limit or config.admin_page_size
    items, total = await feedback_repo.list_all(
        moderation_status=moderation_status,
        mula_rating=mula_rating,
        target_user_id=user_id,
        review_period_id=period_id,
        limit=page_size,
        offset=(page - 1) * page_size,
    )
    return AdminFeedbackResponse(
        feedback=[AdminFeedbackItem(**f.to_admin_dict()) for f in items],
        pagination=Pagination(
            page=page,
            limit=page_size,
            total=total,
            total_pages=math.ceil(total / page_size),
        ),
    )


@router.patch(
    "/feedback/{feedback_id}",
    response_model=AdminFeedbackItem,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid API key or missing user"},
        404: {"model": ErrorResponse, "description": "Feedback not found"},
        422: {"model": ErrorResponse, "description": "Invalid moderation request"},
    },
    summary="Moderate feedback",
)
async def moderate_feedback(
    feedback_id: str,
    body: ModerationRequest,
    moderator_id: str = Depends(get_acting_user_id),
    service: FeedbackService = Depends(get_feedback_service),
) -> AdminFeedbackItem:
    feedback = await service.moderate(
        feedback_id,
        moderator_id,
        body.status,
        note=body.note,
        edits=body.edits(),
    )
    return AdminFeedbackItem(**feedback.to_admin_dict())


@router.get(
    "/attempts/stats",
    response_model=AttemptStatsResponse,
    responses={401: {"model": ErrorResponse, "description": "Invalid API key"}},
    summary="Submission attempt statistics",
)
async def attempt_stats(
    period_id: str | None = Query(default=None),
    attempt_repo: AttemptRepository = Depends(get_attempt_repository),
) -> AttemptStatsResponse:
    stats = await attempt_repo.get_stats(period_id)
    return AttemptStatsResponse(review_period_id=period_id, **stats.to_dict())
