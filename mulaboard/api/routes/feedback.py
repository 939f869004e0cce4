"""Feedback endpoints: anonymous submission, eligibility pre-check,
the public wall, and recipient actions on received feedback."""

import math
import time

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from mulaboard.api.auth import get_acting_user_id, verify_api_key
from mulaboard.api.dependencies import (
    get_feedback_config,
    get_feedback_repository,
    get_feedback_service,
    get_submission_service,
)
from mulaboard.api.models import (
    EligibilityRequest,
    EligibilityResponse,
    ErrorResponse,
    FeedbackItem,
    FeedbackSubmitRequest,
    FeedbackSubmitResponse,
    Pagination,
    PublicFeedbackResponse,
    ReactionRequest,
    VisibilityRequest,
)
from mulaboard.api.rate_limit import get_client_ip
from mulaboard.feedback.config import FeedbackConfig
from mulaboard.feedback.repository import FeedbackRepository
from mulaboard.feedback.schemas import FeedbackSubmission
from mulaboard.feedback.service import FeedbackError, FeedbackService, SubmissionService

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "/feedback",
    response_model=FeedbackSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Bot detected or period inactive"},
        403: {"model": ErrorResponse, "description": "Not eligible to submit"},
        404: {"model": ErrorResponse, "description": "User or review period not found"},
        422: {"model": ErrorResponse, "description": "Invalid submission"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
    summary="Submit anonymous feedback",
    description=(
        "Submit anonymous feedback for a colleague. The submission passes "
        "honeypot and timing checks and the eligibility gate before it is stored."
    ),
)
async def submit_feedback(
    body: FeedbackSubmitRequest,
    request: Request,
    service: SubmissionService = Depends(get_submission_service),
) -> FeedbackSubmitResponse:
    start_time = time.perf_counter()

    try:
        submission = FeedbackSubmission(
            target_user_id=body.target_user_id,
            review_period_id=body.review_period_id,
            fingerprint=body.fingerprint,
            ratings=body.ratings.to_domain(),
            strengths=body.strengths,
            improvements=body.improvements,
            form_load_time_ms=body.form_load_time,
            honeypot=body.honeypot,
        )
        feedback = await service.submit(submission, get_client_ip(request))

        logger.info(
            "Feedback submission accepted",
            feedback_id=feedback.feedback_id,
            latency_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return FeedbackSubmitResponse(
            feedback_id=feedback.feedback_id,
            mula_rating=feedback.mula_rating,
        )

    except (HTTPException, FeedbackError):
        raise
    except Exception as e:
        logger.error("submit_feedback_failed", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while submitting feedback. Please try again.",
        )


@router.post(
    "/feedback/check-eligibility",
    response_model=EligibilityResponse,
    response_model_exclude_none=True,
    summary="Check submission eligibility",
    description=(
        "Run the eligibility gate without submitting, so the form can warn "
        "a reviewer before they write their feedback."
    ),
)
async def check_eligibility(
    body: EligibilityRequest,
    request: Request,
    service: SubmissionService = Depends(get_submission_service),
) -> EligibilityResponse:
    verdict = await service.check_eligibility(
        body.fingerprint,
        get_client_ip(request),
        body.target_user_id,
        body.review_period_id,
    )
    return EligibilityResponse(**verdict)


@router.get(
    "/feedback/public",
    response_model=PublicFeedbackResponse,
    responses={500: {"model": ErrorResponse, "description": "Server error"}},
    summary="List public feedback",
    description="Approved feedback its recipients chose to make public, newest first.",
)
async def list_public_feedback(
    user_id: str | None = Query(default=None, description="Only feedback for this user"),
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, description="Page size (capped)"),
    feedback_repo: FeedbackRepository = Depends(get_feedback_repository),
    config: FeedbackConfig = Depends(get_feedback_config),
) -> PublicFeedbackResponse:
    page_size = min(config.public_page_size_max, max(1, limit or config.public_page_size))

    try:
        items = await feedback_repo.list_public(
            user_id, limit=page_size, offset=(page - 1) * page_size,
        )
        total = await feedback_repo.count_public(user_id)
    except Exception as e:
        logger.error("list_public_feedback_failed", error=str(e), exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list public feedback",
        )

    return PublicFeedbackResponse(
        feedback=[FeedbackItem(**f.to_dict()) for f in items],
        pagination=Pagination(
            page=page,
            limit=page_size,
            total=total,
            total_pages=math.ceil(total / page_size),
        ),
    )


@router.patch(
    "/feedback/{feedback_id}/visibility",
    response_model=FeedbackItem,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid API key or missing user"},
        403: {"model": ErrorResponse, "description": "Not the recipient"},
        404: {"model": ErrorResponse, "description": "Feedback not found"},
    },
    summary="Change feedback visibility",
)
async def update_visibility(
    feedback_id: str,
    body: VisibilityRequest,
    _api_key: str = Depends(verify_api_key),
    user_id: str = Depends(get_acting_user_id),
    service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackItem:
    feedback = await service.update_visibility(feedback_id, user_id, body.visibility)
    return FeedbackItem(**feedback.to_dict())


@router.patch(
    "/feedback/{feedback_id}/reaction",
    response_model=FeedbackItem,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid API key or missing user"},
        403: {"model": ErrorResponse, "description": "Not the recipient"},
        404: {"model": ErrorResponse, "description": "Feedback not found"},
    },
    summary="React to received feedback",
)
async def update_reaction(
    feedback_id: str,
    body: ReactionRequest,
    _api_key: str = Depends(verify_api_key),
    user_id: str = Depends(get_acting_user_id),
    service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackItem:
    feedback = await service.set_reaction(feedback_id, user_id, body.reaction)
    return FeedbackItem(**feedback.to_dict())
