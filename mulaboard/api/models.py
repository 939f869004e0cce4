"""
Request and response models for the MulaBoard API.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

from mulaboard.ratings.schemas import MAX_SCORE, MIN_SCORE, CategoryRating, FeedbackRatings


class ErrorResponse(BaseModel):
    """Response model for errors."""

    detail: str = Field(..., description="Error message")
    error_type: str = Field(
        default="error",
        description="Error type, or the rejection reason code for submissions",
    )


class ComponentHealth(BaseModel):
    """Health of a single infrastructure component."""

    status: str = Field(..., description="healthy or unhealthy")
    latency_ms: float | None = Field(default=None, description="Check latency in milliseconds")
    details: dict[str, Any] | None = Field(default=None, description="Error details")


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(
        ...,
        description="Overall service status: healthy, degraded, or unhealthy",
    )
    components: dict[str, ComponentHealth] = Field(
        default_factory=dict,
        description="Per-component health",
    )
    version: str = Field(..., description="Service version")


# Submission models


class CategoryRatingModel(BaseModel):
    """Score and optional comment for one rating category."""

    score: int = Field(..., ge=MIN_SCORE, le=MAX_SCORE, description="Score from 1 to 5")
    comment: str = Field(default="", description="Optional comment")


class RatingsModel(BaseModel):
    """The five rating categories."""

    work_quality: CategoryRatingModel
    communication: CategoryRatingModel
    team_behavior: CategoryRatingModel
    accountability: CategoryRatingModel
    overall: CategoryRatingModel

    def to_domain(self) -> FeedbackRatings:
        def convert(item: CategoryRatingModel) -> CategoryRating:
            return CategoryRating(score=item.score, comment=item.comment.strip())

        return FeedbackRatings(
            work_quality=convert(self.work_quality),
            communication=convert(self.communication),
            team_behavior=convert(self.team_behavior),
            accountability=convert(self.accountability),
            overall=convert(self.overall),
        )


class FeedbackSubmitRequest(BaseModel):
    """Anonymous feedback submission from the public form."""

    target_user_id: str = Field(..., min_length=1, description="User receiving the feedback")
    review_period_id: str = Field(..., min_length=1, description="Review period")
    fingerprint: str = Field(..., min_length=1, description="Browser fingerprint")
    ratings: RatingsModel
    strengths: str = Field(..., description="What the colleague does well")
    improvements: str = Field(..., description="What the colleague could improve")
    form_load_time: float = Field(
        ...,
        gt=0,
        description="Epoch milliseconds at which the form was loaded",
    )
    honeypot: str | None = Field(
        default=None,
        description="Hidden field; must be empty",
    )


class FeedbackSubmitResponse(BaseModel):
    """Response model for an accepted submission."""

    feedback_id: str = Field(..., description="Identifier of the stored feedback")
    mula_rating: str = Field(..., description="golden_mula, fresh_carrot or rotten_tomato")
    message: str = Field(default="Feedback submitted successfully!")


class EligibilityRequest(BaseModel):
    """Request model for an eligibility pre-check."""

    fingerprint: str = Field(..., min_length=1)
    target_user_id: str = Field(..., min_length=1)
    review_period_id: str = Field(..., min_length=1)


class EligibilityResponse(BaseModel):
    """Gate verdict. ``reason`` and ``message`` are omitted when allowed."""

    allowed: bool
    reason: str | None = None
    message: str | None = None


# Feedback listing models


class FeedbackItem(BaseModel):
    """Single feedback record, without reviewer identifiers."""

    feedback_id: str
    target_user_id: str
    review_period_id: str
    ratings: dict[str, dict[str, Any]]
    average_score: float
    strengths: str
    improvements: str
    mula_rating: str
    visibility: str
    moderation_status: str
    employee_reaction: str | None = None
    created_at: str
    updated_at: str


class AdminFeedbackItem(FeedbackItem):
    """Feedback record with its moderation history."""

    moderation: dict[str, Any]


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class PublicFeedbackResponse(BaseModel):
    """Page of public feedback."""

    feedback: list[FeedbackItem]
    pagination: Pagination


class AdminFeedbackResponse(BaseModel):
    """Page of feedback for moderators."""

    feedback: list[AdminFeedbackItem]
    pagination: Pagination


class RatingSummary(BaseModel):
    """Tier distribution of a set of feedback."""

    golden_mula: int
    fresh_carrot: int
    rotten_tomato: int
    total: int
    percentage: dict[str, int]
    dominant: str


class BadgeItem(BaseModel):
    badge_id: str
    name: str
    description: str
    emoji: str
    category: str
    rarity: str
    color: str


class UserFeedbackResponse(BaseModel):
    """Feedback a user received, with summary statistics and badges."""

    user_id: str
    review_period_id: str | None = None
    feedback: list[FeedbackItem]
    summary: RatingSummary
    average_score: float
    category_averages: dict[str, float]
    badges: list[BadgeItem]


# Feedback action models


class VisibilityRequest(BaseModel):
    visibility: Literal["private", "public"]


class ReactionRequest(BaseModel):
    reaction: Literal["thanks", "noted", "ouch", "fair_enough"] | None = None


class ModerationRequest(BaseModel):
    """Moderation decision, optionally replacing free-text fields."""

    status: Literal["pending", "approved", "flagged"]
    note: str | None = Field(default=None, description="Note for other moderators")
    strengths: str | None = Field(default=None, description="Replacement strengths text")
    improvements: str | None = Field(default=None, description="Replacement improvements text")

    def edits(self) -> dict[str, str]:
        edits: dict[str, str] = {}
        if self.strengths is not None:
            edits["strengths"] = self.strengths
        if self.improvements is not None:
            edits["improvements"] = self.improvements
        return edits


class AttemptStatsResponse(BaseModel):
    """Submission attempt counts by outcome."""

    review_period_id: str | None = None
    total: int
    submitted: int
    blocked: int
    rate_limited: int
