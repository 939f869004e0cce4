"""Anonymous feedback records and the submission pipeline.

Components:
- Feedback / ModerationInfo: Stored records
- FeedbackRepository: asyncpg persistence; recomputes the tier on every write
- SubmissionService: Honeypot, timing, eligibility gate, persistence
- FeedbackService: Visibility, reactions and moderation
"""

from mulaboard.feedback.config import FeedbackConfig
from mulaboard.feedback.repository import DuplicateFeedbackError, FeedbackRepository
from mulaboard.feedback.schemas import (
    VALID_MODERATION_STATUSES,
    VALID_REACTIONS,
    VALID_VISIBILITIES,
    Feedback,
    FeedbackSubmission,
    ModerationInfo,
)
from mulaboard.feedback.service import (
    FeedbackError,
    FeedbackForbidden,
    FeedbackNotFound,
    FeedbackService,
    SubmissionRejected,
    SubmissionService,
)

__all__ = [
    "DuplicateFeedbackError",
    "Feedback",
    "FeedbackConfig",
    "FeedbackError",
    "FeedbackForbidden",
    "FeedbackNotFound",
    "FeedbackRepository",
    "FeedbackService",
    "FeedbackSubmission",
    "ModerationInfo",
    "SubmissionRejected",
    "SubmissionService",
    "VALID_MODERATION_STATUSES",
    "VALID_REACTIONS",
    "VALID_VISIBILITIES",
]
