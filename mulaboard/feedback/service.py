"""Feedback services: the anonymous submission pipeline and owner/admin actions.

``SubmissionService.submit`` runs the full defensive pipeline:

1. Honeypot field must be empty
2. At least ``min_submit_seconds`` between form load and submit
3. Text lengths within limits
4. Eligibility gate (duplicate, IP window, fingerprint window)
5. Target user and an active review period must exist
6. Classify and persist
7. Record the submitted attempt

Business rejections surface as ``SubmissionRejected``; the gate's verdicts
and attempt recording never raise.
"""

from datetime import datetime, timezone
from typing import Any

import structlog

from mulaboard.eligibility.config import EligibilityConfig
from mulaboard.eligibility.gate import ALREADY_SUBMITTED_MESSAGE, EligibilityGate
from mulaboard.eligibility.guards import (
    hash_ip,
    validate_honeypot,
    validate_submission_timing,
)
from mulaboard.eligibility.schemas import REASON_ALREADY_SUBMITTED
from mulaboard.feedback.config import FeedbackConfig
from mulaboard.feedback.repository import DuplicateFeedbackError, FeedbackRepository
from mulaboard.feedback.schemas import (
    MODERATABLE_FIELDS,
    VALID_MODERATION_STATUSES,
    VALID_REACTIONS,
    VALID_VISIBILITIES,
    Feedback,
    FeedbackSubmission,
)
from mulaboard.observability.metrics import MetricsCollector, get_metrics
from mulaboard.periods.repository import ReviewPeriodRepository
from mulaboard.ratings.classifier import classify_ratings
from mulaboard.users.repository import UserRepository

logger = structlog.get_logger(__name__)

REASON_HONEYPOT = "honeypot"
REASON_TOO_FAST = "too_fast"
REASON_VALIDATION = "validation_failed"
REASON_USER_NOT_FOUND = "user_not_found"
REASON_PERIOD_NOT_FOUND = "period_not_found"
REASON_PERIOD_INACTIVE = "period_inactive"


class FeedbackError(Exception):
    """Expected failure of a feedback operation, mapped to an HTTP status."""

    status_code = 400

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class FeedbackNotFound(FeedbackError):
    status_code = 404


class FeedbackForbidden(FeedbackError):
    status_code = 403


class SubmissionRejected(FeedbackError):
    """A submission refused by the pipeline.

    Attributes:
        reason: Machine-readable reason code.
        message: Message safe to show the reviewer.
        status_code: HTTP status for the rejection.
    """

    def __init__(self, reason: str, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)
        self.reason = reason


class SubmissionService:
    """Runs anonymous submissions through guards, gate and persistence."""

    def __init__(
        self,
        gate: EligibilityGate,
        feedback_repo: FeedbackRepository,
        user_repo: UserRepository,
        period_repo: ReviewPeriodRepository,
        eligibility_config: EligibilityConfig | None = None,
        feedback_config: FeedbackConfig | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self._gate = gate
        self._feedback = feedback_repo
        self._users = user_repo
        self._periods = period_repo
        self._eligibility_config = eligibility_config or EligibilityConfig()
        self._feedback_config = feedback_config or FeedbackConfig()
        self._metrics = metrics or get_metrics()

    def _reject(self, reason: str, message: str, status_code: int) -> SubmissionRejected:
        self._metrics.record_rejection(reason)
        return SubmissionRejected(reason, message, status_code)

    def _validate_texts(self, submission: FeedbackSubmission) -> None:
        config = self._feedback_config
        for name in ("strengths", "improvements"):
            length = len(getattr(submission, name).strip())
            if length < config.text_min_length or length > config.text_max_length:
                raise self._reject(
                    REASON_VALIDATION,
                    f"{name.capitalize()} must be between {config.text_min_length} "
                    f"and {config.text_max_length} characters",
                    422,
                )

        ratings = submission.ratings
        for category in (
            ratings.work_quality,
            ratings.communication,
            ratings.team_behavior,
            ratings.accountability,
            ratings.overall,
        ):
            if len(category.comment) > config.comment_max_length:
                raise self._reject(
                    REASON_VALIDATION,
                    f"Comments cannot exceed {config.comment_max_length} characters",
                    422,
                )

    async def submit(
        self,
        submission: FeedbackSubmission,
        ip_address: str,
        now_ms: float | None = None,
    ) -> Feedback:
        """Accept or reject an anonymous feedback submission.

        Args:
            submission: The submitted form.
            ip_address: Reviewer's raw IP; only its hash is stored.
            now_ms: Current epoch milliseconds (defaults to wall clock).

        Returns:
            The stored Feedback.

        Raises:
            SubmissionRejected: The submission was refused.
        """
        if not validate_honeypot(submission.honeypot):
            raise self._reject(REASON_HONEYPOT, "Invalid submission detected", 400)

        if not validate_submission_timing(
            submission.form_load_time_ms,
            min_seconds=self._eligibility_config.min_submit_seconds,
            now_ms=now_ms,
        ):
            raise self._reject(
                REASON_TOO_FAST,
                "Form submitted too quickly. "
                "Please take your time to provide thoughtful feedback.",
                400,
            )

        self._validate_texts(submission)

        eligibility = await self._gate.check(
            submission.fingerprint,
            ip_address,
            submission.target_user_id,
            submission.review_period_id,
        )
        if not eligibility.allowed:
            await self._record(submission, ip_address, "blocked", eligibility.reason)
            raise self._reject(
                eligibility.reason or "blocked",
                eligibility.message or "You are not eligible to submit feedback",
                403,
            )

        user = await self._users.get_by_id(submission.target_user_id)
        if user is None:
            raise self._reject(REASON_USER_NOT_FOUND, "User not found", 404)

        period = await self._periods.get_by_id(submission.review_period_id)
        if period is None:
            raise self._reject(REASON_PERIOD_NOT_FOUND, "Review period not found", 404)
        if not period.is_active:
            raise self._reject(
                REASON_PERIOD_INACTIVE, "This review period is no longer active", 400,
            )

        feedback = Feedback(
            target_user_id=submission.target_user_id,
            review_period_id=submission.review_period_id,
            reviewer_fingerprint=submission.fingerprint,
            reviewer_ip_hash=hash_ip(ip_address),
            ratings=submission.ratings,
            strengths=submission.strengths.strip(),
            improvements=submission.improvements.strip(),
            mula_rating=classify_ratings(submission.ratings).value,
        )
        try:
            stored = await self._feedback.create(feedback)
        except DuplicateFeedbackError:
            # Concurrent submission won the race past the gate
            await self._record(
                submission, ip_address, "blocked", REASON_ALREADY_SUBMITTED,
            )
            raise self._reject(REASON_ALREADY_SUBMITTED, ALREADY_SUBMITTED_MESSAGE, 403)

        await self._record(submission, ip_address, "submitted")

        self._metrics.record_submission(stored.mula_rating)
        logger.info(
            "Feedback submitted",
            feedback_id=stored.feedback_id,
            target_user_id=stored.target_user_id,
            review_period_id=stored.review_period_id,
            mula_rating=stored.mula_rating,
        )
        return stored

    async def check_eligibility(
        self,
        fingerprint: str,
        ip_address: str,
        target_user_id: str,
        review_period_id: str,
    ) -> dict[str, Any]:
        """Gate verdict without submitting; used to pre-check the form."""
        result = await self._gate.check(
            fingerprint, ip_address, target_user_id, review_period_id,
        )
        return result.to_dict()

    async def _record(
        self,
        submission: FeedbackSubmission,
        ip_address: str,
        status: str,
        block_reason: str | None = None,
    ) -> None:
        await self._gate.record_attempt(
            submission.fingerprint,
            ip_address,
            submission.target_user_id,
            submission.review_period_id,
            status=status,
            block_reason=block_reason,
        )


class FeedbackService:
    """Actions on received feedback by its recipient or by moderators."""

    def __init__(
        self,
        feedback_repo: FeedbackRepository,
        config: FeedbackConfig | None = None,
    ) -> None:
        self._feedback = feedback_repo
        self._config = config or FeedbackConfig()

    async def _get(self, feedback_id: str) -> Feedback:
        feedback = await self._feedback.get_by_id(feedback_id)
        if feedback is None:
            raise FeedbackNotFound("Feedback not found")
        return feedback

    async def _get_owned(self, feedback_id: str, user_id: str) -> Feedback:
        feedback = await self._get(feedback_id)
        if feedback.target_user_id != user_id:
            raise FeedbackForbidden("You can only manage feedback you received")
        return feedback

    async def _save(self, feedback: Feedback) -> Feedback:
        saved = await self._feedback.save(feedback)
        if saved is None:
            raise FeedbackNotFound("Feedback not found")
        return saved

    async def update_visibility(
        self,
        feedback_id: str,
        user_id: str,
        visibility: str,
    ) -> Feedback:
        """Make received feedback public or private (recipient only)."""
        if visibility not in VALID_VISIBILITIES:
            raise FeedbackError("Visibility must be either private or public", 422)
        feedback = await self._get_owned(feedback_id, user_id)
        feedback.visibility = visibility
        saved = await self._save(feedback)
        logger.info("Feedback visibility changed", feedback_id=feedback_id, visibility=visibility)
        return saved

    async def set_reaction(
        self,
        feedback_id: str,
        user_id: str,
        reaction: str | None,
    ) -> Feedback:
        """Set or clear the recipient's reaction."""
        if reaction is not None and reaction not in VALID_REACTIONS:
            raise FeedbackError(
                f"Reaction must be one of: {', '.join(sorted(VALID_REACTIONS))}", 422,
            )
        feedback = await self._get_owned(feedback_id, user_id)
        feedback.employee_reaction = reaction
        return await self._save(feedback)

    async def moderate(
        self,
        feedback_id: str,
        moderator_id: str,
        status: str,
        note: str | None = None,
        edits: dict[str, str] | None = None,
    ) -> Feedback:
        """Apply a moderation decision.

        Edited fields keep their first original text in
        ``moderation.original_content`` and are listed in
        ``moderation.removed_fields``.

        Args:
            feedback_id: Feedback to moderate.
            moderator_id: Admin applying the decision.
            status: New moderation status.
            note: Optional note for other moderators.
            edits: Replacement text per moderatable field.

        Raises:
            FeedbackNotFound: Unknown feedback.
            FeedbackError: Invalid status, field or note.
        """
        if status not in VALID_MODERATION_STATUSES:
            raise FeedbackError(
                f"Status must be one of: {', '.join(sorted(VALID_MODERATION_STATUSES))}",
                422,
            )
        if note is not None and len(note) > self._config.moderation_note_max_length:
            raise FeedbackError(
                "Moderation note cannot exceed "
                f"{self._config.moderation_note_max_length} characters",
                422,
            )
        edits = edits or {}
        unknown = set(edits) - MODERATABLE_FIELDS
        if unknown:
            raise FeedbackError(f"Fields cannot be moderated: {sorted(unknown)}", 422)

        feedback = await self._get(feedback_id)
        moderation = feedback.moderation

        for name, text in edits.items():
            moderation.original_content.setdefault(name, getattr(feedback, name))
            if name not in moderation.removed_fields:
                moderation.removed_fields.append(name)
            setattr(feedback, name, text)

        moderation.status = status
        moderation.moderated_by = moderator_id
        moderation.moderated_at = datetime.now(timezone.utc)
        if note:
            moderation.note = note.strip()

        saved = await self._save(feedback)
        logger.info(
            "Feedback moderated",
            feedback_id=feedback_id,
            status=status,
            edited_fields=sorted(edits),
        )
        return saved
