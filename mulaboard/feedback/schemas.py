"""Schema definitions for feedback records.

Maps 1:1 to the ``feedback`` database table. Each record is one anonymous
review of a colleague within a review period. ``mula_rating`` is derived
from ``ratings`` and is recomputed by the repository on every write.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from mulaboard.ratings.classifier import calculate_average_score
from mulaboard.ratings.schemas import VALID_MULA_RATINGS, FeedbackRatings

VALID_VISIBILITIES: frozenset[str] = frozenset({
    "private",
    "public",
})

VALID_MODERATION_STATUSES: frozenset[str] = frozenset({
    "pending",
    "approved",
    "flagged",
})

VALID_REACTIONS: frozenset[str] = frozenset({
    "thanks",
    "noted",
    "ouch",
    "fair_enough",
})

# Free-text fields an admin may redact
MODERATABLE_FIELDS: frozenset[str] = frozenset({
    "strengths",
    "improvements",
})


@dataclass
class ModerationInfo:
    """Moderation state of a feedback record."""

    status: str = "approved"
    moderated_by: str | None = None
    moderated_at: datetime | None = None
    removed_fields: list[str] = field(default_factory=list)
    original_content: dict[str, str] = field(default_factory=dict)
    note: str | None = None

    def __post_init__(self) -> None:
        if self.status not in VALID_MODERATION_STATUSES:
            raise ValueError(
                f"Invalid moderation status {self.status!r}. "
                f"Must be one of: {sorted(VALID_MODERATION_STATUSES)}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "moderated_by": self.moderated_by,
            "moderated_at": self.moderated_at.isoformat() if self.moderated_at else None,
            "removed_fields": list(self.removed_fields),
            "original_content": dict(self.original_content),
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ModerationInfo":
        if not data:
            return cls()
        moderated_at = data.get("moderated_at")
        if isinstance(moderated_at, str):
            moderated_at = datetime.fromisoformat(moderated_at)
        return cls(
            status=data.get("status", "approved"),
            moderated_by=data.get("moderated_by"),
            moderated_at=moderated_at,
            removed_fields=list(data.get("removed_fields") or []),
            original_content=dict(data.get("original_content") or {}),
            note=data.get("note"),
        )


@dataclass
class Feedback:
    """A persisted feedback record from the feedback table.

    Attributes:
        target_user_id: User receiving the feedback.
        review_period_id: Review period the feedback belongs to.
        reviewer_fingerprint: Browser/device fingerprint of the anonymous reviewer.
        reviewer_ip_hash: SHA-256 hex digest of the reviewer's IP.
        ratings: The five category ratings.
        strengths: What the colleague does well.
        improvements: What the colleague could improve.
        mula_rating: Tier derived from ``ratings``.
        feedback_id: Identifier (feedback_{uuid_hex[:12]}).
        visibility: private (default) or public, chosen by the target user.
        moderation: Moderation state.
        employee_reaction: Optional reaction from the target user.
        created_at: When the feedback was submitted.
        updated_at: Last modification time.
    """

    target_user_id: str
    review_period_id: str
    reviewer_fingerprint: str
    reviewer_ip_hash: str
    ratings: FeedbackRatings
    strengths: str
    improvements: str
    mula_rating: str = "fresh_carrot"
    feedback_id: str = field(
        default_factory=lambda: f"feedback_{uuid.uuid4().hex[:12]}"
    )
    visibility: str = "private"
    moderation: ModerationInfo = field(default_factory=ModerationInfo)
    employee_reaction: str | None = None
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    updated_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def __post_init__(self) -> None:
        if self.mula_rating not in VALID_MULA_RATINGS:
            raise ValueError(
                f"Invalid mula_rating {self.mula_rating!r}. "
                f"Must be one of: {sorted(VALID_MULA_RATINGS)}"
            )
        if self.visibility not in VALID_VISIBILITIES:
            raise ValueError(
                f"Invalid visibility {self.visibility!r}. "
                f"Must be one of: {sorted(VALID_VISIBILITIES)}"
            )
        if self.employee_reaction is not None and self.employee_reaction not in VALID_REACTIONS:
            raise ValueError(
                f"Invalid employee_reaction {self.employee_reaction!r}. "
                f"Must be one of: {sorted(VALID_REACTIONS)}"
            )

    @property
    def average_score(self) -> float:
        return calculate_average_score(self.ratings)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses. Reviewer identifiers are never included."""
        return {
            "feedback_id": self.feedback_id,
            "target_user_id": self.target_user_id,
            "review_period_id": self.review_period_id,
            "ratings": self.ratings.to_dict(),
            "average_score": self.average_score,
            "strengths": self.strengths,
            "improvements": self.improvements,
            "mula_rating": self.mula_rating,
            "visibility": self.visibility,
            "moderation_status": self.moderation.status,
            "employee_reaction": self.employee_reaction,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    def to_admin_dict(self) -> dict[str, Any]:
        """Serialization for moderators, including the moderation history."""
        data = self.to_dict()
        data["moderation"] = self.moderation.to_dict()
        return data


@dataclass
class FeedbackSubmission:
    """An anonymous submission as received from the feedback form.

    ``honeypot`` is the hidden form field bots tend to fill in and
    ``form_load_time_ms`` the client-reported epoch milliseconds at which
    the form was rendered.
    """

    target_user_id: str
    review_period_id: str
    fingerprint: str
    ratings: FeedbackRatings
    strengths: str
    improvements: str
    form_load_time_ms: float
    honeypot: str | None = None
