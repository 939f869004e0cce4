"""Schema definitions for eligibility verdicts and submission attempts.

``SubmissionAttempt`` maps 1:1 to the ``submission_attempts`` table. An
attempt is written once for every submission try, successful or not, and
is never updated afterwards.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

AttemptStatus = Literal["submitted", "blocked", "rate_limited"]

VALID_ATTEMPT_STATUSES: frozenset[str] = frozenset({
    "submitted",
    "blocked",
    "rate_limited",
})

# Gate rejection reasons
REASON_ALREADY_SUBMITTED = "already_submitted"
REASON_IP_RATE_LIMITED = "ip_rate_limited"
REASON_FINGERPRINT_RATE_LIMITED = "fingerprint_rate_limited"
REASON_ERROR = "error"

VALID_REASONS: frozenset[str] = frozenset({
    REASON_ALREADY_SUBMITTED,
    REASON_IP_RATE_LIMITED,
    REASON_FINGERPRINT_RATE_LIMITED,
    REASON_ERROR,
})

MAX_BLOCK_REASON_LENGTH = 200


@dataclass(frozen=True)
class EligibilityResult:
    """Verdict of the eligibility gate."""

    allowed: bool
    reason: str | None = None
    message: str | None = None

    @classmethod
    def allow(cls) -> "EligibilityResult":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str, message: str) -> "EligibilityResult":
        if reason not in VALID_REASONS:
            raise ValueError(f"Invalid rejection reason {reason!r}")
        return cls(allowed=False, reason=reason, message=message)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"allowed": self.allowed}
        if self.reason is not None:
            data["reason"] = self.reason
        if self.message is not None:
            data["message"] = self.message
        return data


@dataclass
class SubmissionAttempt:
    """A persisted submission attempt from the submission_attempts table.

    Attributes:
        attempt_id: Identifier (attempt_{uuid_hex[:12]}).
        fingerprint: Opaque browser/device fingerprint of the reviewer.
        ip_hash: SHA-256 hex digest of the reviewer's IP address.
        target_user_id: User the feedback was aimed at.
        review_period_id: Review period of the attempt.
        status: Outcome (submitted, blocked, rate_limited).
        block_reason: Gate reason code when the attempt was rejected.
        created_at: When the attempt happened.
    """

    fingerprint: str
    ip_hash: str
    target_user_id: str
    review_period_id: str
    status: str = "submitted"
    block_reason: str | None = None
    attempt_id: str = field(
        default_factory=lambda: f"attempt_{uuid.uuid4().hex[:12]}"
    )
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def __post_init__(self) -> None:
        if self.status not in VALID_ATTEMPT_STATUSES:
            raise ValueError(
                f"Invalid status {self.status!r}. "
                f"Must be one of: {sorted(VALID_ATTEMPT_STATUSES)}"
            )
        if not self.fingerprint:
            raise ValueError("fingerprint must not be empty")
        if self.block_reason is not None:
            self.block_reason = self.block_reason.strip()[:MAX_BLOCK_REASON_LENGTH]

    def to_dict(self) -> dict[str, Any]:
        """Serialize without the fingerprint and IP hash."""
        return {
            "attempt_id": self.attempt_id,
            "target_user_id": self.target_user_id,
            "review_period_id": self.review_period_id,
            "status": self.status,
            "block_reason": self.block_reason,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class AttemptStats:
    """Attempt counts by outcome."""

    total: int = 0
    submitted: int = 0
    blocked: int = 0
    rate_limited: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "submitted": self.submitted,
            "blocked": self.blocked,
            "rate_limited": self.rate_limited,
        }
