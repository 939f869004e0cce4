"""Eligibility checks for anonymous feedback submissions."""

from mulaboard.eligibility.config import EligibilityConfig
from mulaboard.eligibility.gate import EligibilityGate
from mulaboard.eligibility.guards import (
    hash_ip,
    validate_honeypot,
    validate_submission_timing,
)
from mulaboard.eligibility.rate_limiter import RateLimitResult, WindowRateLimiter
from mulaboard.eligibility.repository import AttemptRepository
from mulaboard.eligibility.schemas import (
    REASON_ALREADY_SUBMITTED,
    REASON_ERROR,
    REASON_FINGERPRINT_RATE_LIMITED,
    REASON_IP_RATE_LIMITED,
    AttemptStats,
    EligibilityResult,
    SubmissionAttempt,
)

__all__ = [
    "AttemptRepository",
    "AttemptStats",
    "EligibilityConfig",
    "EligibilityGate",
    "EligibilityResult",
    "REASON_ALREADY_SUBMITTED",
    "REASON_ERROR",
    "REASON_FINGERPRINT_RATE_LIMITED",
    "REASON_IP_RATE_LIMITED",
    "RateLimitResult",
    "SubmissionAttempt",
    "WindowRateLimiter",
    "hash_ip",
    "validate_honeypot",
    "validate_submission_timing",
]
