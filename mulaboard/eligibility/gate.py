"""Eligibility gate for anonymous feedback submissions.

Decides whether a submission attempt may proceed. Three checks run in a
fixed order and short-circuit on the first failure:

1. Duplicate submission for (fingerprint, target user, review period)
2. Completed submissions from the hashed IP within the window
3. Completed submissions from the fingerprint within the window

``check`` only reads. Writing the attempt audit row (and advancing the
window counters for completed submissions) is the caller's explicit
``record_attempt`` step.
"""

import time
from datetime import datetime
from typing import Any

import structlog

from mulaboard.eligibility.config import EligibilityConfig
from mulaboard.eligibility.guards import hash_ip
from mulaboard.eligibility.rate_limiter import WindowRateLimiter
from mulaboard.eligibility.repository import AttemptRepository
from mulaboard.eligibility.schemas import (
    REASON_ALREADY_SUBMITTED,
    REASON_ERROR,
    REASON_FINGERPRINT_RATE_LIMITED,
    REASON_IP_RATE_LIMITED,
    EligibilityResult,
    SubmissionAttempt,
)
from mulaboard.observability.metrics import MetricsCollector, get_metrics
from mulaboard.observability.tracing import get_tracer, traced

logger = structlog.get_logger(__name__)

ALREADY_SUBMITTED_MESSAGE = (
    "You have already submitted feedback for this person in this review period."
)
ERROR_MESSAGE = "An error occurred while checking eligibility. Please try again."


def _format_reset(reset_at: datetime) -> str:
    return reset_at.strftime("%H:%M:%S UTC")


class EligibilityGate:
    """Admits or rejects anonymous submission attempts.

    Any fault from the attempt store or Redis rejects the attempt with
    reason ``error``.
    """

    def __init__(
        self,
        attempt_repo: AttemptRepository,
        rate_limiter: WindowRateLimiter,
        config: EligibilityConfig | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self._attempts = attempt_repo
        self._limiter = rate_limiter
        self._config = config or EligibilityConfig()
        self._metrics = metrics or get_metrics()
        self._tracer = get_tracer("mulaboard.eligibility")

    def _ip_key(self, ip_hash: str) -> str:
        return self._limiter.key("ip", ip_hash)

    def _fingerprint_key(self, fingerprint: str) -> str:
        return self._limiter.key("fingerprint", fingerprint)

    async def check(
        self,
        fingerprint: str,
        ip_address: str,
        target_user_id: str,
        review_period_id: str,
    ) -> EligibilityResult:
        """Evaluate whether a submission attempt may proceed.

        Args:
            fingerprint: Reviewer's browser/device fingerprint.
            ip_address: Reviewer's raw IP address (hashed before use).
            target_user_id: User receiving the feedback.
            review_period_id: Review period of the submission.

        Returns:
            EligibilityResult; never raises.
        """
        start = time.perf_counter()
        try:
            with traced(
                self._tracer,
                "eligibility.check",
                {
                    "target_user_id": target_user_id,
                    "review_period_id": review_period_id,
                },
            ):
                result = await self._evaluate(
                    fingerprint, hash_ip(ip_address), target_user_id, review_period_id,
                )
        except Exception as e:
            logger.error(
                "Eligibility check failed",
                target_user_id=target_user_id,
                review_period_id=review_period_id,
                error=str(e),
            )
            result = EligibilityResult.deny(REASON_ERROR, ERROR_MESSAGE)

        self._metrics.record_eligibility(
            result.reason or "allowed",
            latency=time.perf_counter() - start,
        )
        if not result.allowed:
            logger.info(
                "Submission attempt rejected",
                reason=result.reason,
                target_user_id=target_user_id,
                review_period_id=review_period_id,
            )
        return result

    async def _evaluate(
        self,
        fingerprint: str,
        ip_hash: str,
        target_user_id: str,
        review_period_id: str,
    ) -> EligibilityResult:
        if await self._attempts.has_submitted(
            fingerprint, target_user_id, review_period_id,
        ):
            return EligibilityResult.deny(
                REASON_ALREADY_SUBMITTED, ALREADY_SUBMITTED_MESSAGE,
            )

        window = self._config.window_seconds

        ip_window = await self._limiter.peek(
            self._ip_key(ip_hash), self._config.ip_limit, window,
        )
        if not ip_window.allowed:
            return EligibilityResult.deny(
                REASON_IP_RATE_LIMITED,
                "Too many submissions from your network. "
                f"Please try again after {_format_reset(ip_window.reset_at)}.",
            )

        fp_window = await self._limiter.peek(
            self._fingerprint_key(fingerprint), self._config.fingerprint_limit, window,
        )
        if not fp_window.allowed:
            return EligibilityResult.deny(
                REASON_FINGERPRINT_RATE_LIMITED,
                "Too many submissions from this device. "
                f"Please try again after {_format_reset(fp_window.reset_at)}.",
            )

        return EligibilityResult.allow()

    async def record_attempt(
        self,
        fingerprint: str,
        ip_address: str,
        target_user_id: str,
        review_period_id: str,
        status: str = "submitted",
        block_reason: str | None = None,
    ) -> SubmissionAttempt | None:
        """Write the audit row for an attempt.

        Completed submissions also advance the IP and fingerprint windows.
        Failures are logged and swallowed so they never fail a submission.

        Returns:
            The stored attempt, or None if recording failed.
        """
        ip_hash = hash_ip(ip_address)
        try:
            attempt = await self._attempts.create(
                SubmissionAttempt(
                    fingerprint=fingerprint,
                    ip_hash=ip_hash,
                    target_user_id=target_user_id,
                    review_period_id=review_period_id,
                    status=status,
                    block_reason=block_reason,
                )
            )
            if status == "submitted":
                window = self._config.window_seconds
                await self._limiter.hit(
                    self._ip_key(ip_hash), self._config.ip_limit, window,
                )
                await self._limiter.hit(
                    self._fingerprint_key(fingerprint),
                    self._config.fingerprint_limit,
                    window,
                )
        except Exception as e:
            logger.error(
                "Failed to record submission attempt",
                status=status,
                target_user_id=target_user_id,
                error=str(e),
            )
            self._metrics.record_attempt_failure()
            return None

        self._metrics.record_attempt(status)
        return attempt

    async def get_stats(self, review_period_id: str | None = None) -> dict[str, Any]:
        stats = await self._attempts.get_stats(review_period_id)
        return stats.to_dict()
