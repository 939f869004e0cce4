"""Tests for eligibility verdicts and attempt records."""

import pytest

from mulaboard.eligibility.schemas import (
    MAX_BLOCK_REASON_LENGTH,
    AttemptStats,
    EligibilityResult,
    SubmissionAttempt,
)


class TestEligibilityResult:
    def test_allow_has_no_reason(self):
        result = EligibilityResult.allow()
        assert result.allowed is True
        assert result.to_dict() == {"allowed": True}

    def test_deny_carries_reason_and_message(self):
        result = EligibilityResult.deny("ip_rate_limited", "slow down")
        assert result.to_dict() == {
            "allowed": False,
            "reason": "ip_rate_limited",
            "message": "slow down",
        }

    def test_deny_rejects_unknown_reason(self):
        with pytest.raises(ValueError, match="Invalid rejection reason"):
            EligibilityResult.deny("too_fast", "slow down")


class TestSubmissionAttempt:
    """Tests for SubmissionAttempt validation."""

    def test_defaults(self):
        attempt = SubmissionAttempt(
            fingerprint="fp", ip_hash="h", target_user_id="u", review_period_id="p",
        )
        assert attempt.status == "submitted"
        assert attempt.attempt_id.startswith("attempt_")
        assert len(attempt.attempt_id) == len("attempt_") + 12

    def test_invalid_status(self):
        with pytest.raises(ValueError, match="Invalid status"):
            SubmissionAttempt(
                fingerprint="fp", ip_hash="h", target_user_id="u",
                review_period_id="p", status="approved",
            )

    def test_empty_fingerprint(self):
        with pytest.raises(ValueError):
            SubmissionAttempt(
                fingerprint="", ip_hash="h", target_user_id="u", review_period_id="p",
            )

    def test_block_reason_is_truncated(self):
        attempt = SubmissionAttempt(
            fingerprint="fp", ip_hash="h", target_user_id="u", review_period_id="p",
            status="blocked", block_reason="x" * 500,
        )
        assert len(attempt.block_reason) == MAX_BLOCK_REASON_LENGTH

    def test_to_dict_hides_identity(self):
        attempt = SubmissionAttempt(
            fingerprint="fp", ip_hash="h", target_user_id="u", review_period_id="p",
        )
        data = attempt.to_dict()
        assert "fingerprint" not in data
        assert "ip_hash" not in data


def test_attempt_stats_to_dict():
    stats = AttemptStats(total=3, submitted=1, blocked=1, rate_limited=1)
    assert stats.to_dict() == {
        "total": 3, "submitted": 1, "blocked": 1, "rate_limited": 1,
    }
