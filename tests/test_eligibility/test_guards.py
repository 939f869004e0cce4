"""Tests for the pre-gate anti-bot checks."""

import pytest

from mulaboard.eligibility.guards import (
    hash_ip,
    validate_honeypot,
    validate_submission_timing,
)


class TestHashIp:
    """Tests for hash_ip()."""

    def test_is_sha256_hex(self):
        digest = hash_ip("203.0.113.7")
        assert len(digest) == 64
        assert all(c in "0123456789abcdef" for c in digest)

    def test_never_equals_raw_ip(self):
        assert hash_ip("203.0.113.7") != "203.0.113.7"

    def test_deterministic(self):
        assert hash_ip("10.0.0.1") == hash_ip("10.0.0.1")

    def test_distinct_ips_differ(self):
        assert hash_ip("10.0.0.1") != hash_ip("10.0.0.2")


class TestHoneypot:
    """Tests for validate_honeypot()."""

    @pytest.mark.parametrize("value", [None, "", "   ", "\t\n"])
    def test_empty_is_valid(self, value):
        assert validate_honeypot(value) is True

    @pytest.mark.parametrize("value", ["x", "http://spam.example", "  bot  "])
    def test_filled_is_invalid(self, value):
        assert validate_honeypot(value) is False


class TestSubmissionTiming:
    """Tests for validate_submission_timing()."""

    def test_exactly_minimum_is_valid(self):
        assert validate_submission_timing(1_000_000, 30.0, now_ms=1_030_000) is True

    def test_just_under_minimum_is_invalid(self):
        assert validate_submission_timing(1_000_000, 30.0, now_ms=1_029_999) is False

    def test_well_over_minimum(self):
        assert validate_submission_timing(0, 30.0, now_ms=600_000) is True

    def test_form_time_in_future_is_invalid(self):
        assert validate_submission_timing(2_000_000, 30.0, now_ms=1_000_000) is False

    def test_zero_minimum_accepts_immediate(self):
        assert validate_submission_timing(5_000, 0.0, now_ms=5_000) is True

    def test_defaults_to_wall_clock(self):
        assert validate_submission_timing(0) is True
