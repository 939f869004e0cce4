"""Tests for ReviewPeriod."""

from datetime import datetime, timezone

import pytest

from mulaboard.periods.schemas import ReviewPeriod


def _period(**kwargs) -> ReviewPeriod:
    defaults = dict(
        period_id="period_1",
        name="Q1 2026",
        slug="q1-2026",
        start_date=datetime(2026, 1, 1, tzinfo=timezone.utc),
        end_date=datetime(2026, 3, 31, tzinfo=timezone.utc),
        is_active=True,
    )
    defaults.update(kwargs)
    return ReviewPeriod(**defaults)


class TestReviewPeriod:
    """Tests for date handling."""

    def test_end_must_follow_start(self):
        with pytest.raises(ValueError, match="end_date"):
            _period(end_date=datetime(2026, 1, 1, tzinfo=timezone.utc))

    def test_duration_days(self):
        assert _period().duration_days == 89

    def test_currently_active(self, fixed_now):
        assert _period().is_currently_active(fixed_now) is True

    def test_flag_off_is_not_active(self, fixed_now):
        assert _period(is_active=False).is_currently_active(fixed_now) is False

    def test_outside_dates_is_not_active(self):
        after = datetime(2026, 4, 2, tzinfo=timezone.utc)
        assert _period().is_currently_active(after) is False

    def test_days_remaining(self, fixed_now):
        # 2026-03-10 12:00 -> 2026-03-31 00:00 is 20.5 days
        assert _period().days_remaining(fixed_now) == 21

    def test_days_remaining_when_over_or_inactive(self, fixed_now):
        assert _period(is_active=False).days_remaining(fixed_now) == 0
        assert _period().days_remaining(datetime(2026, 5, 1, tzinfo=timezone.utc)) == 0

    def test_to_dict(self):
        data = _period().to_dict()
        assert data["slug"] == "q1-2026"
        assert data["duration_days"] == 89
        assert data["theme_emoji"] == "🌿"
