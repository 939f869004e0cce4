"""Shared fixtures for feedback tests."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from mulaboard.eligibility.schemas import EligibilityResult
from mulaboard.feedback.schemas import Feedback, FeedbackSubmission
from mulaboard.periods.schemas import ReviewPeriod
from mulaboard.ratings.schemas import FeedbackRatings
from mulaboard.users.schemas import User

STRENGTHS = "Explains complex topics clearly and patiently."
IMPROVEMENTS = "Could share progress updates a little more often."


@pytest.fixture
def mock_database():
    """Mock Database with async fetch methods."""
    db = AsyncMock()
    db.fetchrow = AsyncMock()
    db.fetch = AsyncMock(return_value=[])
    db.fetchval = AsyncMock()
    return db


@pytest.fixture
def sample_feedback():
    """A stored Feedback with all fields populated."""
    return Feedback(
        feedback_id="feedback_abc123def456",
        target_user_id="user_1",
        review_period_id="period_1",
        reviewer_fingerprint="fp-abc",
        reviewer_ip_hash="a" * 64,
        ratings=FeedbackRatings.from_scores(5, 5, 4, 4, 5),
        strengths=STRENGTHS,
        improvements=IMPROVEMENTS,
        mula_rating="golden_mula",
        created_at=datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc),
        updated_at=datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc),
    )


def feedback_row(feedback: Feedback, **overrides) -> dict:
    """A feedback table row for ``feedback`` as asyncpg returns it."""
    row = {
        "feedback_id": feedback.feedback_id,
        "target_user_id": feedback.target_user_id,
        "review_period_id": feedback.review_period_id,
        "reviewer_fingerprint": feedback.reviewer_fingerprint,
        "reviewer_ip_hash": feedback.reviewer_ip_hash,
        "ratings": feedback.ratings.to_dict(),
        "strengths": feedback.strengths,
        "improvements": feedback.improvements,
        "mula_rating": feedback.mula_rating,
        "visibility": feedback.visibility,
        "moderation": feedback.moderation.to_dict(),
        "employee_reaction": feedback.employee_reaction,
        "created_at": feedback.created_at,
        "updated_at": feedback.updated_at,
    }
    row.update(overrides)
    return row


@pytest.fixture
def sample_submission():
    """A well-formed submission whose form was loaded a minute ago."""
    return FeedbackSubmission(
        target_user_id="user_1",
        review_period_id="period_1",
        fingerprint="fp-abc",
        ratings=FeedbackRatings.from_scores(5, 5, 4, 4, 5),
        strengths=STRENGTHS,
        improvements=IMPROVEMENTS,
        form_load_time_ms=1_000_000,
    )





@pytest.fixture
def active_period():
    return ReviewPeriod(
        period_id="period_1",
        name="Q1 2026",
        slug="q1-2026",
        start_date=datetime(2026, 1, 1, tzinfo=timezone.utc),
        end_date=datetime(2026, 3, 31, tzinfo=timezone.utc),
        is_active=True,
    )


@pytest.fixture
def target_user():
    return User(user_id="user_1", name="Alex Doe", slug="alex-doe", is_approved=True)


@pytest.fixture
def mock_gate():
    gate = AsyncMock()
    gate.check = AsyncMock(return_value=EligibilityResult.allow())
    gate.record_attempt = AsyncMock()
    return gate


@pytest.fixture
def mock_feedback_repo():
    repo = AsyncMock()
    repo.create = AsyncMock(side_effect=lambda feedback: feedback)
    repo.save = AsyncMock(side_effect=lambda feedback: feedback)
    repo.get_by_id = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def mock_user_repo(target_user):
    repo = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=target_user)
    return repo


@pytest.fixture
def mock_period_repo(active_period):
    repo = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=active_period)
    return repo


@pytest.fixture
def mock_metrics():
    return MagicMock()


@pytest.fixture
def make_row():
    """Builder for feedback table rows."""
    return feedback_row
