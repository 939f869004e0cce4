"""Shared fixtures for API tests."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from mulaboard.api.app import create_app
from mulaboard.api.auth import verify_api_key
from mulaboard.api.dependencies import (
    get_attempt_repository,
    get_database,
    get_feedback_repository,
    get_feedback_service,
    get_period_repository,
    get_redis_client,
    get_submission_service,
    get_user_repository,
)
from mulaboard.eligibility.schemas import AttemptStats
from mulaboard.feedback.schemas import Feedback
from mulaboard.ratings.classifier import classify_ratings
from mulaboard.ratings.schemas import FeedbackRatings
from mulaboard.users.schemas import User


def _make_feedback(
    feedback_id: str = "feedback_abc123def456",
    scores: tuple[int, int, int, int, int] = (5, 5, 4, 4, 5),
    **kwargs,
) -> Feedback:
    """Helper to create a Feedback with sensible defaults."""
    ratings = FeedbackRatings.from_scores(*scores)
    return Feedback(
        feedback_id=feedback_id,
        target_user_id=kwargs.pop("target_user_id", "user_1"),
        review_period_id=kwargs.pop("review_period_id", "period_1"),
        reviewer_fingerprint=kwargs.pop("reviewer_fingerprint", "fp-abc"),
        reviewer_ip_hash="a" * 64,
        ratings=ratings,
        strengths=kwargs.pop("strengths", "Explains complex topics clearly and patiently."),
        improvements=kwargs.pop("improvements", "Could share progress updates more often."),
        mula_rating=classify_ratings(ratings).value,
        created_at=datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc),
        updated_at=datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc),
        **kwargs,
    )


@pytest.fixture
def make_feedback():
    return _make_feedback


@pytest.fixture
def mock_submission_service():
    """Mock SubmissionService."""
    service = AsyncMock()
    service.submit = AsyncMock(return_value=_make_feedback())
    service.check_eligibility = AsyncMock(return_value={"allowed": True})
    return service


@pytest.fixture
def mock_feedback_service():
    """Mock FeedbackService."""
    return AsyncMock()


@pytest.fixture
def mock_feedback_repo():
    """Mock FeedbackRepository."""
    repo = AsyncMock()
    repo.list_public = AsyncMock(return_value=[])
    repo.count_public = AsyncMock(return_value=0)
    repo.list_for_target = AsyncMock(return_value=[])
    repo.list_all = AsyncMock(return_value=([], 0))
    return repo


@pytest.fixture
def mock_user_repo():
    """Mock UserRepository with one approved user."""
    repo = AsyncMock()
    repo.get_by_id = AsyncMock(
        return_value=User(user_id="user_1", name="Alex Doe", slug="alex-doe", is_approved=True)
    )
    return repo


@pytest.fixture
def mock_period_repo():
    """Mock ReviewPeriodRepository."""
    repo = AsyncMock()
    repo.list_ordered = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def mock_attempt_repo():
    """Mock AttemptRepository."""
    repo = AsyncMock()
    repo.get_stats = AsyncMock(return_value=AttemptStats())
    return repo


@pytest.fixture
def mock_db():
    """Mock Database."""
    db = AsyncMock()
    db.health_check = AsyncMock(return_value=True)
    return db


@pytest.fixture
def mock_redis():
    """Mock Redis client."""
    client = AsyncMock()
    client.ping = AsyncMock(return_value=True)
    return client


@pytest.fixture
def app(
    mock_submission_service,
    mock_feedback_service,
    mock_feedback_repo,
    mock_user_repo,
    mock_period_repo,
    mock_attempt_repo,
    mock_db,
    mock_redis,
):
    """Application with every external dependency overridden."""
    app = create_app()

    app.dependency_overrides[verify_api_key] = lambda: "test-key"
    app.dependency_overrides[get_submission_service] = lambda: mock_submission_service
    app.dependency_overrides[get_feedback_service] = lambda: mock_feedback_service
    app.dependency_overrides[get_feedback_repository] = lambda: mock_feedback_repo
    app.dependency_overrides[get_user_repository] = lambda: mock_user_repo
    app.dependency_overrides[get_period_repository] = lambda: mock_period_repo
    app.dependency_overrides[get_attempt_repository] = lambda: mock_attempt_repo
    app.dependency_overrides[get_database] = lambda: mock_db
    app.dependency_overrides[get_redis_client] = lambda: mock_redis

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """FastAPI TestClient with dependency overrides."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def user_headers():
    return {"X-API-KEY": "test-key", "X-User-ID": "user_1"}
