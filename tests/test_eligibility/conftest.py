"""Shared fixtures for eligibility tests."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from mulaboard.eligibility.config import EligibilityConfig
from mulaboard.eligibility.gate import EligibilityGate
from mulaboard.eligibility.guards import hash_ip
from mulaboard.eligibility.schemas import SubmissionAttempt


@pytest.fixture
def mock_database():
    """Mock Database with async fetch methods."""
    db = AsyncMock()
    db.fetchrow = AsyncMock()
    db.fetch = AsyncMock(return_value=[])
    db.fetchval = AsyncMock()
    return db


@pytest.fixture
def mock_redis():
    """Mock redis.asyncio client with an empty keyspace."""
    client = AsyncMock()
    client.get = AsyncMock(return_value=None)
    client.incr = AsyncMock(return_value=1)
    client.expire = AsyncMock(return_value=True)
    client.ttl = AsyncMock(return_value=3600)
    client.delete = AsyncMock(return_value=1)
    return client


@pytest.fixture
def eligibility_config():
    return EligibilityConfig(
        ip_limit=5,
        fingerprint_limit=10,
        window_seconds=3600,
        min_submit_seconds=30.0,
    )


@pytest.fixture
def mock_attempt_repo():
    """Mock AttemptRepository with no prior submissions."""
    repo = AsyncMock()
    repo.has_submitted = AsyncMock(return_value=False)
    repo.create = AsyncMock(side_effect=lambda attempt: attempt)
    return repo


@pytest.fixture
def mock_metrics():
    return MagicMock()


@pytest.fixture
def sample_attempt_row():
    """A submission_attempts row as returned by asyncpg."""
    return {
        "attempt_id": "attempt_0123456789ab",
        "fingerprint": "fp-abc",
        "ip_hash": hash_ip("203.0.113.7"),
        "target_user_id": "user_1",
        "review_period_id": "period_1",
        "status": "submitted",
        "block_reason": None,
        "created_at": datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc),
    }


@pytest.fixture
def sample_attempt():
    return SubmissionAttempt(
        fingerprint="fp-abc",
        ip_hash=hash_ip("203.0.113.7"),
        target_user_id="user_1",
        review_period_id="period_1",
    )
