"""Tests for AttemptRepository SQL and parameter passing."""

from datetime import datetime, timedelta, timezone

import pytest

from mulaboard.eligibility.repository import AttemptRepository


@pytest.fixture
def repo(mock_database):
    """AttemptRepository with a mock database."""
    return AttemptRepository(mock_database)


class TestCreate:
    """Tests for AttemptRepository.create()."""

    @pytest.mark.asyncio
    async def test_create_inserts_all_fields(
        self, repo, mock_database, sample_attempt, sample_attempt_row,
    ):
        mock_database.fetchrow.return_value = {
            **sample_attempt_row,
            "attempt_id": sample_attempt.attempt_id,
        }

        result = await repo.create(sample_attempt)

        assert result.attempt_id == sample_attempt.attempt_id
        assert result.status == "submitted"

        args = mock_database.fetchrow.call_args[0]
        assert "INSERT INTO submission_attempts" in args[0]
        assert "RETURNING *" in args[0]
        assert args[1] == sample_attempt.attempt_id
        assert args[2] == "fp-abc"
        assert args[3] == sample_attempt.ip_hash
        assert args[4] == "user_1"
        assert args[5] == "period_1"
        assert args[6] == "submitted"
        assert args[7] is None

    @pytest.mark.asyncio
    async def test_raw_ip_is_never_a_parameter(
        self, repo, mock_database, sample_attempt, sample_attempt_row,
    ):
        mock_database.fetchrow.return_value = sample_attempt_row

        await repo.create(sample_attempt)

        assert "203.0.113.7" not in mock_database.fetchrow.call_args[0]


class TestHasSubmitted:
    """Tests for AttemptRepository.has_submitted()."""

    @pytest.mark.asyncio
    async def test_true_when_row_exists(self, repo, mock_database):
        mock_database.fetchval.return_value = True

        assert await repo.has_submitted("fp-abc", "user_1", "period_1") is True

        args = mock_database.fetchval.call_args[0]
        assert "status = 'submitted'" in args[0]
        assert args[1:] == ("fp-abc", "user_1", "period_1")

    @pytest.mark.asyncio
    async def test_false_when_missing(self, repo, mock_database):
        mock_database.fetchval.return_value = None
        assert await repo.has_submitted("fp-abc", "user_1", "period_1") is False


class TestRecent:
    """Tests for the recent-attempt lookups."""

    @pytest.mark.asyncio
    async def test_recent_by_fingerprint(self, repo, mock_database, sample_attempt_row):
        mock_database.fetch.return_value = [sample_attempt_row]
        before = datetime.now(timezone.utc)

        attempts = await repo.recent_by_fingerprint("fp-abc", hours=6)

        assert len(attempts) == 1
        args = mock_database.fetch.call_args[0]
        assert "WHERE fingerprint = $1" in args[0]
        assert "ORDER BY created_at DESC" in args[0]
        assert args[1] == "fp-abc"
        since = args[2]
        assert before - timedelta(hours=6, seconds=5) <= since <= before - timedelta(hours=6) + timedelta(seconds=5)

    @pytest.mark.asyncio
    async def test_recent_by_ip_hash(self, repo, mock_database):
        attempts = await repo.recent_by_ip_hash("hash")

        assert attempts == []
        args = mock_database.fetch.call_args[0]
        assert "WHERE ip_hash = $1" in args[0]
        assert args[1] == "hash"


class TestGetStats:
    """Tests for AttemptRepository.get_stats()."""

    @pytest.mark.asyncio
    async def test_counts_by_status(self, repo, mock_database):
        mock_database.fetch.return_value = [
            {"status": "submitted", "count": 7},
            {"status": "blocked", "count": 2},
            {"status": "rate_limited", "count": 1},
        ]

        stats = await repo.get_stats()

        assert stats.total == 10
        assert stats.submitted == 7
        assert stats.blocked == 2
        assert stats.rate_limited == 1
        sql = mock_database.fetch.call_args[0][0]
        assert "GROUP BY status" in sql
        assert "WHERE" not in sql

    @pytest.mark.asyncio
    async def test_period_filter(self, repo, mock_database):
        mock_database.fetch.return_value = [{"status": "submitted", "count": 3}]

        stats = await repo.get_stats("period_1")

        args = mock_database.fetch.call_args[0]
        assert "WHERE review_period_id = $1" in args[0]
        assert args[1] == "period_1"
        assert stats.blocked == 0
        assert stats.total == 3


class TestRetention:
    """Tests for the retention purge."""

    @pytest.mark.asyncio
    async def test_count_expired(self, repo, mock_database):
        mock_database.fetchval.return_value = 12

        assert await repo.count_expired(365) == 12
        cutoff = mock_database.fetchval.call_args[0][1]
        expected = datetime.now(timezone.utc) - timedelta(days=365)
        assert abs((cutoff - expected).total_seconds()) < 5

    @pytest.mark.asyncio
    async def test_count_expired_none(self, repo, mock_database):
        mock_database.fetchval.return_value = None
        assert await repo.count_expired(30) == 0

    @pytest.mark.asyncio
    async def test_purge_returns_deleted_count(self, repo, mock_database):
        mock_database.fetch.return_value = [
            {"attempt_id": "attempt_1"},
            {"attempt_id": "attempt_2"},
        ]

        deleted = await repo.purge_expired(90)

        assert deleted == 2
        sql = mock_database.fetch.call_args[0][0]
        assert "DELETE FROM submission_attempts" in sql
        assert "created_at < $1" in sql
