"""Submission attempt repository.

Follows the FeedbackRepository pattern with asyncpg. Attempts are
insert-only; the only deletion is the retention purge.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from mulaboard.eligibility.schemas import AttemptStats, SubmissionAttempt
from mulaboard.storage.database import Database

logger = logging.getLogger(__name__)


class AttemptRepository:
    """Repository for the submission_attempts audit trail."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create(self, attempt: SubmissionAttempt) -> SubmissionAttempt:
        """Insert a new attempt.

        Args:
            attempt: Attempt to persist.

        Returns:
            The created SubmissionAttempt.
        """
        sql = """
            INSERT INTO submission_attempts (
                attempt_id, fingerprint, ip_hash, target_user_id,
                review_period_id, status, block_reason, created_at
            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING *
        """
        row = await self._db.fetchrow(
            sql,
            attempt.attempt_id,
            attempt.fingerprint,
            attempt.ip_hash,
            attempt.target_user_id,
            attempt.review_period_id,
            attempt.status,
            attempt.block_reason,
            attempt.created_at,
        )
        return _row_to_attempt(row)

    async def has_submitted(
        self,
        fingerprint: str,
        target_user_id: str,
        review_period_id: str,
    ) -> bool:
        """Whether a submitted attempt exists for the exact triple."""
        sql = """
            SELECT EXISTS (
                SELECT 1 FROM submission_attempts
                WHERE fingerprint = $1
                  AND target_user_id = $2
                  AND review_period_id = $3
                  AND status = 'submitted'
            )
        """
        result = await self._db.fetchval(
            sql, fingerprint, target_user_id, review_period_id,
        )
        return bool(result)

    async def recent_by_fingerprint(
        self,
        fingerprint: str,
        hours: int = 24,
    ) -> list[SubmissionAttempt]:
        """Attempts from a fingerprint in the last ``hours``, newest first."""
        since = datetime.now(timezone.utc) - timedelta(hours=hours)
        sql = """
            SELECT * FROM submission_attempts
            WHERE fingerprint = $1 AND created_at >= $2
            ORDER BY created_at DESC
        """
        rows = await self._db.fetch(sql, fingerprint, since)
        return [_row_to_attempt(row) for row in rows]

    async def recent_by_ip_hash(
        self,
        ip_hash: str,
        hours: int = 24,
    ) -> list[SubmissionAttempt]:
        """Attempts from a hashed IP in the last ``hours``, newest first."""
        since = datetime.now(timezone.utc) - timedelta(hours=hours)
        sql = """
            SELECT * FROM submission_attempts
            WHERE ip_hash = $1 AND created_at >= $2
            ORDER BY created_at DESC
        """
        rows = await self._db.fetch(sql, ip_hash, since)
        return [_row_to_attempt(row) for row in rows]

    async def get_stats(self, review_period_id: str | None = None) -> AttemptStats:
        """Count attempts grouped by status.

        Args:
            review_period_id: Optional filter to one review period.

        Returns:
            AttemptStats with per-status counts and total.
        """
        params: list[Any] = []
        where_clause = ""
        if review_period_id is not None:
            where_clause = "WHERE review_period_id = $1"
            params.append(review_period_id)

        sql = f"""
            SELECT status, COUNT(*) AS count
            FROM submission_attempts
            {where_clause}
            GROUP BY status
        """
        rows = await self._db.fetch(sql, *params)

        counts = {row["status"]: row["count"] for row in rows}
        return AttemptStats(
            total=sum(counts.values()),
            submitted=counts.get("submitted", 0),
            blocked=counts.get("blocked", 0),
            rate_limited=counts.get("rate_limited", 0),
        )

    async def count_expired(self, retention_days: int) -> int:
        """Number of attempts older than the retention window."""
        cutoff = datetime.now(timezone.utc) - timedelta(days=retention_days)
        sql = "SELECT COUNT(*) FROM submission_attempts WHERE created_at < $1"
        count = await self._db.fetchval(sql, cutoff)
        return count or 0

    async def purge_expired(self, retention_days: int) -> int:
        """Delete attempts older than the retention window.

        Args:
            retention_days: Attempts created more than this many days ago
                are deleted.

        Returns:
            Number of deleted attempts.
        """
        cutoff = datetime.now(timezone.utc) - timedelta(days=retention_days)
        sql = """
            DELETE FROM submission_attempts
            WHERE created_at < $1
            RETURNING attempt_id
        """
        rows = await self._db.fetch(sql, cutoff)
        logger.info(
            "Purged %d submission attempts older than %d days",
            len(rows), retention_days,
        )
        return len(rows)


def _row_to_attempt(row: Any) -> SubmissionAttempt:
    """Convert an asyncpg Record to a SubmissionAttempt."""
    return SubmissionAttempt(
        attempt_id=row["attempt_id"],
        fingerprint=row["fingerprint"],
        ip_hash=row["ip_hash"],
        target_user_id=row["target_user_id"],
        review_period_id=row["review_period_id"],
        status=row["status"],
        block_reason=row.get("block_reason"),
        created_at=row["created_at"],
    )
