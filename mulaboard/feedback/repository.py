"""Feedback repository for persistence and listing queries.

Follows the AttemptRepository pattern with asyncpg. Every write path
(``create`` and ``save``) re-derives ``mula_rating`` from the record's
current scores right before the statement is sent, so the stored tier can
never drift from the stored ratings.
"""

import json
import logging
from typing import Any

import asyncpg

from mulaboard.feedback.schemas import Feedback, ModerationInfo
from mulaboard.ratings.classifier import classify_ratings
from mulaboard.ratings.schemas import FeedbackRatings
from mulaboard.storage.database import Database

logger = logging.getLogger(__name__)


class DuplicateFeedbackError(Exception):
    """A feedback already exists for (fingerprint, target user, period)."""


class FeedbackRepository:
    """Repository for feedback persistence and querying."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create(self, feedback: Feedback) -> Feedback:
        """Insert a new feedback record.

        Args:
            feedback: Feedback to persist. Its ``mula_rating`` is overwritten.

        Returns:
            The created Feedback.

        Raises:
            DuplicateFeedbackError: The reviewer already reviewed this
                user in this period.
        """
        feedback.mula_rating = classify_ratings(feedback.ratings).value

        sql = """
            INSERT INTO feedback (
                feedback_id, target_user_id, review_period_id,
                reviewer_fingerprint, reviewer_ip_hash, ratings,
                strengths, improvements, mula_rating, visibility,
                moderation, employee_reaction, created_at, updated_at
            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13, $14)
            RETURNING *
        """
        try:
            row = await self._db.fetchrow(
                sql,
                feedback.feedback_id,
                feedback.target_user_id,
                feedback.review_period_id,
                feedback.reviewer_fingerprint,
                feedback.reviewer_ip_hash,
                json.dumps(feedback.ratings.to_dict()),
                feedback.strengths,
                feedback.improvements,
                feedback.mula_rating,
                feedback.visibility,
                json.dumps(feedback.moderation.to_dict()),
                feedback.employee_reaction,
                feedback.created_at,
                feedback.updated_at,
            )
        except asyncpg.UniqueViolationError as e:
            raise DuplicateFeedbackError(str(e)) from e
        return _row_to_feedback(row)

    async def save(self, feedback: Feedback) -> Feedback | None:
        """Persist changes to an existing feedback record.

        Ratings, texts, visibility, moderation and reaction are written;
        ``mula_rating`` is recomputed from the ratings first.

        Returns:
            The updated Feedback, or None if it no longer exists.
        """
        feedback.mula_rating = classify_ratings(feedback.ratings).value

        sql = """
            UPDATE feedback
            SET ratings = $2,
                strengths = $3,
                improvements = $4,
                mula_rating = $5,
                visibility = $6,
                moderation = $7,
                employee_reaction = $8,
                updated_at = NOW()
            WHERE feedback_id = $1
            RETURNING *
        """
        row = await self._db.fetchrow(
            sql,
            feedback.feedback_id,
            json.dumps(feedback.ratings.to_dict()),
            feedback.strengths,
            feedback.improvements,
            feedback.mula_rating,
            feedback.visibility,
            json.dumps(feedback.moderation.to_dict()),
            feedback.employee_reaction,
        )
        if row is None:
            return None
        return _row_to_feedback(row)

    async def get_by_id(self, feedback_id: str) -> Feedback | None:
        sql = "SELECT * FROM feedback WHERE feedback_id = $1"
        row = await self._db.fetchrow(sql, feedback_id)
        if row is None:
            return None
        return _row_to_feedback(row)

    async def list_for_target(
        self,
        target_user_id: str,
        review_period_id: str | None = None,
    ) -> list[Feedback]:
        """Approved feedback received by a user, newest first.

        Args:
            target_user_id: User who received the feedback.
            review_period_id: Optional filter to a single period.
        """
        params: list[Any] = [target_user_id]
        period_clause = ""
        if review_period_id is not None:
            period_clause = "AND review_period_id = $2"
            params.append(review_period_id)

        sql = f"""
            SELECT * FROM feedback
            WHERE target_user_id = $1
              AND moderation->>'status' = 'approved'
              {period_clause}
            ORDER BY created_at DESC
        """
        rows = await self._db.fetch(sql, *params)
        return [_row_to_feedback(row) for row in rows]

    async def list_public(
        self,
        target_user_id: str | None = None,
        *,
        limit: int = 10,
        offset: int = 0,
    ) -> list[Feedback]:
        """Public, approved feedback, newest first.

        Args:
            target_user_id: Optional filter to one user's wall.
            limit: Maximum records to return.
            offset: Offset for pagination.
        """
        where_clause, params = _public_filter(target_user_id)
        idx = len(params) + 1

        sql = f"""
            SELECT * FROM feedback
            {where_clause}
            ORDER BY created_at DESC
            LIMIT ${idx} OFFSET ${idx + 1}
        """
        rows = await self._db.fetch(sql, *params, limit, offset)
        return [_row_to_feedback(row) for row in rows]

    async def count_public(self, target_user_id: str | None = None) -> int:
        where_clause, params = _public_filter(target_user_id)
        sql = f"SELECT COUNT(*) FROM feedback {where_clause}"
        count = await self._db.fetchval(sql, *params)
        return count or 0

    async def list_all(
        self,
        *,
        moderation_status: str | None = None,
        mula_rating: str | None = None,
        target_user_id: str | None = None,
        review_period_id: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Feedback], int]:
        """Filtered listing for moderators.

        Args:
            moderation_status: Optional moderation status filter.
            mula_rating: Optional tier filter.
            target_user_id: Optional recipient filter.
            review_period_id: Optional period filter.
            limit: Maximum records to return.
            offset: Offset for pagination.

        Returns:
            Tuple of (feedback page newest first, total matching count).
        """
        conditions: list[str] = []
        params: list[Any] = []
        param_idx = 1

        if moderation_status is not None:
            conditions.append(f"moderation->>'status' = ${param_idx}")
            params.append(moderation_status)
            param_idx += 1

        if mula_rating is not None:
            conditions.append(f"mula_rating = ${param_idx}")
            params.append(mula_rating)
            param_idx += 1

        if target_user_id is not None:
            conditions.append(f"target_user_id = ${param_idx}")
            params.append(target_user_id)
            param_idx += 1

        if review_period_id is not None:
            conditions.append(f"review_period_id = ${param_idx}")
            params.append(review_period_id)
            param_idx += 1

        where_clause = ""
        if conditions:
            where_clause = "WHERE " + " AND ".join(conditions)

        count_sql = f"SELECT COUNT(*) FROM feedback {where_clause}"
        total = await self._db.fetchval(count_sql, *params)

        sql = f"""
            SELECT * FROM feedback
            {where_clause}
            ORDER BY created_at DESC
            LIMIT ${param_idx} OFFSET ${param_idx + 1}
        """
        rows = await self._db.fetch(sql, *params, limit, offset)
        return [_row_to_feedback(row) for row in rows], total or 0


def _public_filter(target_user_id: str | None) -> tuple[str, list[Any]]:
    where_clause = "WHERE visibility = 'public' AND moderation->>'status' = 'approved'"
    params: list[Any] = []
    if target_user_id is not None:
        where_clause += " AND target_user_id = $1"
        params.append(target_user_id)
    return where_clause, params


def _load_json(value: Any) -> Any:
    if isinstance(value, str):
        return json.loads(value)
    return value


def _row_to_feedback(row: Any) -> Feedback:
    """Convert an asyncpg Record to a Feedback."""
    return Feedback(
        feedback_id=row["feedback_id"],
        target_user_id=row["target_user_id"],
        review_period_id=row["review_period_id"],
        reviewer_fingerprint=row["reviewer_fingerprint"],
        reviewer_ip_hash=row["reviewer_ip_hash"],
        ratings=FeedbackRatings.from_dict(_load_json(row["ratings"])),
        strengths=row["strengths"],
        improvements=row["improvements"],
        mula_rating=row["mula_rating"],
        visibility=row["visibility"],
        moderation=ModerationInfo.from_dict(_load_json(row["moderation"])),
        employee_reaction=row.get("employee_reaction"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
