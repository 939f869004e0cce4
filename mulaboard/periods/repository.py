"""Read-only review period repository."""

import logging
from typing import Any

from mulaboard.periods.schemas import ReviewPeriod
from mulaboard.storage.database import Database

logger = logging.getLogger(__name__)


class ReviewPeriodRepository:
    """Lookups over the ``review_periods`` table."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def get_by_id(self, period_id: str) -> ReviewPeriod | None:
        sql = "SELECT * FROM review_periods WHERE period_id = $1"
        row = await self._db.fetchrow(sql, period_id)
        if row is None:
            return None
        return _row_to_period(row)

    async def get_active(self) -> ReviewPeriod | None:
        """The period currently flagged active, if any."""
        sql = """
            SELECT * FROM review_periods
            WHERE is_active = TRUE
            ORDER BY start_date DESC
            LIMIT 1
        """
        row = await self._db.fetchrow(sql)
        if row is None:
            return None
        return _row_to_period(row)

    async def list_ordered(self) -> list[ReviewPeriod]:
        """All periods, oldest start date first."""
        sql = "SELECT * FROM review_periods ORDER BY start_date ASC"
        rows = await self._db.fetch(sql)
        return [_row_to_period(row) for row in rows]


def _row_to_period(row: Any) -> ReviewPeriod:
    return ReviewPeriod(
        period_id=row["period_id"],
        name=row["name"],
        slug=row["slug"],
        start_date=row["start_date"],
        end_date=row["end_date"],
        is_active=row["is_active"],
        theme_name=row["theme_name"],
        theme_emoji=row["theme_emoji"],
        created_at=row["created_at"],
    )
