"""Read-only user repository."""

import logging
from typing import Any

from mulaboard.storage.database import Database
from mulaboard.users.schemas import User

logger = logging.getLogger(__name__)


class UserRepository:
    """Lookups over the ``users`` table."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def get_by_id(self, user_id: str) -> User | None:
        row = await self._db.fetchrow("SELECT * FROM users WHERE user_id = $1", user_id)
        if row is None:
            return None
        return _row_to_user(row)

    async def get_by_slug(self, slug: str) -> User | None:
        """Look up a user by public slug (case-insensitive)."""
        row = await self._db.fetchrow(
            "SELECT * FROM users WHERE slug = LOWER($1)", slug,
        )
        if row is None:
            return None
        return _row_to_user(row)


def _row_to_user(row: Any) -> User:
    return User(
        user_id=row["user_id"],
        name=row["name"],
        slug=row["slug"],
        email=row.get("email"),
        is_active=row["is_active"],
        is_approved=row["is_approved"],
        created_at=row["created_at"],
    )
