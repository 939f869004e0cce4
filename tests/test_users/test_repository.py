"""Tests for UserRepository and User."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from mulaboard.users.repository import UserRepository
from mulaboard.users.schemas import User


@pytest.fixture
def mock_database():
    db = AsyncMock()
    db.fetchrow = AsyncMock(return_value=None)
    return db


@pytest.fixture
def repo(mock_database):
    return UserRepository(mock_database)


USER_ROW = {
    "user_id": "user_1",
    "name": "Alex Doe",
    "slug": "alex-doe",
    "email": "alex@example.com",
    "is_active": True,
    "is_approved": True,
    "created_at": datetime(2026, 1, 5, tzinfo=timezone.utc),
}


class TestUserRepository:
    @pytest.mark.asyncio
    async def test_get_by_id(self, repo, mock_database):
        mock_database.fetchrow.return_value = USER_ROW

        user = await repo.get_by_id("user_1")

        assert user.name == "Alex Doe"
        assert user.can_receive_feedback is True

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, repo):
        assert await repo.get_by_id("user_x") is None

    @pytest.mark.asyncio
    async def test_get_by_slug_is_case_insensitive(self, repo, mock_database):
        mock_database.fetchrow.return_value = USER_ROW

        await repo.get_by_slug("Alex-Doe")

        args = mock_database.fetchrow.call_args[0]
        assert "LOWER($1)" in args[0]
        assert args[1] == "Alex-Doe"


class TestUser:
    def test_unapproved_cannot_receive(self):
        assert User(user_id="u", name="n", slug="s").can_receive_feedback is False

    def test_inactive_cannot_receive(self):
        user = User(user_id="u", name="n", slug="s", is_active=False, is_approved=True)
        assert user.can_receive_feedback is False

    def test_to_dict_omits_email(self):
        data = User(user_id="u", name="n", slug="s", email="a@b.c").to_dict()
        assert "email" not in data
