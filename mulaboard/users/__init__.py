"""Users who can receive feedback (read-only)."""

from mulaboard.users.repository import UserRepository
from mulaboard.users.schemas import User

__all__ = ["User", "UserRepository"]
