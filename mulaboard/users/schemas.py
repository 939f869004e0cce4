"""Schema definitions for users who can receive feedback."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class User:
    """A colleague with a public feedback page.

    Only the fields the feedback core needs; accounts are managed by the
    web app.
    """

    user_id: str
    name: str
    slug: str
    email: str | None = None
    is_active: bool = True
    is_approved: bool = False
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def can_receive_feedback(self) -> bool:
        return self.is_active and self.is_approved

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "slug": self.slug,
            "is_active": self.is_active,
            "is_approved": self.is_approved,
        }
