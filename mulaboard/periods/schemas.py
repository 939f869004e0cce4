"""Schema definitions for review periods.

Maps 1:1 to the ``review_periods`` table. Periods are created and
activated by admins in the web app; this service only reads them.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

SECONDS_PER_DAY = 86400


@dataclass
class ReviewPeriod:
    """A time-boxed window during which feedback is accepted.

    Attributes:
        period_id: Identifier of the period.
        name: Display name (e.g. "Q1 2026 Reviews").
        slug: URL slug.
        start_date: When the period opens.
        end_date: When the period closes; always after start_date.
        is_active: Admin switch; at most one period is active at a time.
        theme_name: Seasonal theme shown on the feedback form.
        theme_emoji: Emoji shown next to the theme name.
        created_at: When the period was created.
    """

    period_id: str
    name: str
    slug: str
    start_date: datetime
    end_date: datetime
    is_active: bool = False
    theme_name: str = "The Mula Season"
    theme_emoji: str = "🌿"
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def __post_init__(self) -> None:
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")

    def is_currently_active(self, now: datetime | None = None) -> bool:
        """Active flag set and ``now`` within the period's dates."""
        now = now or datetime.now(timezone.utc)
        return self.is_active and self.start_date <= now <= self.end_date

    @property
    def duration_days(self) -> int:
        seconds = abs((self.end_date - self.start_date).total_seconds())
        return math.ceil(seconds / SECONDS_PER_DAY)

    def days_remaining(self, now: datetime | None = None) -> int:
        """Whole days left until the period ends, 0 if inactive or over."""
        if not self.is_active:
            return 0
        now = now or datetime.now(timezone.utc)
        if now > self.end_date:
            return 0
        return math.ceil((self.end_date - now).total_seconds() / SECONDS_PER_DAY)

    def to_dict(self) -> dict[str, Any]:
        return {
            "period_id": self.period_id,
            "name": self.name,
            "slug": self.slug,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "is_active": self.is_active,
            "theme_name": self.theme_name,
            "theme_emoji": self.theme_emoji,
            "duration_days": self.duration_days,
            "days_remaining": self.days_remaining(),
        }
