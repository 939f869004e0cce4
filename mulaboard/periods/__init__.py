"""Review periods (read-only)."""

from mulaboard.periods.repository import ReviewPeriodRepository
from mulaboard.periods.schemas import ReviewPeriod

__all__ = ["ReviewPeriod", "ReviewPeriodRepository"]
