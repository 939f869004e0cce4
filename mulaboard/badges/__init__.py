"""Achievement badges earned from feedback history."""

from mulaboard.badges.calculator import (
    PeriodSummary,
    UserStats,
    badge_progress,
    build_user_stats,
    calculate_earned_badges,
    has_badge,
)
from mulaboard.badges.definitions import BADGES, BADGES_BY_ID, Badge, BadgeCondition

__all__ = [
    "BADGES",
    "BADGES_BY_ID",
    "Badge",
    "BadgeCondition",
    "PeriodSummary",
    "UserStats",
    "badge_progress",
    "build_user_stats",
    "calculate_earned_badges",
    "has_badge",
]
