"""Achievement badge definitions.

Each badge is earned when its condition holds over a user's feedback
history. Condition types are interpreted by ``badges.calculator``.
"""

from dataclasses import dataclass
from typing import Any

VALID_BADGE_CATEGORIES: frozenset[str] = frozenset({
    "excellence",
    "consistency",
    "improvement",
    "participation",
})

VALID_RARITIES: frozenset[str] = frozenset({
    "common",
    "rare",
    "epic",
    "legendary",
})


@dataclass(frozen=True)
class BadgeCondition:
    type: str
    value: float | str


@dataclass(frozen=True)
class Badge:
    """An achievement badge."""

    badge_id: str
    name: str
    description: str
    emoji: str
    category: str
    condition: BadgeCondition
    rarity: str
    color: str

    def __post_init__(self) -> None:
        if self.category not in VALID_BADGE_CATEGORIES:
            raise ValueError(f"Invalid badge category {self.category!r}")
        if self.rarity not in VALID_RARITIES:
            raise ValueError(f"Invalid badge rarity {self.rarity!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "badge_id": self.badge_id,
            "name": self.name,
            "description": self.description,
            "emoji": self.emoji,
            "category": self.category,
            "rarity": self.rarity,
            "color": self.color,
        }


BADGES: tuple[Badge, ...] = (
    # Excellence
    Badge(
        badge_id="golden_streak",
        name="Golden Streak",
        description="Received 5+ Golden Mulas in a single review period",
        emoji="🌿✨",
        category="excellence",
        condition=BadgeCondition("golden_mula_count_per_period", 5),
        rarity="epic",
        color="#FFD700",
    ),
    Badge(
        badge_id="perfectionist",
        name="The Perfectionist",
        description="Achieved a perfect 5.0 average score in a review period",
        emoji="💯",
        category="excellence",
        condition=BadgeCondition("perfect_average_score", 5.0),
        rarity="legendary",
        color="#9333EA",
    ),
    Badge(
        badge_id="all_rounder",
        name="All-Rounder",
        description="Scored 4+ in all rating categories",
        emoji="🎯",
        category="excellence",
        condition=BadgeCondition("all_categories_above", 4.0),
        rarity="rare",
        color="#3B82F6",
    ),
    # Consistency
    Badge(
        badge_id="rising_star",
        name="Rising Star",
        description="Received feedback from 10+ different colleagues",
        emoji="⭐",
        category="consistency",
        condition=BadgeCondition("unique_reviewers_count", 10),
        rarity="rare",
        color="#F59E0B",
    ),
    Badge(
        badge_id="team_favorite",
        name="Team Favorite",
        description="Maintained 80%+ Golden/Fresh ratings across 3 periods",
        emoji="💚",
        category="consistency",
        condition=BadgeCondition("positive_rating_streak", 3),
        rarity="epic",
        color="#10B981",
    ),
    # Improvement
    Badge(
        badge_id="growth_mindset",
        name="Growth Mindset",
        description="Improved average score by 0.5+ points between periods",
        emoji="📈",
        category="improvement",
        condition=BadgeCondition("score_improvement", 0.5),
        rarity="rare",
        color="#8B5CF6",
    ),
    Badge(
        badge_id="comeback_king",
        name="Comeback Champion",
        description="Turned around from Rotten Tomato to Golden Mula",
        emoji="👑",
        category="improvement",
        condition=BadgeCondition("rating_turnaround", "rotten_to_golden"),
        rarity="legendary",
        color="#EC4899",
    ),
    # Participation
    Badge(
        badge_id="first_feedback",
        name="Breaking the Ice",
        description="Received your first feedback",
        emoji="🎊",
        category="participation",
        condition=BadgeCondition("feedback_count", 1),
        rarity="common",
        color="#6366F1",
    ),
)

BADGES_BY_ID: dict[str, Badge] = {badge.badge_id: badge for badge in BADGES}
