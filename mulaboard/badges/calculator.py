"""Badge calculator.

Builds a user's feedback statistics and decides which badges they have
earned. Pure functions; the caller loads feedback and periods.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from mulaboard.badges.definitions import BADGES, Badge
from mulaboard.feedback.schemas import Feedback
from mulaboard.periods.schemas import ReviewPeriod
from mulaboard.ratings.classifier import aggregate_ratings, category_averages, round_half_up
from mulaboard.ratings.schemas import RATING_CATEGORIES, MulaRating

POSITIVE_RATINGS = frozenset({MulaRating.GOLDEN_MULA.value, MulaRating.FRESH_CARROT.value})
POSITIVE_SHARE_MIN_PERCENT = 80
PERFECT_SCORE = 5.0


@dataclass(frozen=True)
class PeriodSummary:
    period_id: str
    average_score: float
    dominant_rating: MulaRating


@dataclass
class UserStats:
    """Feedback statistics of one user.

    Attributes:
        total_feedback: Number of feedback received.
        feedback_by_period: Feedback grouped by period id, oldest period first.
        golden_mula_count: Feedback in the golden tier.
        fresh_carrot_count: Feedback in the middle tier.
        rotten_tomato_count: Feedback in the bottom tier.
        average_score: Mean of the feedback averages.
        category_averages: Mean score per rating category.
        unique_reviewers: Distinct reviewer fingerprints.
        period_history: One summary per period with feedback, oldest first.
    """

    total_feedback: int = 0
    feedback_by_period: dict[str, list[Feedback]] = field(default_factory=dict)
    golden_mula_count: int = 0
    fresh_carrot_count: int = 0
    rotten_tomato_count: int = 0
    average_score: float = 0.0
    category_averages: dict[str, float] = field(
        default_factory=lambda: {name: 0.0 for name in RATING_CATEGORIES}
    )
    unique_reviewers: int = 0
    period_history: list[PeriodSummary] = field(default_factory=list)


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return round_half_up(sum(values) / len(values))


def build_user_stats(
    feedback: Iterable[Feedback],
    periods: Sequence[ReviewPeriod],
) -> UserStats:
    """Summarize a user's feedback.

    Args:
        feedback: Feedback the user received.
        periods: Review periods ordered by start date; fixes the order of
            ``period_history``. Periods unknown to this list sort last.

    Returns:
        UserStats for badge evaluation.
    """
    items = list(feedback)
    order = {period.period_id: idx for idx, period in enumerate(periods)}

    grouped: dict[str, list[Feedback]] = {}
    for item in sorted(items, key=lambda f: order.get(f.review_period_id, len(order))):
        grouped.setdefault(item.review_period_id, []).append(item)

    history = []
    for period_id, period_feedback in grouped.items():
        aggregate = aggregate_ratings(f.mula_rating for f in period_feedback)
        history.append(
            PeriodSummary(
                period_id=period_id,
                average_score=_mean([f.average_score for f in period_feedback]),
                dominant_rating=aggregate.dominant,
            )
        )

    overall = aggregate_ratings(f.mula_rating for f in items)
    return UserStats(
        total_feedback=len(items),
        feedback_by_period=grouped,
        golden_mula_count=overall.counts[MulaRating.GOLDEN_MULA],
        fresh_carrot_count=overall.counts[MulaRating.FRESH_CARROT],
        rotten_tomato_count=overall.counts[MulaRating.ROTTEN_TOMATO],
        average_score=_mean([f.average_score for f in items]),
        category_averages=category_averages(f.ratings for f in items),
        unique_reviewers=len({f.reviewer_fingerprint for f in items}),
        period_history=history,
    )


def _golden_count(feedback: Iterable[Feedback]) -> int:
    return sum(1 for f in feedback if f.mula_rating == MulaRating.GOLDEN_MULA.value)


def _positive_share(feedback: Sequence[Feedback]) -> float:
    if not feedback:
        return 0.0
    positive = sum(1 for f in feedback if f.mula_rating in POSITIVE_RATINGS)
    return positive / len(feedback) * 100


def has_badge(badge: Badge, stats: UserStats) -> bool:
    """Whether ``stats`` satisfy the badge's condition.

    Unknown condition types are never earned.
    """
    kind = badge.condition.type
    value = badge.condition.value

    if kind == "feedback_count":
        return stats.total_feedback >= value

    if kind == "golden_mula_count_per_period":
        return any(
            _golden_count(period_feedback) >= value
            for period_feedback in stats.feedback_by_period.values()
        )

    if kind == "perfect_average_score":
        return any(p.average_score == PERFECT_SCORE for p in stats.period_history)

    if kind == "all_categories_above":
        return all(avg >= value for avg in stats.category_averages.values())

    if kind == "unique_reviewers_count":
        return stats.unique_reviewers >= value

    if kind == "positive_rating_streak":
        streak = int(value)
        recent = stats.period_history[-streak:]
        if len(recent) < streak:
            return False
        return all(
            _positive_share(stats.feedback_by_period.get(p.period_id, []))
            >= POSITIVE_SHARE_MIN_PERCENT
            for p in recent
        )

    if kind == "score_improvement":
        if len(stats.period_history) < 2:
            return False
        previous, latest = stats.period_history[-2:]
        return round_half_up(latest.average_score - previous.average_score) >= value

    if kind == "rating_turnaround":
        if len(stats.period_history) < 2:
            return False
        previous, latest = stats.period_history[-2:]
        return (
            previous.dominant_rating == MulaRating.ROTTEN_TOMATO
            and latest.dominant_rating == MulaRating.GOLDEN_MULA
        )

    return False


def calculate_earned_badges(
    stats: UserStats,
    badges: Iterable[Badge] = BADGES,
) -> list[Badge]:
    return [badge for badge in badges if has_badge(badge, stats)]


def badge_progress(badge: Badge, stats: UserStats) -> float:
    """Progress towards a badge in percent (0-100).

    Count-based badges report partial progress; golden streak progress
    uses the most recent period with feedback. Every other badge is
    either 0 or 100.
    """
    kind = badge.condition.type
    value = badge.condition.value

    if kind == "feedback_count":
        return min(stats.total_feedback / value * 100, 100.0)

    if kind == "golden_mula_count_per_period":
        periods = list(stats.feedback_by_period.values())
        latest = periods[-1] if periods else []
        return min(_golden_count(latest) / value * 100, 100.0)

    if kind == "unique_reviewers_count":
        return min(stats.unique_reviewers / value * 100, 100.0)

    return 100.0 if has_badge(badge, stats) else 0.0
