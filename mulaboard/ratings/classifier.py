"""Mula rating classifier.

Turns five category scores into an average and one of three reward tiers,
and summarizes a collection of already-classified feedback. Everything here
is pure and synchronous; score bounds are validated upstream.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field

from mulaboard.ratings.schemas import RATING_CATEGORIES, FeedbackRatings, MulaRating

# Inclusive lower bounds of the two upper tiers
GOLDEN_MULA_MIN_SCORE = 4.5
FRESH_CARROT_MIN_SCORE = 3.0

AVERAGE_PRECISION = 2


def round_half_up(value: float, places: int = AVERAGE_PRECISION) -> float:
    """Round to ``places`` decimals with halves going up.

    Built-in round() sends halves to the even neighbour, so 4.125 would
    become 4.12 instead of 4.13.
    """
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def calculate_average_score(ratings: FeedbackRatings) -> float:
    """Mean of the five category scores, rounded to two decimals."""
    scores = ratings.scores
    return round_half_up(sum(scores) / len(scores))


def classify_average(average_score: float) -> MulaRating:
    """Map an average score to its tier, checking the highest tier first."""
    if average_score >= GOLDEN_MULA_MIN_SCORE:
        return MulaRating.GOLDEN_MULA
    if average_score >= FRESH_CARROT_MIN_SCORE:
        return MulaRating.FRESH_CARROT
    return MulaRating.ROTTEN_TOMATO


def classify_ratings(ratings: FeedbackRatings) -> MulaRating:
    """Tier for a full set of category ratings."""
    return classify_average(calculate_average_score(ratings))


def _percentage(count: int, total: int) -> int:
    if total == 0:
        return 0
    return int(round_half_up(count / total * 100, places=0))


@dataclass
class AggregateRatings:
    """Tier distribution over a set of feedback.

    Attributes:
        counts: Number of feedback per tier (all three tiers present).
        total: Number of feedback aggregated.
        percentage: Integer share of each tier, 0 when total is 0.
        dominant: Tier with the strictly highest count; ties keep the
            earlier candidate in the order fresh_carrot, golden_mula,
            rotten_tomato.
    """

    counts: dict[MulaRating, int] = field(default_factory=dict)
    total: int = 0
    percentage: dict[MulaRating, int] = field(default_factory=dict)
    dominant: MulaRating = MulaRating.FRESH_CARROT

    def to_dict(self) -> dict:
        return {
            **{tier.value: count for tier, count in self.counts.items()},
            "total": self.total,
            "percentage": {tier.value: pct for tier, pct in self.percentage.items()},
            "dominant": self.dominant.value,
        }


def aggregate_ratings(ratings: Iterable[MulaRating | str]) -> AggregateRatings:
    """Count tiers, compute their shares and pick the dominant tier.

    Args:
        ratings: Tier of each feedback (enum members or their string values).

    Returns:
        AggregateRatings for the collection.
    """
    counts = {tier: 0 for tier in MulaRating}
    for rating in ratings:
        counts[MulaRating(rating)] += 1

    total = sum(counts.values())
    percentage = {tier: _percentage(count, total) for tier, count in counts.items()}

    dominant = MulaRating.FRESH_CARROT
    max_count = counts[MulaRating.FRESH_CARROT]
    if counts[MulaRating.GOLDEN_MULA] > max_count:
        dominant = MulaRating.GOLDEN_MULA
        max_count = counts[MulaRating.GOLDEN_MULA]
    if counts[MulaRating.ROTTEN_TOMATO] > max_count:
        dominant = MulaRating.ROTTEN_TOMATO

    return AggregateRatings(
        counts=counts,
        total=total,
        percentage=percentage,
        dominant=dominant,
    )


def category_averages(ratings: Iterable[FeedbackRatings]) -> dict[str, float]:
    """Average score per category over many feedback, rounded to two decimals.

    Returns 0.0 for every category when ``ratings`` is empty.
    """
    totals = {name: 0 for name in RATING_CATEGORIES}
    count = 0
    for item in ratings:
        count += 1
        for name, score in zip(RATING_CATEGORIES, item.scores):
            totals[name] += score

    if count == 0:
        return {name: 0.0 for name in RATING_CATEGORIES}
    return {
        name: round_half_up(total / count)
        for name, total in totals.items()
    }
