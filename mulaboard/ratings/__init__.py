"""Mula rating classification for feedback.

Components:
- MulaRating: The three reward tiers (golden_mula, fresh_carrot, rotten_tomato)
- FeedbackRatings / CategoryRating: Five named 1-5 category scores
- classify_ratings / calculate_average_score: Per-feedback classification
- aggregate_ratings: Tier distribution and dominant tier over many feedback
- MULA_RATINGS / mula_message: Display details and encouragement lines
"""

from mulaboard.ratings.classifier import (
    FRESH_CARROT_MIN_SCORE,
    GOLDEN_MULA_MIN_SCORE,
    AggregateRatings,
    aggregate_ratings,
    calculate_average_score,
    category_averages,
    classify_average,
    classify_ratings,
)
from mulaboard.ratings.details import MULA_RATINGS, get_rating_details, mula_message
from mulaboard.ratings.schemas import (
    RATING_CATEGORIES,
    VALID_MULA_RATINGS,
    CategoryRating,
    FeedbackRatings,
    MulaRating,
)

__all__ = [
    "AggregateRatings",
    "CategoryRating",
    "FRESH_CARROT_MIN_SCORE",
    "FeedbackRatings",
    "GOLDEN_MULA_MIN_SCORE",
    "MULA_RATINGS",
    "MulaRating",
    "RATING_CATEGORIES",
    "VALID_MULA_RATINGS",
    "aggregate_ratings",
    "calculate_average_score",
    "category_averages",
    "classify_average",
    "classify_ratings",
    "get_rating_details",
    "mula_message",
]
