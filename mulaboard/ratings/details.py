"""Display details and encouragement messages for Mula rating tiers."""

import random
from dataclasses import dataclass

from mulaboard.ratings.schemas import MulaRating


@dataclass(frozen=True)
class MulaRatingDetails:
    label: str
    emoji: str
    description: str
    color: str
    bg_color: str
    min_score: float
    max_score: float
    animation: str


MULA_RATINGS: dict[MulaRating, MulaRatingDetails] = {
    MulaRating.GOLDEN_MULA: MulaRatingDetails(
        label="Golden Mula",
        emoji="🌿✨",
        description="Outstanding performance! You're a star!",
        color="#FFD700",
        bg_color="#FFF9E6",
        min_score=4.5,
        max_score=5.0,
        animation="sparkle",
    ),
    MulaRating.FRESH_CARROT: MulaRatingDetails(
        label="Fresh Carrot",
        emoji="🥕",
        description="Good work! Keep it up!",
        color="#FF8C00",
        bg_color="#FFF3E6",
        min_score=3.0,
        max_score=4.49,
        animation="bounce",
    ),
    MulaRating.ROTTEN_TOMATO: MulaRatingDetails(
        label="Rotten Tomato",
        emoji="🍅💀",
        description="Room for improvement. Let's work on this!",
        color="#DC2626",
        bg_color="#FEE2E2",
        min_score=1.0,
        max_score=2.99,
        animation="shake",
    ),
}

_MESSAGES: dict[MulaRating, tuple[str, ...]] = {
    MulaRating.GOLDEN_MULA: (
        "{name} is shining bright like a golden mula! ✨",
        "Outstanding work, {name}! Keep up the excellence! 🌿",
        "{name} is crushing it! Golden mula all the way! 🏆",
    ),
    MulaRating.FRESH_CARROT: (
        "{name} is doing great! Fresh carrot vibes! 🥕",
        "Good job, {name}! Keep growing! 🌱",
        "{name} is on the right track! Keep it up! 👍",
    ),
    MulaRating.ROTTEN_TOMATO: (
        "{name}, there's room to grow. Let's work on this together! 💪",
        "{name}, we believe in your potential! Time to level up! 🚀",
        "{name}, every expert was once a beginner. Keep learning! 📚",
    ),
}


def get_rating_details(rating: MulaRating | str) -> MulaRatingDetails:
    return MULA_RATINGS[MulaRating(rating)]


def mula_message(
    rating: MulaRating | str,
    recipient_name: str,
    rng: random.Random | None = None,
) -> str:
    """Pick one of the tier's encouragement lines for the recipient."""
    options = _MESSAGES[MulaRating(rating)]
    chooser = rng or random
    return chooser.choice(options).format(name=recipient_name)
