"""Schema definitions for feedback ratings and Mula rating tiers.

A feedback carries exactly five rating categories. They are modelled as
named fields on ``FeedbackRatings`` rather than a dict so that every call
site has to handle all five.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any


class MulaRating(str, Enum):
    """Reward tier derived from a feedback's average score, best first."""

    GOLDEN_MULA = "golden_mula"
    FRESH_CARROT = "fresh_carrot"
    ROTTEN_TOMATO = "rotten_tomato"


VALID_MULA_RATINGS: frozenset[str] = frozenset(r.value for r in MulaRating)

RATING_CATEGORIES: tuple[str, ...] = (
    "work_quality",
    "communication",
    "team_behavior",
    "accountability",
    "overall",
)

MIN_SCORE = 1
MAX_SCORE = 5


@dataclass(frozen=True)
class CategoryRating:
    """Score (1-5) for one category plus an optional comment."""

    score: int
    comment: str = ""

    def __post_init__(self) -> None:
        if not MIN_SCORE <= self.score <= MAX_SCORE:
            raise ValueError(
                f"Score must be between {MIN_SCORE} and {MAX_SCORE}, got {self.score}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {"score": self.score, "comment": self.comment}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CategoryRating":
        return cls(score=int(data["score"]), comment=data.get("comment") or "")


@dataclass(frozen=True)
class FeedbackRatings:
    """The five category ratings of a single feedback."""

    work_quality: CategoryRating
    communication: CategoryRating
    team_behavior: CategoryRating
    accountability: CategoryRating
    overall: CategoryRating

    @property
    def scores(self) -> tuple[int, int, int, int, int]:
        return (
            self.work_quality.score,
            self.communication.score,
            self.team_behavior.score,
            self.accountability.score,
            self.overall.score,
        )

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {f.name: getattr(self, f.name).to_dict() for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FeedbackRatings":
        return cls(
            work_quality=CategoryRating.from_dict(data["work_quality"]),
            communication=CategoryRating.from_dict(data["communication"]),
            team_behavior=CategoryRating.from_dict(data["team_behavior"]),
            accountability=CategoryRating.from_dict(data["accountability"]),
            overall=CategoryRating.from_dict(data["overall"]),
        )

    @classmethod
    def from_scores(
        cls,
        work_quality: int,
        communication: int,
        team_behavior: int,
        accountability: int,
        overall: int,
    ) -> "FeedbackRatings":
        """Build ratings from bare scores (no comments)."""
        return cls(
            work_quality=CategoryRating(work_quality),
            communication=CategoryRating(communication),
            team_behavior=CategoryRating(team_behavior),
            accountability=CategoryRating(accountability),
            overall=CategoryRating(overall),
        )
