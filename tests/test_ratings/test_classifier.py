"""Tests for Mula rating classification and aggregation."""

import pytest

from mulaboard.ratings.classifier import (
    AggregateRatings,
    aggregate_ratings,
    calculate_average_score,
    category_averages,
    classify_average,
    classify_ratings,
    round_half_up,
)
from mulaboard.ratings.schemas import FeedbackRatings, MulaRating


# ── Average score ──────────────────────────────────────


class TestCalculateAverageScore:
    """Tests for calculate_average_score()."""

    def test_golden_example(self, golden_ratings):
        assert calculate_average_score(golden_ratings) == 4.6

    def test_fresh_example(self, fresh_ratings):
        assert calculate_average_score(fresh_ratings) == 3.0

    def test_rotten_example(self, rotten_ratings):
        assert calculate_average_score(rotten_ratings) == 2.0

    def test_rounds_to_two_decimals(self):
        # 21 / 5
        ratings = FeedbackRatings.from_scores(4, 4, 4, 4, 5)
        assert calculate_average_score(ratings) == 4.2

    def test_deterministic(self, golden_ratings):
        assert calculate_average_score(golden_ratings) == calculate_average_score(golden_ratings)


# ── Tier thresholds ────────────────────────────────────


class TestClassifyAverage:
    """Tests for the tier thresholds."""

    @pytest.mark.parametrize("average,expected", [
        (5.0, MulaRating.GOLDEN_MULA),
        (4.5, MulaRating.GOLDEN_MULA),
        (4.49, MulaRating.FRESH_CARROT),
        (4.4, MulaRating.FRESH_CARROT),
        (3.0, MulaRating.FRESH_CARROT),
        (2.99, MulaRating.ROTTEN_TOMATO),
        (2.9, MulaRating.ROTTEN_TOMATO),
        (1.0, MulaRating.ROTTEN_TOMATO),
    ])
    def test_boundaries(self, average, expected):
        assert classify_average(average) is expected


class TestClassifyRatings:
    """Tests for classify_ratings()."""

    def test_golden(self, golden_ratings):
        assert classify_ratings(golden_ratings) is MulaRating.GOLDEN_MULA

    def test_fresh(self, fresh_ratings):
        assert classify_ratings(fresh_ratings) is MulaRating.FRESH_CARROT

    def test_rotten(self, rotten_ratings):
        assert classify_ratings(rotten_ratings) is MulaRating.ROTTEN_TOMATO

    def test_neighbouring_integer_sums(self):
        # 22 / 5 = 4.4, 23 / 5 = 4.6
        assert classify_ratings(FeedbackRatings.from_scores(5, 5, 4, 4, 4)) is MulaRating.FRESH_CARROT
        assert classify_ratings(FeedbackRatings.from_scores(5, 5, 5, 4, 4)) is MulaRating.GOLDEN_MULA

    def test_comments_do_not_matter(self):
        ratings = FeedbackRatings.from_dict({
            "work_quality": {"score": 5, "comment": "great"},
            "communication": {"score": 5, "comment": ""},
            "team_behavior": {"score": 4},
            "accountability": {"score": 4, "comment": None},
            "overall": {"score": 5, "comment": "keep going"},
        })
        assert classify_ratings(ratings) is MulaRating.GOLDEN_MULA

    def test_recompute_is_stable(self, fresh_ratings):
        assert classify_ratings(fresh_ratings) is classify_ratings(fresh_ratings)


# ── Aggregation ────────────────────────────────────────


class TestAggregateRatings:
    """Tests for aggregate_ratings()."""

    def test_empty(self):
        result = aggregate_ratings([])

        assert isinstance(result, AggregateRatings)
        assert result.total == 0
        assert all(count == 0 for count in result.counts.values())
        assert all(pct == 0 for pct in result.percentage.values())
        assert result.dominant is MulaRating.FRESH_CARROT

    def test_counts_and_percentages(self):
        tiers = ["golden_mula", "golden_mula", "fresh_carrot", "rotten_tomato"]
        result = aggregate_ratings(tiers)

        assert result.total == 4
        assert result.counts[MulaRating.GOLDEN_MULA] == 2
        assert result.counts[MulaRating.FRESH_CARROT] == 1
        assert result.counts[MulaRating.ROTTEN_TOMATO] == 1
        assert result.percentage[MulaRating.GOLDEN_MULA] == 50
        assert result.percentage[MulaRating.FRESH_CARROT] == 25
        assert result.dominant is MulaRating.GOLDEN_MULA

    def test_percentages_round_half_up(self):
        # 1 of 8 = 12.5% -> 13
        tiers = [MulaRating.GOLDEN_MULA] + [MulaRating.FRESH_CARROT] * 7
        result = aggregate_ratings(tiers)

        assert result.percentage[MulaRating.GOLDEN_MULA] == 13
        assert result.percentage[MulaRating.FRESH_CARROT] == 88

    def test_thirds_round_to_nearest(self):
        result = aggregate_ratings(["golden_mula", "fresh_carrot", "rotten_tomato"])
        assert set(result.percentage.values()) == {33}

    def test_tie_golden_fresh_keeps_fresh(self):
        tiers = ["golden_mula"] * 3 + ["fresh_carrot"] * 3
        assert aggregate_ratings(tiers).dominant is MulaRating.FRESH_CARROT

    def test_tie_fresh_rotten_keeps_fresh(self):
        tiers = ["golden_mula"] * 2 + ["fresh_carrot"] * 3 + ["rotten_tomato"] * 3
        assert aggregate_ratings(tiers).dominant is MulaRating.FRESH_CARROT

    def test_tie_golden_rotten_keeps_golden(self):
        tiers = ["golden_mula"] * 3 + ["fresh_carrot"] + ["rotten_tomato"] * 3
        assert aggregate_ratings(tiers).dominant is MulaRating.GOLDEN_MULA

    def test_rotten_strictly_greater_wins(self):
        tiers = ["golden_mula"] * 2 + ["fresh_carrot"] * 2 + ["rotten_tomato"] * 3
        assert aggregate_ratings(tiers).dominant is MulaRating.ROTTEN_TOMATO

    def test_to_dict(self):
        data = aggregate_ratings(["golden_mula"]).to_dict()

        assert data["golden_mula"] == 1
        assert data["fresh_carrot"] == 0
        assert data["rotten_tomato"] == 0
        assert data["total"] == 1
        assert data["percentage"] == {
            "golden_mula": 100,
            "fresh_carrot": 0,
            "rotten_tomato": 0,
        }
        assert data["dominant"] == "golden_mula"

    def test_invalid_tier_raises(self):
        with pytest.raises(ValueError):
            aggregate_ratings(["silver_mula"])


class TestCategoryAverages:
    """Tests for category_averages()."""

    def test_empty_is_zero(self):
        averages = category_averages([])
        assert averages == {
            "work_quality": 0.0,
            "communication": 0.0,
            "team_behavior": 0.0,
            "accountability": 0.0,
            "overall": 0.0,
        }

    def test_per_category_mean(self, golden_ratings, rotten_ratings):
        averages = category_averages([golden_ratings, rotten_ratings])

        assert averages["work_quality"] == 3.5
        assert averages["communication"] == 3.5
        assert averages["team_behavior"] == 3.5
        assert averages["accountability"] == 3.0
        assert averages["overall"] == 3.0

    def test_rounds_to_two_decimals(self):
        ratings = [
            FeedbackRatings.from_scores(5, 5, 5, 5, 5),
            FeedbackRatings.from_scores(4, 4, 4, 4, 4),
            FeedbackRatings.from_scores(4, 4, 4, 4, 4),
        ]
        assert category_averages(ratings)["overall"] == 4.33

    def test_exact_half_rounds_up(self):
        # 33 / 8 = 4.125
        ratings = [FeedbackRatings.from_scores(5, 5, 5, 5, 5)] + [
            FeedbackRatings.from_scores(4, 4, 4, 4, 4) for _ in range(7)
        ]
        assert category_averages(ratings)["work_quality"] == 4.13


class TestRoundHalfUp:
    """Tests for round_half_up()."""

    @pytest.mark.parametrize("value,expected", [
        (4.125, 4.13),
        (2.375, 2.38),
        (4.124, 4.12),
        (4.6, 4.6),
    ])
    def test_two_decimals(self, value, expected):
        assert round_half_up(value) == expected

    def test_whole_numbers(self):
        assert round_half_up(12.5, places=0) == 13
        assert round_half_up(87.5, places=0) == 88
