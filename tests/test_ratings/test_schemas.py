"""Tests for rating schemas."""

import pytest

from mulaboard.ratings.schemas import CategoryRating, FeedbackRatings


class TestCategoryRating:
    """Tests for CategoryRating validation."""

    @pytest.mark.parametrize("score", [1, 3, 5])
    def test_scores_in_range(self, score):
        assert CategoryRating(score).score == score

    @pytest.mark.parametrize("score", [0, 6, -1])
    def test_out_of_range_raises(self, score):
        with pytest.raises(ValueError, match="Score must be between 1 and 5"):
            CategoryRating(score)

    def test_from_dict_validates(self):
        with pytest.raises(ValueError):
            CategoryRating.from_dict({"score": "9", "comment": "off the chart"})

    def test_ratings_from_scores_validates_each_category(self):
        with pytest.raises(ValueError):
            FeedbackRatings.from_scores(5, 5, 5, 5, 0)
