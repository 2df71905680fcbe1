"""
Unit tests for the result classifier.
"""

import itertools
import math

import pytest

from insight_dashboard.application import classifier
from insight_dashboard.domain.models import Band, RecommendationItem, RFMScore


class TestRFMClassification:
    """Test RFM segment banding."""

    @pytest.mark.parametrize(
        "triple, expected",
        [
            ((5, 5, 5), Band.HIGH),
            ((4, 4, 4), Band.HIGH),
            ((1, 5, 5), Band.LOW),
            ((2, 4, 4), Band.LOW),
            ((3, 5, 5), Band.MEDIUM),
            ((3, 3, 3), Band.MEDIUM),
            ((1, 1, 1), Band.MEDIUM),
            ((5, 3, 5), Band.MEDIUM),
        ],
    )
    def test_examples(self, triple, expected):
        assert classifier.classify_rfm(RFMScore(*triple)) is expected

    def test_total_and_pure_over_domain(self):
        """Every triple in 1..5 maps to one band, the same one on every call."""
        for r, f, m in itertools.product(range(1, 6), repeat=3):
            score = RFMScore(r, f, m)
            first = classifier.classify_rfm(score)
            assert first in (Band.HIGH, Band.MEDIUM, Band.LOW)
            assert classifier.classify_rfm(RFMScore(r, f, m)) is first

    def test_label_is_literal_triple(self):
        assert classifier.rfm_label(RFMScore(5, 3, 1)) == "5-3-1"


class TestPercentageBands:
    """Test retention and prediction banding."""

    @pytest.mark.parametrize(
        "p, expected",
        [(0.75, Band.HIGH), (0.70, Band.HIGH), (0.30, Band.MEDIUM), (0.29999, Band.LOW), (0.0, Band.LOW), (1.0, Band.HIGH)],
    )
    def test_retention_boundaries(self, p, expected):
        assert classifier.classify_retention(p) is expected

    def test_prediction_uses_same_thresholds(self):
        assert classifier.classify_prediction(0.7) is Band.HIGH
        assert classifier.classify_prediction(0.5) is Band.MEDIUM
        assert classifier.classify_prediction(0.1) is Band.LOW

    def test_out_of_range_lands_in_nearest_band(self):
        assert classifier.classify_prediction(1.7) is Band.HIGH
        assert classifier.classify_prediction(-0.4) is Band.LOW
        assert classifier.classify_retention(math.nan) is Band.LOW

    def test_format_percentage_one_decimal(self):
        assert classifier.format_percentage(0.123) == "12.3%"
        assert classifier.format_percentage(0.3) == "30.0%"
        assert classifier.format_percentage(1) == "100.0%"

    def test_format_percentage_clamps(self):
        assert classifier.format_percentage(1.5) == "100.0%"
        assert classifier.format_percentage(-0.2) == "0.0%"
        assert classifier.format_percentage(math.nan) == "0.0%"


class TestCohortApplicability:
    def test_last_cohort_only_has_first_period(self):
        assert classifier.is_cohort_cell_applicable(2, 0, 3) is True
        assert classifier.is_cohort_cell_applicable(2, 1, 3) is False
        assert classifier.is_cohort_cell_applicable(2, 2, 3) is False

    def test_first_cohort_has_every_period(self):
        assert all(classifier.is_cohort_cell_applicable(0, p, 4) for p in range(4))


class TestHourFormatting:
    @pytest.mark.parametrize(
        "hour, text",
        [(-1, "undeterminable"), (0, "12 AM"), (1, "1 AM"), (11, "11 AM"), (12, "12 PM"), (13, "1 PM"), (23, "11 PM")],
    )
    def test_examples(self, hour, text):
        assert classifier.format_hour(hour) == text

    def test_noisy_hours(self):
        """Other negatives are undeterminable; hours past 23 show as 11 PM."""
        assert classifier.format_hour(-7) == classifier.UNDETERMINABLE
        assert classifier.format_hour(30) == "11 PM"


class TestRankedScores:
    def test_order_and_duplicates_preserved(self):
        items = [RecommendationItem("b", 0.5), RecommendationItem("a", 0.91234), RecommendationItem("b", 0.5)]
        assert classifier.ranked_scores(items) == [("b", "0.50"), ("a", "0.91"), ("b", "0.50")]
