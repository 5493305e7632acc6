"""
Test Suite for Partial Scoring

Tests scoring with a subset of metrics available.
"""

import pytest

from src.scoring import (
    MetricName,
    PartialScoreData,
    PerformanceLevel,
    ValidationError,
    calculate_partial_score,
)


class TestPartialScore:
    """Test renormalized partial scores."""

    def test_links_and_domains(self, good_links, good_domains):
        """(100×.35 + 83.3×.2) / .55 ≈ 93.9 with 55% confidence."""
        partial = calculate_partial_score(
            authority_links=good_links,
            authority_domains=good_domains,
        )

        assert isinstance(partial, PartialScoreData)
        assert partial.weighted_score == pytest.approx(93.94, abs=0.01)
        assert partial.normalized_score == 10
        assert partial.performance_level == PerformanceLevel.EXCELLENT
        assert partial.confidence == 55.0
        assert partial.available_metrics == [
            MetricName.AUTHORITY_LINKS,
            MetricName.AUTHORITY_DOMAINS,
        ]
        assert partial.missing_metrics == [
            MetricName.TRAFFIC_GROWTH,
            MetricName.RANKING_IMPROVEMENTS,
            MetricName.AI_VISIBILITY,
        ]

    def test_all_metrics_full_confidence(self, good_inputs):
        partial = calculate_partial_score(**good_inputs)

        assert partial.confidence == 100.0
        assert partial.missing_metrics == []
        assert partial.weighted_score == pytest.approx(82.1667, abs=0.001)

    def test_no_metrics(self):
        partial = calculate_partial_score()

        assert partial.weighted_score == 0
        assert partial.normalized_score == 1
        assert partial.confidence == 0
        assert partial.performance_level == PerformanceLevel.VERY_POOR
        assert len(partial.missing_metrics) == 5

    def test_single_metric(self, good_ai):
        """A lone metric's score is its own weighted score."""
        partial = calculate_partial_score(ai_visibility=good_ai)

        assert partial.weighted_score == pytest.approx(50)
        assert partial.confidence == 10.0

    def test_metric_flags_kept_without_roi_flags(self, poor_inputs):
        partial = calculate_partial_score(**poor_inputs)

        flag_types = [flag.type for flag in partial.red_flags]
        assert "SEVERE_LINK_DEFICIT" in flag_types
        assert "HIGH_SPEND_POOR_RESULTS" not in flag_types

    def test_links_validated_when_present(self, good_links):
        with pytest.raises(ValidationError):
            calculate_partial_score(
                authority_links=dict(good_links, monthlySpend=200, investmentMonths=2),
            )

    def test_no_validation_without_links(self):
        """Without links data there is no spend to validate."""
        partial = calculate_partial_score(
            authority_domains={"clientDomains": 10, "competitorDomains": [100]},
        )

        assert partial.available_metrics == [MetricName.AUTHORITY_DOMAINS]

    def test_to_dict(self, good_links):
        data = calculate_partial_score(authority_links=good_links).to_dict()

        assert data["availableMetrics"] == ["authorityLinks"]
        assert data["confidence"] == 35.0
        assert "authorityLinks" in data["scores"]
