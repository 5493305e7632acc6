"""
Test Suite for Red Flag Detection

Tests per-metric anomaly rules, cross-metric ROI checks, content gap checks,
and the penalty floor.
"""

import pytest

from src.scoring import (
    RedFlag,
    Severity,
    apply_penalties,
    calculate_ai_visibility_score,
    calculate_authority_domains_score,
    calculate_authority_links_score,
    calculate_ranking_improvements_score,
    calculate_traffic_growth_score,
    detect_content_gap_red_flags,
    detect_roi_red_flags,
)


def flag_types(result):
    return [flag.type for flag in (result.red_flags or [])]


def flag_named(result, flag_type):
    return next(flag for flag in result.red_flags if flag.type == flag_type)


# =============================================================================
# PENALTIES
# =============================================================================

class TestPenaltyFloor:
    """Test that penalties never push a score below 1."""

    def test_penalties_floor_at_one(self):
        flags = [
            RedFlag(type="A", severity=Severity.CRITICAL, message="", score_penalty=-2),
            RedFlag(type="B", severity=Severity.CRITICAL, message="", score_penalty=-2),
        ]

        assert apply_penalties(3, flags) == 1

    def test_no_change_returns_none(self):
        """A score already at the floor has no separate adjusted value."""
        flags = [RedFlag(type="A", severity=Severity.CRITICAL, message="", score_penalty=-2)]

        assert apply_penalties(1, flags) is None
        assert apply_penalties(7, []) is None

    def test_partial_penalty(self):
        flags = [RedFlag(type="A", severity=Severity.HIGH, message="", score_penalty=-1.5)]

        assert apply_penalties(8, flags) == 6.5

    def test_adjusted_scores_in_range(self, poor_inputs):
        """Every adjusted score stays within 1-10."""
        results = [
            calculate_authority_links_score(poor_inputs["authority_links"]),
            calculate_authority_domains_score(poor_inputs["authority_domains"]),
            calculate_traffic_growth_score(poor_inputs["traffic_growth"]),
            calculate_ranking_improvements_score(poor_inputs["ranking_improvements"]),
            calculate_ai_visibility_score(poor_inputs["ai_visibility"]),
        ]

        for result in results:
            assert 1 <= result.normalized_score <= 10
            if result.adjusted_score is not None:
                assert 1 <= result.adjusted_score <= 10


# =============================================================================
# AUTHORITY LINKS
# =============================================================================

class TestLinkRedFlags:
    """Test link building red flags."""

    def test_severe_link_deficit(self, poor_inputs):
        """10 links vs 108 expected after 12 months."""
        result = calculate_authority_links_score(poor_inputs["authority_links"])

        flag = flag_named(result, "SEVERE_LINK_DEFICIT")
        assert flag.severity == Severity.CRITICAL
        assert flag.score_penalty == -2
        assert "108 expected" in flag.message

    def test_no_deficit_flag_before_twelve_months(self):
        result = calculate_authority_links_score({
            "actualLinks": 2,
            "monthlySpend": 5000,
            "investmentMonths": 11,
        })

        assert "SEVERE_LINK_DEFICIT" not in flag_types(result)

    def test_no_recent_links(self):
        result = calculate_authority_links_score({
            "actualLinks": 40,
            "monthlySpend": 3000,
            "investmentMonths": 6,
            "recentLinks6Months": 0,
        })

        assert flag_types(result) == ["NO_RECENT_LINKS"]
        assert result.adjusted_score == result.normalized_score - 1.5

    def test_low_quality_links(self):
        result = calculate_authority_links_score({
            "actualLinks": 13,
            "monthlySpend": 1000,
            "investmentMonths": 6,
            "linkBreakdown": {"highQuality": 1, "mediumQuality": 2, "lowQuality": 10},
        })

        assert flag_named(result, "LOW_QUALITY_LINKS").severity == Severity.MEDIUM

    def test_declining_link_velocity(self):
        result = calculate_authority_links_score({
            "actualLinks": 36,
            "monthlySpend": 3000,
            "investmentMonths": 6,
            "linkGrowthByMonth": [10, 10, 10, 2, 2, 2],
        })

        assert "DECLINING_LINK_VELOCITY" in flag_types(result)

    def test_short_velocity_series_ignored(self):
        result = calculate_authority_links_score({
            "actualLinks": 36,
            "monthlySpend": 3000,
            "investmentMonths": 6,
            "linkGrowthByMonth": [10, 0],
        })

        assert result.red_flags is None


# =============================================================================
# AUTHORITY DOMAINS
# =============================================================================

class TestDomainRedFlags:
    """Test referring domain red flags."""

    def test_massive_gap_and_behind_all(self, poor_inputs):
        """15 domains vs ~110: normalized 2, penalized to the floor."""
        result = calculate_authority_domains_score(poor_inputs["authority_domains"])

        assert result.normalized_score == 2
        assert result.adjusted_score == 1
        assert "MASSIVE_AUTHORITY_GAP" in flag_types(result)
        assert "BEHIND_ALL_COMPETITORS" in flag_types(result)

    def test_stagnant_domain_growth(self):
        result = calculate_authority_domains_score({
            "clientDomains": 20,
            "competitorDomains": [25, 30],
            "domainGrowthTrend": [20, 20, 20, 20, 20, 20],
        })

        assert flag_types(result) == ["STAGNANT_DOMAIN_GROWTH"]

    def test_behind_all_requires_competitors(self):
        result = calculate_authority_domains_score({
            "clientDomains": 0,
            "competitorDomains": [],
        })

        assert result.red_flags is None


# =============================================================================
# TRAFFIC GROWTH
# =============================================================================

class TestTrafficRedFlags:
    """Test traffic growth red flags."""

    def test_stagnant_and_falling_behind(self, poor_inputs):
        """2% growth in 12 months while competitors average 30%."""
        result = calculate_traffic_growth_score(poor_inputs["traffic_growth"])

        stagnant = flag_named(result, "STAGNANT_PROGRESS")
        assert stagnant.severity == Severity.CRITICAL
        assert stagnant.score_penalty == -2
        assert "FALLING_BEHIND_COMPETITORS" in flag_types(result)
        assert result.adjusted_score == 1

    @pytest.mark.parametrize("months,client_growth,severity,penalty", [
        (6, 1, Severity.MEDIUM, -1),
        (9, 1, Severity.HIGH, -1.5),
        (12, 1, Severity.CRITICAL, -2),
    ])
    def test_stagnation_severity_escalates(self, months, client_growth, severity, penalty):
        result = calculate_traffic_growth_score({
            "clientGrowth": client_growth,
            "competitorGrowths": [10],
            "investmentMonths": months,
            "currentMonthlyTraffic": 2000,
        })

        flag = flag_named(result, "STAGNANT_PROGRESS")
        assert flag.severity == severity
        assert flag.score_penalty == penalty

    def test_no_stagnation_when_competitors_flat(self):
        result = calculate_traffic_growth_score({
            "clientGrowth": 1,
            "competitorGrowths": [2, 3],
            "investmentMonths": 12,
            "currentMonthlyTraffic": 2000,
        })

        assert "STAGNANT_PROGRESS" not in flag_types(result)

    def test_keyword_over_dependency(self):
        result = calculate_traffic_growth_score({
            "clientGrowth": 40,
            "competitorGrowths": [30],
            "investmentMonths": 12,
            "currentMonthlyTraffic": 20000,
            "topKeywordsDependency": 0.65,
        })

        assert flag_types(result) == ["KEYWORD_OVER_DEPENDENCY"]
        assert result.details["trafficConcentration"]["riskLevel"] == "High"

    def test_no_brand_recognition(self):
        result = calculate_traffic_growth_score({
            "clientGrowth": 40,
            "competitorGrowths": [30],
            "investmentMonths": 8,
            "currentMonthlyTraffic": 20000,
            "brandedSearchTraffic": 50,
        })

        assert "NO_BRAND_RECOGNITION" in flag_types(result)

    def test_declining_momentum(self):
        result = calculate_traffic_growth_score({
            "clientGrowth": 40,
            "competitorGrowths": [30],
            "investmentMonths": 12,
            "currentMonthlyTraffic": 700,
            "trafficHistory": [1000, 1000, 1000, 700, 700, 700],
        })

        assert "DECLINING_MOMENTUM" in flag_types(result)


# =============================================================================
# RANKING IMPROVEMENTS
# =============================================================================

class TestRankingRedFlags:
    """Test ranking red flags."""

    def test_poor_ranking_performance(self, poor_inputs):
        """No top-10 keywords out of 20 after 12 months."""
        result = calculate_ranking_improvements_score(poor_inputs["ranking_improvements"])

        flag = flag_named(result, "POOR_RANKING_PERFORMANCE")
        assert flag.severity == Severity.CRITICAL

    def test_widespread_declines(self):
        """3 of 4 previously top-20 keywords lost positions."""
        result = calculate_ranking_improvements_score({
            "rankingChanges": [
                {"keyword": "a", "oldPosition": 5, "newPosition": 12},
                {"keyword": "b", "oldPosition": 8, "newPosition": 15},
                {"keyword": "c", "oldPosition": 18, "newPosition": 30},
                {"keyword": "d", "oldPosition": 3, "newPosition": 2},
            ],
            "investmentMonths": 6,
        })

        flag = flag_named(result, "WIDESPREAD_RANKING_DECLINES")
        assert flag.severity == Severity.HIGH
        assert flag.score_penalty == -1.5

    def test_dropping_out_counts_as_decline(self):
        result = calculate_ranking_improvements_score({
            "rankingChanges": [
                {"keyword": "a", "oldPosition": 12, "newPosition": 101},
                {"keyword": "b", "oldPosition": 9, "newPosition": 9},
            ],
            "investmentMonths": 6,
        })

        assert "WIDESPREAD_RANKING_DECLINES" in flag_types(result)

    def test_no_commercial_rankings(self):
        result = calculate_ranking_improvements_score({
            "rankingChanges": [
                {"keyword": "buy seo", "oldPosition": 30, "newPosition": 15, "intent": "commercial"},
                {"keyword": "what is seo", "oldPosition": 12, "newPosition": 2, "intent": "informational"},
            ],
            "investmentMonths": 8,
        })

        assert flag_types(result) == ["NO_COMMERCIAL_RANKINGS"]


# =============================================================================
# AI VISIBILITY
# =============================================================================

class TestAIRedFlags:
    """Test AI visibility red flags."""

    def test_invisible_brand(self, poor_inputs):
        result = calculate_ai_visibility_score(poor_inputs["ai_visibility"])

        assert flag_types(result) == ["AI_INVISIBILITY", "NO_AI_PRESENCE"]

    def test_follow_up_mention_counts_as_presence(self):
        result = calculate_ai_visibility_score({
            "keywordResults": [
                {"keyword": "a", "followUpMentioned": True},
                {"keyword": "b"},
                {"keyword": "c"},
            ],
            "investmentMonths": 8,
        })

        assert "NO_AI_PRESENCE" not in flag_types(result)

    def test_no_flags_early_in_campaign(self):
        result = calculate_ai_visibility_score({
            "keywordResults": [{"keyword": "a"}],
            "investmentMonths": 4,
        })

        assert result.red_flags is None


# =============================================================================
# CROSS-METRIC
# =============================================================================

class TestROIRedFlags:
    """Test spend-versus-results checks."""

    def test_high_spend_poor_results(self):
        flags = detect_roi_red_flags(6000, 12, [1, 1, 1, 1, 1])

        assert [flag.type for flag in flags] == ["HIGH_SPEND_POOR_RESULTS"]
        assert "$6,000/month" in flags[0].message
        assert "$72,000 total" in flags[0].message

    def test_long_term_underperformance(self):
        flags = detect_roi_red_flags(3000, 18, [4, 4, 4, 4, 4])

        assert [flag.type for flag in flags] == ["LONG_TERM_UNDERPERFORMANCE"]

    def test_healthy_campaign(self):
        assert detect_roi_red_flags(8000, 24, [7, 6, 8, 5, 6]) == []


class TestContentGapRedFlags:
    """Test content gap checks."""

    def test_multiple_gaps_and_no_commercial_traffic(self):
        flags = detect_content_gap_red_flags({
            "clientTraffic": {"guides": 10, "pricing": 0},
            "competitorTrafficByTheme": [
                {"name": "guides", "competitorAverage": 2000},
                {"name": "pricing", "competitorAverage": 1500},
                {"name": "services", "competitorAverage": 3000, "intent": "commercial"},
            ],
        })

        gaps = flags[0]
        assert gaps.type == "MULTIPLE_CONTENT_GAPS"
        assert gaps.severity == Severity.CRITICAL
        assert gaps.missed_revenue == 26000  # 6,500 visits × 2% × $200
        assert "6,500 monthly visits" in gaps.message
        assert flags[1].type == "NO_COMMERCIAL_TRAFFIC"

    def test_covered_themes(self):
        flags = detect_content_gap_red_flags({
            "clientTraffic": {"guides": 900, "services": 1200},
            "competitorTrafficByTheme": [
                {"name": "guides", "competitorAverage": 2000},
                {"name": "services", "competitorAverage": 3000, "intent": "transactional"},
            ],
        })

        assert flags == []
