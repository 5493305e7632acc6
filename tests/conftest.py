"""
Pytest Configuration and Shared Fixtures

Provides common metric inputs and policies for all test modules.
"""

import pytest
from typing import Dict, Any

from src.scoring import DEFAULT_POLICY, ScoringPolicy
from src.utils.config import get_settings


# ============================================================================
# Settings Isolation
# ============================================================================

@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached; reset around each test so env overrides apply."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================================
# Healthy Campaign (scores in the Excellent tier)
# ============================================================================

@pytest.fixture
def good_links() -> Dict[str, Any]:
    """120 links vs 90 expected at $5,000/month over 12 months."""
    return {
        "actualLinks": 120,
        "monthlySpend": 5000,
        "investmentMonths": 12,
        "linkBreakdown": {"highQuality": 40, "mediumQuality": 60, "lowQuality": 20},
    }


@pytest.fixture
def good_domains() -> Dict[str, Any]:
    """150 domains vs a competitor average of 180 (83%)."""
    return {
        "clientDomains": 150,
        "competitorDomains": [180, 200, 160],
    }


@pytest.fixture
def good_traffic() -> Dict[str, Any]:
    """45% growth over 12 months vs a 30% competitor average."""
    return {
        "clientGrowth": 45,
        "competitorGrowths": [30, 35, 25],
        "investmentMonths": 12,
        "currentMonthlyTraffic": 15000,
    }


@pytest.fixture
def good_rankings() -> Dict[str, Any]:
    """Three keywords capturing 14 of 20 available position value (70%)."""
    return {
        "rankingChanges": [
            {"keyword": "seo agency", "oldPosition": 15, "newPosition": 4, "intent": "commercial"},
            {"keyword": "hire seo consultant", "oldPosition": 25, "newPosition": 8, "intent": "transactional"},
            {"keyword": "what is seo", "oldPosition": 8, "newPosition": 3, "intent": "informational"},
        ],
        "totalKeywords": 3,
        "investmentMonths": 12,
    }


@pytest.fixture
def good_ai() -> Dict[str, Any]:
    """Five keywords worth 20 + 15 + 10 + 5 + 0 = 50 of 100 points."""
    return {
        "keywordResults": [
            {"keyword": "best seo agency", "mentioned": True, "position": 2},
            {"keyword": "seo services", "mentioned": True, "position": 7},
            {"keyword": "seo consultant", "followUpMentioned": True},
            {"keyword": "local seo", "brandRecognized": True},
            {"keyword": "technical seo"},
        ],
        "investmentMonths": 12,
    }


@pytest.fixture
def good_inputs(good_links, good_domains, good_traffic, good_rankings, good_ai) -> Dict[str, Any]:
    return {
        "authority_links": good_links,
        "authority_domains": good_domains,
        "traffic_growth": good_traffic,
        "ranking_improvements": good_rankings,
        "ai_visibility": good_ai,
    }


# ============================================================================
# Underperforming Campaign (high spend, poor results)
# ============================================================================

@pytest.fixture
def poor_inputs() -> Dict[str, Any]:
    """$6,000/month for 12 months with poor results on every metric."""
    return {
        "authority_links": {
            "actualLinks": 10,
            "monthlySpend": 6000,
            "investmentMonths": 12,
        },
        "authority_domains": {
            "clientDomains": 15,
            "competitorDomains": [100, 120, 110],
            "domainGrowthTrend": [14, 14, 15, 15, 15, 15],
        },
        "traffic_growth": {
            "clientGrowth": 2,
            "competitorGrowths": [30, 35, 25],
            "investmentMonths": 12,
            "currentMonthlyTraffic": 1200,
        },
        "ranking_improvements": {
            "rankingChanges": [
                {"keyword": "seo agency", "oldPosition": 50, "newPosition": 45},
                {"keyword": "seo services", "oldPosition": 80, "newPosition": 75},
                {"keyword": "seo consultant", "oldPosition": 101, "newPosition": 99},
            ],
            "totalKeywords": 20,
            "investmentMonths": 12,
        },
        "ai_visibility": {
            "keywordResults": [
                {"keyword": "best seo agency"},
                {"keyword": "seo services"},
                {"keyword": "seo consultant"},
            ],
            "investmentMonths": 12,
        },
    }


# ============================================================================
# Policies
# ============================================================================

@pytest.fixture
def default_policy() -> ScoringPolicy:
    return DEFAULT_POLICY


@pytest.fixture
def lenient_policy() -> ScoringPolicy:
    """Policy accepting smaller campaigns."""
    return ScoringPolicy(min_monthly_spend=500, min_investment_months=3)
