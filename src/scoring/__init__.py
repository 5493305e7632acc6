"""
Scoring Module for the SEO ROI Scoring Engine

This module scores five performance metrics and combines them:

1. **Authority Links** (35%)
   Actual authority links vs links expected for the spend.
   Expected_Links = (Monthly_Spend / 1000) × 1.5 × Months

2. **Authority Domains** (20%)
   Referring domains as a share of the competitor average.

3. **Traffic Growth** (20%)
   Annualized organic growth relative to competitor growth.

4. **Ranking Improvements** (15%)
   Position value gained vs position value available per keyword.

5. **AI Visibility** (10%)
   Share of possible AI assistant mention points.

Each scorer returns a ScoreResult with a raw 0-100 score, a 1-10 normalized
score, red flags, and a penalty-adjusted score when flags fire.

Example Usage:
    from src.scoring import ScoringEngine, ScoringPolicy

    engine = ScoringEngine(ScoringPolicy.from_settings())
    overall = engine.calculate_overall_score(
        authority_links={"actualLinks": 120, "monthlySpend": 5000, "investmentMonths": 12},
        authority_domains={"clientDomains": 150, "competitorDomains": [180, 200, 160]},
        traffic_growth={
            "clientGrowth": 45, "competitorGrowths": [30, 35, 25],
            "investmentMonths": 12, "currentMonthlyTraffic": 15000,
        },
        ranking_improvements={"rankingChanges": [...], "totalKeywords": 50, "investmentMonths": 12},
        ai_visibility={"keywordResults": [...], "investmentMonths": 12},
    )
    print(f"Overall: {overall.normalized_score}/10 ({overall.performance_level.value})")
"""

# Errors
from .exceptions import (
    ScoringError,
    ValidationError,
    MalformedInputError,
)

# Data models
from .models import (
    # Enums
    Severity,
    PerformanceLevel,
    ConfidenceLevel,
    MetricName,

    # Inputs
    LinkBreakdown,
    AuthorityLinksData,
    AuthorityDomainsData,
    TrafficGrowthData,
    RankingChange,
    RankingImprovementsData,
    AIKeywordResult,
    AIVisibilityData,
    CompetitorTheme,
    ContentGapData,

    # Outputs
    RedFlag,
    ScoreResult,
    OverallScoreData,
    PartialScoreData,
)

# Helper utilities and constants
from .helpers import (
    # Normalization
    NORMALIZATION_BUCKETS,
    normalize_score,
    normalize_decile,
    normalize_domain_percentage,
    get_traffic_tier,

    # Position values
    UNRANKED_POSITION,
    POSITION_VALUE_TIERS,
    get_position_value,
    is_ranked,

    # Tiers
    get_performance_level,
    get_confidence_level,

    # Penalties
    apply_penalties,
)

# Policy
from .policy import (
    DEFAULT_WEIGHTS,
    DEFAULT_POLICY,
    ScoringPolicy,
)

# Validation
from .validation import (
    ValidationResult,
    validate_score_inputs,
    ensure_valid_inputs,
)

# Metric scorers
from .authority_links import (
    calculate_expected_links,
    calculate_authority_links_score,
    detect_link_building_red_flags,
)
from .authority_domains import (
    calculate_authority_domains_score,
    detect_domain_red_flags,
)
from .traffic_growth import (
    calculate_traffic_growth_score,
    detect_traffic_growth_red_flags,
)
from .ranking_improvements import (
    calculate_ranking_improvements_score,
    detect_ranking_red_flags,
)
from .ai_visibility import (
    get_keyword_points,
    calculate_ai_visibility_score,
    detect_ai_visibility_red_flags,
)

# Cross-metric red flags
from .roi import (
    detect_roi_red_flags,
    detect_content_gap_red_flags,
    calculate_missed_revenue,
)

# Aggregation
from .aggregator import (
    METRIC_SCORERS,
    ScoringEngine,
    calculate_weighted_score,
    calculate_overall_score,
    generate_recommendations,
    estimate_potential_improvement,
)
from .partial import calculate_partial_score

__all__ = [
    # Errors
    "ScoringError",
    "ValidationError",
    "MalformedInputError",

    # Models
    "Severity",
    "PerformanceLevel",
    "ConfidenceLevel",
    "MetricName",
    "LinkBreakdown",
    "AuthorityLinksData",
    "AuthorityDomainsData",
    "TrafficGrowthData",
    "RankingChange",
    "RankingImprovementsData",
    "AIKeywordResult",
    "AIVisibilityData",
    "CompetitorTheme",
    "ContentGapData",
    "RedFlag",
    "ScoreResult",
    "OverallScoreData",
    "PartialScoreData",

    # Helpers
    "NORMALIZATION_BUCKETS",
    "normalize_score",
    "normalize_decile",
    "normalize_domain_percentage",
    "get_traffic_tier",
    "UNRANKED_POSITION",
    "POSITION_VALUE_TIERS",
    "get_position_value",
    "is_ranked",
    "get_performance_level",
    "get_confidence_level",
    "apply_penalties",

    # Policy
    "DEFAULT_WEIGHTS",
    "DEFAULT_POLICY",
    "ScoringPolicy",

    # Validation
    "ValidationResult",
    "validate_score_inputs",
    "ensure_valid_inputs",

    # Scorers
    "calculate_expected_links",
    "calculate_authority_links_score",
    "detect_link_building_red_flags",
    "calculate_authority_domains_score",
    "detect_domain_red_flags",
    "calculate_traffic_growth_score",
    "detect_traffic_growth_red_flags",
    "calculate_ranking_improvements_score",
    "detect_ranking_red_flags",
    "get_keyword_points",
    "calculate_ai_visibility_score",
    "detect_ai_visibility_red_flags",

    # Cross-metric
    "detect_roi_red_flags",
    "detect_content_gap_red_flags",
    "calculate_missed_revenue",

    # Aggregation
    "METRIC_SCORERS",
    "ScoringEngine",
    "calculate_weighted_score",
    "calculate_overall_score",
    "generate_recommendations",
    "estimate_potential_improvement",
    "calculate_partial_score",
]

__version__ = "2.0.0"  # Red-flag enabled scoring
