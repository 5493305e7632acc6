"""
Overall Score Aggregation

Combines the five metric scores into one weighted result:

    Weighted_Score = (
        Authority_Links × 0.35 +
        Authority_Domains × 0.20 +
        Traffic_Growth × 0.20 +
        Ranking_Improvements × 0.15 +
        AI_Visibility × 0.10
    )

Weights apply to the raw 0-100 scores. Cross-metric ROI and content-gap red
flags are evaluated here, followed by ordered recommendations.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .ai_visibility import calculate_ai_visibility_score
from .authority_domains import calculate_authority_domains_score
from .authority_links import calculate_authority_links_score
from .helpers import (
    format_score,
    get_confidence_level,
    get_performance_level,
    mean,
    normalize_score,
)
from .models import (
    AIVisibilityData,
    AuthorityDomainsData,
    AuthorityLinksData,
    ContentGapData,
    MetricName,
    OverallScoreData,
    PerformanceLevel,
    RankingImprovementsData,
    RedFlag,
    ScoreResult,
    Severity,
    TrafficGrowthData,
)
from .policy import DEFAULT_POLICY, ScoringPolicy
from .ranking_improvements import calculate_ranking_improvements_score
from .roi import detect_content_gap_red_flags, detect_roi_red_flags
from .traffic_growth import calculate_traffic_growth_score
from .validation import ensure_valid_inputs

logger = logging.getLogger(__name__)


MetricScorer = Callable[..., ScoreResult]

# Registry in weight order
METRIC_SCORERS: Dict[MetricName, MetricScorer] = {
    MetricName.AUTHORITY_LINKS: calculate_authority_links_score,
    MetricName.AUTHORITY_DOMAINS: calculate_authority_domains_score,
    MetricName.TRAFFIC_GROWTH: calculate_traffic_growth_score,
    MetricName.RANKING_IMPROVEMENTS: calculate_ranking_improvements_score,
    MetricName.AI_VISIBILITY: calculate_ai_visibility_score,
}


HEADLINES: Dict[PerformanceLevel, List[str]] = {
    PerformanceLevel.EXCELLENT: [
        "Outstanding SEO performance - your investment is delivering exceptional ROI.",
        "Continue current strategies while exploring advanced optimization opportunities.",
    ],
    PerformanceLevel.GOOD: [
        "Good SEO performance with solid ROI - strategic improvements can drive further growth.",
        "Focus on lowest-scoring areas for maximum impact.",
    ],
    PerformanceLevel.AVERAGE: [
        "Average SEO performance - significant optimization opportunities available.",
        "Review strategy focusing on competitive gaps and content opportunities.",
    ],
    PerformanceLevel.POOR: [
        "SEO performance is underdelivering - comprehensive strategy review needed.",
        "Consider audit of current tactics and potential provider evaluation.",
    ],
    PerformanceLevel.VERY_POOR: [
        "Critical underperformance detected - immediate action required.",
        "Evaluate continuing with current SEO approach vs alternative strategies.",
    ],
}


def calculate_weighted_score(
    raw_scores: Mapping[MetricName, float],
    policy: Optional[ScoringPolicy] = None,
) -> float:
    """Weighted sum of raw 0-100 scores."""
    policy = policy or DEFAULT_POLICY
    return sum(score * policy.weight_for(metric) for metric, score in raw_scores.items())


def calculate_overall_score(
    authority_links: Union[AuthorityLinksData, Mapping[str, Any]],
    authority_domains: Union[AuthorityDomainsData, Mapping[str, Any]],
    traffic_growth: Union[TrafficGrowthData, Mapping[str, Any]],
    ranking_improvements: Union[RankingImprovementsData, Mapping[str, Any]],
    ai_visibility: Union[AIVisibilityData, Mapping[str, Any]],
    content_gap: Optional[Union[ContentGapData, Mapping[str, Any]]] = None,
    policy: Optional[ScoringPolicy] = None,
) -> OverallScoreData:
    """
    Calculate the overall SEO ROI score.

    Args:
        authority_links: Links data (its spend and duration gate the run)
        authority_domains: Referring domains data
        traffic_growth: Traffic growth data
        ranking_improvements: Ranking changes data
        ai_visibility: AI mention data
        content_gap: Optional traffic-by-theme data for content gap checks
        policy: Scoring policy (weights and thresholds)

    Returns:
        OverallScoreData with component scores, red flags and recommendations

    Raises:
        MalformedInputError: if a metric record is missing required fields
        ValidationError: if spend or duration are below the minimums
    """
    policy = policy or DEFAULT_POLICY

    links_data = AuthorityLinksData.parse(authority_links)
    ensure_valid_inputs(links_data.monthly_spend, links_data.investment_months, policy)

    inputs = {
        MetricName.AUTHORITY_LINKS: links_data,
        MetricName.AUTHORITY_DOMAINS: authority_domains,
        MetricName.TRAFFIC_GROWTH: traffic_growth,
        MetricName.RANKING_IMPROVEMENTS: ranking_improvements,
        MetricName.AI_VISIBILITY: ai_visibility,
    }
    components: Dict[MetricName, ScoreResult] = {
        metric: scorer(inputs[metric], policy)
        for metric, scorer in METRIC_SCORERS.items()
    }

    red_flags: List[RedFlag] = []
    for result in components.values():
        if result.red_flags:
            red_flags.extend(result.red_flags)

    if content_gap is not None:
        red_flags.extend(detect_content_gap_red_flags(content_gap, policy))

    red_flags.extend(detect_roi_red_flags(
        links_data.monthly_spend,
        links_data.investment_months,
        [result.effective_score for result in components.values()],
        policy,
    ))

    weighted_score = calculate_weighted_score(
        {metric: result.score for metric, result in components.items()}, policy
    )
    normalized = normalize_score(weighted_score)
    performance_level = get_performance_level(weighted_score)
    confidence = get_confidence_level(links_data.investment_months)

    recommendations = generate_recommendations(
        components, weighted_score, performance_level, red_flags, policy
    )

    logger.info(
        f"Overall score {weighted_score:.1f} ({normalized}/10, {performance_level.value}), "
        f"{len(red_flags)} red flags, confidence {confidence.value}"
    )

    return OverallScoreData(
        authority_links=components[MetricName.AUTHORITY_LINKS],
        authority_domains=components[MetricName.AUTHORITY_DOMAINS],
        traffic_growth=components[MetricName.TRAFFIC_GROWTH],
        ranking_improvements=components[MetricName.RANKING_IMPROVEMENTS],
        ai_visibility=components[MetricName.AI_VISIBILITY],
        weighted_score=weighted_score,
        normalized_score=normalized,
        performance_level=performance_level,
        confidence=confidence,
        recommendations=recommendations,
        red_flags=red_flags,
    )


# =============================================================================
# RECOMMENDATIONS
# =============================================================================

def generate_recommendations(
    components: Mapping[MetricName, ScoreResult],
    weighted_score: float,
    performance_level: PerformanceLevel,
    red_flags: List[RedFlag],
    policy: Optional[ScoringPolicy] = None,
) -> List[str]:
    """
    Build the ordered recommendation list.

    Order: tier headline, the two weakest components, potential improvement,
    quick wins, then red-flag alerts.
    """
    policy = policy or DEFAULT_POLICY
    recommendations: List[str] = list(HEADLINES[performance_level])

    ranked = sorted(components.items(), key=lambda item: item[1].effective_score)
    weakest = ranked[:2]

    if weakest:
        metric, result = weakest[0]
        suffix = " - immediate focus needed." if result.effective_score < 5 else "."
        recommendations.append(
            f"Weakest area: {metric.display_name} ({format_score(result.effective_score)}/10){suffix}"
        )
    if len(weakest) > 1:
        metric, result = weakest[1]
        recommendations.append(
            f"Secondary priority: {metric.display_name} ({format_score(result.effective_score)}/10)."
        )

    improvement = estimate_potential_improvement(components, weighted_score, policy)
    if improvement is not None:
        recommendations.append(improvement)

    recommendations.extend(_quick_wins(components))

    if any(flag.severity == Severity.CRITICAL for flag in red_flags):
        recommendations.append(
            "CRITICAL: Serious issues detected requiring immediate attention. "
            "Schedule a strategic review with your SEO provider within 7 days."
        )

    if weighted_score < 40 and any(flag.type == "HIGH_SPEND_POOR_RESULTS" for flag in red_flags):
        recommendations.append(
            "ROI Alert: Current spend level not justified by results. Consider reducing spend "
            "while addressing fundamental issues or changing providers."
        )

    return recommendations


def estimate_potential_improvement(
    components: Mapping[MetricName, ScoreResult],
    weighted_score: float,
    policy: Optional[ScoringPolicy] = None,
) -> Optional[str]:
    """
    Estimate the gain from lifting the two weakest components to the average.

    Returns:
        Recommendation text, or None when there is nothing to gain
    """
    if len(components) < 2:
        return None

    raw_scores = {metric: result.score for metric, result in components.items()}
    average_raw = mean(list(raw_scores.values()))

    ranked = sorted(components.items(), key=lambda item: item[1].effective_score)
    weakest = [metric for metric, _ in ranked[:2]]

    improved = dict(raw_scores)
    for metric in weakest:
        improved[metric] = max(improved[metric], average_raw)

    improved_score = calculate_weighted_score(improved, policy)
    gain = improved_score - weighted_score
    if round(gain, 1) <= 0:
        return None

    names = " and ".join(metric.display_name for metric in weakest)
    return (
        f"Potential improvement: raising {names} to your average component level "
        f"could lift the overall score from {weighted_score:.0f} to {improved_score:.0f} "
        f"(+{gain:.1f} points)."
    )


def _quick_wins(components: Mapping[MetricName, ScoreResult]) -> List[str]:
    """Targeted suggestions triggered by specific score-pair patterns."""
    links = components[MetricName.AUTHORITY_LINKS].effective_score
    domains = components[MetricName.AUTHORITY_DOMAINS].effective_score
    traffic = components[MetricName.TRAFFIC_GROWTH].effective_score
    rankings = components[MetricName.RANKING_IMPROVEMENTS].effective_score
    ai = components[MetricName.AI_VISIBILITY].effective_score

    wins: List[str] = []

    if ai < 5 and traffic >= 6:
        wins.append(
            "Quick Win: Optimize existing content for AI visibility to capture future traffic."
        )

    if rankings < 5 and links >= 7:
        wins.append(
            "Quick Win: Leverage your existing link authority by pointing internal links and "
            "refreshed content at keywords stuck outside the top 10."
        )

    if rankings >= 6 and traffic < 6:
        wins.append(
            "Quick Win: Improve meta descriptions and titles to boost CTR from existing rankings."
        )

    if domains < 5 and links >= 7:
        wins.append(
            "Quick Win: Diversify outreach to new referring domains - your link volume is "
            "concentrated on too few sites."
        )

    return wins


# =============================================================================
# ENGINE
# =============================================================================

class ScoringEngine:
    """
    Scoring entry point bound to one policy.

    Example:
        engine = ScoringEngine(ScoringPolicy.from_settings())
        overall = engine.calculate_overall_score(links, domains, traffic, rankings, ai)
    """

    def __init__(self, policy: Optional[ScoringPolicy] = None):
        self.policy = policy or DEFAULT_POLICY

    def score_metric(
        self,
        metric: MetricName,
        data: Mapping[str, Any],
    ) -> ScoreResult:
        """Score a single metric with this engine's policy."""
        return METRIC_SCORERS[metric](data, self.policy)

    def calculate_overall_score(
        self,
        authority_links,
        authority_domains,
        traffic_growth,
        ranking_improvements,
        ai_visibility,
        content_gap=None,
    ) -> OverallScoreData:
        return calculate_overall_score(
            authority_links,
            authority_domains,
            traffic_growth,
            ranking_improvements,
            ai_visibility,
            content_gap=content_gap,
            policy=self.policy,
        )

    def calculate_partial_score(self, **metrics):
        """Score any subset of metrics, passed by their snake_case keyword."""
        from .partial import calculate_partial_score

        return calculate_partial_score(policy=self.policy, **metrics)
