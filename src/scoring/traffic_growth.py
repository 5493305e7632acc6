"""
Traffic Growth Score (20% weight)

Annualizes the client's organic traffic growth and compares it against the
average growth of its competitors.

Formula:
    Annualized_Growth = Client_Growth × (12 / Investment_Months)
    Relative_Performance = Annualized_Growth / mean(Competitor_Growths)
    Score = clamp(Relative_Performance × 50, 0, 100)

Normalized tiers (relative performance):
    ≥1.5 → 10, ≥1.2 → 8, ≥0.8 → 6, ≥0.5 → 4, else → 2
    Zero or negative growth → 1
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from .helpers import (
    apply_penalties,
    clamp,
    format_number,
    format_percent,
    get_traffic_tier,
    mean,
    trailing_averages,
)
from .models import RedFlag, ScoreResult, Severity, TrafficGrowthData
from .policy import ScoringPolicy

logger = logging.getLogger(__name__)

# Annualized growth at or below this percentage counts as stagnant
STAGNANT_GROWTH_THRESHOLD = 2.0

# Competitor growth at or above this percentage counts as materially positive
MATERIAL_COMPETITOR_GROWTH = 5.0

# Share of traffic from the top keywords that signals concentration risk
KEYWORD_DEPENDENCY_THRESHOLD = 0.6

# Relative performance assigned when no competitor growth is available
NO_BENCHMARK_RELATIVE_PERFORMANCE = 2.0


def calculate_traffic_growth_score(
    data: Union[TrafficGrowthData, Mapping[str, Any]],
    policy: Optional[ScoringPolicy] = None,
) -> ScoreResult:
    """
    Calculate the Traffic Growth score.

    Args:
        data: Traffic data with clientGrowth, competitorGrowths,
            investmentMonths, currentMonthlyTraffic and optional
            trafficHistory, brandedSearchTraffic, topKeywordsDependency
        policy: Scoring policy (unused by this metric, accepted for symmetry)

    Returns:
        ScoreResult with raw and normalized scores
    """
    data = TrafficGrowthData.parse(data)

    annualized_growth = data.client_growth * (12 / data.investment_months)
    average_competitor = mean(data.competitor_growths)

    if average_competitor > 0:
        relative_performance = annualized_growth / average_competitor
    elif annualized_growth > 0:
        relative_performance = NO_BENCHMARK_RELATIVE_PERFORMANCE
    else:
        relative_performance = 0.0

    normalized = get_traffic_tier(relative_performance, annualized_growth)

    red_flags = detect_traffic_growth_red_flags(data, annualized_growth, average_competitor)
    adjusted = apply_penalties(normalized, red_flags)

    insights: List[str] = []
    _generate_traffic_insights(
        data, annualized_growth, average_competitor, relative_performance, insights
    )

    details: Dict[str, Any] = {
        "clientGrowth": data.client_growth,
        "annualizedClientGrowth": annualized_growth,
        "competitorGrowths": list(data.competitor_growths),
        "averageCompetitorGrowth": average_competitor,
        "relativePerformance": relative_performance,
        "currentTraffic": data.current_monthly_traffic,
        "competitorComparison": [
            {
                "competitor": f"Competitor {index + 1}",
                "growth": growth,
                "clientRelativePerformance": annualized_growth / growth if growth > 0 else "N/A",
            }
            for index, growth in enumerate(data.competitor_growths)
        ],
    }

    dependency = data.top_keywords_dependency
    if dependency is not None:
        if dependency > KEYWORD_DEPENDENCY_THRESHOLD:
            risk_level = "High"
        elif dependency > 0.4:
            risk_level = "Medium"
        else:
            risk_level = "Low"
        details["trafficConcentration"] = {
            "topKeywordsDependency": dependency,
            "riskLevel": risk_level,
        }

    logger.debug(
        f"Traffic growth: {annualized_growth:.1f}% annualized vs {average_competitor:.1f}% "
        f"competitor avg (ratio {relative_performance:.2f}), normalized={normalized}"
    )

    return ScoreResult(
        score=clamp(relative_performance * 50),
        normalized_score=normalized,
        adjusted_score=adjusted,
        details=details,
        insights=insights,
        red_flags=red_flags or None,
    )


def _stagnation_severity(investment_months: float):
    """Severity and penalty of stagnant progress grow with investment length."""
    if investment_months >= 12:
        return Severity.CRITICAL, -2
    if investment_months >= 9:
        return Severity.HIGH, -1.5
    return Severity.MEDIUM, -1


def detect_traffic_growth_red_flags(
    data: TrafficGrowthData,
    annualized_growth: float,
    average_competitor: float,
) -> List[RedFlag]:
    """
    Detect traffic growth anomalies.

    Concentration risk is flagged even when the headline growth looks fine.
    """
    red_flags: List[RedFlag] = []
    months = data.investment_months

    if months >= 8 and average_competitor > 0 and annualized_growth < average_competitor * 0.5:
        red_flags.append(RedFlag(
            type="FALLING_BEHIND_COMPETITORS",
            severity=Severity.HIGH,
            message=(
                f"Your traffic growth ({format_percent(annualized_growth)}%) is less than half the "
                f"competitor average ({format_percent(average_competitor)}%) despite "
                f"{format_number(months)} months of SEO investment."
            ),
            score_penalty=-1.5,
        ))

    if (
        months >= 6
        and annualized_growth <= STAGNANT_GROWTH_THRESHOLD
        and average_competitor >= MATERIAL_COMPETITOR_GROWTH
    ):
        severity, penalty = _stagnation_severity(months)
        red_flags.append(RedFlag(
            type="STAGNANT_PROGRESS",
            severity=severity,
            message=(
                f"No significant improvements in traffic after {format_number(months)} months of "
                f"investment while competitors grew {format_percent(average_competitor)}%. "
                f"Strategy needs immediate review."
            ),
            score_penalty=penalty,
        ))

    dependency = data.top_keywords_dependency
    if dependency is not None and dependency > KEYWORD_DEPENDENCY_THRESHOLD:
        red_flags.append(RedFlag(
            type="KEYWORD_OVER_DEPENDENCY",
            severity=Severity.MEDIUM,
            message=(
                f"Over {format_percent(dependency * 100)}% of traffic comes from less than 10 keywords. "
                f"High risk if rankings drop."
            ),
            score_penalty=-1,
        ))

    if data.branded_search_traffic is not None and data.branded_search_traffic < 100 and months >= 8:
        red_flags.append(RedFlag(
            type="NO_BRAND_RECOGNITION",
            severity=Severity.MEDIUM,
            message="Minimal branded search traffic suggests poor brand building through SEO.",
            score_penalty=-1,
        ))

    if data.traffic_history:
        averages = trailing_averages(data.traffic_history)
        if averages is not None:
            recent_avg, earlier_avg = averages
            if earlier_avg > 0 and recent_avg < earlier_avg * 0.8:
                red_flags.append(RedFlag(
                    type="DECLINING_MOMENTUM",
                    severity=Severity.HIGH,
                    message="Traffic growth momentum has declined by over 20% in recent months.",
                    score_penalty=-1,
                ))

    return red_flags


def _generate_traffic_insights(
    data: TrafficGrowthData,
    annualized_growth: float,
    average_competitor: float,
    relative_performance: float,
    insights: List[str],
) -> None:
    growth = format_percent(annualized_growth)
    competitor = format_percent(average_competitor)

    if relative_performance >= 1.5:
        insights.append(
            f"Excellent traffic growth: {growth}% annualized vs competitor average of {competitor}%."
        )
    elif relative_performance >= 1.2:
        insights.append(f"Strong growth performance: {growth}% growth outpacing competitors by 20%.")
    elif relative_performance >= 0.8:
        insights.append(f"Competitive growth rate: {growth}% is within range of competitor average.")
    elif relative_performance >= 0.5:
        insights.append(
            f"Below-average growth: {growth}% is only "
            f"{format_percent(relative_performance * 100)}% of competitor performance."
        )
    else:
        insights.append(f"Poor traffic growth: {growth}% vs competitor average of {competitor}%.")

    insights.append(
        f"Actual growth: {format_percent(data.client_growth)}% over "
        f"{format_number(data.investment_months)} months."
    )

    traffic = data.current_monthly_traffic
    if traffic >= 50000:
        insights.append(f"Strong traffic base: {format_number(traffic / 1000)}K monthly visitors.")
    elif traffic >= 10000:
        insights.append(
            f"Moderate traffic: {format_number(traffic)} monthly visitors with growth potential."
        )
    else:
        insights.append(
            f"Low traffic volume: {format_number(traffic)} monthly visitors needs acceleration."
        )

    if data.competitor_growths:
        ahead = sum(1 for rate in data.competitor_growths if annualized_growth > rate)
        insights.append(
            f"Outperforming {ahead} of {len(data.competitor_growths)} competitors in traffic growth rate."
        )

    dependency = data.top_keywords_dependency
    if dependency is not None:
        if dependency > 0.5:
            insights.append(
                f"Risk: {format_percent(dependency * 100)}% of traffic from top 10 keywords - "
                f"diversification needed."
            )
        else:
            insights.append(
                f"Good traffic diversity: {format_percent(dependency * 100)}% from top 10 keywords."
            )

    if relative_performance < 1.0:
        insights.append("Priority: Accelerate content production and target high-volume keywords.")

    if traffic < 10000:
        insights.append("Focus: Build topic authority in key service areas to drive traffic growth.")

    if annualized_growth > 0:
        projected = traffic * (1 + annualized_growth / 100)
        insights.append(
            f"Projection: {format_number(projected)} monthly visitors in 12 months at current growth rate."
        )
