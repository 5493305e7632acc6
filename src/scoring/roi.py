"""
Cross-Metric Red Flags

Checks that only make sense with the full picture: return on spend across
all five metrics, and themes where competitors capture traffic the client
does not target.
"""

import logging
from typing import Any, List, Mapping, Optional, Union

from .helpers import format_number, mean, round_half_up
from .models import ContentGapData, RedFlag, Severity
from .policy import DEFAULT_POLICY, ScoringPolicy

logger = logging.getLogger(__name__)


def detect_roi_red_flags(
    monthly_spend: float,
    investment_months: float,
    component_scores: List[float],
    policy: Optional[ScoringPolicy] = None,
) -> List[RedFlag]:
    """
    Flag spend that is not producing results.

    Args:
        monthly_spend: Monthly SEO spend in dollars
        investment_months: Months of investment
        component_scores: Effective 1-10 scores of the five metrics
        policy: Scoring policy supplying the thresholds

    Returns:
        List of red flags (possibly empty)
    """
    policy = policy or DEFAULT_POLICY
    red_flags: List[RedFlag] = []
    overall = mean(component_scores)
    total_investment = monthly_spend * investment_months

    if monthly_spend >= policy.high_spend_threshold and overall < policy.high_spend_min_score:
        red_flags.append(RedFlag(
            type="HIGH_SPEND_POOR_RESULTS",
            severity=Severity.CRITICAL,
            message=(
                f"Investing ${format_number(monthly_spend)}/month (${format_number(total_investment)} total) "
                f"but achieving poor results across all metrics. This suggests fundamental strategy "
                f"or execution issues."
            ),
            score_penalty=-2,
        ))

    if investment_months >= policy.long_term_months and overall < policy.long_term_min_score:
        red_flags.append(RedFlag(
            type="LONG_TERM_UNDERPERFORMANCE",
            severity=Severity.CRITICAL,
            message=(
                f"After {format_number(investment_months)} months of SEO investment, overall "
                f"performance remains below average. Immediate strategic review required."
            ),
            score_penalty=-2,
        ))

    if red_flags:
        logger.info(
            f"ROI red flags raised: {', '.join(flag.type for flag in red_flags)} "
            f"(mean component score {overall:.2f})"
        )

    return red_flags


def calculate_missed_revenue(
    missed_traffic: float,
    policy: Optional[ScoringPolicy] = None,
) -> int:
    """Estimate monthly revenue lost on traffic competitors capture."""
    policy = policy or DEFAULT_POLICY
    return round_half_up(
        missed_traffic * policy.assumed_conversion_rate * policy.assumed_order_value
    )


def detect_content_gap_red_flags(
    data: Union[ContentGapData, Mapping[str, Any]],
    policy: Optional[ScoringPolicy] = None,
) -> List[RedFlag]:
    """
    Flag major traffic themes the client is not competing for.

    Args:
        data: Client traffic by theme and competitor averages per theme
        policy: Scoring policy supplying the thresholds

    Returns:
        List of red flags (possibly empty)
    """
    policy = policy or DEFAULT_POLICY
    data = ContentGapData.parse(data)
    red_flags: List[RedFlag] = []

    missed_themes = [
        theme for theme in data.competitor_traffic_by_theme
        if theme.competitor_average > policy.content_gap_min_competitor_traffic
        and data.client_traffic.get(theme.name, 0) < theme.competitor_average * policy.content_gap_client_ratio
    ]

    if len(missed_themes) >= policy.content_gap_min_themes:
        missed_traffic = sum(theme.competitor_average for theme in missed_themes)
        red_flags.append(RedFlag(
            type="MULTIPLE_CONTENT_GAPS",
            severity=Severity.CRITICAL,
            message=(
                f"Missing content for {len(missed_themes)} major traffic themes. Competitors are "
                f"capturing {format_number(missed_traffic)} monthly visits from themes you're not targeting."
            ),
            score_penalty=-2,
            missed_revenue=calculate_missed_revenue(missed_traffic, policy),
        ))

    commercial_themes = [
        theme for theme in data.competitor_traffic_by_theme
        if theme.intent in ("commercial", "transactional")
    ]
    client_commercial_traffic = sum(
        data.client_traffic.get(theme.name, 0) for theme in commercial_themes
    )

    if commercial_themes and client_commercial_traffic < policy.min_commercial_traffic:
        red_flags.append(RedFlag(
            type="NO_COMMERCIAL_TRAFFIC",
            severity=Severity.HIGH,
            message=(
                "Minimal traffic from commercial/transactional keywords. SEO strategy not focused "
                "on revenue-generating terms."
            ),
            score_penalty=-1.5,
        ))

    return red_flags
