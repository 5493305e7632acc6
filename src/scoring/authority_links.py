"""
Authority Links Score (35% weight)

Compares authority links acquired against the number the investment should
have produced.

Formula:
    Expected_Links = round((Monthly_Spend / 1000) × 1.5 × Investment_Months)
    Score = min(100, Actual_Links / Expected_Links × 100)

Red flags: SEVERE_LINK_DEFICIT, NO_RECENT_LINKS, LOW_QUALITY_LINKS,
DECLINING_LINK_VELOCITY.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from .helpers import (
    apply_penalties,
    format_number,
    format_percent,
    normalize_score,
    round_half_up,
    trailing_averages,
)
from .models import AuthorityLinksData, RedFlag, ScoreResult, Severity
from .policy import DEFAULT_POLICY, ScoringPolicy

logger = logging.getLogger(__name__)


def calculate_expected_links(
    monthly_spend: float,
    investment_months: float,
    links_per_thousand: float = DEFAULT_POLICY.links_per_thousand,
) -> int:
    """
    Model the authority links a spend level should produce.

    Args:
        monthly_spend: Monthly SEO spend in dollars
        investment_months: Months of investment
        links_per_thousand: Links per $1000/month

    Returns:
        Expected link count
    """
    expected_per_month = (monthly_spend / 1000) * links_per_thousand
    return round_half_up(expected_per_month * investment_months)


def calculate_authority_links_score(
    data: Union[AuthorityLinksData, Mapping[str, Any]],
    policy: Optional[ScoringPolicy] = None,
) -> ScoreResult:
    """
    Calculate the Authority Links score.

    Args:
        data: Links data with actualLinks, monthlySpend, investmentMonths and
            optional recentLinks6Months, linkBreakdown, linkGrowthByMonth
        policy: Scoring policy (defaults to the canonical policy)

    Returns:
        ScoreResult with raw and normalized scores

    Raises:
        MalformedInputError: if required fields are missing
    """
    policy = policy or DEFAULT_POLICY
    data = AuthorityLinksData.parse(data)

    expected_links = calculate_expected_links(
        data.monthly_spend, data.investment_months, policy.links_per_thousand
    )

    if data.actual_links == 0:
        percentage = 0.0
    else:
        percentage = data.actual_links / max(expected_links, 1) * 100

    score = min(100.0, percentage)
    normalized = normalize_score(score)

    red_flags = detect_link_building_red_flags(data, expected_links)
    adjusted = apply_penalties(normalized, red_flags)

    insights: List[str] = []
    _generate_link_insights(data, expected_links, percentage, insights)

    details: Dict[str, Any] = {
        "expectedLinks": expected_links,
        "actualLinks": data.actual_links,
        "performancePercentage": percentage,
        "monthlyLinkRate": data.actual_links / data.investment_months,
        "expectedMonthlyRate": expected_links / data.investment_months,
    }

    breakdown = data.link_breakdown
    if breakdown is not None:
        total = breakdown.total
        details["qualityDistribution"] = {
            "highQuality": breakdown.high_quality / total * 100 if total > 0 else 0,
            "mediumQuality": breakdown.medium_quality / total * 100 if total > 0 else 0,
            "lowQuality": breakdown.low_quality / total * 100 if total > 0 else 0,
        }

    logger.debug(
        f"Authority links: {data.actual_links}/{expected_links} expected "
        f"({percentage:.1f}%), normalized={normalized}, flags={len(red_flags)}"
    )

    return ScoreResult(
        score=score,
        normalized_score=normalized,
        adjusted_score=adjusted,
        details=details,
        insights=insights,
        red_flags=red_flags or None,
    )


def detect_link_building_red_flags(
    data: AuthorityLinksData,
    expected_links: int,
) -> List[RedFlag]:
    """
    Detect link building anomalies. Every rule is evaluated independently.

    Args:
        data: Links data
        expected_links: Modeled link count for the spend

    Returns:
        List of red flags (possibly empty)
    """
    red_flags: List[RedFlag] = []
    months = data.investment_months

    # Severe deficit after a year or more
    if months >= 12 and data.actual_links < expected_links * 0.3:
        red_flags.append(RedFlag(
            type="SEVERE_LINK_DEFICIT",
            severity=Severity.CRITICAL,
            message=(
                f"After {format_number(months)} months, only {format_number(data.actual_links)} "
                f"authority links vs {expected_links} expected. This suggests fundamental "
                f"link building strategy failures."
            ),
            score_penalty=-2,
        ))

    if months >= 6 and data.recent_links_6_months is not None and data.recent_links_6_months == 0:
        red_flags.append(RedFlag(
            type="NO_RECENT_LINKS",
            severity=Severity.HIGH,
            message="No authority links acquired in the past 6 months despite ongoing SEO investment.",
            score_penalty=-1.5,
        ))

    breakdown = data.link_breakdown
    if breakdown is not None:
        total = breakdown.total
        low_quality_ratio = breakdown.low_quality / total if total > 0 else 0
        if low_quality_ratio > 0.7:
            red_flags.append(RedFlag(
                type="LOW_QUALITY_LINKS",
                severity=Severity.MEDIUM,
                message=(
                    f"Over {format_percent(low_quality_ratio * 100)}% of acquired links are "
                    f"from low-authority domains (DR <20)."
                ),
                score_penalty=-1,
            ))

    if data.link_growth_by_month:
        averages = trailing_averages(data.link_growth_by_month)
        if averages is not None:
            recent_avg, earlier_avg = averages
            if earlier_avg > 0 and recent_avg < earlier_avg * 0.3:
                red_flags.append(RedFlag(
                    type="DECLINING_LINK_VELOCITY",
                    severity=Severity.HIGH,
                    message="Link acquisition rate has declined by over 70% in recent months.",
                    score_penalty=-1,
                ))

    return red_flags


def _generate_link_insights(
    data: AuthorityLinksData,
    expected_links: int,
    percentage: float,
    insights: List[str],
) -> None:
    """Append narrative insights: assessment, rates, cost, quality, actions."""
    actual = format_number(data.actual_links)
    pct = format_percent(percentage)
    monthly_rate = data.actual_links / data.investment_months
    expected_monthly_rate = expected_links / data.investment_months

    if percentage >= 80:
        insights.append(
            f"Strong link building performance: {actual} authority links acquired ({pct}% of expected)."
        )
    elif percentage >= 60:
        insights.append(f"Good link acquisition: {actual} links, meeting {pct}% of expectations.")
    elif percentage >= 40:
        insights.append(
            f"Below-target link building: {actual} links is only {pct}% of expected {expected_links} links."
        )
    else:
        insights.append(
            f"Poor link building results: {actual} links vs {expected_links} expected ({pct}%)."
        )

    insights.append(
        f"Current rate: {monthly_rate:.1f} links/month vs expected {expected_monthly_rate:.1f} links/month."
    )

    if data.actual_links > 0:
        cost_per_link = data.monthly_spend * data.investment_months / data.actual_links
        insights.append(f"Cost per authority link: ${format_number(cost_per_link)}")

    if data.link_breakdown is not None:
        high_quality_pct = (
            data.link_breakdown.high_quality / data.actual_links * 100
            if data.actual_links > 0 else 0
        )
        if high_quality_pct >= 30:
            insights.append(
                f"Excellent link quality: {format_percent(high_quality_pct)}% are "
                f"high-authority (DR 70+) domains."
            )
        elif high_quality_pct >= 15:
            insights.append(
                f"Good link quality mix with {format_percent(high_quality_pct)}% high-authority domains."
            )
        else:
            insights.append(
                f"Link quality needs improvement: Only {format_percent(high_quality_pct)}% "
                f"from high-authority domains."
            )

    if percentage < 60:
        insights.append(
            "Recommendation: Review link building strategy and tactics. Consider diversifying outreach methods."
        )

    if data.recent_links_6_months is not None and data.recent_links_6_months < 5:
        insights.append("Alert: Link acquisition has stalled. Immediate strategy review needed.")
