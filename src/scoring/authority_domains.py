"""
Authority Domains Score (20% weight)

Benchmarks the client's authority referring domains against the average of
its top competitors.

Formula:
    Percentage = Client_Domains / mean(Competitor_Domains) × 100

Normalization uses a coarser competitive bucket than the shared 1-10 table:
    ≥80% → 10, ≥60% → 8, ≥40% → 6, ≥20% → 4, else → 2
"""

import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Union

from .helpers import (
    apply_penalties,
    clamp,
    format_number,
    format_percent,
    mean,
    normalize_domain_percentage,
    round_half_up,
    trailing_averages,
)
from .models import AuthorityDomainsData, RedFlag, ScoreResult, Severity
from .policy import ScoringPolicy

logger = logging.getLogger(__name__)

# Percentage used when there is no competitor benchmark to compare against
NEUTRAL_PERCENTAGE = 50.0


def calculate_authority_domains_score(
    data: Union[AuthorityDomainsData, Mapping[str, Any]],
    policy: Optional[ScoringPolicy] = None,
) -> ScoreResult:
    """
    Calculate the Authority Domains score.

    Args:
        data: Domains data with clientDomains, competitorDomains and optional
            domainGrowthTrend
        policy: Scoring policy (unused by this metric, accepted for symmetry)

    Returns:
        ScoreResult; `score` is the percentage clamped to 0-100
    """
    data = AuthorityDomainsData.parse(data)

    average_competitor = mean(data.competitor_domains)
    has_benchmark = average_competitor > 0

    if has_benchmark:
        percentage = data.client_domains / average_competitor * 100
    else:
        percentage = NEUTRAL_PERCENTAGE

    normalized = normalize_domain_percentage(percentage)

    red_flags = detect_domain_red_flags(data, average_competitor, percentage)
    adjusted = apply_penalties(normalized, red_flags)

    insights: List[str] = []
    _generate_domain_insights(data, average_competitor, percentage, insights)

    details: Dict[str, Any] = {
        "clientDomains": data.client_domains,
        "competitorDomains": list(data.competitor_domains),
        "averageCompetitorDomains": round_half_up(average_competitor),
        "performancePercentage": percentage,
        "domainGap": max(0, round_half_up(average_competitor - data.client_domains)),
        "hasCompetitorBenchmark": has_benchmark,
        "competitorComparison": [
            {
                "competitor": f"Competitor {index + 1}",
                "domains": domains,
                "clientRatio": data.client_domains / domains * 100 if domains > 0 else None,
            }
            for index, domains in enumerate(data.competitor_domains)
        ],
    }

    logger.debug(
        f"Authority domains: {data.client_domains} vs avg {average_competitor:.1f} "
        f"({percentage:.1f}%), normalized={normalized}, flags={len(red_flags)}"
    )

    return ScoreResult(
        score=clamp(percentage),
        normalized_score=normalized,
        adjusted_score=adjusted,
        details=details,
        insights=insights,
        red_flags=red_flags or None,
    )


def detect_domain_red_flags(
    data: AuthorityDomainsData,
    average_competitor: float,
    percentage: float,
) -> List[RedFlag]:
    """
    Detect competitive-position anomalies in referring domains.

    Gap rules need a competitor benchmark; the growth rule needs six months
    of trend data.
    """
    red_flags: List[RedFlag] = []

    if average_competitor > 0 and percentage < 30:
        red_flags.append(RedFlag(
            type="MASSIVE_AUTHORITY_GAP",
            severity=Severity.CRITICAL,
            message=(
                f"You have {format_number(data.client_domains)} authority domains vs competitor "
                f"average of {round_half_up(average_competitor)}. This "
                f"{format_percent(100 - percentage)}% gap suggests ineffective link building strategy."
            ),
            score_penalty=-2,
        ))

    if data.domain_growth_trend:
        averages = trailing_averages(data.domain_growth_trend)
        if averages is not None:
            recent_avg, earlier_avg = averages
            if recent_avg <= earlier_avg:
                red_flags.append(RedFlag(
                    type="STAGNANT_DOMAIN_GROWTH",
                    severity=Severity.HIGH,
                    message=(
                        "No growth in referring domains over the past 3 months. "
                        "Link building efforts appear ineffective."
                    ),
                    score_penalty=-1.5,
                ))

    competitors = data.competitor_domains
    if competitors and all(data.client_domains < count * 0.5 for count in competitors):
        red_flags.append(RedFlag(
            type="BEHIND_ALL_COMPETITORS",
            severity=Severity.HIGH,
            message=(
                "You have less than 50% of the authority domains compared to ALL competitors. "
                "Major competitive disadvantage."
            ),
            score_penalty=-1,
        ))

    return red_flags


def _generate_domain_insights(
    data: AuthorityDomainsData,
    average_competitor: float,
    percentage: float,
    insights: List[str],
) -> None:
    client = format_number(data.client_domains)
    average = round_half_up(average_competitor)
    pct = format_percent(percentage)

    if average_competitor <= 0:
        insights.append(
            f"No competitor benchmark available: {client} authority domains scored at a neutral position."
        )
    elif percentage >= 80:
        insights.append(
            f"Strong competitive position: {client} authority domains vs competitor average of {average}."
        )
    elif percentage >= 60:
        insights.append(f"Competitive domain profile: {client} domains is {pct}% of competitor average.")
    elif percentage >= 40:
        insights.append(
            f"Below average: {client} domains is only {pct}% of competitor average ({average})."
        )
    else:
        insights.append(
            f"Weak domain profile: {client} domains vs competitor average of {average} ({pct}%)."
        )

    domain_gap = average_competitor - data.client_domains
    if domain_gap > 0:
        insights.append(
            f"Domain gap: Need {round_half_up(domain_gap)} more authority domains to match competitor average."
        )

    if data.competitor_domains:
        ahead = sum(1 for count in data.competitor_domains if data.client_domains > count)
        insights.append(
            f"Outperforming {ahead} of {len(data.competitor_domains)} competitors in authority domain count."
        )

    trend = data.domain_growth_trend
    if trend and len(trend) >= 4:
        monthly_growth = (trend[-1] - trend[-4]) / 3
        if monthly_growth > 5:
            insights.append(f"Good momentum: Adding {monthly_growth:.1f} new domains per month.")
        elif monthly_growth > 0:
            insights.append(f"Slow growth: Only {monthly_growth:.1f} new domains per month.")
        else:
            insights.append("Warning: No recent growth in referring domains.")

    if average_competitor > 0 and percentage < 60:
        insights.append("Priority: Accelerate domain acquisition through diversified link building tactics.")

    if domain_gap > 20:
        # Assumes a target of 5 new domains per month
        months_to_close = math.ceil(domain_gap / 5)
        insights.append(
            f"Target: Acquire 5+ new authority domains monthly to close gap in {months_to_close} months."
        )
