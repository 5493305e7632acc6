"""
Score Summary Payloads

Builds the plain structures that report and webhook layers consume from a
finished scoring run. Rendering and delivery happen elsewhere.
"""

from typing import Any, Dict, List
import logging

from src.scoring.helpers import format_number
from src.scoring.models import MetricName, OverallScoreData, RedFlag, Severity

logger = logging.getLogger(__name__)

TOP_RECOMMENDATIONS = 3

# Webhook breakdown keys differ from the metric wire keys for rankings
BREAKDOWN_KEYS: Dict[MetricName, str] = {
    MetricName.AUTHORITY_LINKS: "authorityLinks",
    MetricName.AUTHORITY_DOMAINS: "authorityDomains",
    MetricName.TRAFFIC_GROWTH: "trafficGrowth",
    MetricName.RANKING_IMPROVEMENTS: "rankings",
    MetricName.AI_VISIBILITY: "aiVisibility",
}


def build_score_summary(overall: OverallScoreData) -> Dict[str, Any]:
    """
    Build the score section of a webhook payload.

    Component scores are effective (penalty-adjusted) 1-10 scores.

    Args:
        overall: Result of an overall scoring run

    Returns:
        Dict with overallScore, scoreBreakdown, performanceLevel,
        redFlagsCount and topRecommendations
    """
    return {
        "overallScore": overall.normalized_score,
        "scoreBreakdown": {
            BREAKDOWN_KEYS[metric]: result.effective_score
            for metric, result in overall.components.items()
        },
        "performanceLevel": overall.performance_level.value,
        "redFlagsCount": len(overall.red_flags),
        "topRecommendations": overall.recommendations[:TOP_RECOMMENDATIONS],
    }


def generate_red_flag_commentary(
    red_flags: List[RedFlag],
    monthly_spend: float,
    investment_months: float,
    company_name: str,
) -> str:
    """
    Write the red flag paragraph for a report.

    Only the most severe group present is described. Returns an empty
    string when there are no flags.
    """
    critical = [flag for flag in red_flags if flag.severity == Severity.CRITICAL]
    high = [flag for flag in red_flags if flag.severity == Severity.HIGH]

    if critical:
        messages = " ".join(flag.message for flag in critical)
        return (
            f"CRITICAL ISSUES DETECTED: {company_name}'s SEO investment shows serious red flags "
            f"that require immediate attention. {messages} These issues suggest fundamental "
            f"problems with your current SEO strategy or execution that are preventing you from "
            f"achieving expected returns on your ${format_number(monthly_spend)}/month investment."
        )

    if high:
        messages = " ".join(flag.message for flag in high)
        return (
            f"SIGNIFICANT CONCERNS: Your SEO performance analysis reveals important issues that "
            f"are limiting your ROI. {messages} Addressing these concerns should be a priority to "
            f"improve your return on the ${format_number(monthly_spend * investment_months)} "
            f"invested over {format_number(investment_months)} months."
        )

    if red_flags:
        messages = " ".join(flag.message for flag in red_flags)
        return (
            f"OPTIMIZATION OPPORTUNITIES: While your SEO campaign shows progress, we've identified "
            f"several areas for improvement. {messages} Addressing these items will help maximize "
            f"your SEO investment returns."
        )

    return ""
