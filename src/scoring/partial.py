"""
Partial Scoring

Scores whatever subset of the five metrics is available. The weighted score
is renormalized over the weights of the metrics present, and confidence is
the share of total weight those metrics represent.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from .aggregator import METRIC_SCORERS
from .helpers import get_performance_level, normalize_score
from .models import (
    AIVisibilityData,
    AuthorityDomainsData,
    AuthorityLinksData,
    MetricName,
    PartialScoreData,
    PerformanceLevel,
    RankingImprovementsData,
    RedFlag,
    ScoreResult,
    TrafficGrowthData,
)
from .policy import DEFAULT_POLICY, ScoringPolicy
from .validation import ensure_valid_inputs

logger = logging.getLogger(__name__)


def calculate_partial_score(
    authority_links: Optional[Union[AuthorityLinksData, Mapping[str, Any]]] = None,
    authority_domains: Optional[Union[AuthorityDomainsData, Mapping[str, Any]]] = None,
    traffic_growth: Optional[Union[TrafficGrowthData, Mapping[str, Any]]] = None,
    ranking_improvements: Optional[Union[RankingImprovementsData, Mapping[str, Any]]] = None,
    ai_visibility: Optional[Union[AIVisibilityData, Mapping[str, Any]]] = None,
    policy: Optional[ScoringPolicy] = None,
) -> PartialScoreData:
    """
    Calculate a score from the metrics that are available.

    Spend and duration are only validated when authority links data is
    present, since that is where they are carried. Cross-metric ROI flags
    are not evaluated on partial data.

    Args:
        authority_links: Optional links data
        authority_domains: Optional domains data
        traffic_growth: Optional traffic data
        ranking_improvements: Optional rankings data
        ai_visibility: Optional AI visibility data
        policy: Scoring policy (weights and thresholds)

    Returns:
        PartialScoreData; confidence is 0-100
    """
    policy = policy or DEFAULT_POLICY

    provided = {
        MetricName.AUTHORITY_LINKS: authority_links,
        MetricName.AUTHORITY_DOMAINS: authority_domains,
        MetricName.TRAFFIC_GROWTH: traffic_growth,
        MetricName.RANKING_IMPROVEMENTS: ranking_improvements,
        MetricName.AI_VISIBILITY: ai_visibility,
    }

    if authority_links is not None:
        links_data = AuthorityLinksData.parse(authority_links)
        ensure_valid_inputs(links_data.monthly_spend, links_data.investment_months, policy)
        provided[MetricName.AUTHORITY_LINKS] = links_data

    scores: Dict[MetricName, ScoreResult] = {}
    available: List[MetricName] = []
    missing: List[MetricName] = []
    red_flags: List[RedFlag] = []

    for metric, scorer in METRIC_SCORERS.items():
        data = provided[metric]
        if data is None:
            missing.append(metric)
            continue
        result = scorer(data, policy)
        scores[metric] = result
        available.append(metric)
        if result.red_flags:
            red_flags.extend(result.red_flags)

    total_weight = sum(policy.weight_for(metric) for metric in available)

    if total_weight > 0:
        weighted_score = sum(
            scores[metric].score * policy.weight_for(metric) for metric in available
        ) / total_weight
        normalized = normalize_score(weighted_score)
        performance_level = get_performance_level(weighted_score)
    else:
        weighted_score = 0.0
        normalized = 1
        performance_level = PerformanceLevel.VERY_POOR

    confidence = round(total_weight * 100, 2)

    logger.info(
        f"Partial score {weighted_score:.1f} from {len(available)}/{len(METRIC_SCORERS)} metrics "
        f"(confidence {confidence}%)"
    )

    return PartialScoreData(
        scores=scores,
        weighted_score=weighted_score,
        normalized_score=normalized,
        performance_level=performance_level,
        confidence=confidence,
        available_metrics=available,
        missing_metrics=missing,
        red_flags=red_flags,
    )
