"""
Ranking Improvements Score (15% weight)

Values each keyword's movement by the worth of the positions it moved
between, relative to the headroom it had.

Position values:
    1-3 → 10, 4-5 → 8, 6-10 → 6, 11-20 → 3, 21-100 → 1, unranked → 0

Formula:
    Improvement = v(new) - v(old)
    Possible = 10 - v(old)
    Percentage = Σ Improvement / Σ Possible × 100
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from .helpers import (
    MAX_POSITION_VALUE,
    UNRANKED_POSITION,
    apply_penalties,
    clamp,
    format_number,
    format_percent,
    get_position_value,
    is_ranked,
    normalize_score,
)
from .models import RankingImprovementsData, RedFlag, ScoreResult, Severity
from .policy import ScoringPolicy

logger = logging.getLogger(__name__)

COMMERCIAL_INTENTS = ("commercial", "transactional")

# Percentage when every keyword already sits at the top
NO_HEADROOM_PERCENTAGE = 50.0


def calculate_ranking_improvements_score(
    data: Union[RankingImprovementsData, Mapping[str, Any]],
    policy: Optional[ScoringPolicy] = None,
) -> ScoreResult:
    """
    Calculate the Ranking Improvements score.

    Args:
        data: Ranking data with rankingChanges, totalKeywords, investmentMonths
        policy: Scoring policy (unused by this metric, accepted for symmetry)

    Returns:
        ScoreResult; `score` is the improvement percentage clamped to 0-100
    """
    data = RankingImprovementsData.parse(data)
    changes = data.ranking_changes

    total_value = 0
    total_possible_value = 0
    keyword_breakdown = []

    for change in changes:
        old_value = get_position_value(change.old_position)
        new_value = get_position_value(change.new_position)
        improvement = new_value - old_value
        total_value += improvement
        total_possible_value += MAX_POSITION_VALUE - old_value
        keyword_breakdown.append({
            "keyword": change.keyword,
            "oldPosition": change.old_position,
            "newPosition": change.new_position,
            "oldValue": old_value,
            "newValue": new_value,
            "improvement": improvement,
        })

    if not changes:
        percentage = 0.0
    elif total_possible_value == 0:
        percentage = NO_HEADROOM_PERCENTAGE
    else:
        percentage = total_value / total_possible_value * 100

    score = clamp(percentage)
    normalized = normalize_score(score)

    counts = _count_positions(data)

    red_flags = detect_ranking_red_flags(data, counts)
    adjusted = apply_penalties(normalized, red_flags)

    insights: List[str] = []
    _generate_ranking_insights(data, percentage, counts, insights)

    details: Dict[str, Any] = {
        "totalValue": total_value,
        "totalPossibleValue": total_possible_value,
        "performancePercentage": percentage,
        "totalKeywords": data.total_keywords,
        "trackedChanges": len(changes),
        "top3Count": counts["top3"],
        "top10Count": counts["top10"],
        "top20Count": counts["top20"],
        "newRankings": counts["new_rankings"],
        "improvedKeywords": counts["improved"],
        "declinedKeywords": counts["declined"],
        "keywordBreakdown": keyword_breakdown,
    }

    logger.debug(
        f"Rankings: value {total_value}/{total_possible_value} ({percentage:.1f}%), "
        f"top10={counts['top10']}, normalized={normalized}, flags={len(red_flags)}"
    )

    return ScoreResult(
        score=score,
        normalized_score=normalized,
        adjusted_score=adjusted,
        details=details,
        insights=insights,
        red_flags=red_flags or None,
    )


def _count_positions(data: RankingImprovementsData) -> Dict[str, int]:
    """Tally current-position buckets and movement across the tracked keywords."""
    counts = {
        "top3": 0,
        "top10": 0,
        "top20": 0,
        "new_rankings": 0,
        "improved": 0,
        "declined": 0,
        "previous_top20": 0,
        "previous_top20_declined": 0,
    }

    for change in data.ranking_changes:
        new_ranked = is_ranked(change.new_position)
        old_ranked = is_ranked(change.old_position)

        if new_ranked and change.new_position <= 3:
            counts["top3"] += 1
        if new_ranked and change.new_position <= 10:
            counts["top10"] += 1
        if new_ranked and change.new_position <= 20:
            counts["top20"] += 1

        if change.old_position > UNRANKED_POSITION and new_ranked:
            counts["new_rankings"] += 1

        old_value = get_position_value(change.old_position)
        new_value = get_position_value(change.new_position)
        if new_value > old_value:
            counts["improved"] += 1
        elif new_value < old_value:
            counts["declined"] += 1

        if old_ranked and change.old_position <= 20:
            counts["previous_top20"] += 1
            if not new_ranked or change.new_position > change.old_position:
                counts["previous_top20_declined"] += 1

    return counts


def _keyword_base(data: RankingImprovementsData) -> int:
    """Denominator for share-of-keywords ratios."""
    if data.total_keywords > 0:
        return data.total_keywords
    return len(data.ranking_changes)


def detect_ranking_red_flags(
    data: RankingImprovementsData,
    counts: Dict[str, int],
) -> List[RedFlag]:
    """Detect ranking anomalies after sustained investment."""
    red_flags: List[RedFlag] = []
    months = data.investment_months
    keyword_base = _keyword_base(data)

    if months >= 12 and keyword_base > 0:
        top10_fraction = counts["top10"] / keyword_base
        if top10_fraction < 0.10:
            red_flags.append(RedFlag(
                type="POOR_RANKING_PERFORMANCE",
                severity=Severity.CRITICAL,
                message=(
                    f"After {format_number(months)} months, only {counts['top10']} of "
                    f"{keyword_base} tracked keywords rank in the top 10 "
                    f"({format_percent(top10_fraction * 100)}%)."
                ),
                score_penalty=-2,
            ))

    commercial = [
        change for change in data.ranking_changes
        if change.intent in COMMERCIAL_INTENTS
    ]
    if commercial and months >= 8:
        commercial_top10 = [
            change for change in commercial
            if is_ranked(change.new_position) and change.new_position <= 10
        ]
        if not commercial_top10:
            red_flags.append(RedFlag(
                type="NO_COMMERCIAL_RANKINGS",
                severity=Severity.HIGH,
                message=(
                    f"None of your {len(commercial)} commercial or transactional keywords rank in "
                    f"the top 10. Rankings are not reaching revenue-generating searches."
                ),
                score_penalty=-1.5,
            ))

    previous_top20 = counts["previous_top20"]
    if previous_top20 > 0:
        decline_ratio = counts["previous_top20_declined"] / previous_top20
        if decline_ratio > 0.3:
            red_flags.append(RedFlag(
                type="WIDESPREAD_RANKING_DECLINES",
                severity=Severity.HIGH,
                message=(
                    f"{counts['previous_top20_declined']} of {previous_top20} keywords that ranked in "
                    f"the top 20 have lost positions ({format_percent(decline_ratio * 100)}%)."
                ),
                score_penalty=-1.5,
            ))

    return red_flags


def _generate_ranking_insights(
    data: RankingImprovementsData,
    percentage: float,
    counts: Dict[str, int],
    insights: List[str],
) -> None:
    changes = data.ranking_changes
    if not changes:
        insights.append("No ranking changes tracked - unable to measure keyword progress.")
    elif percentage >= 80:
        insights.append(
            f"Excellent ranking progress: captured {format_percent(percentage)}% of available position value."
        )
    elif percentage >= 60:
        insights.append(
            f"Good ranking improvements: {format_percent(percentage)}% of potential position value achieved."
        )
    elif percentage >= 40:
        insights.append(
            f"Moderate ranking gains: {format_percent(percentage)}% of potential position value achieved."
        )
    elif percentage >= 0:
        insights.append(
            f"Limited ranking progress: only {format_percent(percentage)}% of potential position value achieved."
        )
    else:
        insights.append("Rankings have lost value overall - more keywords declined than improved.")

    keyword_base = _keyword_base(data)
    if keyword_base > 0:
        insights.append(
            f"Current distribution: {counts['top3']} in top 3, {counts['top10']} in top 10, "
            f"{counts['top20']} in top 20 of {keyword_base} keywords."
        )

    if changes:
        insights.append(
            f"{counts['improved']} keywords improved, {counts['declined']} declined."
        )

    if counts["new_rankings"] > 0:
        insights.append(f"{counts['new_rankings']} keywords entered the top 100 for the first time.")

    page_two = counts["top20"] - counts["top10"]
    if page_two > 0:
        insights.append(
            f"Opportunity: {page_two} keywords on page 2 could move to page 1 with on-page optimization."
        )

    if keyword_base > 0 and counts["top10"] < keyword_base * 0.4:
        insights.append("Focus: Convert page 2 rankings to page 1 positions.")

    if keyword_base > 0 and counts["top3"] < keyword_base * 0.15:
        insights.append("Tactic: Focus on snippet optimization for position 4-10 keywords.")
