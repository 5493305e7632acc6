"""
AI Visibility Score (10% weight)

Measures how often AI assistants surface the brand for the client's target
keywords.

Points per keyword:
    Mentioned in top 5 of the response          → 20
    Mentioned in top 10 (or position unknown)   → 15
    Mentioned only after a follow-up question   → 10
    Brand recognized but not recommended        → 5
    Not present                                 → 0

Formula:
    Percentage = Σ Points / (20 × Keyword_Count) × 100
    Normalized = completed deciles of Percentage, minimum 1

Normalization is deliberately decile-based rather than the shared
normalize_score bucket: half of the possible visibility points scores 5,
where normalize_score would give 6. Keep normalize_decile here.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from .helpers import apply_penalties, format_number, format_percent, normalize_decile
from .models import AIKeywordResult, AIVisibilityData, RedFlag, ScoreResult, Severity
from .policy import ScoringPolicy

logger = logging.getLogger(__name__)

MAX_KEYWORD_POINTS = 20


def get_keyword_points(result: AIKeywordResult) -> int:
    """
    Score a single keyword's AI response.

    A direct mention beyond position 10 counts as recognition only.
    """
    if result.mentioned:
        if result.position is not None and result.position <= 5:
            return 20
        if result.position is None or result.position <= 10:
            return 15
    if result.follow_up_mentioned:
        return 10
    if result.brand_recognized or result.mentioned:
        return 5
    return 0


def calculate_ai_visibility_score(
    data: Union[AIVisibilityData, Mapping[str, Any]],
    policy: Optional[ScoringPolicy] = None,
) -> ScoreResult:
    """
    Calculate the AI Visibility score.

    Args:
        data: AI data with keywordResults and investmentMonths
        policy: Scoring policy (unused by this metric, accepted for symmetry)

    Returns:
        ScoreResult with raw and normalized scores
    """
    data = AIVisibilityData.parse(data)
    results = data.keyword_results

    keyword_scores = [
        {"keyword": result.keyword, "points": get_keyword_points(result)}
        for result in results
    ]
    total_score = sum(item["points"] for item in keyword_scores)
    max_score = MAX_KEYWORD_POINTS * len(results)
    percentage = total_score * 100 / max_score if max_score > 0 else 0.0

    normalized = normalize_decile(percentage)

    red_flags = detect_ai_visibility_red_flags(data, percentage)
    adjusted = apply_penalties(normalized, red_flags)

    mentioned_count = sum(1 for result in results if result.mentioned)
    follow_up_count = sum(
        1 for result in results if not result.mentioned and result.follow_up_mentioned
    )
    top5_count = sum(1 for item in keyword_scores if item["points"] == 20)

    insights: List[str] = []
    _generate_ai_insights(
        len(results), percentage, mentioned_count, follow_up_count, top5_count, insights
    )

    details: Dict[str, Any] = {
        "totalScore": total_score,
        "maxScore": max_score,
        "performancePercentage": percentage,
        "keywordsTested": len(results),
        "mentionedCount": mentioned_count,
        "followUpCount": follow_up_count,
        "top5Count": top5_count,
        "keywordScores": keyword_scores,
    }

    logger.debug(
        f"AI visibility: {total_score}/{max_score} points ({percentage:.1f}%), "
        f"normalized={normalized}, flags={len(red_flags)}"
    )

    return ScoreResult(
        score=percentage,
        normalized_score=normalized,
        adjusted_score=adjusted,
        details=details,
        insights=insights,
        red_flags=red_flags or None,
    )


def detect_ai_visibility_red_flags(
    data: AIVisibilityData,
    percentage: float,
) -> List[RedFlag]:
    """Detect missing AI presence after sustained investment."""
    red_flags: List[RedFlag] = []
    months = data.investment_months

    if months >= 6 and percentage < 20:
        red_flags.append(RedFlag(
            type="AI_INVISIBILITY",
            severity=Severity.MEDIUM,
            message=(
                f"Your brand earns only {format_percent(percentage)}% of possible AI visibility after "
                f"{format_number(months)} months. AI assistants are recommending competitors instead."
            ),
            score_penalty=-1,
        ))

    any_mention = any(
        result.mentioned or result.follow_up_mentioned for result in data.keyword_results
    )
    if not any_mention and months >= 8:
        red_flags.append(RedFlag(
            type="NO_AI_PRESENCE",
            severity=Severity.HIGH,
            message="Your brand is not mentioned by AI assistants for any tracked keyword.",
            score_penalty=-1.5,
        ))

    return red_flags


def _generate_ai_insights(
    keyword_count: int,
    percentage: float,
    mentioned_count: int,
    follow_up_count: int,
    top5_count: int,
    insights: List[str],
) -> None:
    pct = format_percent(percentage)

    if keyword_count == 0:
        insights.append("No AI visibility data collected for target keywords.")
    elif percentage >= 80:
        insights.append(f"Excellent AI visibility: {pct}% of maximum score across tested keywords.")
    elif percentage >= 60:
        insights.append(f"Good AI visibility: {pct}% of maximum score with room to grow.")
    elif percentage >= 40:
        insights.append(f"Moderate AI visibility: {pct}% of maximum score.")
    elif percentage >= 20:
        insights.append(f"Limited AI visibility: only {pct}% of maximum score.")
    else:
        insights.append(f"Minimal AI visibility: {pct}% of maximum score.")

    if keyword_count > 0:
        insights.append(
            f"Mentioned directly for {mentioned_count} of {keyword_count} keywords "
            f"({top5_count} in the top 5 recommendations)."
        )

    if follow_up_count > 0:
        insights.append(
            f"{follow_up_count} keywords only surfaced the brand after a follow-up question."
        )

    if keyword_count > 0 and mentioned_count < keyword_count * 0.5:
        insights.append("Tactic: Create definitive guides and FAQ content that AI assistants can cite.")
        insights.append("Tactic: Earn mentions from authoritative industry sources.")
