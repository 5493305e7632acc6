"""
Scoring Helper Functions and Constants

Contains the shared normalization bucket, position value table, tier tables,
and numeric utilities used across all scoring calculations.
"""

import math
from typing import List, Optional, Sequence, Tuple

from .models import ConfidenceLevel, PerformanceLevel, RedFlag


# ============================================================================
# SCORE NORMALIZATION (0-100 -> 1-10)
# ============================================================================

# Evaluated top-down, first match wins
NORMALIZATION_BUCKETS: Tuple[Tuple[float, int], ...] = (
    (90, 10),
    (80, 9),
    (70, 8),
    (60, 7),
    (50, 6),
    (40, 5),
    (30, 4),
    (20, 3),
    (10, 2),
)


def normalize_score(raw_score: float) -> int:
    """
    Convert a raw 0-100 score to the 1-10 scale.

    Shared by every metric scorer and the aggregator so that normalized
    scores stay comparable across metrics.

    Args:
        raw_score: Raw score (any finite number, negatives map to 1)

    Returns:
        Integer score (1-10)
    """
    for threshold, value in NORMALIZATION_BUCKETS:
        if raw_score >= threshold:
            return value
    return 1


def normalize_decile(percentage: float) -> int:
    """
    Convert a 0-100 percentage to completed deciles on the 1-10 scale.

    50% scores 5 here where normalize_score gives 6. Used for AI visibility,
    where the score is read as "tenths of maximum visibility".
    """
    return max(1, min(10, int(math.floor(percentage / 10))))


# Authority domains use a coarser competitive-position bucket
DOMAIN_BUCKETS: Tuple[Tuple[float, int], ...] = (
    (80, 10),
    (60, 8),
    (40, 6),
    (20, 4),
)


def normalize_domain_percentage(percentage: float) -> int:
    """
    Convert a client/competitor domain percentage to the 1-10 scale.

    Args:
        percentage: Client domains as a percentage of the competitor average

    Returns:
        Integer score (2, 4, 6, 8 or 10)
    """
    for threshold, value in DOMAIN_BUCKETS:
        if percentage >= threshold:
            return value
    return 2


# Traffic growth tiers keyed on growth relative to competitors
TRAFFIC_TIERS: Tuple[Tuple[float, int], ...] = (
    (1.5, 10),  # 50% better than competitors
    (1.2, 8),   # 20% better
    (0.8, 6),   # Within 20% of competitors
    (0.5, 4),   # Half of competitor growth
)


def get_traffic_tier(relative_performance: float, annualized_growth: float) -> int:
    """
    Get the normalized traffic score for a relative-performance ratio.

    Zero or negative growth always lands at the bottom of the scale.
    """
    if annualized_growth <= 0:
        return 1
    for threshold, value in TRAFFIC_TIERS:
        if relative_performance >= threshold:
            return value
    return 2


# ============================================================================
# POSITION VALUES
# ============================================================================

UNRANKED_POSITION = 100

POSITION_VALUE_TIERS: Tuple[Tuple[int, int], ...] = (
    (3, 10),   # Top 3
    (5, 8),    # Positions 4-5
    (10, 6),   # Rest of page 1
    (20, 3),   # Page 2
)

MAX_POSITION_VALUE = 10


def get_position_value(position: Optional[int]) -> int:
    """
    Get the tiered worth of a SERP position.

    Args:
        position: SERP position (>100 or missing means not ranking)

    Returns:
        Position value (0-10)
    """
    if position is None or position <= 0 or position > UNRANKED_POSITION:
        return 0
    for max_position, value in POSITION_VALUE_TIERS:
        if position <= max_position:
            return value
    return 1


def is_ranked(position: Optional[int]) -> bool:
    """Check whether a position counts as ranking (1-100)."""
    return position is not None and 0 < position <= UNRANKED_POSITION


# ============================================================================
# PERFORMANCE AND CONFIDENCE TIERS
# ============================================================================

PERFORMANCE_TIERS: Tuple[Tuple[float, PerformanceLevel], ...] = (
    (80, PerformanceLevel.EXCELLENT),
    (60, PerformanceLevel.GOOD),
    (40, PerformanceLevel.AVERAGE),
    (20, PerformanceLevel.POOR),
)


def get_performance_level(weighted_score: float) -> PerformanceLevel:
    """
    Classify a raw weighted score (0-100) into a performance tier.

    Independent of the 1-10 normalization.
    """
    for threshold, level in PERFORMANCE_TIERS:
        if weighted_score >= threshold:
            return level
    return PerformanceLevel.VERY_POOR


def get_confidence_level(investment_months: float) -> ConfidenceLevel:
    """Confidence is driven by how long the investment has been running."""
    if investment_months >= 8:
        return ConfidenceLevel.HIGH
    if investment_months >= 6:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


# ============================================================================
# RED FLAG PENALTIES
# ============================================================================

def apply_penalties(normalized_score: float, red_flags: List[RedFlag]) -> Optional[float]:
    """
    Subtract red flag penalties from a normalized score, floored at 1.

    Returns:
        Adjusted score, or None when the penalties leave the score unchanged
    """
    total_penalty = sum(flag.score_penalty for flag in red_flags)
    adjusted = max(1.0, min(10.0, normalized_score + total_penalty))
    if adjusted == normalized_score:
        return None
    return adjusted


# ============================================================================
# NUMERIC HELPERS
# ============================================================================

def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return int(math.floor(value + 0.5))


def clamp(value: float, lower: float = 0.0, upper: float = 100.0) -> float:
    """Clamp a value into [lower, upper]."""
    return max(lower, min(upper, value))


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def trailing_averages(series: Sequence[float], window: int = 3) -> Optional[Tuple[float, float]]:
    """
    Average of the last `window` points and of the `window` points before them.

    Args:
        series: Monthly series, oldest first
        window: Number of months per window

    Returns:
        (recent_avg, earlier_avg), or None if the series is too short
    """
    if len(series) < window * 2:
        return None
    recent = series[-window:]
    earlier = series[-2 * window:-window]
    return sum(recent) / window, sum(earlier) / window


def format_number(value: float) -> str:
    """Format a number with thousands separators (1234567 -> '1,234,567')."""
    rounded = round_half_up(value)
    return f"{rounded:,}"


def format_score(value: float) -> str:
    """Format a 1-10 score, dropping the decimal for whole values."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}"


def format_percent(value: float) -> str:
    """Format a percentage with no decimals, halves rounded up."""
    return str(round_half_up(value))
