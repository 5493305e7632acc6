"""
Scoring Policy

Immutable weights and thresholds passed into the engine at construction
time. Test suites and callers override thresholds by building a new policy
(dataclasses.replace) instead of patching module constants.
"""

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from src.utils.config import Settings, get_settings

from .models import MetricName


DEFAULT_WEIGHTS: Mapping[MetricName, float] = MappingProxyType({
    MetricName.AUTHORITY_LINKS: 0.35,
    MetricName.AUTHORITY_DOMAINS: 0.20,
    MetricName.TRAFFIC_GROWTH: 0.20,
    MetricName.RANKING_IMPROVEMENTS: 0.15,
    MetricName.AI_VISIBILITY: 0.10,
})


@dataclass(frozen=True)
class ScoringPolicy:
    """Weights and thresholds for one scoring strategy."""

    version: str = "2.0"
    weights: Mapping[MetricName, float] = field(default_factory=lambda: DEFAULT_WEIGHTS)

    # Input gate
    min_monthly_spend: float = 1000
    min_investment_months: float = 6

    # Expected links model: links per $1000/month of spend
    links_per_thousand: float = 1.5

    # Cross-metric ROI checks
    high_spend_threshold: float = 5000
    high_spend_min_score: float = 4
    long_term_months: float = 18
    long_term_min_score: float = 5

    # Content gap checks
    content_gap_min_competitor_traffic: float = 1000
    content_gap_client_ratio: float = 0.1
    content_gap_min_themes: int = 3
    min_commercial_traffic: float = 500
    assumed_conversion_rate: float = 0.02
    assumed_order_value: float = 200

    def __post_init__(self):
        missing = [metric.value for metric in MetricName if metric not in self.weights]
        if missing:
            raise ValueError(f"Scoring weights missing for: {', '.join(missing)}")
        total = sum(self.weights.values())
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"Scoring weights must sum to 1.0, got {total}")
        # Freeze caller-supplied dicts
        if not isinstance(self.weights, MappingProxyType):
            object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))

    def weight_for(self, metric: MetricName) -> float:
        return self.weights[metric]

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ScoringPolicy":
        """Build a policy from environment settings."""
        settings = settings or get_settings()
        return cls(
            min_monthly_spend=settings.SCORING_MIN_MONTHLY_SPEND,
            min_investment_months=settings.SCORING_MIN_INVESTMENT_MONTHS,
            links_per_thousand=settings.SCORING_LINKS_PER_THOUSAND,
        )


DEFAULT_POLICY = ScoringPolicy()
