"""
Scoring Data Models

Input records are frozen pydantic models that accept both the camelCase
field names used by the data-acquisition layer and snake_case names.
Output records are plain dataclasses with a to_dict() that emits the
camelCase shape consumed by report renderers and webhook payload builders.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field, NonNegativeFloat
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .exceptions import MalformedInputError


# =============================================================================
# ENUMS
# =============================================================================

class Severity(Enum):
    """Red flag severity."""
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"


class PerformanceLevel(Enum):
    """Overall performance tier over the raw weighted score."""
    EXCELLENT = "Excellent"
    GOOD = "Good"
    AVERAGE = "Average"
    POOR = "Poor"
    VERY_POOR = "Very Poor"


class ConfidenceLevel(Enum):
    """Qualitative confidence driven by investment duration."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class MetricName(Enum):
    """The five scored metrics, valued by their wire key."""
    AUTHORITY_LINKS = "authorityLinks"
    AUTHORITY_DOMAINS = "authorityDomains"
    TRAFFIC_GROWTH = "trafficGrowth"
    RANKING_IMPROVEMENTS = "rankingImprovements"
    AI_VISIBILITY = "aiVisibility"

    @property
    def display_name(self) -> str:
        return METRIC_DISPLAY_NAMES[self]


METRIC_DISPLAY_NAMES: Dict[MetricName, str] = {
    MetricName.AUTHORITY_LINKS: "Authority Links",
    MetricName.AUTHORITY_DOMAINS: "Authority Domains",
    MetricName.TRAFFIC_GROWTH: "Traffic Growth",
    MetricName.RANKING_IMPROVEMENTS: "Ranking Improvements",
    MetricName.AI_VISIBILITY: "AI Visibility",
}


Intent = Literal["informational", "commercial", "transactional", "navigational"]


# =============================================================================
# INPUT RECORDS
# =============================================================================

class MetricInput(BaseModel):
    """Base for all metric input records."""

    metric: ClassVar[str] = "metric"

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True
        extra = "ignore"
        allow_inf_nan = False

    @classmethod
    def parse(cls, data: Union["MetricInput", Mapping[str, Any]]):
        """
        Build a record from an instance or a mapping.

        Raises:
            MalformedInputError: if required fields are missing or invalid
        """
        if isinstance(data, cls):
            return data
        if not isinstance(data, Mapping):
            raise MalformedInputError(
                cls.metric, [f"expected a mapping, got {type(data).__name__}"]
            )
        try:
            return cls.model_validate(dict(data))
        except PydanticValidationError as e:
            raise MalformedInputError(cls.metric, _format_errors(e)) from e


def _format_errors(error: PydanticValidationError) -> List[str]:
    messages = []
    for err in error.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        messages.append(f"{location}: {err.get('msg', 'invalid value')}")
    return messages


class LinkBreakdown(MetricInput):
    """Authority links split by referring domain rating."""
    high_quality: float = Field(ge=0)    # DR 70+
    medium_quality: float = Field(ge=0)  # DR 20-69
    low_quality: float = Field(ge=0)     # DR < 20

    @property
    def total(self) -> float:
        return self.high_quality + self.medium_quality + self.low_quality


class AuthorityLinksData(MetricInput):
    metric: ClassVar[str] = "authorityLinks"

    actual_links: float = Field(ge=0)
    monthly_spend: float = Field(ge=0)
    investment_months: float = Field(gt=0)
    recent_links_6_months: Optional[float] = Field(default=None, ge=0)
    link_breakdown: Optional[LinkBreakdown] = None
    link_growth_by_month: Optional[List[NonNegativeFloat]] = None


class AuthorityDomainsData(MetricInput):
    metric: ClassVar[str] = "authorityDomains"

    client_domains: float = Field(ge=0)
    competitor_domains: List[NonNegativeFloat] = Field(default_factory=list)
    domain_growth_trend: Optional[List[NonNegativeFloat]] = None


class TrafficGrowthData(MetricInput):
    metric: ClassVar[str] = "trafficGrowth"

    client_growth: float                       # Percentage over the investment period
    competitor_growths: List[float] = Field(default_factory=list)
    investment_months: float = Field(gt=0)
    current_monthly_traffic: float = Field(ge=0)
    traffic_history: Optional[List[NonNegativeFloat]] = None
    branded_search_traffic: Optional[float] = Field(default=None, ge=0)
    top_keywords_dependency: Optional[float] = Field(default=None, ge=0, le=1)


class RankingChange(MetricInput):
    keyword: str
    old_position: int  # >100 means not ranking
    new_position: int  # >100 means not ranking
    search_volume: Optional[int] = Field(default=None, ge=0)
    intent: Optional[Intent] = None


class RankingImprovementsData(MetricInput):
    metric: ClassVar[str] = "rankingImprovements"

    ranking_changes: List[RankingChange] = Field(default_factory=list)
    total_keywords: int = Field(default=0, ge=0)
    investment_months: float = Field(gt=0)


class AIKeywordResult(MetricInput):
    keyword: str
    mentioned: bool = False
    position: Optional[int] = Field(default=None, ge=1)  # Position in the AI response
    follow_up_mentioned: bool = False
    brand_recognized: bool = False


class AIVisibilityData(MetricInput):
    metric: ClassVar[str] = "aiVisibility"

    keyword_results: List[AIKeywordResult] = Field(default_factory=list)
    investment_months: float = Field(gt=0)


class CompetitorTheme(MetricInput):
    name: str
    competitor_average: float = Field(ge=0)
    intent: Optional[Intent] = None


class ContentGapData(MetricInput):
    metric: ClassVar[str] = "contentGap"

    client_traffic: Dict[str, NonNegativeFloat] = Field(default_factory=dict)  # Traffic by theme
    competitor_traffic_by_theme: List[CompetitorTheme] = Field(default_factory=list)


# =============================================================================
# OUTPUT RECORDS
# =============================================================================

@dataclass
class RedFlag:
    """A detected anomaly carrying a severity and a score penalty."""
    type: str
    severity: Severity
    message: str
    score_penalty: float  # Negative
    missed_revenue: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "type": self.type,
            "severity": self.severity.value,
            "message": self.message,
            "scorePenalty": self.score_penalty,
        }
        if self.missed_revenue is not None:
            data["missedRevenue"] = self.missed_revenue
        return data


@dataclass
class ScoreResult:
    """Output of a single metric scorer."""
    score: float                 # Raw 0-100
    normalized_score: int        # 1-10 bucket value
    details: Dict[str, Any] = field(default_factory=dict)  # Diagnostic only
    insights: List[str] = field(default_factory=list)
    red_flags: Optional[List[RedFlag]] = None
    adjusted_score: Optional[float] = None

    @property
    def effective_score(self) -> float:
        """Adjusted score when penalties applied, otherwise the normalized score."""
        if self.adjusted_score is not None:
            return self.adjusted_score
        return float(self.normalized_score)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "score": round(self.score, 2),
            "normalizedScore": self.normalized_score,
            "details": self.details,
            "insights": list(self.insights),
        }
        if self.adjusted_score is not None:
            data["adjustedScore"] = self.adjusted_score
        if self.red_flags:
            data["redFlags"] = [flag.to_dict() for flag in self.red_flags]
        return data


@dataclass
class OverallScoreData:
    """Aggregated result over all five metrics."""
    authority_links: ScoreResult
    authority_domains: ScoreResult
    traffic_growth: ScoreResult
    ranking_improvements: ScoreResult
    ai_visibility: ScoreResult
    weighted_score: float
    normalized_score: int
    performance_level: PerformanceLevel
    confidence: ConfidenceLevel
    recommendations: List[str] = field(default_factory=list)
    red_flags: List[RedFlag] = field(default_factory=list)

    @property
    def components(self) -> Dict[MetricName, ScoreResult]:
        return {
            MetricName.AUTHORITY_LINKS: self.authority_links,
            MetricName.AUTHORITY_DOMAINS: self.authority_domains,
            MetricName.TRAFFIC_GROWTH: self.traffic_growth,
            MetricName.RANKING_IMPROVEMENTS: self.ranking_improvements,
            MetricName.AI_VISIBILITY: self.ai_visibility,
        }

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            metric.value: result.to_dict()
            for metric, result in self.components.items()
        }
        data.update({
            "weightedScore": round(self.weighted_score, 2),
            "normalizedScore": self.normalized_score,
            "performanceLevel": self.performance_level.value,
            "recommendations": list(self.recommendations),
            "redFlags": [flag.to_dict() for flag in self.red_flags],
            "confidence": self.confidence.value,
        })
        return data


@dataclass
class PartialScoreData:
    """Aggregated result over whichever metrics had data."""
    scores: Dict[MetricName, ScoreResult]
    weighted_score: float
    normalized_score: int
    performance_level: PerformanceLevel
    confidence: float  # Percentage of total weight backed by data
    available_metrics: List[MetricName] = field(default_factory=list)
    missing_metrics: List[MetricName] = field(default_factory=list)
    red_flags: List[RedFlag] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scores": {metric.value: result.to_dict() for metric, result in self.scores.items()},
            "weightedScore": round(self.weighted_score, 2),
            "normalizedScore": self.normalized_score,
            "performanceLevel": self.performance_level.value,
            "confidence": self.confidence,
            "availableMetrics": [metric.value for metric in self.available_metrics],
            "missingMetrics": [metric.value for metric in self.missing_metrics],
            "redFlags": [flag.to_dict() for flag in self.red_flags],
        }
