"""
Input Validation

Gate run before any aggregation: analysis only proceeds when spend and
investment duration meet the policy minimums.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .exceptions import ValidationError
from .helpers import round_half_up
from .policy import DEFAULT_POLICY, ScoringPolicy

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Outcome of the input gate."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)

    def to_dict(self):
        data = {"isValid": self.is_valid}
        if self.errors:
            data["errors"] = list(self.errors)
        return data


def validate_score_inputs(
    monthly_spend: float,
    investment_months: float,
    policy: Optional[ScoringPolicy] = None,
) -> ValidationResult:
    """
    Check spend and duration against the analysis minimums.

    Both checks run independently so both messages can be reported together.

    Args:
        monthly_spend: Monthly SEO spend in dollars
        investment_months: Months of investment so far
        policy: Scoring policy supplying the minimums

    Returns:
        ValidationResult with human-readable error messages
    """
    policy = policy or DEFAULT_POLICY
    errors: List[str] = []

    if monthly_spend < policy.min_monthly_spend:
        errors.append(
            f"Minimum ${round_half_up(policy.min_monthly_spend)}/month required for analysis"
        )

    if investment_months < policy.min_investment_months:
        errors.append(
            f"Minimum {round_half_up(policy.min_investment_months)} months investment required for analysis"
        )

    return ValidationResult(is_valid=not errors, errors=errors)


def ensure_valid_inputs(
    monthly_spend: float,
    investment_months: float,
    policy: Optional[ScoringPolicy] = None,
) -> None:
    """
    Raise if the inputs fail the analysis gate.

    Raises:
        ValidationError: carrying every failed check's message
    """
    result = validate_score_inputs(monthly_spend, investment_months, policy)
    if not result.is_valid:
        logger.warning(f"Scoring inputs rejected: {'; '.join(result.errors)}")
        raise ValidationError(result.errors)
