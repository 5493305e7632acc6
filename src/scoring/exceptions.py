"""
Scoring Errors

Only two conditions stop a scoring run:
- ValidationError: spend/duration below the analysis minimums
- MalformedInputError: a metric record is missing required fields
"""

from typing import List, Optional


class ScoringError(Exception):
    """Base error for the scoring engine."""
    pass


class ValidationError(ScoringError):
    """Inputs are well-formed but below the minimums for analysis."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class MalformedInputError(ScoringError):
    """A metric record is missing required fields or has invalid values."""

    def __init__(self, metric: str, errors: Optional[List[str]] = None):
        self.metric = metric
        self.errors = list(errors or [])
        detail = "; ".join(self.errors) if self.errors else "invalid input"
        super().__init__(f"Malformed {metric} input: {detail}")
