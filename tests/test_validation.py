"""
Test Suite for Input Validation

Tests the spend/duration gate and policy overrides.
"""

import dataclasses

import pytest

from src.scoring import (
    DEFAULT_POLICY,
    ScoringPolicy,
    ValidationError,
    ensure_valid_inputs,
    validate_score_inputs,
)


class TestValidateScoreInputs:
    """Test the analysis minimums."""

    def test_low_spend_only(self):
        """$500/month over 8 months fails on spend alone."""
        result = validate_score_inputs(500, 8)

        assert result.is_valid is False
        assert result.errors == ["Minimum $1000/month required for analysis"]

    def test_short_investment_only(self):
        result = validate_score_inputs(2000, 4)

        assert result.errors == ["Minimum 6 months investment required for analysis"]

    def test_both_checks_independent(self):
        result = validate_score_inputs(500, 3)

        assert result.errors == [
            "Minimum $1000/month required for analysis",
            "Minimum 6 months investment required for analysis",
        ]

    def test_boundaries_inclusive(self):
        result = validate_score_inputs(1000, 6)

        assert result.is_valid is True
        assert result.errors == []
        assert result.to_dict() == {"isValid": True}

    def test_to_dict_with_errors(self):
        data = validate_score_inputs(500, 8).to_dict()

        assert data["isValid"] is False
        assert len(data["errors"]) == 1


class TestEnsureValidInputs:
    """Test the raising gate."""

    def test_raises_with_all_errors(self):
        with pytest.raises(ValidationError) as exc_info:
            ensure_valid_inputs(100, 1)

        assert len(exc_info.value.errors) == 2
        assert "Minimum $1000/month" in str(exc_info.value)

    def test_valid_inputs_pass(self):
        assert ensure_valid_inputs(5000, 12) is None


class TestPolicyOverrides:
    """Test threshold overrides without patching module constants."""

    def test_lenient_policy(self, lenient_policy):
        assert validate_score_inputs(500, 3, lenient_policy).is_valid

    def test_stricter_policy_message(self):
        policy = dataclasses.replace(DEFAULT_POLICY, min_monthly_spend=2500)

        result = validate_score_inputs(2000, 8, policy)

        assert result.errors == ["Minimum $2500/month required for analysis"]

    def test_default_policy_unchanged(self):
        dataclasses.replace(DEFAULT_POLICY, min_monthly_spend=2500)

        assert DEFAULT_POLICY.min_monthly_spend == 1000

    def test_policy_is_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_POLICY.min_monthly_spend = 0

    def test_weights_are_read_only(self):
        policy = ScoringPolicy(weights=dict(DEFAULT_POLICY.weights))

        with pytest.raises(TypeError):
            policy.weights["authorityLinks"] = 1.0
