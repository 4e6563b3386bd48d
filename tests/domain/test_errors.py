"""Tests for domain exception classes."""

from __future__ import annotations

from campaign_billing.domain.errors import (
    BillingError,
    ModelNotFoundError,
    UnknownInputError,
)


class TestBillingErrors:
    """Error hierarchy and message formatting."""

    def test_model_not_found(self) -> None:
        exc = ModelNotFoundError("Bogus")
        assert isinstance(exc, BillingError)
        assert exc.model_id == "Bogus"
        assert str(exc) == "Pricing model 'Bogus' not found"

    def test_unknown_input(self) -> None:
        exc = UnknownInputError("FixedMetric", "colour")
        assert isinstance(exc, BillingError)
        assert exc.input_name == "colour"
        assert str(exc) == "Pricing model 'FixedMetric' has no input 'colour'"
