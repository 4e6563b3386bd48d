"""Domain types, models, and errors for campaign billing."""

from campaign_billing.domain.errors import (
    BillingError,
    ModelNotFoundError,
    UnknownInputError,
)
from campaign_billing.domain.models import (
    CalculationContext,
    CalculationFunction,
    CalculationOutput,
    InputField,
    InputValue,
    PricingModel,
    format_value,
)
from campaign_billing.domain.types import (
    NOT_APPLICABLE,
    BuyMetric,
    InputKind,
    ModelId,
    OutputName,
)

__all__ = [
    "NOT_APPLICABLE",
    "BillingError",
    "BuyMetric",
    "CalculationContext",
    "CalculationFunction",
    "CalculationOutput",
    "InputField",
    "InputKind",
    "InputValue",
    "ModelId",
    "ModelNotFoundError",
    "OutputName",
    "PricingModel",
    "UnknownInputError",
    "format_value",
]
