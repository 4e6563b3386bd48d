"""Pricing model definitions, registry, and evaluation engine.

Re-exports key functions and types for convenient access:
    from campaign_billing.pricing import evaluate, lookup, list_models
"""

from campaign_billing.pricing.engine import build_context, evaluate
from campaign_billing.pricing.primitives import (
    capped_spend,
    commission_amount,
    delivered_units,
    gross_up,
    is_impression_paced,
)
from campaign_billing.pricing.registry import (
    MODEL_REGISTRY,
    default_model,
    describe,
    list_models,
    lookup,
)
from campaign_billing.pricing.session import (
    CalculatorSession,
    coerce_input,
    coerce_inputs,
)

__all__ = [
    "MODEL_REGISTRY",
    "CalculatorSession",
    "build_context",
    "capped_spend",
    "coerce_input",
    "coerce_inputs",
    "commission_amount",
    "default_model",
    "delivered_units",
    "describe",
    "evaluate",
    "gross_up",
    "is_impression_paced",
    "list_models",
    "lookup",
]
