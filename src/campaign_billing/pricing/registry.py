"""Fixed registry of pricing models.

The registry is built once at import time, in selection order; the first
entry is the default selection. It cannot be modified afterwards.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any

import structlog

from campaign_billing.domain.errors import ModelNotFoundError
from campaign_billing.domain.models import PricingModel
from campaign_billing.pricing.fixed_metric import FIXED_METRIC
from campaign_billing.pricing.flat_fee import JOB_SERVICE, PROJECT_SERVICE
from campaign_billing.pricing.gross_fee import (
    HD_GROSS_INVOICE_GROSS_FEE,
    HD_NET_INVOICE_GROSS_FEE,
    HD_NET_INVOICE_NET_FEE,
)
from campaign_billing.pricing.service import (
    MANAGED_SERVICE,
    MEDIA_SERVICE,
    NO_FEE_SERVICE,
)

logger = structlog.get_logger()

MODEL_REGISTRY: MappingProxyType[str, PricingModel] = MappingProxyType(
    {
        str(model.id): model
        for model in (
            FIXED_METRIC,
            HD_GROSS_INVOICE_GROSS_FEE,
            HD_NET_INVOICE_GROSS_FEE,
            HD_NET_INVOICE_NET_FEE,
            JOB_SERVICE,
            MANAGED_SERVICE,
            MEDIA_SERVICE,
            NO_FEE_SERVICE,
            PROJECT_SERVICE,
        )
    }
)


def lookup(model_id: str) -> PricingModel:
    """Look up a pricing model by identifier.

    Args:
        model_id: The stable model identifier, e.g. ``"FixedMetric"``.

    Returns:
        The registered ``PricingModel``.

    Raises:
        ModelNotFoundError: If no model is registered under ``model_id``.
    """
    try:
        return MODEL_REGISTRY[model_id]
    except KeyError:
        logger.warning("model_not_found", model_id=model_id)
        raise ModelNotFoundError(model_id) from None


def list_models() -> list[tuple[str, PricingModel]]:
    """All registered models as ``(id, model)`` pairs in selection order."""
    return list(MODEL_REGISTRY.items())


def default_model(model_id: str = "") -> PricingModel:
    """The model selected when nothing else has been chosen.

    Args:
        model_id: Configured default, usually ``Settings.default_model_id``.
            Empty selects the first registered model.

    Raises:
        ModelNotFoundError: If ``model_id`` is set but not registered.
    """
    if model_id:
        return lookup(model_id)
    return next(iter(MODEL_REGISTRY.values()))


def describe(model: PricingModel, *, is_default: bool = False) -> dict[str, Any]:
    """Discovery record for ``model``: identity, input schema, and outputs.

    Args:
        model: The model to describe.
        is_default: Whether ``model`` is the default selection.

    Returns:
        A JSON-serializable dict using camelCase keys.
    """
    return {
        "id": str(model.id),
        "name": model.name,
        "description": model.description,
        "isProject": model.is_project,
        "isDefault": is_default,
        "inputs": [
            f.model_dump(mode="json", by_alias=True, exclude_none=True)
            for f in model.inputs
        ],
        "outputs": [str(name) for name in model.calculations],
    }
