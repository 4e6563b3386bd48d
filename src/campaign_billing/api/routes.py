"""HTTP routes for model discovery and evaluation.

Endpoints:
    GET  /models             -- discovery records for every model, in selection order
    GET  /models/{model_id}  -- discovery record for one model
    POST /evaluate           -- evaluate ``{modelId, inputs}`` and return every output

Discovery records flag the default model (``isDefault``): the configured
``DEFAULT_MODEL_ID``, or the first registered model when that is empty or
unknown. ``POST /evaluate`` without a ``modelId`` evaluates the default.

Raw inputs are coerced and clamped against the model's schema before the
engine sees them, the same way the interactive calculator does.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from campaign_billing.domain.errors import ModelNotFoundError, UnknownInputError
from campaign_billing.domain.models import CalculationOutput, PricingModel
from campaign_billing.observability.metrics import record_evaluation
from campaign_billing.pricing.engine import evaluate
from campaign_billing.pricing.registry import default_model, describe, list_models, lookup
from campaign_billing.pricing.session import coerce_inputs

logger = structlog.get_logger()

router = APIRouter()


class EvaluateRequest(BaseModel):
    """Request body for ``POST /evaluate``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    model_id: str | None = None
    inputs: dict[str, Any] = Field(
        default_factory=dict,
        description="Raw input values keyed by input name. Missing inputs use "
                    "the model's defaults; numbers are clamped to their bounds.",
    )


def serialize_output(output: CalculationOutput) -> dict[str, Any]:
    """JSON shape of one output: value, formula, and two-decimal display."""
    return {
        "value": output.value,
        "formula": output.formula,
        "display": output.display(),
    }


def resolve_default_model(request: Request) -> PricingModel:
    """The app's default model, falling back to the first registered one."""
    configured = getattr(request.app.state, "default_model_id", "")
    try:
        return default_model(configured)
    except ModelNotFoundError:
        return default_model()


def _lookup_or_404(model_id: str) -> PricingModel:
    try:
        return lookup(model_id)
    except ModelNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.get("/models")
async def get_models(request: Request) -> list[dict[str, Any]]:
    """List every registered model in selection order."""
    default = resolve_default_model(request)
    return [describe(model, is_default=model is default) for _, model in list_models()]


@router.get("/models/{model_id}")
async def get_model(model_id: str, request: Request) -> dict[str, Any]:
    """Describe one model.

    Raises:
        HTTPException: 404 if ``model_id`` is not registered.
    """
    model = _lookup_or_404(model_id)
    return describe(model, is_default=model is resolve_default_model(request))


@router.post("/evaluate")
async def evaluate_model(body: EvaluateRequest, request: Request) -> dict[str, Any]:
    """Evaluate a model against the supplied inputs.

    Without a ``modelId`` the default model is evaluated.

    Raises:
        HTTPException: 404 for an unknown model, 422 for an undeclared input.
    """
    if body.model_id is None:
        model = resolve_default_model(request)
    else:
        model = _lookup_or_404(body.model_id)
    try:
        inputs = coerce_inputs(model, body.inputs)
    except UnknownInputError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    outputs = evaluate(model, inputs)
    record_evaluation(str(model.id), outputs)
    logger.info("evaluation_served", model_id=str(model.id), outputs=len(outputs))

    return {
        "modelId": str(model.id),
        "inputs": inputs,
        "outputs": {name: serialize_output(o) for name, o in outputs.items()},
    }
