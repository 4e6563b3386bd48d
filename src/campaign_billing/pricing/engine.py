"""Evaluation engine: runs a pricing model's formula table in dependency order.

``clientSpend`` is computed first and ``serviceFeeAmount`` second, because
other outputs read them from the context. Every remaining calculation then
runs in the model's declared order, each seeing the numeric values of all
outputs computed before it.
"""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from campaign_billing.domain.models import (
    CalculationContext,
    CalculationOutput,
    InputValue,
    PricingModel,
)
from campaign_billing.domain.types import OutputName

logger = structlog.get_logger()

# Outputs evaluated ahead of the general pass, in this order
PRIORITY_OUTPUTS: tuple[OutputName, ...] = (
    OutputName.CLIENT_SPEND,
    OutputName.SERVICE_FEE_AMOUNT,
)


def build_context(
    model: PricingModel,
    inputs: Mapping[str, InputValue],
    computed: Mapping[str, float] | None = None,
) -> CalculationContext:
    """Merge schema defaults, caller inputs, and computed values into a context.

    Args:
        model: The model whose input defaults fill unset keys.
        inputs: Caller-supplied input values keyed by input name.
        computed: Numeric values of outputs already produced this pass.

    Returns:
        A frozen ``CalculationContext``.
    """
    values: dict[str, object] = {**model.default_inputs(), **inputs}
    values["computed"] = dict(computed or {})
    return CalculationContext.model_validate(values)


def evaluate(
    model: PricingModel,
    inputs: Mapping[str, InputValue],
) -> dict[str, CalculationOutput]:
    """Evaluate every calculation ``model`` declares.

    Args:
        model: The pricing model to evaluate.
        inputs: Input values keyed by input name. Unset inputs take the
            model's schema default.

    Returns:
        Output name to ``CalculationOutput``, one entry per declared
        calculation, in evaluation order.
    """
    results: dict[str, CalculationOutput] = {}
    computed: dict[str, float] = {}

    def run(name: str) -> None:
        context = build_context(model, inputs, computed)
        output = model.calculations[name](context)
        results[str(name)] = output
        if output.is_applicable:
            computed[str(name)] = float(output.value)

    for name in PRIORITY_OUTPUTS:
        if name in model.calculations:
            run(name)

    for name in model.calculations:
        if name not in PRIORITY_OUTPUTS:
            run(name)

    logger.debug(
        "evaluation_complete",
        model_id=str(model.id),
        outputs=len(results),
        not_applicable=sum(1 for o in results.values() if not o.is_applicable),
    )
    return results
