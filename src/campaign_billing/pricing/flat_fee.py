"""Job and project billing: the budget is earned evenly over the placement.

Client spend accrues linearly with elapsed days. Delivery and media spend
are derived from that accrued client spend rather than from raw inputs.
Invoice amounts are not produced by this family.
"""

from campaign_billing.domain.models import (
    CalculationContext,
    CalculationOutput,
    InputField,
    PricingModel,
    format_value,
)
from campaign_billing.domain.types import (
    NOT_APPLICABLE,
    InputKind,
    ModelId,
    OutputName,
)


def _target_delivery(ctx: CalculationContext) -> CalculationOutput:
    value = ctx.total_budget * (1 - ctx.commission_rate / 100) * (1 - ctx.service_fee_rate / 100)
    return CalculationOutput(
        value=value,
        formula=(
            "Total Budget * (1 - Commission Rate / 100) * (1 - Service Fee Rate / 100). "
            f"Result: {format_value(value)}"
        ),
    )


def _actual_delivery(ctx: CalculationContext) -> CalculationOutput:
    net_after_commission = (ctx.client_spend or 0.0) * (1 - ctx.commission_rate / 100)
    service_fee = net_after_commission * (ctx.service_fee_rate / 100)
    value = net_after_commission - service_fee
    return CalculationOutput(
        value=value,
        formula=(
            "Client Spend * (1 - Comm%) * (1 - ServFee% on Net). "
            f"Result: {format_value(value)}"
        ),
    )


def _client_spend(ctx: CalculationContext) -> CalculationOutput:
    if ctx.total_days_in_placement <= 0:
        return CalculationOutput(value=0.0, formula="Total Days must be > 0.")
    daily_bill = ctx.total_budget / ctx.total_days_in_placement
    value = min(ctx.total_budget, daily_bill * ctx.days_elapsed_in_date_range)
    return CalculationOutput(
        value=value,
        formula=(
            "min(Total Budget, (Total Budget / Total Days) * Days Elapsed). "
            f"Result: {format_value(value)}"
        ),
    )


def _media_spend(ctx: CalculationContext) -> CalculationOutput:
    value = (ctx.client_spend or 0.0) * (1 - ctx.service_fee_rate / 100)
    return CalculationOutput(
        value=value,
        formula=f"Client Spend * (1 - Service Fee Rate / 100). Result: {format_value(value)}",
    )


def _net_budget(ctx: CalculationContext) -> CalculationOutput:
    value = (ctx.total_budget * (1 - ctx.commission_rate / 100)) * (1 - ctx.service_fee_rate / 100)
    return CalculationOutput(
        value=value,
        formula=(
            "(Total Budget * (1 - Commission Rate %)) * (1 - Service Fee Rate / 100). "
            f"Result: {format_value(value)}"
        ),
    )


def _to_date_budget(ctx: CalculationContext) -> CalculationOutput:
    value = ctx.client_spend or 0.0
    return CalculationOutput(
        value=value,
        formula=f"Calculated Client Spend for the period. Result: {format_value(value)}",
    )


def _invoice_amount(ctx: CalculationContext) -> CalculationOutput:
    return CalculationOutput(
        value=NOT_APPLICABLE,
        formula="Job billing does not produce an invoice amount.",
    )


JOB_SERVICE = PricingModel(
    id=ModelId.JOB_SERVICE,
    name="Job Service",
    description="Budget spread evenly over duration. Service fee on (Budget - Commission).",
    inputs=(
        InputField(
            name="totalBudget", label="Total Budget ($)",
            kind=InputKind.NUMBER, default_value=5000,
        ),
        InputField(
            name="commissionRate", label="Agency Commission (%)",
            kind=InputKind.NUMBER, default_value=0, min_value=0, max_value=99.99,
        ),
        InputField(
            name="serviceFeeRate", label="Service Fee (%) on Net",
            kind=InputKind.NUMBER, default_value=20, min_value=0, max_value=100,
        ),
        InputField(
            name="totalDaysInPlacement", label="Total Days in Placement",
            kind=InputKind.NUMBER, default_value=30,
        ),
        InputField(
            name="daysElapsedInDateRange", label="Days Elapsed in Billing Period",
            kind=InputKind.NUMBER, default_value=30,
        ),
    ),
    calculations={
        OutputName.TARGET_DELIVERY: _target_delivery,
        OutputName.ACTUAL_DELIVERY: _actual_delivery,
        OutputName.CLIENT_SPEND: _client_spend,
        OutputName.MEDIA_SPEND: _media_spend,
        OutputName.NET_BUDGET: _net_budget,
        OutputName.TO_DATE_BUDGET: _to_date_budget,
        OutputName.INVOICE_AMOUNT: _invoice_amount,
    },
)

PROJECT_SERVICE = JOB_SERVICE.derive(
    id=ModelId.PROJECT_SERVICE,
    name="Project Service",
    description=(
        "For project-based work, budget spread over duration. "
        "Service fee on (Budget - Commission)."
    ),
    is_project=True,
)
