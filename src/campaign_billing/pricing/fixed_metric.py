"""Fixed-rate metric billing.

The client pays a fixed rate per delivered unit (per thousand for CPM),
optionally capped at the booked budget. Invoices are expressed net of
agency commission and may never push the total charged past the
commission-net budget.
"""

import math

from campaign_billing.domain.models import (
    CalculationContext,
    CalculationOutput,
    InputField,
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
from campaign_billing.pricing.primitives import (
    IMPRESSIONS_PER_MILLE,
    capped_spend,
    delivered_units,
    is_impression_paced,
)


def _target_delivery(ctx: CalculationContext) -> CalculationOutput:
    if ctx.fixed_rate <= 0 or ctx.total_budget < 0:
        return CalculationOutput(
            value=NOT_APPLICABLE,
            formula="Rate must be > 0 and Budget >= 0.",
        )
    delivery = ctx.total_budget / ctx.fixed_rate
    if is_impression_paced(ctx.buy_metric_id):
        # Ceiling over whole impressions, not whole thousands
        delivery *= IMPRESSIONS_PER_MILLE
    if not math.isfinite(delivery):
        return CalculationOutput(
            value=NOT_APPLICABLE,
            formula="Total Budget / Fixed Rate exceeds the representable range.",
        )
    value = math.ceil(delivery)
    return CalculationOutput(
        value=value,
        formula=(
            "If CPM: ceil((Total Budget / Fixed Rate) * 1000). "
            "Else: ceil(Total Budget / Fixed Rate). "
            f"Result: {format_value(value)}"
        ),
    )


def _actual_delivery(ctx: CalculationContext) -> CalculationOutput:
    value = delivered_units(
        ctx.pacing_from_ad_server, ctx.buy_metric_id, ctx.actual_delivered_units
    )
    return CalculationOutput(
        value=value,
        formula=f"User-provided 'Actual Delivered Units'. Result: {format_value(value)}",
    )


def _client_spend(ctx: CalculationContext) -> CalculationOutput:
    delivered = delivered_units(
        ctx.pacing_from_ad_server, ctx.buy_metric_id, ctx.actual_delivered_units
    )
    value = capped_spend(
        ctx.buy_metric_id,
        delivered,
        ctx.fixed_rate,
        ctx.total_budget,
        ctx.cap_budget,
    )
    per_mille = "/ 1000 " if is_impression_paced(ctx.buy_metric_id) else ""
    cap = ", capped by Total Budget." if ctx.cap_budget else "."
    return CalculationOutput(
        value=value,
        formula=(
            f"(Fixed Rate * Actual Delivered Units) {per_mille}{cap} "
            f"Result: {format_value(value)}"
        ),
    )


def _media_spend(ctx: CalculationContext) -> CalculationOutput:
    return CalculationOutput(
        value=ctx.actual_media_spend,
        formula=(
            "User-provided 'Actual Media Spend'. "
            f"Result: {format_value(ctx.actual_media_spend)}"
        ),
    )


def _net_budget(ctx: CalculationContext) -> CalculationOutput:
    effective_budget = min(ctx.client_spend or 0.0, ctx.total_budget)
    value = effective_budget * (1 - ctx.commission_rate / 100)
    return CalculationOutput(
        value=value,
        formula=(
            "min(Client Spend, Total Budget) * (1 - Commission Rate / 100). "
            f"Result: {format_value(value)}"
        ),
    )


def _to_date_budget(ctx: CalculationContext) -> CalculationOutput:
    return CalculationOutput(
        value=NOT_APPLICABLE,
        formula=(
            "Requires daily delivery data. For Fixed Metric this is usually "
            "the Client Spend up to a point in the flight."
        ),
    )


def _invoice_amount(ctx: CalculationContext) -> CalculationOutput:
    net_budget = ctx.total_budget * (1 - ctx.commission_rate / 100)
    amount = ctx.fixed_rate * ctx.invoice_quantity
    if is_impression_paced(ctx.buy_metric_id):
        amount = (ctx.fixed_rate * ctx.invoice_quantity) / IMPRESSIONS_PER_MILLE
    amount = amount * (1 - ctx.commission_rate / 100)

    if amount + ctx.amount_already_charged > net_budget:
        amount = net_budget - ctx.amount_already_charged
    value = max(0.0, amount)

    per_mille = " / 1000" if is_impression_paced(ctx.buy_metric_id) else ""
    return CalculationOutput(
        value=value,
        formula=(
            "Quantity at the fixed rate, net of commission, capped by "
            "(Net Budget - Amount Already Charged). "
            "Net Budget = Total Budget * (1 - Commission %). "
            f"Amount = (Rate * Quantity{per_mille}) * (1 - Commission %). "
            f"Result: {format_value(value)}"
        ),
    )


FIXED_METRIC = PricingModel(
    id=ModelId.FIXED_METRIC,
    name="Fixed Metric",
    description=(
        "Bills based on a fixed rate for a specific metric (e.g., CPM, CPC), "
        "capped by budget."
    ),
    inputs=(
        InputField(
            name="totalBudget", label="Total Budget ($)",
            kind=InputKind.NUMBER, default_value=10000,
        ),
        InputField(
            name="commissionRate", label="Agency Commission (%)",
            kind=InputKind.NUMBER, default_value=15, min_value=0, max_value=99.99,
        ),
        InputField(
            name="fixedRate", label="Fixed Rate ($ per unit/CPM)",
            kind=InputKind.NUMBER, default_value=5,
        ),
        InputField(
            name="buyMetricId", label="Buy Metric",
            kind=InputKind.SELECT, default_value=BuyMetric.CPM.value,
            choices=tuple(m.value for m in BuyMetric),
        ),
        InputField(
            name="actualDeliveredUnits", label="Actual Delivered Units",
            kind=InputKind.NUMBER, default_value=1800000,
        ),
        InputField(
            name="actualMediaSpend", label="Actual Media Spend ($)",
            kind=InputKind.NUMBER, default_value=8000,
        ),
        InputField(
            name="pacingFromAdServer", label="Pace from Ad Server?",
            kind=InputKind.BOOLEAN, default_value=False,
        ),
        InputField(
            name="capBudget", label="Cap Spend at Budget?",
            kind=InputKind.BOOLEAN, default_value=True,
        ),
        InputField(
            name="invoiceQuantity", label="Quantity for Invoice",
            kind=InputKind.NUMBER, default_value=1800000,
        ),
        InputField(
            name="amountAlreadyCharged", label="Amount Already Charged ($)",
            kind=InputKind.NUMBER, default_value=0,
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
