"""Service-fee models driven by actual media spend.

Managed service grosses media spend up through the service fee and then
through commission. Media service adds both as flat surcharges on capped
media spend. No-fee service is managed service with the fee defaulted off.
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
    InputKind,
    ModelId,
    OutputName,
)
from campaign_billing.pricing.primitives import commission_amount, gross_up


def _markup(amount: float, rate_pct: float) -> float:
    """Portion added when grossing ``amount`` up through ``rate_pct``."""
    denominator = 100 - rate_pct
    if denominator <= 0:
        return math.inf
    return (amount * rate_pct) / denominator


def _actual_delivery(ctx: CalculationContext) -> CalculationOutput:
    return CalculationOutput(
        value=ctx.actual_media_spend,
        formula=(
            "Actual Media Spend (if not pacing from ad server). "
            f"Result: {format_value(ctx.actual_media_spend)}"
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


def _to_date_budget(ctx: CalculationContext) -> CalculationOutput:
    return CalculationOutput(
        value=NOT_APPLICABLE,
        formula="Requires daily flight data and pacing logic.",
    )


# -- Managed service ----------------------------------------------------------


def _managed_target_delivery(ctx: CalculationContext) -> CalculationOutput:
    value = ctx.total_budget * (1 - ctx.commission_rate / 100) * (1 - ctx.service_fee_rate / 100)
    return CalculationOutput(
        value=value,
        formula=(
            "Total Budget * (1 - Commission Rate / 100) * (1 - Service Fee Rate / 100). "
            f"Result: {format_value(value)}"
        ),
    )


def _managed_client_spend(ctx: CalculationContext) -> CalculationOutput:
    media = ctx.actual_media_spend
    service_fee = _markup(media, ctx.service_fee_rate)
    commission = 0.0
    if ctx.commission_rate > 0:
        commission = _markup(media + service_fee, ctx.commission_rate)
    value = min(ctx.total_budget, media + service_fee + commission)
    return CalculationOutput(
        value=value,
        formula=(
            "Media Spend + Service Fee (Media Spend grossed up by 1 - ServFee%) "
            "+ Commission ((Media Spend + ServFeeAmt) grossed up by 1 - Comm%), "
            f"capped by Total Budget. Result: {format_value(value)}"
        ),
    )


def _managed_net_budget(ctx: CalculationContext) -> CalculationOutput:
    booked_net_media_spend = (
        ctx.total_budget * (1 - ctx.commission_rate / 100) * (1 - ctx.service_fee_rate / 100)
    )
    if ctx.actual_media_spend <= booked_net_media_spend:
        value = gross_up(ctx.actual_media_spend, ctx.service_fee_rate)
        if math.isinf(value):
            return CalculationOutput(
                value=NOT_APPLICABLE,
                formula="Service Fee must be below 100% to gross up Media Spend.",
            )
    else:
        value = ctx.total_budget * (1 - ctx.commission_rate / 100)
    return CalculationOutput(
        value=value,
        formula=(
            "If Media Spend <= Booked Net Media Spend: Media Spend / (1 - Service Fee %). "
            "Else: Total Budget * (1 - Commission Rate %). "
            f"Result: {format_value(value)}"
        ),
    )


def _managed_invoice_amount(ctx: CalculationContext) -> CalculationOutput:
    net_budget = ctx.total_budget * (1 - ctx.commission_rate / 100)
    amount = gross_up(ctx.invoice_spend, ctx.service_fee_rate)
    amount = min(amount, net_budget - ctx.amount_already_charged)
    value = max(0.0, amount)
    return CalculationOutput(
        value=value,
        formula=(
            "min((Invoice Spend * 100) / (100 - Service Fee% on Net), "
            f"Net Budget - Already Charged). Result: {format_value(value)}"
        ),
    )


MANAGED_SERVICE = PricingModel(
    id=ModelId.MANAGED_SERVICE,
    name="Managed Service",
    description=(
        "Service fee on (Budget - Commission). Client spend derived from "
        "media spend + fees."
    ),
    inputs=(
        InputField(
            name="totalBudget", label="Total Budget ($)",
            kind=InputKind.NUMBER, default_value=10000,
        ),
        InputField(
            name="commissionRate", label="Agency Commission (%)",
            kind=InputKind.NUMBER, default_value=10, min_value=0, max_value=99.99,
        ),
        InputField(
            name="serviceFeeRate", label="Service Fee (%) on Net",
            kind=InputKind.NUMBER, default_value=20, min_value=0, max_value=100,
        ),
        InputField(
            name="actualMediaSpend", label="Actual Media Spend ($)",
            kind=InputKind.NUMBER, default_value=6000,
        ),
        InputField(
            name="invoiceSpend", label="Spend for Invoice Calc. ($)",
            kind=InputKind.NUMBER, default_value=6000,
        ),
        InputField(
            name="amountAlreadyCharged", label="Amount Already Charged ($)",
            kind=InputKind.NUMBER, default_value=0,
        ),
    ),
    calculations={
        OutputName.TARGET_DELIVERY: _managed_target_delivery,
        OutputName.ACTUAL_DELIVERY: _actual_delivery,
        OutputName.CLIENT_SPEND: _managed_client_spend,
        OutputName.MEDIA_SPEND: _media_spend,
        OutputName.NET_BUDGET: _managed_net_budget,
        OutputName.TO_DATE_BUDGET: _to_date_budget,
        OutputName.INVOICE_AMOUNT: _managed_invoice_amount,
    },
)


NO_FEE_SERVICE = MANAGED_SERVICE.derive(
    id=ModelId.NO_FEE_SERVICE,
    name="No Fee Service",
    description="Variation of Managed Service, typically with service fee set to zero.",
    inputs=MANAGED_SERVICE.override_input(
        "serviceFeeRate",
        default_value=0,
        label="Service Fee (%) on Net (usually 0)",
    ),
)


# -- Media service ------------------------------------------------------------


def _media_target_delivery(ctx: CalculationContext) -> CalculationOutput:
    return CalculationOutput(
        value=ctx.total_budget,
        formula=(
            "Total Budget (as fees are additive to media spend). "
            f"Result: {format_value(ctx.total_budget)}"
        ),
    )


def _media_client_spend(ctx: CalculationContext) -> CalculationOutput:
    capped_media = min(ctx.actual_media_spend, ctx.total_budget)
    service_fee = (capped_media * ctx.service_fee_rate) / 100
    commission = commission_amount(capped_media, ctx.commission_rate)
    value = capped_media + service_fee + commission
    return CalculationOutput(
        value=value,
        formula=(
            "min(Actual Media Spend, Total Budget) + Service Fee (on capped Media Spend) "
            f"+ Commission (on capped Media Spend). Result: {format_value(value)}"
        ),
    )


def _media_net_budget(ctx: CalculationContext) -> CalculationOutput:
    value = min(ctx.actual_media_spend, ctx.total_budget)
    return CalculationOutput(
        value=value,
        formula=f"min(Actual Media Spend, Total Budget). Result: {format_value(value)}",
    )


def _media_invoice_amount(ctx: CalculationContext) -> CalculationOutput:
    # Approximates the already-charged reconciliation: the remaining gross
    # budget is the fee-inclusive net budget less what was already charged.
    net_after_commission = ctx.total_budget * (1 - ctx.commission_rate / 100)
    gross_budget = net_after_commission * (100 + ctx.service_fee_rate) / 100
    amount = (ctx.invoice_spend * (100 + ctx.service_fee_rate)) / 100
    available = gross_budget - ctx.amount_already_charged
    value = max(0.0, min(amount, available))
    return CalculationOutput(
        value=value,
        formula=(
            "min((Invoice Spend * (1 + Service Fee %)), "
            "Gross Budget (incl. ServFee on Net after Comm) - Already Charged). "
            f"Result: {format_value(value)}"
        ),
    )


MEDIA_SERVICE = PricingModel(
    id=ModelId.MEDIA_SERVICE,
    name="Media Service",
    description="Service fee and commission applied directly on top of media spend.",
    inputs=(
        InputField(
            name="totalBudget", label="Total Budget ($)",
            kind=InputKind.NUMBER, default_value=10000,
        ),
        InputField(
            name="commissionRate", label="Agency Commission (%) on Media Spend",
            kind=InputKind.NUMBER, default_value=5, min_value=0, max_value=99.99,
        ),
        InputField(
            name="serviceFeeRate", label="Service Fee (%) on Media Spend",
            kind=InputKind.NUMBER, default_value=10, min_value=0, max_value=100,
        ),
        InputField(
            name="actualMediaSpend", label="Actual Media Spend ($)",
            kind=InputKind.NUMBER, default_value=8000,
        ),
        InputField(
            name="invoiceSpend", label="Spend for Invoice Calc. ($)",
            kind=InputKind.NUMBER, default_value=8000,
        ),
        InputField(
            name="amountAlreadyCharged", label="Amount Already Charged ($)",
            kind=InputKind.NUMBER, default_value=0,
        ),
    ),
    calculations={
        OutputName.TARGET_DELIVERY: _media_target_delivery,
        OutputName.ACTUAL_DELIVERY: _actual_delivery,
        OutputName.CLIENT_SPEND: _media_client_spend,
        OutputName.MEDIA_SPEND: _media_spend,
        OutputName.NET_BUDGET: _media_net_budget,
        OutputName.TO_DATE_BUDGET: _to_date_budget,
        OutputName.INVOICE_AMOUNT: _media_invoice_amount,
    },
)
