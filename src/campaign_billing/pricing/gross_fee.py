"""HD invoice models: commission and service fee charged against the budget.

Three variants differ in where the service fee is levied and whether the
invoice is expressed gross or net of commission:

- gross invoice, fee on gross budget
- net invoice, fee on gross budget
- net invoice, fee on commission-net budget
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
from campaign_billing.pricing.primitives import gross_up


def _net_after_commission(ctx: CalculationContext) -> float:
    return ctx.total_budget * (1 - ctx.commission_rate / 100)


# -- Gross invoice, gross fee -------------------------------------------------


def _service_fee_on_gross(ctx: CalculationContext) -> CalculationOutput:
    value = (ctx.total_budget * ctx.service_fee_rate) / 100
    return CalculationOutput(
        value=value,
        formula=f"Total Budget * Service Fee Rate / 100. Result: {format_value(value)}",
    )


def _target_delivery_fee_on_gross(ctx: CalculationContext) -> CalculationOutput:
    service_fee = (ctx.total_budget * ctx.service_fee_rate) / 100
    value = _net_after_commission(ctx) - service_fee
    return CalculationOutput(
        value=value,
        formula=(
            "(Total Budget * (1 - Commission Rate / 100)) - "
            "(Total Budget * Service Fee Rate / 100). "
            f"Result: {format_value(value)}"
        ),
    )


def _actual_delivery(ctx: CalculationContext) -> CalculationOutput:
    return CalculationOutput(
        value=ctx.actual_media_spend,
        formula=(
            "Actual Media Spend stands in for delivery. "
            f"Result: {format_value(ctx.actual_media_spend)}"
        ),
    )


def _client_spend_fee_on_gross(ctx: CalculationContext) -> CalculationOutput:
    denominator = 1 - ctx.commission_rate / 100 - ctx.service_fee_rate / 100
    grossed = ctx.actual_media_spend / denominator if denominator > 0 else math.inf
    value = min(ctx.total_budget, grossed)
    return CalculationOutput(
        value=value,
        formula=(
            "Media Spend / (1 - Commission Rate% - Service Fee Rate%), "
            f"capped by Total Budget. Result: {format_value(value)}"
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


def _net_budget_after_commission(ctx: CalculationContext) -> CalculationOutput:
    value = _net_after_commission(ctx)
    return CalculationOutput(
        value=value,
        formula=f"Total Budget * (1 - Commission Rate / 100). Result: {format_value(value)}",
    )


def _to_date_budget(ctx: CalculationContext) -> CalculationOutput:
    return CalculationOutput(
        value=NOT_APPLICABLE,
        formula="Requires daily flight data and pacing logic.",
    )


def _invoice_gross(ctx: CalculationContext) -> CalculationOutput:
    denominator = 100 - ctx.service_fee_rate - ctx.commission_rate
    amount = (ctx.invoice_spend * 100) / denominator if denominator > 0 else math.inf
    amount = min(amount, ctx.total_budget - ctx.amount_already_charged)
    value = max(0.0, amount)
    return CalculationOutput(
        value=value,
        formula=(
            "min((Invoice Spend * 100) / (100 - Service Fee % - Commission %), "
            "Total Budget - Amount Already Charged). "
            f"Result: {format_value(value)}"
        ),
    )


HD_GROSS_INVOICE_GROSS_FEE = PricingModel(
    id=ModelId.HD_GROSS_INVOICE_GROSS_FEE,
    name="HD Gross Invoice Gross Fee",
    description=(
        "Invoice based on gross amount, service fee calculated on gross budget. "
        "Commission applied first."
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
            name="serviceFeeRate", label="Service Fee (%) on Gross",
            kind=InputKind.NUMBER, default_value=15, min_value=0, max_value=100,
        ),
        InputField(
            name="actualMediaSpend", label="Actual Media Spend ($)",
            kind=InputKind.NUMBER, default_value=7000,
        ),
        InputField(
            name="invoiceSpend", label="Spend for Invoice Calc. ($)",
            kind=InputKind.NUMBER, default_value=7000,
        ),
        InputField(
            name="amountAlreadyCharged", label="Amount Already Charged ($)",
            kind=InputKind.NUMBER, default_value=0,
        ),
    ),
    calculations={
        OutputName.SERVICE_FEE_AMOUNT: _service_fee_on_gross,
        OutputName.TARGET_DELIVERY: _target_delivery_fee_on_gross,
        OutputName.ACTUAL_DELIVERY: _actual_delivery,
        OutputName.CLIENT_SPEND: _client_spend_fee_on_gross,
        OutputName.MEDIA_SPEND: _media_spend,
        OutputName.NET_BUDGET: _net_budget_after_commission,
        OutputName.TO_DATE_BUDGET: _to_date_budget,
        OutputName.INVOICE_AMOUNT: _invoice_gross,
    },
)


# -- Net invoice, gross fee ---------------------------------------------------


def _invoice_net_fee_on_gross(ctx: CalculationContext) -> CalculationOutput:
    net_budget = _net_after_commission(ctx)
    denominator = 100 - ctx.service_fee_rate - ctx.commission_rate
    if denominator > 0:
        amount = (ctx.invoice_spend * 100 / denominator) * (1 - ctx.commission_rate / 100)
    else:
        amount = math.inf
    amount = min(amount, net_budget - ctx.amount_already_charged)
    value = max(0.0, amount)
    return CalculationOutput(
        value=value,
        formula=(
            "Invoice is Net. Amount = min((Spend / (100 - Comm% - Serv%)) * (100 - Comm%), "
            f"Net Budget - Already Charged). Result: {format_value(value)}"
        ),
    )


HD_NET_INVOICE_GROSS_FEE = HD_GROSS_INVOICE_GROSS_FEE.derive(
    id=ModelId.HD_NET_INVOICE_GROSS_FEE,
    name="HD Net Invoice Gross Fee",
    description=(
        "Invoice based on net amount (after commission), service fee calculated "
        "on gross budget."
    ),
    overrides={
        OutputName.NET_BUDGET: _net_budget_after_commission,
        OutputName.INVOICE_AMOUNT: _invoice_net_fee_on_gross,
    },
)


# -- Net invoice, net fee -----------------------------------------------------


def _service_fee_on_net(ctx: CalculationContext) -> CalculationOutput:
    value = (_net_after_commission(ctx) * ctx.service_fee_rate) / 100
    return CalculationOutput(
        value=value,
        formula=(
            "(Total Budget * (1 - Commission Rate / 100)) * Service Fee Rate / 100. "
            f"Result: {format_value(value)}"
        ),
    )


def _target_delivery_fee_on_net(ctx: CalculationContext) -> CalculationOutput:
    net_after_commission = _net_after_commission(ctx)
    service_fee = (net_after_commission * ctx.service_fee_rate) / 100
    value = net_after_commission - service_fee
    return CalculationOutput(
        value=value,
        formula=(
            "Net Budget After Commission - Service Fee (on Net Budget). "
            f"Result: {format_value(value)}"
        ),
    )


def _client_spend_fee_on_net(ctx: CalculationContext) -> CalculationOutput:
    net_factor = (1 - ctx.commission_rate / 100) * (1 - ctx.service_fee_rate / 100)
    grossed = ctx.actual_media_spend / net_factor if net_factor > 0 else math.inf
    value = min(ctx.total_budget, grossed)
    return CalculationOutput(
        value=value,
        formula=(
            "Media Spend / ((1 - Commission Rate%) * (1 - Service Fee Rate% on Net)), "
            f"capped by Total Budget. Result: {format_value(value)}"
        ),
    )


def _net_budget_fee_on_net(ctx: CalculationContext) -> CalculationOutput:
    net_after_commission = _net_after_commission(ctx)
    service_fee = (net_after_commission * ctx.service_fee_rate) / 100
    booked_net_media_spend = net_after_commission - service_fee

    if ctx.actual_media_spend <= booked_net_media_spend:
        value = gross_up(ctx.actual_media_spend, ctx.service_fee_rate)
        if math.isinf(value):
            return CalculationOutput(
                value=NOT_APPLICABLE,
                formula="Service Fee on Net must be below 100% to gross up Media Spend.",
            )
    else:
        value = net_after_commission
    return CalculationOutput(
        value=value,
        formula=(
            "If Media Spend <= Booked Net Media Spend: Media Spend / (1 - Service Fee% on Net). "
            "Else: Total Budget * (1 - Commission Rate%). "
            f"Result: {format_value(value)}"
        ),
    )


def _invoice_net_fee_on_net(ctx: CalculationContext) -> CalculationOutput:
    net_budget = _net_after_commission(ctx)
    amount = gross_up(ctx.invoice_spend, ctx.service_fee_rate)
    amount = min(amount, net_budget - ctx.amount_already_charged)
    value = max(0.0, amount)
    return CalculationOutput(
        value=value,
        formula=(
            "Invoice is Net. Amount = min((Spend / (1 - Serv% on Net)), "
            f"Net Budget - Already Charged). Result: {format_value(value)}"
        ),
    )


HD_NET_INVOICE_NET_FEE = HD_GROSS_INVOICE_GROSS_FEE.derive(
    id=ModelId.HD_NET_INVOICE_NET_FEE,
    name="HD Net Invoice Net Fee",
    description=(
        "Invoice based on net amount, service fee calculated on net budget "
        "(after commission)."
    ),
    overrides={
        OutputName.SERVICE_FEE_AMOUNT: _service_fee_on_net,
        OutputName.TARGET_DELIVERY: _target_delivery_fee_on_net,
        OutputName.CLIENT_SPEND: _client_spend_fee_on_net,
        OutputName.NET_BUDGET: _net_budget_fee_on_net,
        OutputName.INVOICE_AMOUNT: _invoice_net_fee_on_net,
    },
)
