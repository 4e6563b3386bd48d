"""Shared pytest fixtures for the campaign billing test suite."""

from __future__ import annotations

import pytest
import structlog

from campaign_billing.config import Settings
from campaign_billing.domain.models import (
    CalculationContext,
    CalculationOutput,
    InputField,
    PricingModel,
)
from campaign_billing.domain.types import InputKind, OutputName


@pytest.fixture(autouse=True)
def _reset_structlog() -> None:
    """Keep loggers configured by one test from leaking into the next."""
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local ``.env`` file."""
    return Settings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def budget_field() -> InputField:
    """A representative bounded numeric input."""
    return InputField(
        name="totalBudget",
        label="Total Budget ($)",
        kind=InputKind.NUMBER,
        default_value=1000,
        min_value=0,
        max_value=50000,
    )


@pytest.fixture
def recording_model(budget_field: InputField) -> tuple[PricingModel, list[str]]:
    """A model whose calculations record the order they were invoked in.

    ``netBudget`` is declared first but reads ``clientSpend`` from context.
    """
    calls: list[str] = []

    def net_budget(ctx: CalculationContext) -> CalculationOutput:
        calls.append(OutputName.NET_BUDGET)
        spend = ctx.client_spend
        assert isinstance(spend, float)
        return CalculationOutput(value=spend / 2, formula=f"Half of {spend}")

    def service_fee(ctx: CalculationContext) -> CalculationOutput:
        calls.append(OutputName.SERVICE_FEE_AMOUNT)
        return CalculationOutput(value=(ctx.client_spend or 0.0) * 0.1, formula="10%")

    def client_spend(ctx: CalculationContext) -> CalculationOutput:
        calls.append(OutputName.CLIENT_SPEND)
        assert ctx.client_spend is None
        return CalculationOutput(value=ctx.total_budget, formula="Total Budget")

    def to_date(ctx: CalculationContext) -> CalculationOutput:
        calls.append(OutputName.TO_DATE_BUDGET)
        return CalculationOutput(value="N/A", formula="Unsupported")

    def invoice(ctx: CalculationContext) -> CalculationOutput:
        calls.append(OutputName.INVOICE_AMOUNT)
        seen = sorted(ctx.computed)
        return CalculationOutput(value=float(len(seen)), formula=",".join(seen))

    model = PricingModel(
        id="Recording",
        name="Recording",
        description="Records evaluation order",
        inputs=(budget_field,),
        calculations={
            OutputName.NET_BUDGET: net_budget,
            OutputName.SERVICE_FEE_AMOUNT: service_fee,
            OutputName.TO_DATE_BUDGET: to_date,
            OutputName.CLIENT_SPEND: client_spend,
            OutputName.INVOICE_AMOUNT: invoice,
        },
    )
    return model, calls
