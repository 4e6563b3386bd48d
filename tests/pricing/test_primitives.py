"""Tests for the shared pricing arithmetic."""

from __future__ import annotations

import math

import pytest

from campaign_billing.domain.types import BuyMetric
from campaign_billing.pricing.primitives import (
    capped_spend,
    commission_amount,
    delivered_units,
    gross_up,
    is_impression_paced,
)


class TestIsImpressionPaced:
    """Only CPM is priced per thousand."""

    @pytest.mark.parametrize(
        ("metric", "expected"),
        [
            (BuyMetric.CPM, True),
            ("CPM", True),
            (BuyMetric.CPC, False),
            (BuyMetric.CPA, False),
            (BuyMetric.CPCV, False),
            (BuyMetric.FLAT_FEE, False),
        ],
        ids=["cpm", "cpm_str", "cpc", "cpa", "cpcv", "flat_fee"],
    )
    def test_is_impression_paced(self, metric: BuyMetric | str, expected: bool) -> None:
        assert is_impression_paced(metric) is expected


class TestDeliveredUnits:
    """Pacing source does not change the reported figure."""

    @pytest.mark.parametrize("pacing", [True, False], ids=["ad_server", "manual"])
    def test_returns_actual_units(self, pacing: bool) -> None:
        assert delivered_units(pacing, BuyMetric.CPC, 1234.0) == 1234.0


class TestCappedSpend:
    """Spend from delivered units, optionally capped at the budget."""

    def test_cpm_divides_by_thousand_and_caps(self) -> None:
        assert capped_spend(BuyMetric.CPM, 1_800_000, 5, 10000) == 9000

    def test_cpm_capped_at_budget(self) -> None:
        assert capped_spend(BuyMetric.CPM, 3_000_000, 5, 10000) == 10000

    def test_cpm_uncapped(self) -> None:
        assert capped_spend(BuyMetric.CPM, 3_000_000, 5, 10000, cap_enabled=False) == 15000

    def test_per_unit_metric(self) -> None:
        assert capped_spend(BuyMetric.CPC, 1000, 2.5, 10000) == 2500

    def test_zero_budget_caps_to_zero(self) -> None:
        assert capped_spend(BuyMetric.CPA, 10, 5, 0) == 0


class TestCommissionAmount:
    """Commission retained on a budget, with degenerate rates yielding zero."""

    @pytest.mark.parametrize(
        ("budget", "rate", "expected"),
        [
            (10000, 15, 1500),
            (8000, 5, 400),
            (10000, 0, 0),
            (10000, 99.99, 9999),
            (10000, 100, 0),
            (10000, 150, 0),
            (10000, -1, 0),
            (10000, math.nan, 0),
            (math.nan, 15, 0),
            (0, 50, 0),
        ],
        ids=[
            "typical",
            "media_default",
            "zero_rate",
            "max_rate",
            "full_rate",
            "over_full",
            "negative",
            "nan_rate",
            "nan_budget",
            "zero_budget",
        ],
    )
    def test_commission_amount(self, budget: float, rate: float, expected: float) -> None:
        assert commission_amount(budget, rate) == pytest.approx(expected)

    @pytest.mark.parametrize("rate", [x / 4 for x in range(-40, 440)])
    def test_never_negative_for_non_negative_budget(self, rate: float) -> None:
        assert commission_amount(2500.0, rate) >= 0
        if rate < 0 or rate >= 100:
            assert commission_amount(2500.0, rate) == 0


class TestGrossUp:
    """Grossing an amount up through a percentage deduction."""

    def test_typical(self) -> None:
        assert gross_up(6000, 20) == pytest.approx(7500)

    def test_zero_rate_is_identity(self) -> None:
        assert gross_up(6000, 0) == 6000

    @pytest.mark.parametrize("rate", [100, 120], ids=["full", "over"])
    def test_unbounded_at_or_above_full_rate(self, rate: float) -> None:
        assert gross_up(6000, rate) == math.inf
