"""Arithmetic building blocks shared by every pricing model.

All functions are pure and total: degenerate inputs resolve to a defined
number (zero, or infinity for an unbounded gross-up) instead of raising.
"""

import math

from campaign_billing.domain.types import BuyMetric

# Impression-paced rates are quoted per thousand units
IMPRESSIONS_PER_MILLE = 1000


def is_impression_paced(buy_metric: BuyMetric | str) -> bool:
    """Return True when the buy metric is priced per thousand impressions."""
    return buy_metric == BuyMetric.CPM


def delivered_units(
    pacing_from_ad_server: bool,
    buy_metric: BuyMetric | str,
    actual_delivered_units: float,
) -> float:
    """Delivered metric count for a placement.

    Ad-server pacing and manual entry currently report the same figure;
    the flags are accepted so callers do not change when they diverge.
    """
    return actual_delivered_units


def capped_spend(
    buy_metric: BuyMetric | str,
    delivered: float,
    rate: float,
    budget: float,
    cap_enabled: bool = True,
) -> float:
    """Spend earned by ``delivered`` units at ``rate``.

    Impression-paced metrics divide by 1000. With ``cap_enabled`` the
    result never exceeds ``budget``.

    Args:
        buy_metric: The unit basis of the rate.
        delivered: Units delivered so far.
        rate: Price per unit, or per thousand for CPM.
        budget: Ceiling applied when capping is enabled.
        cap_enabled: Whether to clamp the spend to ``budget``.

    Returns:
        The (optionally capped) spend.
    """
    spend = rate * delivered
    if is_impression_paced(buy_metric):
        spend = (rate * delivered) / IMPRESSIONS_PER_MILLE
    return min(spend, budget) if cap_enabled else spend


def commission_amount(budget: float, commission_rate_pct: float) -> float:
    """Commission retained on ``budget`` at ``commission_rate_pct`` percent.

    Rates that are NaN, negative, or 100 and above are treated as no
    commission.
    """
    if (
        math.isnan(budget)
        or math.isnan(commission_rate_pct)
        or commission_rate_pct >= 100
        or commission_rate_pct < 0
    ):
        return 0.0
    return (budget * commission_rate_pct) / 100


def gross_up(amount: float, rate_pct: float) -> float:
    """Gross ``amount`` up through a ``rate_pct`` percent deduction.

    Computes ``amount * 100 / (100 - rate_pct)``. A deduction of 100% or
    more has no finite gross and yields infinity.
    """
    denominator = 100 - rate_pct
    if denominator <= 0:
        return math.inf
    return (amount * 100) / denominator
