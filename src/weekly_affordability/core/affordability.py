"""
Affordability compositor.

Combines the aligned price and rate series with the projected income into
cost-to-income metrics for a single earner and for a household.
"""

import logging
import math
from typing import Optional, Sequence

from .income_projector import IncomeTrendProjector
from ..models import AffordabilityResult, AlignedPoint, CostEntry, EstimationDetails
from ..utils.config import AffordabilityConfig

logger = logging.getLogger(__name__)


def monthly_payment(price: float, annual_rate: float, months: int = 360) -> float:
    """
    Fixed monthly payment of a fully amortizing loan.

    Args:
        price: Loan principal
        annual_rate: Annual interest rate as a fraction (0.06 for 6%)
        months: Number of monthly payments
    """
    monthly_rate = annual_rate / 12.0
    if monthly_rate == 0:
        return price / months
    return (price * monthly_rate) / (1 - (1 + monthly_rate) ** (-months))


def total_mortgage_cost(price: float, annual_rate: float, months: int = 360) -> float:
    """Sum of all payments over the life of the loan."""
    return monthly_payment(price, annual_rate, months) * months


def build_cost_entry(
    entry_type: str,
    point: AlignedPoint,
    total_cost: float,
    income: float,
    price: float,
    rate_percent: float,
    details: Optional[EstimationDetails] = None
) -> CostEntry:
    return CostEntry(
        type=entry_type,
        date=point.date,
        total_cost=int(total_cost),
        income=int(income),
        cost_to_income=f"{round(total_cost / income, 2):.2f}",
        home_price=int(price),
        mortgage_rate=f"{round(rate_percent, 2):.2f}",
        estimation_details=details
    )


def calculate_costs(
    price_points: Sequence[AlignedPoint],
    rate_points: Sequence[AlignedPoint],
    income_projector: IncomeTrendProjector,
    config: Optional[AffordabilityConfig] = None
) -> AffordabilityResult:
    """
    Build the single and household cost series.

    Price and rate points are paired by index. Anchors with a non-finite or
    non-positive house price are skipped and recorded in
    ``AffordabilityResult.skipped_dates``.

    Args:
        price_points: Home prices aligned on the anchor dates
        rate_points: Mortgage rates in percent aligned on the anchor dates
        income_projector: Weekly income estimator
        config: Pipeline settings

    Returns:
        AffordabilityResult with index-aligned single and household entries
    """
    config = config or AffordabilityConfig()
    result = AffordabilityResult()

    for i, price_point in enumerate(price_points):
        if i >= len(rate_points):
            break
        rate_point = rate_points[i]
        anchor = price_point.date

        house_price = price_point.value
        if not math.isfinite(house_price) or house_price <= 0:
            logger.warning(f"Invalid house price for {anchor}, skipping")
            result.skipped_dates.append(anchor)
            continue

        weekly_income = income_projector.estimate(anchor)
        single_income = weekly_income * config.weeks_per_year
        household_income = single_income * config.household_multiplier
        if not math.isfinite(single_income) or single_income <= 0:
            logger.warning(f"Invalid income for {anchor}, skipping")
            result.skipped_dates.append(anchor)
            continue

        rate = rate_point.value / 100.0
        total_cost = total_mortgage_cost(house_price, rate, config.loan_term_months)

        details = EstimationDetails(
            price_estimated=price_point.estimated,
            rate_estimated=rate_point.estimated,
            income_estimated=income_projector.is_estimated(anchor)
        )
        if not details.any:
            details = None

        result.single_costs.append(build_cost_entry(
            'single', price_point, total_cost, single_income, house_price, rate * 100, details
        ))
        result.household_costs.append(build_cost_entry(
            'household', price_point, total_cost, household_income, house_price, rate * 100, details
        ))

    logger.info(
        f"Calculated {len(result)} cost entries per profile, skipped {len(result.skipped_dates)} anchors"
    )
    return result
