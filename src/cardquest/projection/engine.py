"""
Deterministic projection engine.

Pure functions only: every figure here is derived from card attributes and
user-edited parameters, never from the AI. Variable cost is always
cost-per-unit multiplied by volume.
"""

import math
from typing import Sequence

from ..models.card import Card
from ..models.projection import (
    Aggregate,
    PROJECTION_YEARS,
    MonthlyMetrics,
    PolicyMetrics,
    YearParameter,
    YearResult,
)


DEFAULT_GROWTH_RATE = 0.2
DEFAULT_YEARS = PROJECTION_YEARS
MONTHS_PER_YEAR = 12

EDITABLE_FIELDS = ("monthly_sales", "unit_price", "variable_cost_per_unit")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward positive infinity."""
    return int(math.floor(value + 0.5))


def profit_margin(revenue: float, profit: float) -> int:
    """Profit as a rounded percentage of revenue; 0 when there is no revenue."""
    if revenue > 0:
        return round_half_up(profit / revenue * 100)
    return 0


def grown_sales(base_sales: float, rate: float, year: int) -> int:
    """Monthly sales for a 1-indexed year under compound growth."""
    return round_half_up(base_sales * (1 + rate) ** (year - 1))


def initialize_years(
    base_sales: float,
    base_price: float,
    base_cost_per_unit: float,
    growth_rate: float = DEFAULT_GROWTH_RATE,
    years: int = DEFAULT_YEARS,
) -> list[YearParameter]:
    """
    Build the initial multi-year parameters.

    Sales compound at growth_rate from year 1; price and cost per unit are
    carried unchanged into every year.

    Args:
        base_sales: Year 1 monthly sales.
        base_price: Unit price for all years.
        base_cost_per_unit: Variable cost per unit for all years.
        growth_rate: Yearly growth as a fraction (0.2 = 20%).
        years: Number of years to project.

    Returns:
        One YearParameter per year, year 1 first.
    """
    return [
        YearParameter(
            year=year,
            monthly_sales=grown_sales(base_sales, growth_rate, year),
            unit_price=base_price,
            variable_cost_per_unit=base_cost_per_unit,
        )
        for year in range(1, years + 1)
    ]


def compute_year(param: YearParameter) -> YearResult:
    """Derive annual revenue, cost, profit and margin for one year."""
    annual_revenue = param.monthly_sales * param.unit_price * MONTHS_PER_YEAR
    annual_cost = param.monthly_sales * param.variable_cost_per_unit * MONTHS_PER_YEAR
    annual_profit = annual_revenue - annual_cost
    return YearResult(
        **param.model_dump(include=set(YearParameter.model_fields)),
        annual_revenue=annual_revenue,
        annual_cost=annual_cost,
        annual_profit=annual_profit,
        profit_margin=profit_margin(annual_revenue, annual_profit),
    )


def compute_projection(params: Sequence[YearParameter]) -> list[YearResult]:
    return [compute_year(p) for p in params]


def compute_aggregate(results: Sequence[YearResult]) -> Aggregate:
    """
    Total revenue and cost across years.

    The margin is recomputed from the totals, not averaged over years.
    """
    annual_revenue = sum(r.annual_revenue for r in results)
    annual_cost = sum(r.annual_cost for r in results)
    annual_profit = annual_revenue - annual_cost
    return Aggregate(
        annual_revenue=annual_revenue,
        annual_cost=annual_cost,
        annual_profit=annual_profit,
        profit_margin=profit_margin(annual_revenue, annual_profit),
    )


def apply_growth_rate(params: Sequence[YearParameter], rate: float) -> list[YearParameter]:
    """
    Recompute every year's sales from year 1's current sales and rate.

    Price and cost per unit are left as the user edited them.
    """
    if not params:
        return []

    base = params[0].monthly_sales
    return [
        p.model_copy(update={"monthly_sales": grown_sales(base, rate, index + 1)})
        for index, p in enumerate(params)
    ]


def update_year(
    params: Sequence[YearParameter],
    year: int,
    field: str,
    value: float,
) -> list[YearParameter]:
    """
    Edit a single cell of the projection table.

    Only the named year changes; there is no cascading to later years.

    Raises:
        ValueError: Unknown field, unknown year, or a negative value.
    """
    if field not in EDITABLE_FIELDS:
        raise ValueError(f"Field '{field}' is not editable")
    if not any(p.year == year for p in params):
        raise ValueError(f"Year {year} is not part of the projection")

    updated = []
    for p in params:
        if p.year == year:
            # Re-validate so negative or fractional sales are rejected
            p = YearParameter.model_validate({**p.model_dump(), field: value})
        updated.append(p)
    return updated


def compute_monthly(
    monthly_sales: float,
    unit_price: float,
    variable_cost_per_unit: float,
) -> MonthlyMetrics:
    """Single-month revenue, cost, profit and margin (no yearly factor)."""
    monthly_revenue = monthly_sales * unit_price
    monthly_cost = variable_cost_per_unit * monthly_sales
    monthly_profit = monthly_revenue - monthly_cost
    return MonthlyMetrics(
        monthly_sales=round_half_up(monthly_sales),
        unit_price=unit_price,
        variable_cost_per_unit=variable_cost_per_unit,
        monthly_revenue=monthly_revenue,
        monthly_cost=monthly_cost,
        monthly_profit=monthly_profit,
        profit_margin=profit_margin(monthly_revenue, monthly_profit),
    )


def compute_policy_metrics(cards: Sequence[Card]) -> PolicyMetrics:
    """Totals and averages over the attributes of the selected policy cards."""
    if not cards:
        return PolicyMetrics()

    count = len(cards)
    return PolicyMetrics(
        total_budget_million_yen=sum(c.number("budget_million_yen") for c in cards),
        total_affected_residents=round_half_up(sum(c.number("affected_residents") for c in cards)),
        average_well_being_score=round(sum(c.number("well_being_score") for c in cards) / count, 1),
        average_feasibility_score=round(sum(c.number("feasibility_score") for c in cards) / count, 1),
        longest_implementation_months=round_half_up(
            max(c.number("implementation_months") for c in cards)
        ),
    )
