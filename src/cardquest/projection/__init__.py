"""Deterministic financial and demographic projections."""

from .engine import (
    DEFAULT_GROWTH_RATE,
    DEFAULT_YEARS,
    round_half_up,
    profit_margin,
    initialize_years,
    compute_year,
    compute_projection,
    compute_aggregate,
    apply_growth_rate,
    update_year,
    compute_monthly,
    compute_policy_metrics,
)

__all__ = [
    "DEFAULT_GROWTH_RATE",
    "DEFAULT_YEARS",
    "round_half_up",
    "profit_margin",
    "initialize_years",
    "compute_year",
    "compute_projection",
    "compute_aggregate",
    "apply_growth_rate",
    "update_year",
    "compute_monthly",
    "compute_policy_metrics",
]
