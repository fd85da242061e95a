"""
Unit Tests for the Projection Engine.

Tests:
1. Rounding and margins
2. Multi-year initialization with compound growth
3. Year computation and aggregation
4. Editing: growth rate and single cells
5. Monthly and policy metrics
"""

import pytest

from cardquest.models import YearParameter
from cardquest.projection import engine
from cardquest.projection import (
    apply_growth_rate,
    compute_aggregate,
    compute_monthly,
    compute_policy_metrics,
    compute_projection,
    compute_year,
    initialize_years,
    profit_margin,
    round_half_up,
    update_year,
)


# =============================================================================
# TEST: ROUNDING
# =============================================================================

class TestRounding:

    def test_half_rounds_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(14.4) == 14

    def test_negative_half_rounds_toward_positive(self):
        assert round_half_up(-2.5) == -2

    def test_margin_zero_without_revenue(self):
        """Test that a zero-revenue year reports a 0% margin instead of failing."""
        assert profit_margin(0, 0) == 0
        assert profit_margin(0, -500) == 0

    def test_margin_is_rounded_percentage(self):
        assert profit_margin(3, 2) == 67
        assert profit_margin(1000, -250) == -25


# =============================================================================
# TEST: INITIALIZATION
# =============================================================================

class TestInitializeYears:

    def test_default_growth_sequence(self):
        """Test that 10 units/month at 20% growth gives 10, 12, 14, 17, 21."""
        params = initialize_years(10, 10000, 1000)

        assert [p.monthly_sales for p in params] == [10, 12, 14, 17, 21]
        assert [p.year for p in params] == [1, 2, 3, 4, 5]

    def test_price_and_cost_carried_forward(self):
        params = initialize_years(10, 8000, 1500)

        assert all(p.unit_price == 8000 for p in params)
        assert all(p.variable_cost_per_unit == 1500 for p in params)

    def test_zero_growth(self):
        params = initialize_years(25, 100, 10, growth_rate=0)
        assert [p.monthly_sales for p in params] == [25] * 5

    def test_custom_year_count(self):
        assert len(initialize_years(10, 100, 10, years=3)) == 3

    def test_years_limited_to_projection_window(self):
        assert engine.DEFAULT_YEARS == 5
        with pytest.raises(ValueError):
            initialize_years(10, 100, 10, years=6)


# =============================================================================
# TEST: COMPUTATION
# =============================================================================

class TestComputeYear:

    def test_annual_figures(self):
        result = compute_year(YearParameter(year=1, monthly_sales=10, unit_price=10000, variable_cost_per_unit=1000))

        assert result.annual_revenue == 1_200_000
        assert result.annual_cost == 120_000
        assert result.annual_profit == 1_080_000
        assert result.profit_margin == 90

    def test_cost_scales_with_volume(self):
        """Test that variable cost is per unit multiplied by monthly sales."""
        low = compute_year(YearParameter(year=1, monthly_sales=1, unit_price=0, variable_cost_per_unit=500))
        high = compute_year(YearParameter(year=1, monthly_sales=4, unit_price=0, variable_cost_per_unit=500))

        assert low.annual_cost == 6000
        assert high.annual_cost == 24000

    def test_zero_revenue_year(self):
        result = compute_year(YearParameter(year=2, monthly_sales=0, unit_price=1000, variable_cost_per_unit=100))

        assert result.annual_revenue == 0
        assert result.profit_margin == 0

    def test_year_outside_window_rejected(self):
        with pytest.raises(ValueError):
            YearParameter(year=6, monthly_sales=10, unit_price=1000, variable_cost_per_unit=100)
        with pytest.raises(ValueError):
            YearParameter(year=0, monthly_sales=10, unit_price=1000, variable_cost_per_unit=100)

    def test_accepts_existing_results(self):
        """Test that results can be recomputed from previous results."""
        first = compute_projection(initialize_years(10, 10000, 1000))
        again = compute_projection(first)

        assert again == first


class TestAggregate:

    def test_margin_from_totals(self):
        """Test that the aggregate margin uses summed totals, not an average of margins."""
        results = compute_projection([
            YearParameter(year=1, monthly_sales=1, unit_price=100, variable_cost_per_unit=0),
            YearParameter(year=2, monthly_sales=9, unit_price=100, variable_cost_per_unit=100),
        ])
        total = compute_aggregate(results)

        assert total.annual_revenue == 12_000
        assert total.annual_cost == 10_800
        assert total.annual_profit == 1_200
        assert total.profit_margin == 10

    def test_empty_projection(self):
        total = compute_aggregate([])
        assert total.annual_revenue == 0
        assert total.profit_margin == 0


# =============================================================================
# TEST: EDITING
# =============================================================================

class TestEditing:

    def test_apply_growth_rate_from_current_year_one(self):
        params = update_year(initialize_years(10, 100, 10), 1, "monthly_sales", 100)
        params = update_year(params, 1, "unit_price", 250)

        regrown = apply_growth_rate(params, 0.1)

        assert [p.monthly_sales for p in regrown] == [100, 110, 121, 133, 146]
        assert regrown[0].unit_price == 250

    def test_apply_growth_rate_empty(self):
        assert apply_growth_rate([], 0.2) == []

    def test_update_year_does_not_cascade(self):
        params = initialize_years(10, 10000, 1000)
        updated = update_year(params, 3, "monthly_sales", 50)

        assert [p.monthly_sales for p in updated] == [10, 12, 50, 17, 21]
        assert params[2].monthly_sales == 14

    def test_update_year_price(self):
        updated = update_year(initialize_years(10, 10000, 1000), 2, "unit_price", 12000)
        assert [p.unit_price for p in updated] == [10000, 12000, 10000, 10000, 10000]

    def test_update_unknown_field(self):
        with pytest.raises(ValueError):
            update_year(initialize_years(10, 100, 10), 1, "year", 3)

    def test_update_unknown_year(self):
        with pytest.raises(ValueError):
            update_year(initialize_years(10, 100, 10), 9, "unit_price", 3)

    def test_update_rejects_negative_value(self):
        with pytest.raises(ValueError):
            update_year(initialize_years(10, 100, 10), 1, "variable_cost_per_unit", -1)


# =============================================================================
# TEST: MONTHLY AND POLICY METRICS
# =============================================================================

class TestMonthly:

    def test_monthly_example(self):
        """Test 100 units at 5000 yen with 1000 yen cost per unit."""
        metrics = compute_monthly(100, 5000, 1000)

        assert metrics.monthly_revenue == 500_000
        assert metrics.monthly_cost == 100_000
        assert metrics.monthly_profit == 400_000
        assert metrics.profit_margin == 80

    def test_monthly_without_sales(self):
        metrics = compute_monthly(0, 5000, 1000)
        assert metrics.monthly_revenue == 0
        assert metrics.profit_margin == 0

    def test_months_per_year(self):
        assert engine.MONTHS_PER_YEAR == 12


class TestPolicyMetrics:

    def test_totals_and_averages(self, policy_cards):
        metrics = compute_policy_metrics(list(policy_cards.values()))

        assert metrics.total_budget_million_yen == 38
        assert metrics.total_affected_residents == 4500
        assert metrics.average_well_being_score == 7.5
        assert metrics.average_feasibility_score == 6.8
        assert metrics.longest_implementation_months == 24

    def test_no_cards(self):
        assert compute_policy_metrics([]).total_budget_million_yen == 0
