"""Financial projection records for the business template."""

from pydantic import BaseModel, ConfigDict, Field


PROJECTION_YEARS = 5


class YearParameter(BaseModel):
    """User-editable inputs for one projected year."""

    model_config = ConfigDict(frozen=True)

    year: int = Field(ge=1, le=PROJECTION_YEARS, description="Projection year, 1-indexed")
    monthly_sales: int = Field(ge=0, description="Units sold per month")
    unit_price: float = Field(ge=0, description="Price per unit (yen)")
    variable_cost_per_unit: float = Field(ge=0, description="Variable cost per unit (yen)")


class YearResult(YearParameter):
    """Derived figures for one year, always computed from its YearParameter."""

    annual_revenue: float = 0
    annual_cost: float = 0
    annual_profit: float = 0
    profit_margin: int = 0


class Aggregate(BaseModel):
    """Sum over all projected years; margin is derived from the sums."""

    model_config = ConfigDict(frozen=True)

    annual_revenue: float = 0
    annual_cost: float = 0
    annual_profit: float = 0
    profit_margin: int = 0


class MonthlyMetrics(BaseModel):
    """Single-month figures shown before any multi-year editing."""

    model_config = ConfigDict(frozen=True)

    monthly_sales: int = 0
    unit_price: float = 0
    variable_cost_per_unit: float = 0
    monthly_revenue: float = 0
    monthly_cost: float = 0
    monthly_profit: float = 0
    profit_margin: int = 0


class BusinessMetrics(MonthlyMetrics):
    """Trusted business figures merged into every business evaluation."""

    feasibility_score: float = 0
    market_size: float = 0
    five_year_total: Aggregate = Field(default_factory=Aggregate)


class PolicyMetrics(BaseModel):
    """Trusted totals derived from the four policy cards."""

    model_config = ConfigDict(frozen=True)

    total_budget_million_yen: float = 0
    total_affected_residents: int = 0
    average_well_being_score: float = 0
    average_feasibility_score: float = 0
    longest_implementation_months: int = 0
