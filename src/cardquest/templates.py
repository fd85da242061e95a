"""
Scenario template descriptors.

Both games run through the same pipeline; everything that differs between
them (categories, card attributes, free-text fields, prompt, result model
and trusted metrics) is declared here.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Optional, Sequence

from pydantic import BaseModel

from .agents.models import BusinessEvaluation, PolicyEvaluation
from .agents.normalizer import normalize_business_response, normalize_policy_response
from .models.projection import BusinessMetrics, YearParameter, YearResult
from .models.submission import ScenarioSubmission, SelectionSet
from .models.template import CardAttribute, CategorySpec, FreeTextField
from .projection.engine import (
    DEFAULT_GROWTH_RATE,
    DEFAULT_YEARS,
    compute_aggregate,
    compute_monthly,
    compute_policy_metrics,
    initialize_years,
)
from .prompts import business, policy


# Year-1 fallbacks when a card leaves the figure empty
FALLBACK_MONTHLY_SALES = 10
FALLBACK_UNIT_PRICE = 10000
FALLBACK_COST_PER_UNIT = 1000


@dataclass(frozen=True)
class ScenarioTemplate:
    """Everything the generic pipeline needs to know about one game."""

    name: str
    title: str
    categories: tuple[CategorySpec, ...]
    attributes: tuple[CardAttribute, ...]
    free_text_fields: tuple[FreeTextField, ...]
    result_model: type
    system_prompt: str
    render_prompt: Callable[..., str]
    metrics_builder: Callable[[SelectionSet, Sequence[YearResult]], BaseModel]
    normalizer: Callable[[str, ScenarioSubmission, Any], BaseModel]
    has_projection: bool = False
    has_targets: bool = False
    catalog_db_env: str = ""
    default_provider: str = "openai"
    default_model: str = "gpt-4o"
    json_mode: bool = False
    max_tokens: int = 4096

    def category_keys(self) -> list[str]:
        return [c.key for c in self.categories]

    def suits(self) -> dict[str, str]:
        """Category key -> suit, in display order."""
        return {c.key: c.suit for c in self.categories}

    def category(self, key: str) -> CategorySpec:
        for c in self.categories:
            if c.key == key:
                return c
        raise KeyError(key)

    def attribute_map(self) -> dict[str, CardAttribute]:
        return {a.name: a for a in self.attributes}

    def notion_properties(self) -> dict[str, str]:
        """Card attribute name -> Notion number property."""
        return {a.name: a.notion_property for a in self.attributes}

    def build_metrics(self, selection: SelectionSet, projection: Sequence[YearResult] = ()) -> BaseModel:
        return self.metrics_builder(selection, projection)

    def synthesize_prompt(
        self,
        submission: ScenarioSubmission,
        metrics: BaseModel,
        today: Optional[date] = None,
    ) -> str:
        return self.render_prompt(submission, metrics, self, today)

    def normalize(self, raw: str, submission: ScenarioSubmission, metrics: BaseModel) -> BaseModel:
        return self.normalizer(raw, submission, metrics)


# =============================================================================
# BUSINESS PLAN
# =============================================================================

def business_base_inputs(selection: SelectionSet) -> tuple[float, float, float]:
    """Monthly sales, unit price and cost per unit as printed on the cards."""
    return (
        selection["persona"].number("monthly_sales"),
        selection["problem"].number("unit_price"),
        selection["partner"].number("variable_cost"),
    )


def business_initial_years(
    selection: SelectionSet,
    growth_rate: float = DEFAULT_GROWTH_RATE,
    years: int = DEFAULT_YEARS,
) -> list[YearParameter]:
    """Five-year parameters seeded from the cards, with fallbacks for empty figures."""
    sales, price, cost = business_base_inputs(selection)
    return initialize_years(
        base_sales=sales or FALLBACK_MONTHLY_SALES,
        base_price=price or FALLBACK_UNIT_PRICE,
        base_cost_per_unit=cost or FALLBACK_COST_PER_UNIT,
        growth_rate=growth_rate,
        years=years,
    )


def build_business_metrics(selection: SelectionSet, projection: Sequence[YearResult] = ()) -> BusinessMetrics:
    sales, price, cost = business_base_inputs(selection)
    monthly = compute_monthly(sales, price, cost)
    return BusinessMetrics(
        **monthly.model_dump(),
        feasibility_score=selection["job_type"].number("feasibility_score"),
        market_size=selection["persona"].number("market_size"),
        five_year_total=compute_aggregate(projection),
    )


BUSINESS_TEMPLATE = ScenarioTemplate(
    name="business",
    title="Business Plan Card Game",
    categories=(
        CategorySpec("persona", "♥️ハート", "Persona", "Who is it for?", "♥",
                     ("market_size", "monthly_sales")),
        CategorySpec("problem", "♦️ダイヤ", "Problem", "What does it solve?", "♦",
                     ("unit_price",)),
        CategorySpec("partner", "♣️クラブ", "Partner", "Who do you team up with?", "♣",
                     ("variable_cost",)),
        CategorySpec("job_type", "♠️スペード", "Job type", "How will it be delivered?", "♠",
                     ("feasibility_score",)),
    ),
    attributes=(
        CardAttribute("market_size", "Market size", "x10k people/companies", "マーケットサイズ（万人）"),
        CardAttribute("monthly_sales", "Expected monthly sales", "units/month", "月間販売見込数（件）"),
        CardAttribute("unit_price", "Expected unit price", "yen", "販売単価（円）"),
        CardAttribute("variable_cost", "Variable cost per unit", "yen", "変動費月額（円）"),
        CardAttribute("feasibility_score", "Feasibility score", "/10", "実現可能性スコア"),
    ),
    free_text_fields=(
        FreeTextField("solution_name", "Solution name"),
        FreeTextField("user_benefit", "User benefit (value for users)"),
        FreeTextField("advantage", "Strengths and differentiation from competitors"),
        FreeTextField("plan_revision", "Plan revisions and additions"),
    ),
    result_model=BusinessEvaluation,
    system_prompt=business.SYSTEM_PROMPT,
    render_prompt=business.render_business_prompt,
    metrics_builder=build_business_metrics,
    normalizer=lambda raw, submission, metrics: normalize_business_response(
        raw, metrics, submission.projection
    ),
    has_projection=True,
    catalog_db_env="NOTION_CARD_DB_ID",
    default_provider="anthropic",
    default_model="claude-haiku-4-5-20251001",
    max_tokens=4096,
)


# =============================================================================
# WELL-BEING POLICY PLAN
# =============================================================================

def build_policy_metrics(selection: SelectionSet, projection: Sequence[YearResult] = ()):
    return compute_policy_metrics(list(selection.cards.values()))


_POLICY_ATTRIBUTES = (
    "well_being_score",
    "feasibility_score",
    "affected_residents",
    "implementation_months",
    "budget_million_yen",
)

POLICY_TEMPLATE = ScenarioTemplate(
    name="policy",
    title="Well-Being QUEST",
    categories=(
        CategorySpec("persona", "♠️スペード", "Persona", "Whose problem is it?", "♠", _POLICY_ATTRIBUTES),
        CategorySpec("problem", "♣️クラブ", "Problem", "What is happening?", "♣", _POLICY_ATTRIBUTES),
        CategorySpec("partner", "♦️ダイヤ", "Partner", "Who do you team up with?", "♦", _POLICY_ATTRIBUTES),
        CategorySpec("action", "♥️ハート", "Action", "What will you do?", "♥", _POLICY_ATTRIBUTES),
    ),
    attributes=(
        CardAttribute("well_being_score", "Well-being contribution", "/10", "Well-Being改善スコア（1-10）"),
        CardAttribute("feasibility_score", "Feasibility", "/10", "実現可能性スコア（1-10）"),
        CardAttribute("affected_residents", "Residents affected", "people", "影響住民数（人）"),
        CardAttribute("implementation_months", "Implementation period", "months", "実施期間（ヶ月）"),
        CardAttribute("budget_million_yen", "Required budget", "million yen/year", "必要予算（百万円/年）"),
    ),
    free_text_fields=(
        FreeTextField("plan_text", "Policy proposal"),
    ),
    result_model=PolicyEvaluation,
    system_prompt=policy.SYSTEM_PROMPT,
    render_prompt=policy.render_policy_prompt,
    metrics_builder=build_policy_metrics,
    normalizer=lambda raw, submission, metrics: normalize_policy_response(
        raw, metrics, submission.targets
    ),
    has_targets=True,
    catalog_db_env="NOTION_WB_CARD_DB_ID",
    default_provider="groq",
    default_model="llama-3.3-70b-versatile",
    json_mode=True,
    max_tokens=2000,
)


TEMPLATES = {
    BUSINESS_TEMPLATE.name: BUSINESS_TEMPLATE,
    POLICY_TEMPLATE.name: POLICY_TEMPLATE,
}


def get_template(name: str) -> ScenarioTemplate:
    """Look up a template by name ('business' or 'policy')."""
    try:
        return TEMPLATES[name]
    except KeyError:
        raise ValueError(f"Unknown template: {name} (expected one of {', '.join(TEMPLATES)})")
