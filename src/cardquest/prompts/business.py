"""Prompt for the business-plan template."""

from datetime import date
from typing import TYPE_CHECKING, Optional

from ..models.projection import BusinessMetrics
from ..models.submission import ScenarioSubmission
from .formatting import card_lines, fmt_number, fmt_yen

if TYPE_CHECKING:
    from ..templates import ScenarioTemplate


SYSTEM_PROMPT = """You are an experienced business plan consultant mentoring student teams.
You improve their plans and evaluate them strictly but fairly.
Respond ONLY with the JSON object, no additional text or markdown."""

RESULT_SCHEMA = """{
  "improvedPlan": "Improved full business plan (about 400 characters) with concrete measures, numeric targets and key risk mitigations",
  "executiveSummary": "Executive summary for investors (200 characters max)",
  "targetCustomer": "Detailed definition of the target customer (150 characters max)",
  "valueProposition": "Value proposition in one sentence (100 characters max)",
  "revenueModel": "Revenue model explanation (200 characters max)",
  "score": <integer 0-100>,
  "scoreBreakdown": {
    "marketPotential": <number 0-25>,
    "feasibility": <number 0-25>,
    "differentiation": <number 0-25>,
    "planQuality": <number 0-25>
  },
  "strengths": ["strength 1", "strength 2", "strength 3"],
  "issues": ["issue or risk 1", "issue or risk 2", "issue or risk 3"],
  "nextActions": ["topic for group work 1", "topic 2", "topic 3"],
  "mentorComment": "Overall mentor comment (300 characters max) balancing encouragement and hard critique"
}"""

SCORING_CRITERIA = """Scoring criteria (be strict):
- 80 or above: ready to show to investors
- 60-79: good idea that needs improvement
- 40-59: has direction but needs a fundamental rethink
- below 40: needs a major redesign

Acknowledge the students' enthusiasm, but judge objectively whether this works as a business."""


def _projection_table(submission: ScenarioSubmission, metrics: BusinessMetrics) -> list[str]:
    lines = [
        "| Year | Monthly sales | Unit price | Cost/unit | Revenue | Variable cost | Profit | Margin |",
        "|---|---|---|---|---|---|---|---|",
    ]
    for r in submission.projection:
        lines.append(
            f"| {r.year} | {fmt_number(r.monthly_sales)} | {fmt_yen(r.unit_price)} "
            f"| {fmt_yen(r.variable_cost_per_unit)} | {fmt_yen(r.annual_revenue)} "
            f"| {fmt_yen(r.annual_cost)} | {fmt_yen(r.annual_profit)} | {r.profit_margin}% |"
        )
    total = metrics.five_year_total
    lines.append(
        f"| Total | | | | {fmt_yen(total.annual_revenue)} | {fmt_yen(total.annual_cost)} "
        f"| {fmt_yen(total.annual_profit)} | {total.profit_margin}% |"
    )
    return lines


def render_business_prompt(
    submission: ScenarioSubmission,
    metrics: BusinessMetrics,
    template: "ScenarioTemplate",
    today: Optional[date] = None,
) -> str:
    """
    Render the evaluation request for a business plan.

    Args:
        submission: Frozen scenario snapshot.
        metrics: Locally computed monthly metrics and five-year total.
        template: Descriptor supplying category and field labels.
        today: Evaluation date, injected by the caller.

    Returns:
        Prompt text; identical inputs always give identical text.
    """
    attributes = template.attribute_map()
    parts = [
        "You are reviewing a business plan that a student team built from four cards.",
        "Improve and strengthen the plan using the information below, then evaluate it strictly.",
        "",
    ]
    if today:
        parts.append(f"Evaluation date: {today.isoformat()}")
    parts.append(f"Team: {submission.participant.team_name}")
    parts += ["", "## Selected cards"]

    for category in template.categories:
        card = submission.selection[category.key]
        parts += ["", f"### {category.symbol} {category.label} ({category.question})"]
        parts += card_lines(card, category, attributes)

    parts += [
        "",
        "## Business metrics (computed by the system; use these figures as given)",
        f"- Monthly sales: {fmt_number(metrics.monthly_sales)} units",
        f"- Monthly revenue: {fmt_yen(metrics.monthly_revenue)}",
        f"- Monthly variable cost: {fmt_yen(metrics.monthly_cost)} "
        f"({fmt_yen(metrics.variable_cost_per_unit)} per unit x {fmt_number(metrics.monthly_sales)} units)",
        f"- Monthly profit: {fmt_yen(metrics.monthly_profit)}",
        f"- Profit margin: {metrics.profit_margin}%",
        f"- Feasibility score: {fmt_number(metrics.feasibility_score)}/10",
        "",
        "## 5-year projection (computed by the system; use these figures as given)",
    ]
    parts += _projection_table(submission, metrics)

    parts += ["", "## Team inputs"]
    for text_field in template.free_text_fields:
        parts += ["", f"### {text_field.label}", submission.free_text.get(text_field.name, "")]

    parts += [
        "",
        "---",
        "",
        "## Output instructions",
        "",
        "Reply with a JSON object in exactly this format (no text outside the JSON):",
        "",
        RESULT_SCHEMA,
        "",
        SCORING_CRITERIA,
    ]
    return "\n".join(parts)
