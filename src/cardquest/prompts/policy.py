"""Prompt for the municipal policy-plan template."""

from datetime import date
from typing import TYPE_CHECKING, Optional

from ..models.projection import PolicyMetrics
from ..models.submission import PolicyTargets, ScenarioSubmission
from .formatting import card_lines, fmt_number

if TYPE_CHECKING:
    from ..templates import ScenarioTemplate


SYSTEM_PROMPT = """You are an AI assistant that evaluates policies for a shrinking rural municipality.
Always return JSON only. Do not use markdown code blocks."""

WELL_BEING_AXES = """### Well-being axes (12.5 points each, 100 in total)
1. economic: economic stability (income, jobs, industry)
2. socialConnection: social connection (community, mutual support)
3. healthMedical: health and medical care (healthy life expectancy, access to care)
4. autonomy: freedom of self-determination (can residents choose how to live)
5. generosity: generosity and mutual aid (volunteering, helping each other)
6. trust: trust in local government (transparency, integrity)
7. safety: safety and security (disaster readiness, care, watching over residents)
8. nature: natural and living environment (nature, livability)"""

RANK_CRITERIA = """### Overall rank criteria
- S: population target met and population growing again, well-being 85 or above
- A: population target met, well-being 70 or above
- B: 80% of the target met, well-being 55 or above
- C: some improvement, well-being 40 or above
- D: limited effect, well-being below 40"""

RESULT_SCHEMA = """{
  "proposal": "Policy proposal combining the four cards (about 400 characters)",
  "wellBeingScores": {
    "economic": <score 0-12.5, one decimal>,
    "socialConnection": <number>,
    "healthMedical": <number>,
    "autonomy": <number>,
    "generosity": <number>,
    "trust": <number>,
    "safety": <number>,
    "nature": <number>,
    "total": <sum 0-100>
  },
  "populationSim": {
    "withoutPolicy": { "y5": <population after 5 years>, "y10": <after 10 years>, "y20": <after 20 years> },
    "withPolicy": { "y5": <population after 5 years>, "y10": <after 10 years>, "y20": <after 20 years> }
  },
  "rankJudge": {
    "populationAchieved": true or false,
    "wellBeingAchieved": true or false,
    "populationDiff": <difference from target, positive = exceeded>,
    "wellBeingDiff": <difference from target>
  },
  "rank": "S" or "A" or "B" or "C" or "D",
  "strengths": ["strength 1", "strength 2", "strength 3"],
  "challenges": ["challenge 1", "challenge 2", "challenge 3"],
  "nextActions": ["next action 1", "next action 2", "next action 3"],
  "comment": "Overall evaluation comment (about 200 characters)"
}"""


def render_policy_prompt(
    submission: ScenarioSubmission,
    metrics: PolicyMetrics,
    template: "ScenarioTemplate",
    today: Optional[date] = None,
) -> str:
    """Render the evaluation request for a policy proposal."""
    attributes = template.attribute_map()
    targets = submission.targets or PolicyTargets()

    parts = [
        "You are the policy evaluation AI for a shrinking municipality.",
        "Evaluate the four cards this team chose and their policy proposal.",
        "",
    ]
    if today:
        parts.append(f"Evaluation date: {today.isoformat()}")
    parts += [
        "## Team under evaluation",
        f"Team name: {submission.participant.team_name}",
        "",
        "## Selected cards (4)",
    ]
    for category in template.categories:
        card = submission.selection[category.key]
        parts += ["", f"### {category.symbol} {category.label} ({category.question}): {card.title}"]
        parts += card_lines(card, category, attributes)

    parts += [
        "",
        "## Card totals (computed by the system; use these figures as given)",
        f"- Total annual budget: {fmt_number(metrics.total_budget_million_yen)} million yen",
        f"- Residents affected: {fmt_number(metrics.total_affected_residents)}",
        f"- Average well-being contribution: {fmt_number(metrics.average_well_being_score)}/10",
        f"- Average feasibility: {fmt_number(metrics.average_feasibility_score)}/10",
        f"- Longest implementation period: {fmt_number(metrics.longest_implementation_months)} months",
        "",
        "## Team policy proposal",
    ]
    for text_field in template.free_text_fields:
        parts.append(submission.free_text.get(text_field.name, ""))

    parts += [
        "",
        "## Team goals",
        f"- Target population: {fmt_number(targets.target_population)} "
        f"(starting from {fmt_number(targets.base_population)})",
        f"- Target well-being index: {targets.target_well_being} (out of 100)",
        "",
        "## Evaluation criteria",
        WELL_BEING_AXES,
        "",
        RANK_CRITERIA,
        "",
        "## Output format",
        "Output JSON in exactly this format. Output only the JSON and no other text.",
        "",
        RESULT_SCHEMA,
    ]
    return "\n".join(parts)
