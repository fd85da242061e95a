"""
Extraction of structured evaluation results from raw AI text.

The AI response is untrusted: it may be wrapped in markdown fences, padded
with prose, or not JSON at all. Extraction either yields a JSON object or
fails with MalformedAIResponse; nothing is guessed. Locally computed
figures are then merged over whatever numbers the AI echoed back.
"""

import json
import re
from typing import Any, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..errors import MalformedAIResponse, PREVIEW_LENGTH
from ..models.projection import BusinessMetrics, PolicyMetrics, YearResult
from ..models.submission import PolicyTargets
from .models import BusinessEvaluation, PolicyEvaluation, RankJudge

T = TypeVar("T", bound=BaseModel)

# A fence line: ``` with an optional language tag and nothing else
FENCE_PATTERN = re.compile(r"^[ \t]*```[A-Za-z0-9_-]*[ \t]*\r?$", re.MULTILINE)


def strip_code_fences(text: str) -> str:
    """Remove markdown code-fence lines; backticks inside other lines are kept."""
    return FENCE_PATTERN.sub("", text).strip()


def extract_json_candidate(raw: str) -> str:
    """
    Narrow raw text down to the most likely JSON object.

    Slices from the first '{' to the last '}' when both exist; otherwise
    returns the whole fence-stripped text.
    """
    text = strip_code_fences(raw)
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        text = text[start:end + 1]
    return text


def extract_json(raw: str) -> dict[str, Any]:
    """
    Parse the JSON object contained in an AI response.

    Args:
        raw: Raw response text.

    Returns:
        The parsed object.

    Raises:
        MalformedAIResponse: No JSON object could be parsed.
    """
    raw = raw or ""
    candidate = extract_json_candidate(raw)

    try:
        # strict=False tolerates raw control characters inside strings
        data = json.loads(candidate, strict=False)
    except json.JSONDecodeError as e:
        raise MalformedAIResponse(len(raw), candidate[:PREVIEW_LENGTH], str(e)) from e

    if not isinstance(data, dict):
        raise MalformedAIResponse(
            len(raw),
            candidate[:PREVIEW_LENGTH],
            f"Expected a JSON object, got {type(data).__name__}",
        )
    return data


def drop_nulls(value: Any) -> Any:
    """Remove explicit nulls so model defaults apply to them."""
    if isinstance(value, dict):
        return {k: drop_nulls(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [drop_nulls(v) for v in value if v is not None]
    return value


def build_result(
    data: dict[str, Any],
    result_type: Type[T],
    trusted: dict[str, Any],
    raw: str,
) -> T:
    """
    Validate AI data into a result model with trusted fields taking precedence.

    Args:
        data: Parsed AI object.
        result_type: Result model class.
        trusted: Locally computed fields; they replace any AI values.
        raw: Original response, used for diagnostics only.

    Raises:
        MalformedAIResponse: The object cannot be coerced into the result model.
    """
    merged = {**drop_nulls(data), **trusted}
    try:
        return result_type.model_validate(merged)
    except PydanticValidationError as e:
        preview = extract_json_candidate(raw or "")[:PREVIEW_LENGTH]
        raise MalformedAIResponse(len(raw or ""), preview, str(e)) from e


def normalize_business_response(
    raw: str,
    metrics: BusinessMetrics,
    projection: Sequence[YearResult],
) -> BusinessEvaluation:
    """Turn a raw business evaluation into a BusinessEvaluation."""
    data = extract_json(raw)
    return build_result(
        data,
        BusinessEvaluation,
        trusted={
            "template": "business",
            "metrics": metrics,
            "projection": list(projection),
        },
        raw=raw,
    )


def judge_targets(evaluation: PolicyEvaluation, targets: PolicyTargets) -> RankJudge:
    """Compare the simulated 10-year population and well-being total against targets."""
    population = evaluation.population_sim.with_policy.y10
    total = evaluation.well_being_scores.total
    return RankJudge(
        population_achieved=population >= targets.target_population,
        well_being_achieved=total >= targets.target_well_being,
        population_diff=population - targets.target_population,
        well_being_diff=round(total - targets.target_well_being, 1),
    )


def normalize_policy_response(
    raw: str,
    metrics: PolicyMetrics,
    targets: Optional[PolicyTargets] = None,
) -> PolicyEvaluation:
    """
    Turn a raw policy evaluation into a PolicyEvaluation.

    The well-being total is recomputed from the eight axes, and the target
    judgement is recomputed from that total and the simulated population.
    """
    data = extract_json(raw)
    evaluation = build_result(
        data,
        PolicyEvaluation,
        trusted={"template": "policy", "metrics": metrics},
        raw=raw,
    )

    scores = evaluation.well_being_scores.model_copy(
        update={"total": evaluation.well_being_scores.axis_total()}
    )
    evaluation = evaluation.model_copy(update={"well_being_scores": scores})

    if targets is not None:
        evaluation = evaluation.model_copy(update={"rank_judge": judge_targets(evaluation, targets)})
    return evaluation
