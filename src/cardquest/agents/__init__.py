"""AI evaluation agent, result models and response normalization."""

from .models import (
    ScoreBreakdown,
    BusinessEvaluation,
    WellBeingScores,
    PopulationForecast,
    PopulationSim,
    RankJudge,
    PolicyEvaluation,
    EvaluationResult,
)
from .base import BaseAgent
from .evaluator import ScenarioEvaluator
from .normalizer import (
    strip_code_fences,
    extract_json_candidate,
    extract_json,
    normalize_business_response,
    normalize_policy_response,
)

__all__ = [
    # Base
    "BaseAgent",
    # Models
    "ScoreBreakdown",
    "BusinessEvaluation",
    "WellBeingScores",
    "PopulationForecast",
    "PopulationSim",
    "RankJudge",
    "PolicyEvaluation",
    "EvaluationResult",
    # Agents
    "ScenarioEvaluator",
    # Normalization
    "strip_code_fences",
    "extract_json_candidate",
    "extract_json",
    "normalize_business_response",
    "normalize_policy_response",
]
