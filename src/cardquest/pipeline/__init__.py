"""Pipeline orchestration: evaluation workflow, participant session and CLI runner."""

from .workflow import EvaluationWorkflow, EvaluationState
from .session import ScenarioSession, SessionState
from .runner import CardQuestRunner

__all__ = [
    "EvaluationWorkflow",
    "EvaluationState",
    "ScenarioSession",
    "SessionState",
    "CardQuestRunner",
]
