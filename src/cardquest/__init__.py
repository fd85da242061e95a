"""
Card-driven scenario composition and AI evaluation.

Participants pick one card per category, the system computes trusted
figures from the cards, and a single AI call evaluates the resulting plan.
"""

from .errors import (
    ScenarioError,
    IncompleteSelection,
    ValidationError,
    CatalogUnavailable,
    AIServiceUnavailable,
    MalformedAIResponse,
    PersistenceFailed,
    SubmissionInProgress,
)
from .templates import BUSINESS_TEMPLATE, POLICY_TEMPLATE, ScenarioTemplate, get_template

__version__ = "0.1.0"

__all__ = [
    "ScenarioError",
    "IncompleteSelection",
    "ValidationError",
    "CatalogUnavailable",
    "AIServiceUnavailable",
    "MalformedAIResponse",
    "PersistenceFailed",
    "SubmissionInProgress",
    "BUSINESS_TEMPLATE",
    "POLICY_TEMPLATE",
    "ScenarioTemplate",
    "get_template",
]
