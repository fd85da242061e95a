"""Plain data models shared across the pipeline."""

from .card import Card, RANK_ORDER, rank_index
from .projection import (
    YearParameter,
    YearResult,
    Aggregate,
    MonthlyMetrics,
    BusinessMetrics,
    PolicyMetrics,
)
from .submission import (
    BASE_POPULATION,
    Participant,
    PolicyTargets,
    SelectionSet,
    ScenarioSubmission,
)

__all__ = [
    "Card",
    "RANK_ORDER",
    "rank_index",
    "YearParameter",
    "YearResult",
    "Aggregate",
    "MonthlyMetrics",
    "BusinessMetrics",
    "PolicyMetrics",
    "BASE_POPULATION",
    "Participant",
    "PolicyTargets",
    "SelectionSet",
    "ScenarioSubmission",
]
