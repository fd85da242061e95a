"""Saving evaluated plans and persisting sessions."""

from .registry import (
    SaveReceipt,
    ScenarioSummary,
    build_summary,
    PlanRegistry,
    InMemoryPlanRegistry,
    NotionPlanRegistry,
)
from .session_store import SessionStore, InMemorySessionStore, JsonFileSessionStore

__all__ = [
    "SaveReceipt",
    "ScenarioSummary",
    "build_summary",
    "PlanRegistry",
    "InMemoryPlanRegistry",
    "NotionPlanRegistry",
    "SessionStore",
    "InMemorySessionStore",
    "JsonFileSessionStore",
]
