"""Card catalog access and the selection state machine."""

from .state_machine import Phase, SelectionState, SelectionStateMachine
from .catalog import (
    CardCatalog,
    StaticCardCatalog,
    NotionCardCatalog,
    card_from_notion_page,
    load_catalog,
    sort_by_rank,
)

__all__ = [
    "Phase",
    "SelectionState",
    "SelectionStateMachine",
    "CardCatalog",
    "StaticCardCatalog",
    "NotionCardCatalog",
    "card_from_notion_page",
    "load_catalog",
    "sort_by_rank",
]
