"""State machine collecting one card per category."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from ..errors import IncompleteSelection
from ..models.card import Card
from ..models.submission import SelectionSet


class Phase(str, Enum):
    SELECTING = "selecting"
    COMPLETE = "complete"


class SelectionState(BaseModel):
    """Serializable snapshot of selection progress."""

    categories: list[str] = Field(description="Category keys in display order")
    index: int = Field(default=0, description="Current category index while selecting")
    phase: Phase = Field(default=Phase.SELECTING)
    selections: dict[str, Card] = Field(default_factory=dict, description="Category key to chosen card")

    @property
    def current_category(self) -> Optional[str]:
        if self.phase == Phase.COMPLETE:
            return None
        return self.categories[self.index]

    @property
    def is_complete(self) -> bool:
        return self.phase == Phase.COMPLETE

    def missing(self) -> list[str]:
        return [c for c in self.categories if c not in self.selections]


class SelectionStateMachine:
    """
    Tracks progress through the required categories.

    States are Selecting(i) for each category index and Complete. Cards can
    be (re)selected in any state; moving forward requires the current
    category to be filled, and reaching Complete requires all of them.
    """

    def __init__(
        self,
        categories: list[str],
        suits: Optional[dict[str, str]] = None,
        state: Optional[SelectionState] = None,
    ):
        """
        Args:
            categories: Category keys in display order.
            suits: Optional category key -> expected card suit. When given,
                cards from another suit are rejected.
            state: Snapshot to resume from.
        """
        if not categories:
            raise ValueError("At least one category is required")
        self.suits = dict(suits or {})
        self._state = state.model_copy(deep=True) if state else SelectionState(categories=list(categories))
        if self._state.categories != list(categories):
            raise ValueError("Snapshot categories do not match this template")

    @property
    def categories(self) -> list[str]:
        return list(self._state.categories)

    @property
    def index(self) -> int:
        return self._state.index

    @property
    def phase(self) -> Phase:
        return self._state.phase

    def get_state(self) -> SelectionState:
        """Return a detached copy of the current state."""
        return self._state.model_copy(deep=True)

    def selection(self, category: str) -> Optional[Card]:
        return self._state.selections.get(category)

    def select_card(self, category: str, card: Card) -> SelectionState:
        """Set or overwrite the card for a category. Does not move the cursor."""
        if category not in self._state.categories:
            raise ValueError(f"Unknown category: {category}")
        expected = self.suits.get(category)
        if expected and card.suit != expected:
            raise ValueError(f"Card {card.id} belongs to '{card.suit}', not '{expected}'")

        self._state.selections[category] = card
        return self.get_state()

    def advance(self) -> SelectionState:
        """
        Move to the next category, or to Complete from the last one.

        Raises:
            IncompleteSelection: The current category is unselected, or the
                final step is attempted with other categories still empty.
        """
        state = self._state
        if state.phase == Phase.COMPLETE:
            return self.get_state()

        current = state.categories[state.index]
        if current not in state.selections:
            raise IncompleteSelection([current])

        if state.index < len(state.categories) - 1:
            state.index += 1
        else:
            missing = state.missing()
            if missing:
                raise IncompleteSelection(missing)
            state.phase = Phase.COMPLETE
        return self.get_state()

    def retreat(self) -> SelectionState:
        """Step back one category; no-op at the first one."""
        state = self._state
        if state.phase == Phase.COMPLETE:
            state.phase = Phase.SELECTING
        elif state.index > 0:
            state.index -= 1
        return self.get_state()

    def jump_to(self, index: int) -> SelectionState:
        """Navigate directly to a category for review or editing."""
        if not 0 <= index < len(self._state.categories):
            raise IndexError(f"Category index {index} out of range")
        self._state.phase = Phase.SELECTING
        self._state.index = index
        return self.get_state()

    def finalize(self) -> SelectionSet:
        """
        Freeze the selections once every category is filled.

        Raises:
            IncompleteSelection: If any category is still empty.
        """
        missing = self._state.missing()
        if missing:
            raise IncompleteSelection(missing)

        self._state.phase = Phase.COMPLETE
        return SelectionSet(cards={c: self._state.selections[c] for c in self._state.categories})
