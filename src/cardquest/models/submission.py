"""Snapshots handed from the selection stage to the evaluation stage."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .card import Card
from .projection import YearResult


BASE_POPULATION = 10000


class Participant(BaseModel):
    """Team playing the session."""

    team_name: str = Field(default="", description="Team name, required before play")
    members: str = Field(default="", description="Member names, one per line")

    def member_list(self) -> list[str]:
        return [m.strip() for m in self.members.splitlines() if m.strip()]


class PolicyTargets(BaseModel):
    """Goals a policy team commits to before choosing cards."""

    target_population: int = Field(default=12000, ge=10001, le=20000)
    target_well_being: int = Field(default=75, ge=40, le=100)
    base_population: int = BASE_POPULATION


class SelectionSet(BaseModel):
    """One card per category, in display order. Complete by construction."""

    model_config = ConfigDict(frozen=True)

    cards: dict[str, Card] = Field(default_factory=dict)

    def __getitem__(self, category: str) -> Card:
        return self.cards[category]

    def categories(self) -> list[str]:
        return list(self.cards)


class ScenarioSubmission(BaseModel):
    """Immutable input to prompt synthesis for a single evaluation."""

    model_config = ConfigDict(frozen=True)

    template: str = Field(description="Template name: business or policy")
    participant: Participant = Field(default_factory=Participant)
    selection: SelectionSet
    free_text: dict[str, str] = Field(default_factory=dict, description="Trimmed free-text fields")
    projection: list[YearResult] = Field(default_factory=list, description="Business year results")
    targets: Optional[PolicyTargets] = Field(default=None, description="Policy goals")
