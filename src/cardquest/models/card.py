"""Card records sourced from the read-only catalog."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, AliasChoices


RANK_ORDER = ["A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K"]


def rank_index(rank: str) -> int:
    """Ordinal position of a rank label; unknown labels sort last."""
    try:
        return RANK_ORDER.index(rank.strip().upper())
    except ValueError:
        return len(RANK_ORDER)


class Card(BaseModel):
    """A single themed card. Never mutated once loaded."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Catalog identity")
    suit: str = Field(description="Category tag, e.g. '♥️ハート'")
    rank: str = Field(default="", description="Rank label A, 2-10, J, Q, K")
    title: str = Field(default="", description="Short card title")
    description: str = Field(default="", description="Card body text")
    flavor_text: Optional[str] = Field(
        default=None,
        description="Atmospheric line shown on the card",
        validation_alias=AliasChoices("flavor_text", "flavorText"),
    )
    card_name: str = Field(
        default="",
        description="Full catalog name, e.g. '♠A: Farmer living alone'",
        validation_alias=AliasChoices("card_name", "cardName"),
    )
    attributes: dict[str, float] = Field(
        default_factory=dict,
        description="Template-specific numeric attributes",
    )

    @property
    def rank_order(self) -> int:
        return rank_index(self.rank)

    def number(self, name: str) -> float:
        """Numeric attribute value, 0 when the catalog left it empty."""
        value = self.attributes.get(name)
        return value if value is not None else 0

    def label(self) -> str:
        """'rank - title' label used in prompts and saved summaries."""
        return f"{self.rank} - {self.title}"
