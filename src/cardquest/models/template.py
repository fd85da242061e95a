"""Building blocks of a scenario template descriptor."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CardAttribute:
    """A numeric card attribute and where the catalog stores it."""
    name: str
    label: str
    unit: str = ""
    notion_property: str = ""


@dataclass(frozen=True)
class CategorySpec:
    """One of the four card categories of a template."""
    key: str  # "persona"
    suit: str  # "♥️ハート"
    label: str
    question: str
    symbol: str = ""
    attributes: tuple[str, ...] = field(default_factory=tuple)  # attributes shown in prompts


@dataclass(frozen=True)
class FreeTextField:
    """A free-text input the team must fill in before submitting."""
    name: str
    label: str
    required: bool = True
