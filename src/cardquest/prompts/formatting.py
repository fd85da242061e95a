"""Number and card formatting shared by the prompt renderers."""

from typing import Sequence

from ..models.card import Card
from ..models.template import CardAttribute, CategorySpec


def fmt_number(value: float) -> str:
    """Thousands-separated number; decimals only when the value has them."""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def fmt_yen(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}¥{fmt_number(abs(value))}"


def card_lines(
    card: Card,
    category: CategorySpec,
    attributes: dict[str, CardAttribute],
) -> list[str]:
    """Identifying fields plus the category's numeric attributes."""
    lines = [
        f"- Card: {card.label()}",
        f"- Details: {card.description}",
    ]
    if card.flavor_text:
        lines.append(f"- Flavor: {card.flavor_text}")
    for name in category.attributes:
        attr = attributes[name]
        unit = f" {attr.unit}" if attr.unit else ""
        lines.append(f"- {attr.label}: {fmt_number(card.number(name))}{unit}")
    return lines


def bullet_list(items: Sequence[str]) -> str:
    return "\n".join(f"- {item}" for item in items)
