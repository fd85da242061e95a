"""Card catalog collaborators: a static catalog and a Notion database catalog."""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Optional

import httpx

from ..config import NOTION_API_URL, NOTION_VERSION, require_env
from ..errors import CatalogUnavailable
from ..models.card import Card, rank_index


# Notion property names shared by both card databases
SUIT_PROPERTY = "スート"
RANK_PROPERTY = "ランク"
NAME_PROPERTY = "カード名"
TITLE_PROPERTY = "カードタイトル"
DESCRIPTION_PROPERTY = "説明テキスト"
FLAVOR_PROPERTY = "フレーバーテキスト"

PAGE_SIZE = 100


def sort_by_rank(cards: list[Card]) -> list[Card]:
    """Order cards A, 2..10, J, Q, K; unknown ranks keep their order at the end."""
    return sorted(cards, key=lambda c: c.rank_order)


class CardCatalog(ABC):
    """Read-only source of cards, queried one suit at a time."""

    @abstractmethod
    def fetch(self, suit: str) -> list[Card]:
        """
        Return every card of a suit, rank ascending.

        An empty list means the suit has no cards; it is not an error.
        """


class StaticCardCatalog(CardCatalog):
    """Catalog backed by an in-memory list, typically loaded from JSON."""

    def __init__(self, cards: list[Card]):
        self.cards = list(cards)

    @classmethod
    def from_json(cls, path: Path) -> "StaticCardCatalog":
        """
        Load cards from a JSON file.

        Accepts either a list of card objects or {"cards": [...]}.
        """
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if isinstance(data, dict):
            data = data.get("cards", [])
        return cls([Card.model_validate(item) for item in data])

    def fetch(self, suit: str) -> list[Card]:
        return sort_by_rank([c for c in self.cards if c.suit == suit])


def _plain_text(prop: Optional[dict], kind: str) -> str:
    """First plain_text fragment of a title or rich_text property."""
    if not prop:
        return ""
    fragments = prop.get(kind) or []
    if not fragments:
        return ""
    return fragments[0].get("plain_text", "") or ""


def _select_name(prop: Optional[dict]) -> str:
    if not prop or not prop.get("select"):
        return ""
    return prop["select"].get("name", "") or ""


def _number(prop: Optional[dict]) -> float:
    if not prop or prop.get("number") is None:
        return 0
    return prop["number"]


def card_from_notion_page(page: dict[str, Any], attribute_properties: dict[str, str]) -> Card:
    """
    Convert a Notion database page into a Card.

    Args:
        page: Page object from a database query.
        attribute_properties: Card attribute name -> Notion number property.

    Returns:
        Card with empty numbers read as 0.
    """
    props = page.get("properties", {})
    flavor = _plain_text(props.get(FLAVOR_PROPERTY), "rich_text")
    return Card(
        id=page["id"],
        card_name=_plain_text(props.get(NAME_PROPERTY), "title"),
        suit=_select_name(props.get(SUIT_PROPERTY)),
        rank=_select_name(props.get(RANK_PROPERTY)),
        title=_plain_text(props.get(TITLE_PROPERTY), "rich_text"),
        description=_plain_text(props.get(DESCRIPTION_PROPERTY), "rich_text"),
        flavor_text=flavor or None,
        attributes={
            name: _number(props.get(prop_name))
            for name, prop_name in attribute_properties.items()
        },
    )


class NotionCardCatalog(CardCatalog):
    """
    Catalog backed by a Notion card-master database.

    Each fetch is one database query filtered on the suit and sorted by
    rank. Authentication uses NOTION_API_KEY unless a key is passed in.
    """

    def __init__(
        self,
        database_id: str,
        attribute_properties: dict[str, str],
        api_key: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ):
        """
        Args:
            database_id: Notion database holding the cards.
            attribute_properties: Card attribute name -> Notion number property.
            api_key: Notion integration token.
            client: Preconfigured httpx client (tests inject a mock transport).
            timeout: Request timeout in seconds.
        """
        self.database_id = database_id
        self.attribute_properties = dict(attribute_properties)
        self.api_key = require_env("NOTION_API_KEY", api_key)
        self._client = client or httpx.Client(timeout=timeout)

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Notion-Version": NOTION_VERSION,
            "Content-Type": "application/json",
        }

    def fetch(self, suit: str) -> list[Card]:
        body = {
            "filter": {"property": SUIT_PROPERTY, "select": {"equals": suit}},
            "sorts": [{"property": RANK_PROPERTY, "direction": "ascending"}],
            "page_size": PAGE_SIZE,
        }
        try:
            response = self._client.post(
                f"{NOTION_API_URL}/databases/{self.database_id}/query",
                headers=self._headers(),
                json=body,
            )
        except httpx.HTTPError as exc:
            raise CatalogUnavailable(suit, str(exc)) from exc

        if response.status_code != 200:
            detail = response.text[:200]
            if response.status_code == 401:
                detail = f"Notion authentication failed (is the database shared?): {detail}"
            raise CatalogUnavailable(suit, detail)

        pages = response.json().get("results", [])
        return sort_by_rank([card_from_notion_page(p, self.attribute_properties) for p in pages])


def load_catalog(
    catalog: CardCatalog,
    suits: dict[str, str],
    log: Optional[Callable[[str], None]] = None,
) -> dict[str, list[Card]]:
    """
    Fetch every category, one after another.

    Requests are sequential to stay within the catalog's rate limits. Any
    failure aborts the whole load so the session never starts half-filled.

    Args:
        catalog: Card source.
        suits: Category key -> suit, in display order.
        log: Optional progress callback.

    Returns:
        Category key -> cards, rank ascending.

    Raises:
        CatalogUnavailable: If any category fails to load.
    """
    cards_by_category: dict[str, list[Card]] = {}
    for category, suit in suits.items():
        try:
            cards = catalog.fetch(suit)
        except CatalogUnavailable as exc:
            raise CatalogUnavailable(category, exc.detail) from exc
        except Exception as exc:
            raise CatalogUnavailable(category, str(exc)) from exc

        cards_by_category[category] = cards
        if log:
            log(f"  {category}: {len(cards)} cards")
    return cards_by_category
