"""Event Catalog — purchasable ticket types loaded once from a JSON file.

Invariants:
    - Catalog is read-only after load
    - Price strings accept an optional " SOL" suffix ("0.10 SOL" == 0.10)
    - A missing or malformed file yields an empty catalog plus an error log;
      a malformed entry is skipped, the rest still load
"""

import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path

from eventix.core.domain_types import TicketTypeId, to_price
from eventix.core.entities import CatalogItem

logger = logging.getLogger(__name__)


def parse_price(raw: object) -> Decimal:
    text = str(raw).strip()
    if text.upper().endswith("SOL"):
        text = text[:-3].strip()
    return to_price(text)


def _to_item(event: dict) -> CatalogItem:
    return CatalogItem(
        id=TicketTypeId(str(event["id"])),
        name=event["title"],
        description=event.get("venue", ""),
        event_date=event.get("date", ""),
        price=parse_price(event["price"]),
        seat=event.get("seat", "GA-001"),
        image=event.get("image", ""),
    )


class Catalog:
    """Ticket types keyed by id, in file order."""

    def __init__(self, items: list[CatalogItem] | None = None):
        self._items: dict[TicketTypeId, CatalogItem] = {
            item.id: item for item in items or []
        }

    def get(self, ticket_type: str) -> CatalogItem | None:
        return self._items.get(TicketTypeId(ticket_type))

    def items(self) -> list[CatalogItem]:
        return list(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    @classmethod
    def from_file(cls, path: str | Path) -> "Catalog":
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Error loading events from {path}: {e}")
            return cls()

        items: list[CatalogItem] = []
        for event in data.get("events", []) if isinstance(data, dict) else []:
            try:
                items.append(_to_item(event))
            except (KeyError, TypeError, InvalidOperation) as e:
                logger.error(f"Skipping malformed event {event!r}: {e}")
        logger.info(f"Loaded {len(items)} ticket types from {path}")
        return cls(items)


# Singleton (initialized on startup)
catalog: Catalog = Catalog()


def init_catalog(path: str | Path) -> Catalog:
    global catalog
    catalog = Catalog.from_file(path)
    return catalog

