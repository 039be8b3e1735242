"""Domain Entities — users, tickets, resale history and catalog items.

Invariants:
    - Ticket.mint is assigned by the ledger and never reassigned
    - Ticket.original_price is fixed at creation from the catalog price
    - ResaleHistoryRecord is append-only; resale_number is 1-based
    - Entities are plain dataclasses: no IO, no ORM coupling

Design Decisions:
    - Store adapters convert ORM rows / dict entries to these types at the boundary,
      so the facade contract is identical for durable and fallback stores
    - with_listing / with_owner return copies; the fallback store never hands out
      references to its own records
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal

from eventix.core.domain_types import (
    MintAddress, WalletAddress, TicketTypeId,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class User:
    """Registered account. password_hash is opaque to the engine."""
    id: int
    name: str
    email: str
    password_hash: str
    created_at: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class Ticket:
    """A minted ticket as recorded by the registry."""
    mint: MintAddress
    name: str
    description: str
    event_date: str
    price: Decimal
    original_price: Decimal
    image: str
    listed: bool
    owner: WalletAddress
    created_at: datetime = field(default_factory=utc_now)

    def with_listing(self, price: Decimal, listed: bool) -> "Ticket":
        return replace(self, price=price, listed=listed)

    def with_owner(self, owner: WalletAddress) -> "Ticket":
        # Every ownership change clears the listing
        return replace(self, owner=owner, listed=False)


@dataclass(frozen=True)
class ResaleHistoryRecord:
    """One marketplace resale of a ticket."""
    ticket_id: MintAddress
    seller: WalletAddress
    buyer: WalletAddress
    price: Decimal
    resale_number: int
    timestamp: datetime = field(default_factory=utc_now)


@dataclass(frozen=True)
class CatalogItem:
    """A purchasable ticket type (one per event)."""
    id: TicketTypeId
    name: str
    description: str
    event_date: str
    price: Decimal
    seat: str = "GA-001"
    image: str = ""


@dataclass(frozen=True)
class MintReceipt:
    """Ledger answer to a successful mint. proof is an opaque transaction ref."""
    mint_address: MintAddress
    proof: str
