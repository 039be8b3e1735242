"""Ticket Schemas — wire shapes for purchase, listing, resale and read views.

Invariants:
    - Prices are floats on the wire, Decimal everywhere behind the routes
    - Request ids, wallets and prices default to empty or zero so a missing
      or non-positive value reaches the orchestrator and comes back as
      success=false with a reason
    - Ticket payload keeps the legacy client shape (mint, isListed, originalPrice)

Design Decisions:
    - to_camel alias generator over per-field aliases; populate_by_name lets
      tests construct models with snake_case names
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from eventix.core.entities import CatalogItem, ResaleHistoryRecord, Ticket
from eventix.core.marketplace_view import MarketplaceEntry, TicketLifecycle
from eventix.core.domain_types import MAX_MARKUP_PERCENT, MAX_RESALES


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ─── Requests ───────────────────────────────────────────────────

class BuyTicketRequest(CamelModel):
    ticket_type: str = ""
    wallet_address: str = ""


class ListTicketRequest(CamelModel):
    ticket_id: str = ""
    price: float = Field(0.0, allow_inf_nan=False)
    wallet_address: str = ""


class MarketplacePurchaseRequest(CamelModel):
    ticket_id: str = ""
    buyer_wallet: str = ""


# ─── Responses ──────────────────────────────────────────────────

class TicketResponse(CamelModel):
    id: str
    mint: str
    name: str
    description: str
    event_date: str
    price: float
    original_price: float
    image: str
    is_listed: bool
    owner: str
    created_at: datetime

    @classmethod
    def from_entity(cls, ticket: Ticket) -> "TicketResponse":
        return cls(
            id=ticket.mint,
            mint=ticket.mint,
            name=ticket.name,
            description=ticket.description,
            event_date=ticket.event_date,
            price=float(ticket.price),
            original_price=float(ticket.original_price),
            image=ticket.image,
            is_listed=ticket.listed,
            owner=ticket.owner,
            created_at=ticket.created_at,
        )


class MarketplaceTicketResponse(TicketResponse):
    resale_count: int
    can_resale: bool

    @classmethod
    def from_entry(cls, entry: MarketplaceEntry) -> "MarketplaceTicketResponse":
        base = TicketResponse.from_entity(entry.ticket).model_dump()
        return cls(
            **base,
            resale_count=entry.resale_count,
            can_resale=entry.can_resale,
        )


class CatalogItemResponse(CamelModel):
    id: str
    name: str
    description: str
    event_date: str
    price: float
    seat: str
    image: str

    @classmethod
    def from_entity(cls, item: CatalogItem) -> "CatalogItemResponse":
        return cls(
            id=item.id,
            name=item.name,
            description=item.description,
            event_date=item.event_date,
            price=float(item.price),
            seat=item.seat,
            image=item.image,
        )


class OperationResponse(CamelModel):
    """success plus payload, or success=false plus a human-readable error."""
    success: bool
    mint_address: str | None = None
    transaction: str | None = None
    ticket: TicketResponse | None = None
    error: str | None = None
    error_code: str | None = None
    max_allowed_price: float | None = None


# ─── Lifecycle ──────────────────────────────────────────────────

class ResaleRecordResponse(CamelModel):
    resale_number: int
    from_wallet: str
    to_wallet: str
    price: float
    timestamp: datetime

    @classmethod
    def from_entity(cls, record: ResaleHistoryRecord) -> "ResaleRecordResponse":
        return cls(
            resale_number=record.resale_number,
            from_wallet=record.seller,
            to_wallet=record.buyer,
            price=float(record.price),
            timestamp=record.timestamp,
        )


class PriceHistory(CamelModel):
    original: float
    current: float
    markup: str


class ResaleInfo(CamelModel):
    count: int
    max_allowed: int = MAX_RESALES
    can_resale: bool
    is_listed: bool


class Compliance(CamelModel):
    anti_scalping_active: bool = True
    max_markup_percent: int = MAX_MARKUP_PERCENT
    max_allowed_price: float
    within_limits: bool


class LifecycleResponse(CamelModel):
    mint: str
    state: str
    current_owner: str
    ticket: TicketResponse
    resale_history: list[ResaleRecordResponse]
    price_history: PriceHistory
    resale_info: ResaleInfo
    compliance: Compliance

    @classmethod
    def from_view(cls, view: TicketLifecycle) -> "LifecycleResponse":
        ticket = view.ticket
        return cls(
            mint=ticket.mint,
            state=view.state.value,
            current_owner=ticket.owner,
            ticket=TicketResponse.from_entity(ticket),
            resale_history=[
                ResaleRecordResponse.from_entity(r) for r in view.history
            ],
            price_history=PriceHistory(
                original=float(ticket.original_price),
                current=float(ticket.price),
                markup=f"{view.markup_percent:.2f}",
            ),
            resale_info=ResaleInfo(
                count=view.resale_count,
                can_resale=view.can_resale,
                is_listed=ticket.listed,
            ),
            compliance=Compliance(
                max_allowed_price=float(view.max_allowed_price),
                within_limits=view.within_limits,
            ),
        )
