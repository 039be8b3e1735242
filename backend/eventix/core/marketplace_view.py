"""Marketplace & Lifecycle Views — pure assembly of read-side payloads.

Invariants:
    - All inputs come from registry reads made by the caller (no IO here)
    - canResale is computed from the resale count passed in, never cached
    - Lifecycle markup percent is relative to original_price
"""

from dataclasses import dataclass
from decimal import Decimal

from eventix.core.domain_types import MAX_RESALES, TicketState
from eventix.core.entities import ResaleHistoryRecord, Ticket
from eventix.core.resale_rules import can_resell, max_allowed_price, ticket_state


@dataclass(frozen=True)
class MarketplaceEntry:
    ticket: Ticket
    resale_count: int
    can_resale: bool


@dataclass(frozen=True)
class TicketLifecycle:
    """Complete lifecycle summary of one ticket."""
    ticket: Ticket
    state: TicketState
    history: list[ResaleHistoryRecord]
    resale_count: int
    can_resale: bool
    markup_percent: Decimal
    max_allowed_price: Decimal
    within_limits: bool


def build_marketplace_entry(ticket: Ticket, resale_count: int) -> MarketplaceEntry:
    return MarketplaceEntry(
        ticket=ticket,
        resale_count=resale_count,
        can_resale=can_resell(resale_count),
    )


def markup_percent(ticket: Ticket) -> Decimal:
    """Current price relative to original, in percent (2 decimals)."""
    if ticket.original_price <= 0:
        return Decimal("0.00")
    pct = (ticket.price - ticket.original_price) / ticket.original_price * 100
    return pct.quantize(Decimal("0.01"))


def build_lifecycle(
    ticket: Ticket, history: list[ResaleHistoryRecord],
) -> TicketLifecycle:
    """Summarize a ticket; resale count is the number of history records."""
    ordered = sorted(history, key=lambda r: r.resale_number)
    count = len(ordered)
    ceiling = max_allowed_price(ticket.original_price)
    return TicketLifecycle(
        ticket=ticket,
        state=ticket_state(ticket, count),
        history=ordered,
        resale_count=count,
        can_resale=can_resell(count),
        markup_percent=markup_percent(ticket),
        max_allowed_price=ceiling,
        within_limits=ticket.price <= ceiling and count <= MAX_RESALES,
    )

