"""Resale Rule Engine — anti-scalping checks on a proposed listing.

Invariants:
    - evaluate_resale is PURE: no IO, no clock, no mutation
    - Markup is measured against Ticket.original_price, never the current price,
      so markup cannot compound across successive resales
    - resale_count >= MAX_RESALES denies regardless of price (checked first)
    - A price exactly at original_price × 1.25 is allowed; anything above the
      exact product is denied, even by a fraction of a lamport
    - The reported maximum is the product floored to whole lamports, the
      highest price a listing can actually carry

Design Decisions:
    - Returns a decision object instead of raising: callers decide whether a denial
      becomes an error, and tests exercise it without storage or network
    - Registry-side evaluation is a fast path only; the ledger re-validates and its
      decision is final (the two are not assumed to always agree)
"""

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal

from eventix.core.domain_types import (
    MAX_MARKUP_FACTOR, MAX_RESALES, PRICE_QUANTUM, ResaleDenialReason,
    TicketState,
)
from eventix.core.entities import Ticket
from eventix.core.errors import (
    EventixError, MarkupExceededError, ResaleLimitExceededError,
)


@dataclass(frozen=True)
class ResaleDecision:
    """Allow when reason is None; otherwise Deny(reason)."""
    reason: ResaleDenialReason | None
    max_allowed_price: Decimal
    resale_count: int

    @property
    def allowed(self) -> bool:
        return self.reason is None

    def to_error(self, proposed_price: Decimal) -> EventixError:
        """Map a denial to its typed error (callers check allowed first)."""
        if self.reason is ResaleDenialReason.RESALE_LIMIT_EXCEEDED:
            return ResaleLimitExceededError(
                self.resale_count, self.max_allowed_price,
            )
        return MarkupExceededError(proposed_price, self.max_allowed_price)


def max_allowed_price(original_price: Decimal) -> Decimal:
    """Highest listing price permitted for a ticket."""
    return (original_price * MAX_MARKUP_FACTOR).quantize(
        PRICE_QUANTUM, rounding=ROUND_FLOOR,
    )


def can_resell(resale_count: int) -> bool:
    return resale_count < MAX_RESALES


def evaluate_resale(
    ticket: Ticket, proposed_price: Decimal, resale_count: int,
) -> ResaleDecision:
    """Decide whether ticket may be listed at proposed_price."""
    ceiling = max_allowed_price(ticket.original_price)
    if not can_resell(resale_count):
        return ResaleDecision(
            ResaleDenialReason.RESALE_LIMIT_EXCEEDED, ceiling, resale_count,
        )
    if proposed_price > ticket.original_price * MAX_MARKUP_FACTOR:
        return ResaleDecision(
            ResaleDenialReason.MARKUP_EXCEEDED, ceiling, resale_count,
        )
    return ResaleDecision(None, ceiling, resale_count)


def ticket_state(ticket: Ticket, resale_count: int) -> TicketState:
    """Derive lifecycle state. RETIRED is terminal: no further listings."""
    if ticket.listed:
        return TicketState.LISTED
    if not can_resell(resale_count):
        return TicketState.RETIRED
    return TicketState.OWNED
