"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - MintAddress and WalletAddress wrap str; never use bare str for them in domain logic
    - Prices are Decimal (SOL, 9 fractional digits); floats only at the wire boundary
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from decimal import Decimal
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

MintAddress = NewType("MintAddress", str)
WalletAddress = NewType("WalletAddress", str)
TicketTypeId = NewType("TicketTypeId", str)


# ─── Anti-scalping Limits ────────────────────────────────────────

MAX_RESALES: int = 3
MAX_MARKUP_PERCENT: int = 25
MAX_MARKUP_FACTOR: Decimal = Decimal(100 + MAX_MARKUP_PERCENT) / Decimal(100)

# Lamport precision: 1 SOL = 10^9 lamports
PRICE_QUANTUM: Decimal = Decimal("0.000000001")


# ─── Enums ───────────────────────────────────────────────────────

class TicketState(str, Enum):
    """Ticket lifecycle states derived from listed flag and resale count."""
    OWNED = "owned"
    LISTED = "listed"
    RETIRED = "retired"


class ResaleDenialReason(str, Enum):
    """Why the resale rule engine refused a listing."""
    RESALE_LIMIT_EXCEEDED = "RESALE_LIMIT_EXCEEDED"
    MARKUP_EXCEEDED = "MARKUP_EXCEEDED"


class LedgerRejectionKind(str, Enum):
    """Rejection taxonomy reported by the external ledger."""
    EXCEEDS_MARKUP = "ExceedsMarkup"
    NOT_OWNER = "NotOwner"
    RESALE_NOT_ALLOWED = "ResaleNotAllowed"
    ALREADY_MAX_RESALES = "AlreadyMaxResales"


class LedgerOperation(str, Enum):
    """Operations exposed by the external ledger service."""
    MINT = "mint"
    LIST = "list"
    TRANSFER = "transfer"


class RegistryBackend(str, Enum):
    """Which store is currently serving registry calls."""
    DURABLE = "durable"
    FALLBACK = "fallback"


def to_price(value: Decimal | float | int | str) -> Decimal:
    """Normalize any numeric input to a lamport-quantized Decimal."""
    if isinstance(value, float):
        value = repr(value)
    return Decimal(value).quantize(PRICE_QUANTUM)
