"""Error Hierarchy — typed, categorized exceptions for all Eventix failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - StorageUnavailableError never reaches a caller: the RegistryFacade recovers it
    - Validation errors (resale, markup, ownership) carry a human-readable reason
    - LedgerRejectedError maps 1:1 from LedgerRejectionKind to a user-facing message
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with EventixError base: FastAPI global handler catches all
    - Store adapters raise these instead of returning result objects; the facade
      decides per class whether to fall back or propagate
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

from eventix.core.domain_types import LedgerRejectionKind, MAX_RESALES


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    mint: str | None = None
    wallet: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class EventixError(Exception):
    """Base exception for all Eventix errors."""

    # Set by the resale rule errors; None everywhere else
    max_allowed_price: Decimal | None = None

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidRequestError(EventixError):
    """Request is missing or carries an unusable field."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


class DuplicateEmailError(EventixError):
    """A user with this email is already registered."""
    def __init__(self, email: str, context: ErrorContext | None = None):
        super().__init__(
            "User already exists", "DUPLICATE_EMAIL", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.email = email


class DuplicateMintError(EventixError):
    """A ticket with this mint address is already recorded."""
    def __init__(self, mint: str, context: ErrorContext | None = None):
        super().__init__(
            f"Ticket '{mint}' is already registered",
            "DUPLICATE_MINT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.mint = mint


class TicketNotFoundError(EventixError):
    """Ticket missing, not owned by the caller, or not listed."""
    def __init__(self, message: str, mint: str, context: ErrorContext | None = None):
        super().__init__(
            message, "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.mint = mint


class UnknownTicketTypeError(EventixError):
    """Requested catalog item does not exist."""
    def __init__(self, ticket_type: str, context: ErrorContext | None = None):
        super().__init__(
            "Invalid ticket type", "INVALID_TICKET_TYPE",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING, context, 400,
        )
        self.ticket_type = ticket_type


class ResaleLimitExceededError(EventixError):
    """Ticket already changed hands MAX_RESALES times."""
    def __init__(
        self, resale_count: int, max_allowed_price: Decimal,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Maximum resales ({MAX_RESALES}) exceeded",
            "RESALE_LIMIT_EXCEEDED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )
        self.resale_count = resale_count
        self.max_allowed_price = max_allowed_price


class MarkupExceededError(EventixError):
    """Proposed price is above the markup ceiling."""
    def __init__(
        self, proposed_price: Decimal, max_allowed_price: Decimal,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            "Price exceeds 25% markup limit. "
            f"Max: {max_allowed_price.normalize():f} SOL",
            "MARKUP_EXCEEDED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )
        self.proposed_price = proposed_price
        self.max_allowed_price = max_allowed_price


# ─── Ledger Errors ──────────────────────────────────────────────

LEDGER_REJECTION_MESSAGES: dict[LedgerRejectionKind, str] = {
    LedgerRejectionKind.EXCEEDS_MARKUP: (
        "Price exceeds maximum allowed markup of 25%. Please set a lower price."
    ),
    LedgerRejectionKind.NOT_OWNER: "You are not the owner of this ticket.",
    LedgerRejectionKind.RESALE_NOT_ALLOWED: "This ticket cannot be resold.",
    LedgerRejectionKind.ALREADY_MAX_RESALES: (
        "Maximum number of resales (3) exceeded. "
        "This ticket cannot be resold anymore."
    ),
}


class LedgerRejectedError(EventixError):
    """Ledger refused a list/transfer after its own validation."""
    def __init__(
        self, kind: LedgerRejectionKind, detail: str = "",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            LEDGER_REJECTION_MESSAGES[kind],
            "LEDGER_REJECTED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 422,
        )
        self.kind = kind
        self.detail = detail


class MintFailedError(EventixError):
    """Ledger could not mint a ticket; no mint address exists."""
    def __init__(self, detail: str, context: ErrorContext | None = None):
        super().__init__(
            "Ticket minting failed. Please try again later.",
            "MINT_FAILED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )
        self.detail = detail


class LedgerUnavailableError(EventixError):
    """Ledger did not answer, timed out, or failed for an unclassified reason."""
    def __init__(
        self, operation: str, detail: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            "Ledger operation failed. Please try again later.",
            "LEDGER_UNAVAILABLE", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 503,
        )
        self.operation = operation
        self.detail = detail


# ─── Infrastructure Errors ──────────────────────────────────────

class StorageUnavailableError(EventixError):
    """Durable registry unreachable, timed out, or schema mismatch."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Registry {operation} failed: {message}",
            "STORAGE_UNAVAILABLE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class StorageConflictError(EventixError):
    """Unique constraint violated in the durable registry."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "STORAGE_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
