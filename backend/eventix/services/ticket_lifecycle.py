"""Ticket Lifecycle Orchestrator — purchase, listing and marketplace resale.

Invariants:
    - Order per write operation: validate → ledger → persist. A ledger failure
      leaves the registry untouched (no partial commit)
    - Resale transfer appends history BEFORE updating the owner: a crash between
      the two writes may overcount resales, never undercount them
    - Resale sequence number = history count + 1, read after the ledger confirms
    - list/transfer for one mint run under that mint's lock (validate → ledger →
      persist is not interleaved with another list/transfer of the same mint)
    - Every write operation returns an OperationOutcome; no exception crosses
      this boundary
    - Marketplace resale counts are read per ticket at request time, never cached

Design Decisions:
    - Per-mint asyncio.Lock covers one process only. Across processes two
      listings of the same ticket can both pass registry validation; the
      ledger re-validates markup and resale count and its answer is final.
      Registry-side checks are a fast path, not the enforcement point
    - Module-level singleton: the lock table must be shared by all requests
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from decimal import Decimal
from typing import AsyncIterator, Awaitable, Callable

from eventix.core.domain_types import MintAddress, WalletAddress
from eventix.core.entities import (
    CatalogItem, ResaleHistoryRecord, Ticket, User,
)
from eventix.core.errors import (
    ErrorContext, EventixError, InvalidRequestError, ResaleLimitExceededError,
    TicketNotFoundError, UnknownTicketTypeError,
)
from eventix.core.marketplace_view import (
    MarketplaceEntry, TicketLifecycle, build_lifecycle, build_marketplace_entry,
)
from eventix.core.repository_protocols import LedgerClient
from eventix.core.resale_rules import can_resell, evaluate_resale, max_allowed_price
from eventix.infrastructure.catalog import Catalog
from eventix.infrastructure.registry import RegistryFacade

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationOutcome:
    """Result of an orchestrated write: success flag plus payload or reason."""
    success: bool
    ticket: Ticket | None = None
    user: User | None = None
    mint_address: str | None = None
    transaction: str | None = None
    error: str | None = None
    error_code: str | None = None
    max_allowed_price: Decimal | None = None
    http_status: int = 200

    @classmethod
    def failure(cls, exc: EventixError) -> "OperationOutcome":
        return cls(
            success=False,
            error=exc.message,
            error_code=exc.code,
            max_allowed_price=exc.max_allowed_price,
            http_status=exc.http_status,
        )


class MintLocks:
    """One asyncio.Lock per mint, dropped when nobody holds or waits on it."""

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, mint: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(mint, asyncio.Lock())
        self._users[mint] = self._users.get(mint, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[mint] -= 1
            if not self._users[mint]:
                del self._users[mint]
                del self._locks[mint]

    def __len__(self) -> int:
        return len(self._locks)


class TicketLifecycleOrchestrator:
    """Composes resale rules, ledger gateway and registry facade."""

    def __init__(
        self,
        registry: RegistryFacade,
        ledger: LedgerClient,
        catalog: Catalog,
    ):
        self.registry = registry
        self.ledger = ledger
        self.catalog = catalog
        self.locks = MintLocks()

    # ─── Write operations ───────────────────────────────────────

    async def purchase(
        self, ticket_type: str, wallet: str,
    ) -> OperationOutcome:
        """Unminted → Owned: mint a catalog ticket for wallet."""
        return await self._guard(
            "purchase", lambda: self._purchase(ticket_type, wallet),
        )

    async def list_for_resale(
        self, mint: str, price: Decimal, wallet: str,
    ) -> OperationOutcome:
        """Owned → Listed: list a ticket the caller owns at price."""
        return await self._guard(
            "list_for_resale", lambda: self._list(mint, price, wallet),
        )

    async def purchase_from_marketplace(
        self, mint: str, buyer: str,
    ) -> OperationOutcome:
        """Listed → Owned(buyer): resale transfer at the listed price."""
        return await self._guard(
            "purchase_from_marketplace", lambda: self._transfer(mint, buyer),
        )

    async def register_user(
        self, name: str, email: str, password_hash: str,
    ) -> OperationOutcome:
        return await self._guard(
            "register_user",
            lambda: self._register(name, email, password_hash),
        )

    async def _purchase(self, ticket_type: str, wallet: str) -> OperationOutcome:
        if not wallet:
            raise InvalidRequestError("Wallet address required", "walletAddress")
        item = self.catalog.get(ticket_type)
        if item is None:
            raise UnknownTicketTypeError(ticket_type)

        receipt = await self.ledger.mint(item)
        ticket = Ticket(
            mint=receipt.mint_address,
            name=item.name,
            description=item.description,
            event_date=item.event_date,
            price=item.price,
            original_price=item.price,
            image=item.image,
            listed=False,
            owner=WalletAddress(wallet),
        )
        try:
            await self.registry.create_ticket(ticket)
        except EventixError:
            logger.error(
                "Minted ticket could not be recorded; needs reconciliation",
                extra={"mint": ticket.mint, "wallet": wallet},
            )
            raise
        logger.info(
            f"Ticket purchased: {item.name}",
            extra={"mint": ticket.mint, "wallet": wallet},
        )
        return OperationOutcome(
            success=True,
            ticket=ticket,
            mint_address=ticket.mint,
            transaction=receipt.proof,
        )

    async def _list(
        self, mint: str, price: Decimal, wallet: str,
    ) -> OperationOutcome:
        if not mint:
            raise InvalidRequestError("Ticket ID required", "ticketId")
        if price <= 0:
            raise InvalidRequestError("Price must be positive", "price")
        mint_address = MintAddress(mint)
        async with self.locks.hold(mint_address):
            ticket = await self.registry.get_ticket(mint_address)
            if ticket is None or ticket.owner != wallet:
                raise TicketNotFoundError(
                    "Ticket not found or not owned by you", mint,
                    ErrorContext(mint=mint, wallet=wallet),
                )

            resale_count = await self.registry.count_resale_history(mint_address)
            decision = evaluate_resale(ticket, price, resale_count)
            if not decision.allowed:
                raise decision.to_error(price)

            proof = await self.ledger.list_ticket(mint_address, price)
            await self.registry.update_ticket_listing(mint_address, price, True)

        logger.info(
            f"Ticket listed at {price} SOL",
            extra={"mint": mint, "wallet": wallet},
        )
        return OperationOutcome(
            success=True,
            ticket=ticket.with_listing(price, True),
            mint_address=mint,
            transaction=proof,
        )

    async def _transfer(self, mint: str, buyer: str) -> OperationOutcome:
        if not mint:
            raise InvalidRequestError("Ticket ID required", "ticketId")
        if not buyer:
            raise InvalidRequestError("Buyer wallet required", "buyerWallet")
        mint_address = MintAddress(mint)
        async with self.locks.hold(mint_address):
            ticket = await self.registry.get_ticket(mint_address)
            if ticket is None or not ticket.listed:
                raise TicketNotFoundError(
                    "Ticket not available", mint,
                    ErrorContext(mint=mint, wallet=buyer),
                )
            resale_count = await self.registry.count_resale_history(mint_address)
            if not can_resell(resale_count):
                raise ResaleLimitExceededError(
                    resale_count, max_allowed_price(ticket.original_price),
                )

            proof = await self.ledger.transfer(
                mint_address, ticket.owner, WalletAddress(buyer), ticket.price,
            )

            resale_number = (
                await self.registry.count_resale_history(mint_address) + 1
            )
            # History first, then owner: never undercount resales
            await self.registry.append_resale_history(ResaleHistoryRecord(
                ticket_id=mint_address,
                seller=ticket.owner,
                buyer=WalletAddress(buyer),
                price=ticket.price,
                resale_number=resale_number,
            ))
            await self.registry.update_ticket_owner(
                mint_address, WalletAddress(buyer),
            )

        logger.info(
            f"Resale #{resale_number} recorded",
            extra={"mint": mint, "wallet": buyer, "resale_number": resale_number},
        )
        return OperationOutcome(
            success=True,
            ticket=ticket.with_owner(WalletAddress(buyer)),
            mint_address=mint,
            transaction=proof,
        )

    async def _register(
        self, name: str, email: str, password_hash: str,
    ) -> OperationOutcome:
        user = await self.registry.create_user(name, email, password_hash)
        logger.info(f"User registered: {email}")
        return OperationOutcome(success=True, user=user)

    async def _guard(
        self, operation: str, run: Callable[[], Awaitable[OperationOutcome]],
    ) -> OperationOutcome:
        try:
            return await run()
        except EventixError as e:
            logger.warning(
                f"{operation} refused: {e.message}",
                extra={"error_code": e.code, "mint": e.context.mint},
            )
            return OperationOutcome.failure(e)
        except Exception as e:
            logger.error(f"{operation} failed unexpectedly: {e}", exc_info=True)
            return OperationOutcome(
                success=False,
                error="Operation failed",
                error_code="INTERNAL_ERROR",
                http_status=500,
            )

    # ─── Read views ─────────────────────────────────────────────

    def available_tickets(self) -> list[CatalogItem]:
        return self.catalog.items()

    async def tickets_for_owner(self, wallet: str) -> list[Ticket]:
        return await self.registry.list_tickets_by_owner(WalletAddress(wallet))

    async def marketplace(self) -> list[MarketplaceEntry]:
        """Listed tickets with their resale count read now."""
        listed = await self.registry.list_marketplace_tickets()
        counts = await asyncio.gather(*(
            self.registry.count_resale_history(t.mint) for t in listed
        ))
        return [
            build_marketplace_entry(ticket, count)
            for ticket, count in zip(listed, counts)
        ]

    async def lifecycle(self, mint: str) -> TicketLifecycle | None:
        ticket = await self.registry.get_ticket(MintAddress(mint))
        if ticket is None:
            return None
        history = await self.registry.list_resale_history(MintAddress(mint))
        return build_lifecycle(ticket, history)


# Singleton (initialized on startup)
orchestrator: TicketLifecycleOrchestrator | None = None


def init_orchestrator(
    registry: RegistryFacade, ledger: LedgerClient, catalog: Catalog,
) -> TicketLifecycleOrchestrator:
    global orchestrator
    orchestrator = TicketLifecycleOrchestrator(registry, ledger, catalog)
    return orchestrator


def get_orchestrator() -> TicketLifecycleOrchestrator:
    """FastAPI dependency for the shared orchestrator."""
    if orchestrator is None:
        raise RuntimeError("Orchestrator not initialized")
    return orchestrator
