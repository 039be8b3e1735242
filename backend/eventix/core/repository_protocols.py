"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell: dependency arrows point inward only
    - Durable and fallback registry adapters satisfy the same RegistryStore contract
    - Adapters raise StorageUnavailableError for connectivity/timeout/schema failures
      and Duplicate*Error for uniqueness violations; nothing else is expected

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO, the pure core never awaits
"""

from decimal import Decimal
from typing import Protocol

from eventix.core.domain_types import MintAddress, WalletAddress
from eventix.core.entities import (
    CatalogItem, MintReceipt, ResaleHistoryRecord, Ticket, User,
)


class RegistryStore(Protocol):
    """Contract for user/ticket/resale-history persistence."""
    async def probe(self) -> None: ...

    async def create_user(
        self, name: str, email: str, password_hash: str,
    ) -> User: ...
    async def find_user_by_email(self, email: str) -> User | None: ...

    async def create_ticket(self, ticket: Ticket) -> Ticket: ...
    async def get_ticket(self, mint: MintAddress) -> Ticket | None: ...
    async def list_tickets_by_owner(self, wallet: WalletAddress) -> list[Ticket]: ...
    async def list_marketplace_tickets(self) -> list[Ticket]: ...
    async def update_ticket_listing(
        self, mint: MintAddress, price: Decimal, listed: bool,
    ) -> None: ...
    async def update_ticket_owner(
        self, mint: MintAddress, new_owner: WalletAddress,
    ) -> None: ...

    async def append_resale_history(self, record: ResaleHistoryRecord) -> None: ...
    async def count_resale_history(self, mint: MintAddress) -> int: ...
    async def list_resale_history(
        self, mint: MintAddress,
    ) -> list[ResaleHistoryRecord]: ...


class LedgerClient(Protocol):
    """Contract for the external ledger, implemented by LedgerGateway."""
    async def mint(self, item: CatalogItem) -> MintReceipt: ...
    async def list_ticket(self, mint: MintAddress, price: Decimal) -> str: ...
    async def transfer(
        self,
        mint: MintAddress,
        from_owner: WalletAddress,
        to_owner: WalletAddress,
        price: Decimal,
    ) -> str: ...
