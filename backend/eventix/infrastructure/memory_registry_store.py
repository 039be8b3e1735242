"""Memory Registry Store — volatile RegistryStore used when the durable one is down.

Invariants:
    - Same contract and error behavior as SqlRegistryStore
    - Records are frozen dataclasses; updates replace the entry
    - Contents live for the process lifetime only and are never merged back

Design Decisions:
    - Dicts keyed by email / mint: uniqueness checks are lookups, not scans
    - Insertion order preserved (dict), matching created_at ordering of the SQL store
"""

from collections import defaultdict
from decimal import Decimal

from eventix.core.domain_types import MintAddress, WalletAddress
from eventix.core.entities import ResaleHistoryRecord, Ticket, User
from eventix.core.errors import DuplicateEmailError, DuplicateMintError


class MemoryRegistryStore:
    """In-process registry. Constructed once, owned by the RegistryFacade."""

    def __init__(self):
        self._users: dict[str, User] = {}
        self._tickets: dict[MintAddress, Ticket] = {}
        self._history: defaultdict[MintAddress, list[ResaleHistoryRecord]] = (
            defaultdict(list)
        )

    async def probe(self) -> None:
        return None

    async def create_user(
        self, name: str, email: str, password_hash: str,
    ) -> User:
        if email in self._users:
            raise DuplicateEmailError(email)
        user = User(
            id=len(self._users) + 1,
            name=name,
            email=email,
            password_hash=password_hash,
        )
        self._users[email] = user
        return user

    async def find_user_by_email(self, email: str) -> User | None:
        return self._users.get(email)

    async def create_ticket(self, ticket: Ticket) -> Ticket:
        if ticket.mint in self._tickets:
            raise DuplicateMintError(ticket.mint)
        self._tickets[ticket.mint] = ticket
        return ticket

    async def get_ticket(self, mint: MintAddress) -> Ticket | None:
        return self._tickets.get(mint)

    async def list_tickets_by_owner(self, wallet: WalletAddress) -> list[Ticket]:
        return [t for t in self._tickets.values() if t.owner == wallet]

    async def list_marketplace_tickets(self) -> list[Ticket]:
        return [t for t in self._tickets.values() if t.listed]

    async def update_ticket_listing(
        self, mint: MintAddress, price: Decimal, listed: bool,
    ) -> None:
        ticket = self._tickets.get(mint)
        if ticket is not None:
            self._tickets[mint] = ticket.with_listing(price, listed)

    async def update_ticket_owner(
        self, mint: MintAddress, new_owner: WalletAddress,
    ) -> None:
        ticket = self._tickets.get(mint)
        if ticket is not None:
            self._tickets[mint] = ticket.with_owner(new_owner)

    async def append_resale_history(self, record: ResaleHistoryRecord) -> None:
        self._history[record.ticket_id].append(record)

    async def count_resale_history(self, mint: MintAddress) -> int:
        return len(self._history.get(mint, ()))

    async def list_resale_history(
        self, mint: MintAddress,
    ) -> list[ResaleHistoryRecord]:
        return sorted(
            self._history.get(mint, ()), key=lambda r: r.resale_number,
        )
