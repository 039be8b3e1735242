"""SQL Registry Store — durable RegistryStore adapter on async SQLAlchemy.

Invariants:
    - Rows are converted to core entities before leaving this module
    - create_user / create_ticket check uniqueness first and also map
      StorageConflictError from a racing insert to DuplicateEmail / DuplicateMint
    - update_* on an absent mint is a no-op
    - original_price is never part of an UPDATE statement

Design Decisions:
    - One short session per call: the facade may abandon this store at any call
"""

from decimal import Decimal

from sqlalchemy import func, select, update

from eventix.core.domain_types import MintAddress, WalletAddress, to_price
from eventix.core.entities import ResaleHistoryRecord, Ticket, User
from eventix.core.errors import (
    DuplicateEmailError, DuplicateMintError, StorageConflictError,
)
from eventix.infrastructure.database import DatabaseSessionManager
from eventix.models.resale_history import ResaleHistoryRow
from eventix.models.ticket import TicketRow
from eventix.models.user import UserRow


def _to_user(row: UserRow) -> User:
    return User(
        id=row.id,
        name=row.name,
        email=row.email,
        password_hash=row.password_hash,
        created_at=row.created_at,
    )


def _to_ticket(row: TicketRow) -> Ticket:
    return Ticket(
        mint=MintAddress(row.mint_address),
        name=row.name,
        description=row.description,
        event_date=row.event_date,
        price=to_price(row.price),
        original_price=to_price(row.original_price),
        image=row.image,
        listed=bool(row.is_listed),
        owner=WalletAddress(row.owner),
        created_at=row.created_at,
    )


def _to_record(row: ResaleHistoryRow) -> ResaleHistoryRecord:
    return ResaleHistoryRecord(
        ticket_id=MintAddress(row.ticket_id),
        seller=WalletAddress(row.from_wallet),
        buyer=WalletAddress(row.to_wallet),
        price=to_price(row.price),
        resale_number=row.resale_number,
        timestamp=row.created_at,
    )


class SqlRegistryStore:
    """Durable registry backed by any SQLAlchemy async dialect."""

    def __init__(
        self, manager: DatabaseSessionManager, create_schema: bool = False,
    ):
        self._manager = manager
        self._create_schema = create_schema

    async def probe(self) -> None:
        await self._manager.probe(self._create_schema)

    # ─── Users ──────────────────────────────────────────────────

    async def create_user(
        self, name: str, email: str, password_hash: str,
    ) -> User:
        try:
            async with self._manager.session() as db:
                existing = await db.execute(
                    select(UserRow.id).where(UserRow.email == email),
                )
                if existing.scalar_one_or_none() is not None:
                    raise DuplicateEmailError(email)
                row = UserRow(name=name, email=email, password_hash=password_hash)
                db.add(row)
                await db.commit()
                await db.refresh(row)
                return _to_user(row)
        except StorageConflictError:
            raise DuplicateEmailError(email)

    async def find_user_by_email(self, email: str) -> User | None:
        async with self._manager.session() as db:
            result = await db.execute(
                select(UserRow).where(UserRow.email == email),
            )
            row = result.scalar_one_or_none()
            return _to_user(row) if row else None

    # ─── Tickets ────────────────────────────────────────────────

    async def create_ticket(self, ticket: Ticket) -> Ticket:
        try:
            async with self._manager.session() as db:
                if await db.get(TicketRow, ticket.mint) is not None:
                    raise DuplicateMintError(ticket.mint)
                db.add(TicketRow(
                    mint_address=ticket.mint,
                    name=ticket.name,
                    description=ticket.description,
                    event_date=ticket.event_date,
                    price=ticket.price,
                    original_price=ticket.original_price,
                    image=ticket.image,
                    is_listed=ticket.listed,
                    owner=ticket.owner,
                    created_at=ticket.created_at,
                ))
                await db.commit()
                return ticket
        except StorageConflictError:
            raise DuplicateMintError(ticket.mint)

    async def get_ticket(self, mint: MintAddress) -> Ticket | None:
        async with self._manager.session() as db:
            row = await db.get(TicketRow, mint)
            return _to_ticket(row) if row else None

    async def list_tickets_by_owner(self, wallet: WalletAddress) -> list[Ticket]:
        async with self._manager.session() as db:
            result = await db.execute(
                select(TicketRow)
                .where(TicketRow.owner == wallet)
                .order_by(TicketRow.created_at),
            )
            return [_to_ticket(r) for r in result.scalars().all()]

    async def list_marketplace_tickets(self) -> list[Ticket]:
        async with self._manager.session() as db:
            result = await db.execute(
                select(TicketRow)
                .where(TicketRow.is_listed.is_(True))
                .order_by(TicketRow.created_at),
            )
            return [_to_ticket(r) for r in result.scalars().all()]

    async def update_ticket_listing(
        self, mint: MintAddress, price: Decimal, listed: bool,
    ) -> None:
        async with self._manager.session() as db:
            await db.execute(
                update(TicketRow)
                .where(TicketRow.mint_address == mint)
                .values(price=price, is_listed=listed),
            )
            await db.commit()

    async def update_ticket_owner(
        self, mint: MintAddress, new_owner: WalletAddress,
    ) -> None:
        async with self._manager.session() as db:
            await db.execute(
                update(TicketRow)
                .where(TicketRow.mint_address == mint)
                .values(owner=new_owner, is_listed=False),
            )
            await db.commit()

    # ─── Resale history ─────────────────────────────────────────

    async def append_resale_history(self, record: ResaleHistoryRecord) -> None:
        async with self._manager.session() as db:
            db.add(ResaleHistoryRow(
                ticket_id=record.ticket_id,
                from_wallet=record.seller,
                to_wallet=record.buyer,
                price=record.price,
                resale_number=record.resale_number,
                created_at=record.timestamp,
            ))
            await db.commit()

    async def count_resale_history(self, mint: MintAddress) -> int:
        async with self._manager.session() as db:
            result = await db.execute(
                select(func.count())
                .select_from(ResaleHistoryRow)
                .where(ResaleHistoryRow.ticket_id == mint),
            )
            return int(result.scalar_one())

    async def list_resale_history(
        self, mint: MintAddress,
    ) -> list[ResaleHistoryRecord]:
        async with self._manager.session() as db:
            result = await db.execute(
                select(ResaleHistoryRow)
                .where(ResaleHistoryRow.ticket_id == mint)
                .order_by(ResaleHistoryRow.resale_number),
            )
            return [_to_record(r) for r in result.scalars().all()]
