"""Ticket ORM — one row per minted ticket.

Invariants:
    - mint_address is the primary key (assigned by the ledger, never reassigned)
    - original_price is written once on insert and never updated
    - is_listed is false after every owner update

Design Decisions:
    - Numeric(20, 9): lamport precision, returned as Decimal
    - event_date kept as text: the catalog carries display dates, not timestamps
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from eventix.db.base import Base


class TicketRow(Base):
    __tablename__ = "tickets"

    mint_address: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    event_date: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    price: Mapped[Decimal] = mapped_column(Numeric(20, 9), nullable=False)
    original_price: Mapped[Decimal] = mapped_column(Numeric(20, 9), nullable=False)
    image: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    is_listed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    owner: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
