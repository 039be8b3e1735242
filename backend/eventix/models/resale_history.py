"""Resale History ORM — append-only log of marketplace resales.

Invariants:
    - Rows are never updated or deleted
    - COUNT(*) per ticket_id is the authoritative resale count
    - resale_number is 1-based per ticket_id
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import DateTime, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from eventix.db.base import Base


class ResaleHistoryRow(Base):
    __tablename__ = "resale_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    ticket_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    from_wallet: Mapped[str] = mapped_column(String(64), nullable=False)
    to_wallet: Mapped[str] = mapped_column(String(64), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(20, 9), nullable=False)
    resale_number: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
