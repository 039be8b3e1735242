"""Initial schema — users, tickets, resale_history.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "tickets",
        sa.Column("mint_address", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("event_date", sa.String(255), nullable=False, server_default=""),
        sa.Column("price", sa.Numeric(20, 9), nullable=False),
        sa.Column("original_price", sa.Numeric(20, 9), nullable=False),
        sa.Column("image", sa.String(500), nullable=False, server_default=""),
        sa.Column("is_listed", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("owner", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_tickets_owner", "tickets", ["owner"])

    op.create_table(
        "resale_history",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("ticket_id", sa.String(64), nullable=False),
        sa.Column("from_wallet", sa.String(64), nullable=False),
        sa.Column("to_wallet", sa.String(64), nullable=False),
        sa.Column("price", sa.Numeric(20, 9), nullable=False),
        sa.Column("resale_number", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_resale_history_ticket_id", "resale_history", ["ticket_id"])


def downgrade() -> None:
    op.drop_index("ix_resale_history_ticket_id", table_name="resale_history")
    op.drop_table("resale_history")
    op.drop_index("ix_tickets_owner", table_name="tickets")
    op.drop_table("tickets")
    op.drop_table("users")
