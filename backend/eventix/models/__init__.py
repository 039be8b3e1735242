"""ORM Models — SQLAlchemy declarative models for the durable registry.

Invariants:
    - All models inherit from Base (db/base.py)
    - tickets.mint_address is the natural key shared with resale_history.ticket_id

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all
"""

from eventix.models.user import UserRow  # noqa: F401
from eventix.models.ticket import TicketRow  # noqa: F401
from eventix.models.resale_history import ResaleHistoryRow  # noqa: F401
