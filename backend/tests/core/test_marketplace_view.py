"""Marketplace & Lifecycle Views — tests for read-side assembly.

Tests cover:
    - canResale derived from the resale count passed in
    - markup percent relative to original price, zero-safe
    - lifecycle orders history and derives state and compliance
"""

from decimal import Decimal

from eventix.core.domain_types import TicketState
from eventix.core.marketplace_view import (
    build_lifecycle, build_marketplace_entry, markup_percent,
)

from tests.factories import build_record, build_ticket


def test_marketplace_entry_resalable_below_ceiling():
    entry = build_marketplace_entry(build_ticket(listed=True), 2)
    assert entry.resale_count == 2
    assert entry.can_resale is True


def test_marketplace_entry_not_resalable_at_ceiling():
    entry = build_marketplace_entry(build_ticket(listed=True), 3)
    assert entry.can_resale is False


def test_markup_percent_twenty():
    ticket = build_ticket(price="0.12", original_price="0.10")
    assert markup_percent(ticket) == Decimal("20.00")


def test_markup_percent_negative_when_discounted():
    ticket = build_ticket(price="0.05", original_price="0.10")
    assert markup_percent(ticket) == Decimal("-50.00")


def test_markup_percent_zero_original_price():
    ticket = build_ticket(price="0.10", original_price="0")
    assert markup_percent(ticket) == Decimal("0.00")


def test_lifecycle_sorts_history_by_resale_number():
    history = [
        build_record(resale_number=2, seller="WalletBob", buyer="WalletCarol"),
        build_record(resale_number=1),
    ]
    view = build_lifecycle(build_ticket(owner="WalletCarol"), history)
    assert [r.resale_number for r in view.history] == [1, 2]
    assert view.resale_count == 2
    assert view.can_resale is True
    assert view.state is TicketState.OWNED


def test_lifecycle_listed_within_limits():
    ticket = build_ticket(price="0.12", original_price="0.10", listed=True)
    view = build_lifecycle(ticket, [])
    assert view.state is TicketState.LISTED
    assert view.markup_percent == Decimal("20.00")
    assert view.max_allowed_price == Decimal("0.125")
    assert view.within_limits is True


def test_lifecycle_retired_after_three_resales():
    history = [build_record(resale_number=n) for n in (1, 2, 3)]
    view = build_lifecycle(build_ticket(), history)
    assert view.state is TicketState.RETIRED
    assert view.can_resale is False
    assert view.within_limits is True


def test_lifecycle_flags_price_above_ceiling():
    ticket = build_ticket(price="0.20", original_price="0.10", listed=True)
    assert build_lifecycle(ticket, []).within_limits is False
