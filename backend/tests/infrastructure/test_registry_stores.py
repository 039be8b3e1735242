"""Registry Stores — contract tests run against memory and SQL backends.

Tests cover:
    - create/read round-trip with identical field values (modulo timestamps)
    - duplicate email / mint surface as typed errors
    - listing and owner updates; owner update clears listed and is idempotent
    - originalPrice untouched by updates
    - resale history append, count and ordering
    - updates on an unknown mint are no-ops
"""

from dataclasses import replace
from decimal import Decimal

import pytest

from eventix.core.domain_types import MintAddress, WalletAddress
from eventix.core.errors import DuplicateEmailError, DuplicateMintError

from tests.factories import build_record, build_ticket


def _same(a, b) -> bool:
    """Field equality ignoring created_at (SQLite drops tz info)."""
    return replace(a, created_at=b.created_at) == b


# ─── Users ──────────────────────────────────────────────────────

async def test_create_and_find_user(store):
    user = await store.create_user("Alice", "alice@example.com", "hash-1")
    found = await store.find_user_by_email("alice@example.com")
    assert found is not None
    assert found.id == user.id
    assert (found.name, found.password_hash) == ("Alice", "hash-1")


async def test_find_unknown_user_returns_none(store):
    assert await store.find_user_by_email("ghost@example.com") is None


async def test_duplicate_email_rejected(store):
    await store.create_user("Alice", "alice@example.com", "hash-1")
    with pytest.raises(DuplicateEmailError):
        await store.create_user("Alice 2", "alice@example.com", "hash-2")


# ─── Tickets ────────────────────────────────────────────────────

async def test_ticket_round_trip(store):
    ticket = build_ticket()
    await store.create_ticket(ticket)
    assert _same(await store.get_ticket(ticket.mint), ticket)


async def test_duplicate_mint_rejected(store):
    await store.create_ticket(build_ticket())
    with pytest.raises(DuplicateMintError):
        await store.create_ticket(build_ticket(owner="WalletBob"))


async def test_get_unknown_ticket_returns_none(store):
    assert await store.get_ticket(MintAddress("nope")) is None


async def test_list_by_owner(store):
    await store.create_ticket(build_ticket(mint="M1", owner="WalletAlice"))
    await store.create_ticket(build_ticket(mint="M2", owner="WalletBob"))
    await store.create_ticket(build_ticket(mint="M3", owner="WalletAlice"))
    owned = await store.list_tickets_by_owner(WalletAddress("WalletAlice"))
    assert sorted(t.mint for t in owned) == ["M1", "M3"]


async def test_listing_update_round_trip(store):
    await store.create_ticket(build_ticket(mint="M1"))
    await store.create_ticket(build_ticket(mint="M2"))
    await store.update_ticket_listing(MintAddress("M1"), Decimal("0.12"), True)

    ticket = await store.get_ticket(MintAddress("M1"))
    assert ticket.listed is True
    assert ticket.price == Decimal("0.12")
    assert ticket.original_price == Decimal("0.10")
    listed = await store.list_marketplace_tickets()
    assert [t.mint for t in listed] == ["M1"]


async def test_owner_update_clears_listing(store):
    await store.create_ticket(build_ticket(listed=True))
    await store.update_ticket_owner(MintAddress("Mint1111"), WalletAddress("WalletBob"))
    ticket = await store.get_ticket(MintAddress("Mint1111"))
    assert ticket.owner == "WalletBob"
    assert ticket.listed is False
    assert ticket.original_price == Decimal("0.10")


async def test_owner_update_idempotent(store):
    await store.create_ticket(build_ticket(listed=True))
    mint, bob = MintAddress("Mint1111"), WalletAddress("WalletBob")
    await store.update_ticket_owner(mint, bob)
    once = await store.get_ticket(mint)
    await store.update_ticket_owner(mint, bob)
    assert await store.get_ticket(mint) == once


async def test_updates_on_unknown_mint_are_noops(store):
    await store.update_ticket_listing(MintAddress("nope"), Decimal("1"), True)
    await store.update_ticket_owner(MintAddress("nope"), WalletAddress("W"))
    assert await store.get_ticket(MintAddress("nope")) is None


# ─── Resale history ─────────────────────────────────────────────

async def test_history_count_starts_at_zero(store):
    assert await store.count_resale_history(MintAddress("Mint1111")) == 0


async def test_history_append_count_and_order(store):
    await store.append_resale_history(build_record(resale_number=2))
    await store.append_resale_history(build_record(resale_number=1))
    await store.append_resale_history(build_record(mint="Other", resale_number=1))

    mint = MintAddress("Mint1111")
    assert await store.count_resale_history(mint) == 2
    history = await store.list_resale_history(mint)
    assert [r.resale_number for r in history] == [1, 2]
    assert history[0].seller == "WalletAlice"
    assert history[0].buyer == "WalletBob"
    assert history[0].price == Decimal("0.12")


async def test_probe_succeeds_on_healthy_store(store):
    await store.probe()
