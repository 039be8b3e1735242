"""Resale Rules — tests for the pure anti-scalping decision.

Tests cover:
    - markup ceiling is original_price × 1.25, boundary inclusive
    - sub-lamport ceilings floor to whole lamports, never round up
    - markup measured against original_price, not the current price
    - resale ceiling denies regardless of price and is checked first
    - denial maps to the matching typed error with the computed maximum
    - ticket_state derivation (owned, listed, retired)
"""

from decimal import Decimal

from eventix.core.domain_types import (
    MAX_RESALES, ResaleDenialReason, TicketState,
)
from eventix.core.errors import MarkupExceededError, ResaleLimitExceededError
from eventix.core.resale_rules import (
    can_resell, evaluate_resale, max_allowed_price, ticket_state,
)

from tests.factories import build_ticket


# ─── max_allowed_price ──────────────────────────────────────────

def test_max_allowed_price_is_125_percent_of_original():
    assert max_allowed_price(Decimal("0.10")) == Decimal("0.125")


def test_max_allowed_price_keeps_lamport_precision():
    assert max_allowed_price(Decimal("0.000000008")) == Decimal("0.000000010")


def test_max_allowed_price_floors_sub_lamport_ceiling():
    # 0.100000003 × 1.25 = 0.12500000375
    assert max_allowed_price(Decimal("0.100000003")) == Decimal("0.125000003")


# ─── evaluate_resale ────────────────────────────────────────────

def test_markup_above_limit_denied_with_maximum():
    decision = evaluate_resale(build_ticket(price="0.10"), Decimal("0.14"), 0)
    assert not decision.allowed
    assert decision.reason is ResaleDenialReason.MARKUP_EXCEEDED
    assert decision.max_allowed_price == Decimal("0.125")


def test_markup_within_limit_allowed():
    decision = evaluate_resale(build_ticket(price="0.10"), Decimal("0.12"), 0)
    assert decision.allowed
    assert decision.reason is None


def test_price_exactly_at_ceiling_allowed():
    decision = evaluate_resale(build_ticket(price="0.10"), Decimal("0.125"), 0)
    assert decision.allowed


def test_price_one_lamport_above_ceiling_denied():
    decision = evaluate_resale(
        build_ticket(price="0.10"), Decimal("0.125000001"), 0,
    )
    assert decision.reason is ResaleDenialReason.MARKUP_EXCEEDED


def test_odd_lamport_original_denies_price_above_exact_ceiling():
    decision = evaluate_resale(
        build_ticket(price="0.100000003"), Decimal("0.125000004"), 0,
    )
    assert decision.reason is ResaleDenialReason.MARKUP_EXCEEDED
    assert decision.max_allowed_price == Decimal("0.125000003")


def test_odd_lamport_original_allows_floored_ceiling():
    decision = evaluate_resale(
        build_ticket(price="0.100000003"), Decimal("0.125000003"), 0,
    )
    assert decision.allowed


def test_price_below_original_allowed():
    decision = evaluate_resale(build_ticket(price="0.10"), Decimal("0.05"), 2)
    assert decision.allowed


def test_markup_measured_against_original_not_current_price():
    # Already listed at the ceiling; 1.25 × current price would compound
    ticket = build_ticket(price="0.125", original_price="0.10")
    decision = evaluate_resale(ticket, Decimal("0.15625"), 1)
    assert decision.reason is ResaleDenialReason.MARKUP_EXCEEDED
    assert decision.max_allowed_price == Decimal("0.125")


def test_resale_limit_denies_regardless_of_price():
    decision = evaluate_resale(
        build_ticket(price="0.10"), Decimal("0.01"), MAX_RESALES,
    )
    assert decision.reason is ResaleDenialReason.RESALE_LIMIT_EXCEEDED


def test_resale_limit_checked_before_markup():
    decision = evaluate_resale(
        build_ticket(price="0.10"), Decimal("9.99"), MAX_RESALES,
    )
    assert decision.reason is ResaleDenialReason.RESALE_LIMIT_EXCEEDED


def test_two_prior_resales_still_allowed():
    decision = evaluate_resale(build_ticket(price="0.10"), Decimal("0.11"), 2)
    assert decision.allowed
    assert decision.resale_count == 2


# ─── to_error ───────────────────────────────────────────────────

def test_markup_denial_maps_to_markup_error():
    decision = evaluate_resale(build_ticket(price="0.10"), Decimal("0.14"), 0)
    err = decision.to_error(Decimal("0.14"))
    assert isinstance(err, MarkupExceededError)
    assert err.max_allowed_price == Decimal("0.125")
    assert err.message == "Price exceeds 25% markup limit. Max: 0.125 SOL"


def test_limit_denial_maps_to_resale_limit_error():
    decision = evaluate_resale(build_ticket(), Decimal("0.10"), 3)
    err = decision.to_error(Decimal("0.10"))
    assert isinstance(err, ResaleLimitExceededError)
    assert err.message == "Maximum resales (3) exceeded"
    assert err.resale_count == 3


# ─── can_resell / ticket_state ──────────────────────────────────

def test_can_resell_below_ceiling_only():
    assert can_resell(0)
    assert can_resell(MAX_RESALES - 1)
    assert not can_resell(MAX_RESALES)


def test_ticket_state_owned():
    assert ticket_state(build_ticket(), 0) is TicketState.OWNED


def test_ticket_state_listed_wins_over_count():
    assert ticket_state(build_ticket(listed=True), 1) is TicketState.LISTED


def test_ticket_state_retired_at_ceiling():
    assert ticket_state(build_ticket(), MAX_RESALES) is TicketState.RETIRED
