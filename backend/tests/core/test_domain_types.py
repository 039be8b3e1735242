"""Domain Types — tests for price normalization and limit constants."""

from decimal import Decimal

import pytest

from eventix.core.domain_types import (
    MAX_MARKUP_FACTOR, MAX_RESALES, LedgerRejectionKind, RegistryBackend,
    TicketState, to_price,
)


def test_limits():
    assert MAX_RESALES == 3
    assert MAX_MARKUP_FACTOR == Decimal("1.25")


def test_to_price_from_float_has_no_binary_noise():
    assert to_price(0.1) == Decimal("0.100000000")
    assert str(to_price(0.1)) == "0.100000000"


def test_to_price_from_string_and_int():
    assert to_price("0.25") == Decimal("0.25")
    assert to_price(2) == Decimal("2")


def test_to_price_rounds_to_lamports():
    assert to_price("0.1234567891") == Decimal("0.123456789")


def test_to_price_rejects_garbage():
    with pytest.raises(ArithmeticError):
        to_price("abc")


def test_enums_serialize_as_strings():
    assert TicketState.RETIRED.value == "retired"
    assert RegistryBackend.FALLBACK.value == "fallback"
    assert LedgerRejectionKind("AlreadyMaxResales") is (
        LedgerRejectionKind.ALREADY_MAX_RESALES
    )
