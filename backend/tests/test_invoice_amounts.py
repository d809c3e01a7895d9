"""Invoice amount derivation tests."""

from __future__ import annotations

from decimal import Decimal
from types import SimpleNamespace

import pytest

from hospitality.core.errors import InvalidAmount, MissingReservation
from hospitality.services.invoice_amounts import derive_invoice_amounts


def _reservation(total, taxes=None):
    return SimpleNamespace(total_amount=total, taxes_amount=taxes)


def test_recorded_taxes_are_used_as_is() -> None:
    amounts = derive_invoice_amounts(_reservation(Decimal("1150"), Decimal("150")))

    assert amounts.subtotal == Decimal("1000.00")
    assert amounts.tax_amount == Decimal("150.00")
    assert amounts.total_amount == Decimal("1150.00")


@pytest.mark.parametrize("taxes", [None, Decimal("0")])
def test_missing_taxes_apply_the_flat_rate(taxes) -> None:
    amounts = derive_invoice_amounts(_reservation(Decimal("1150"), taxes))

    assert amounts.subtotal == Decimal("1150.00")
    assert amounts.tax_amount == Decimal("172.50")
    assert amounts.total_amount == Decimal("1322.50")


def test_configured_rate_is_honoured() -> None:
    amounts = derive_invoice_amounts(_reservation("200.00"), Decimal("0.05"))
    assert amounts.tax_amount == Decimal("10.00")
    assert amounts.total_amount == Decimal("210.00")


def test_rate_rounding_is_half_up() -> None:
    amounts = derive_invoice_amounts(_reservation("0.10"), Decimal("0.15"))
    assert amounts.tax_amount == Decimal("0.02")


@pytest.mark.parametrize("total", [None, Decimal("0"), 0])
def test_zero_total_yields_zero_amounts(total) -> None:
    amounts = derive_invoice_amounts(_reservation(total, Decimal("0")))
    assert amounts.subtotal == Decimal("0")
    assert amounts.tax_amount == Decimal("0")
    assert amounts.total_amount == Decimal("0")


def test_total_always_equals_subtotal_plus_tax() -> None:
    for total in ("99.99", "1.01", "12345.67"):
        amounts = derive_invoice_amounts(_reservation(total))
        assert amounts.total_amount == amounts.subtotal + amounts.tax_amount


def test_missing_reservation() -> None:
    with pytest.raises(MissingReservation):
        derive_invoice_amounts(None)


@pytest.mark.parametrize(
    ("total", "taxes"),
    [
        (Decimal("-10"), None),
        (Decimal("100"), Decimal("-1")),
        (Decimal("100"), Decimal("150")),
        ("not-a-number", None),
    ],
)
def test_invalid_reservation_amounts(total, taxes) -> None:
    with pytest.raises(InvalidAmount):
        derive_invoice_amounts(_reservation(total, taxes))


def test_negative_rate_is_rejected() -> None:
    with pytest.raises(InvalidAmount):
        derive_invoice_amounts(_reservation("100"), Decimal("-0.15"))
