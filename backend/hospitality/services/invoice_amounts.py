"""Derivation of tax invoice amounts from a reservation."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Final, Protocol

from hospitality.core.errors import InvalidAmount, MissingReservation
from hospitality.services.money import ZERO, Amount, optional_amount, to_money

DEFAULT_VAT_RATE: Final = Decimal("0.15")


class ReservationAmounts(Protocol):
    total_amount: Amount | None
    taxes_amount: Amount | None


@dataclass(slots=True, frozen=True)
class InvoiceAmounts:
    """Subtotal, VAT and grand total of a tax invoice."""

    subtotal: Decimal
    tax_amount: Decimal
    total_amount: Decimal


_ZERO_AMOUNTS: Final = InvoiceAmounts(subtotal=ZERO, tax_amount=ZERO, total_amount=ZERO)


def derive_invoice_amounts(
    reservation: ReservationAmounts | None,
    vat_rate: Decimal = DEFAULT_VAT_RATE,
) -> InvoiceAmounts:
    """Split a reservation total into subtotal and VAT.

    Recorded taxes are taken as-is; when the reservation carries no taxes the
    flat ``vat_rate`` is applied on top of the total. A reservation without a
    total (a comped stay) yields zero amounts.
    """

    if reservation is None:
        raise MissingReservation("Reservation is required to derive invoice amounts")

    rate = Decimal(str(vat_rate)) if isinstance(vat_rate, float) else Decimal(vat_rate)
    if not rate.is_finite() or rate < 0:
        raise InvalidAmount(f"VAT rate must be a non-negative number, got {vat_rate!r}")

    total = optional_amount(reservation.total_amount, field="total_amount")
    if total == ZERO:
        return _ZERO_AMOUNTS

    taxes = optional_amount(reservation.taxes_amount, field="taxes_amount")
    subtotal = total - taxes
    if subtotal < ZERO:
        raise InvalidAmount(
            f"taxes_amount {taxes} exceeds total_amount {total} on the reservation"
        )

    tax_amount = taxes if taxes != ZERO else to_money(subtotal * rate)
    return InvoiceAmounts(
        subtotal=subtotal,
        tax_amount=tax_amount,
        total_amount=subtotal + tax_amount,
    )


__all__ = ["DEFAULT_VAT_RATE", "InvoiceAmounts", "derive_invoice_amounts"]
