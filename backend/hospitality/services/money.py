"""Fixed-point helpers shared by the billing computations."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Final

from hospitality.core.errors import InvalidAmount

MONEY_PLACES: Final = Decimal("0.01")
ZERO: Final = Decimal("0.00")

Amount = Decimal | int | float | str


def to_money(value: Amount) -> Decimal:
    """Normalize numeric values to a money-safe decimal."""

    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def require_amount(value: Amount | None, *, field: str = "amount") -> Decimal:
    """Return ``value`` as money, rejecting negative and non-finite input."""

    if value is None or isinstance(value, bool):
        raise InvalidAmount(f"{field} is required")
    try:
        number = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidAmount(f"{field} is not a number: {value!r}") from exc
    if not number.is_finite():
        raise InvalidAmount(f"{field} must be finite, got {value!r}")
    if number < 0:
        raise InvalidAmount(f"{field} must not be negative, got {value!r}")
    return number.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def optional_amount(value: Amount | None, *, field: str = "amount") -> Decimal:
    """Like :func:`require_amount` but treats ``None`` as zero."""

    if value is None:
        return ZERO
    return require_amount(value, field=field)


def format_money(value: Amount) -> str:
    """Render an amount with exactly two decimal places."""

    return format(to_money(value), "f")


__all__ = [
    "Amount",
    "MONEY_PLACES",
    "ZERO",
    "format_money",
    "optional_amount",
    "require_amount",
    "to_money",
]
