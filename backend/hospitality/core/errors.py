"""Domain errors raised by the billing core.

Every error derives from ``ValueError``; routers map the subclasses to
specific status codes.
"""

from __future__ import annotations


class BillingError(ValueError):
    """Base class for folio and invoice failures."""


class InvalidAmount(BillingError):
    """A monetary value was negative, NaN or infinite."""


class PayloadTooLarge(BillingError):
    """A TLV value does not fit in a single length byte."""

    def __init__(self, tag: int, length: int) -> None:
        super().__init__(
            f"TLV value for tag {tag} is {length} bytes; the maximum is 255"
        )
        self.tag = tag
        self.length = length


class MalformedPayload(BillingError):
    """A stored QR payload could not be parsed back into TLV records."""


class MissingReservation(BillingError):
    """The reservation a computation depends on was not supplied or not found."""


class MissingFolio(BillingError):
    """The folio a computation depends on was not supplied or not found."""


class InvoiceAlreadyIssued(BillingError):
    """A reservation already carries a tax invoice."""


class NumberingConflict(BillingError):
    """No free document number could be claimed after repeated collisions."""


class UnknownTransactionCode(BillingError):
    """A posting named a transaction code that is missing or inactive."""


__all__ = [
    "BillingError",
    "InvalidAmount",
    "InvoiceAlreadyIssued",
    "MalformedPayload",
    "MissingFolio",
    "MissingReservation",
    "NumberingConflict",
    "PayloadTooLarge",
    "UnknownTransactionCode",
]
