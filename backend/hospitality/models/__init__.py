"""ORM models package export."""

from hospitality.models.folio import (
    CREDIT_POSTING_TYPES,
    DEBIT_POSTING_TYPES,
    Folio,
    FolioPosting,
    FolioStatus,
    PostingType,
)
from hospitality.models.guest import Guest
from hospitality.models.invoice import Invoice
from hospitality.models.property import Property, Unit
from hospitality.models.reservation import (
    PaymentStatus,
    Reservation,
    ReservationStatus,
)
from hospitality.models.transaction_code import (
    SYSTEM_TRANSACTION_CODES,
    TransactionCategory,
    TransactionCode,
)
from hospitality.models.user import User, UserRole, UserStatus

__all__ = [
    "CREDIT_POSTING_TYPES",
    "DEBIT_POSTING_TYPES",
    "Folio",
    "FolioPosting",
    "FolioStatus",
    "Guest",
    "Invoice",
    "PaymentStatus",
    "PostingType",
    "Property",
    "Reservation",
    "ReservationStatus",
    "SYSTEM_TRANSACTION_CODES",
    "TransactionCategory",
    "TransactionCode",
    "Unit",
    "User",
    "UserRole",
    "UserStatus",
]
