"""Service layer exports."""
from hospitality.services import (
    auth_service,
    folio_service,
    invoice_service,
    transaction_code_service,
    user_service,
)

__all__ = [
    "auth_service",
    "folio_service",
    "invoice_service",
    "transaction_code_service",
    "user_service",
]
