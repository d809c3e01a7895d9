"""Schema exports."""

from hospitality.schemas.auth import Token
from hospitality.schemas.common import LabelRead
from hospitality.schemas.folio import (
    FolioCreate,
    FolioDetailRead,
    FolioRead,
    FolioTotalsRead,
    LedgerLineRead,
    LedgerRead,
    PostingCreate,
    PostingRead,
)
from hospitality.schemas.invoice import (
    InvoicePaymentRequest,
    InvoiceQRRead,
    InvoiceRead,
    TLVRecordRead,
)

__all__ = [
    "FolioCreate",
    "FolioDetailRead",
    "FolioRead",
    "FolioTotalsRead",
    "InvoicePaymentRequest",
    "InvoiceQRRead",
    "InvoiceRead",
    "LabelRead",
    "LedgerLineRead",
    "LedgerRead",
    "PostingCreate",
    "PostingRead",
    "TLVRecordRead",
    "Token",
]
