"""Invoice schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class InvoiceRead(BaseModel):
    """Serialized tax invoice."""

    id: uuid.UUID
    invoice_no: str
    invoice_type: str
    reservation_id: uuid.UUID
    issued_at: datetime
    subtotal: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    seller_vat_number: str | None = None
    buyer_vat_number: str | None = None
    zatca_qr_code: str | None = None
    paid_at: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class InvoicePaymentRequest(BaseModel):
    """Payload recording when an invoice was settled."""

    paid_at: datetime | None = None


class TLVRecordRead(BaseModel):
    tag: int
    value: str

    model_config = ConfigDict(from_attributes=True)


class InvoiceQRRead(BaseModel):
    """Decoded QR payload of an invoice."""

    invoice_id: uuid.UUID
    invoice_no: str
    records: list[TLVRecordRead]
