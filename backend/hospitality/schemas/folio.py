"""Folio and posting schemas."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from hospitality.models.folio import FolioStatus, PostingType
from hospitality.models.transaction_code import TransactionCategory
from hospitality.schemas.common import LabelRead
from hospitality.services.status_labels import folio_status_label, posting_type_label


class FolioCreate(BaseModel):
    """Payload to open a folio for a reservation."""

    reservation_id: uuid.UUID
    folio_type: str = Field(default="guest", max_length=32)
    credit_limit: Decimal | None = Field(default=None, ge=Decimal("0"))
    notes: str | None = Field(default=None, max_length=1024)


class FolioTotalsRead(BaseModel):
    total_debits: Decimal
    total_credits: Decimal
    balance: Decimal

    model_config = ConfigDict(from_attributes=True)


class FolioRead(BaseModel):
    """Serialized folio."""

    id: uuid.UUID
    folio_number: str
    folio_type: str
    status: FolioStatus
    balance: Decimal
    credit_limit: Decimal | None = None
    notes: str | None = None
    reservation_id: uuid.UUID
    guest_id: uuid.UUID | None = None
    closed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status_label(self) -> LabelRead:
        return LabelRead.from_label(folio_status_label(self.status))


class FolioDetailRead(FolioRead):
    """Folio together with freshly computed totals."""

    totals: FolioTotalsRead


class PostingCreate(BaseModel):
    """Payload to add a ledger entry to a folio."""

    posting_type: PostingType
    transaction_code: str | None = Field(default=None, min_length=1, max_length=16)
    description: str | None = Field(default=None, min_length=1, max_length=255)
    amount: Decimal | None = Field(default=None, gt=Decimal("0"))
    tax_amount: Decimal | None = Field(default=None, ge=Decimal("0"))
    posting_date: date | None = None
    reference: str | None = Field(default=None, max_length=64)
    quantity: int | None = Field(default=None, ge=1)


class PostingRead(BaseModel):
    """Serialized folio posting."""

    id: uuid.UUID
    folio_id: uuid.UUID
    posting_date: date
    posting_type: PostingType
    description: str
    amount: Decimal
    tax_amount: Decimal | None = None
    quantity: int | None = None
    reference: str | None = None
    posted_by: str | None = None
    is_reversed: bool
    reversed_at: datetime | None = None
    reversed_by: str | None = None
    transaction_code_id: uuid.UUID | None = None
    code: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def type_label(self) -> LabelRead:
        return LabelRead.from_label(posting_type_label(self.posting_type))


class LedgerLineRead(BaseModel):
    """One row of the folio transaction listing."""

    posting: PostingRead
    code: str | None = None
    debit: Decimal
    credit: Decimal
    balance: Decimal
    is_reversed: bool

    model_config = ConfigDict(from_attributes=True)


class LedgerRead(BaseModel):
    folio_id: uuid.UUID
    lines: list[LedgerLineRead]
    totals: FolioTotalsRead


class TransactionCodeRead(BaseModel):
    """Entry of the cashier's transaction code picker."""

    id: uuid.UUID
    code: str
    name_en: str
    name_ar: str | None = None
    category: TransactionCategory
    default_amount: Decimal | None = None
    is_tax_exempt: bool
    is_revenue: bool
    is_active: bool

    model_config = ConfigDict(from_attributes=True)
