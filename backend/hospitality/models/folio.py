"""Guest folios and their ledger postings."""
from __future__ import annotations

import enum
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hospitality.db.base import Base
from hospitality.models.mixins import TimestampMixin

from hospitality.models.transaction_code import TransactionCode

if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from hospitality.models.guest import Guest
    from hospitality.models.reservation import Reservation


class FolioStatus(str, enum.Enum):
    """Folio lifecycle states."""

    OPEN = "open"
    CLOSED = "closed"
    TRANSFERRED = "transferred"
    SETTLED = "settled"


class PostingType(str, enum.Enum):
    """Kinds of ledger entries a folio accepts."""

    CHARGE = "charge"
    ADJUSTMENT = "adjustment"
    PAYMENT = "payment"
    REFUND = "refund"


DEBIT_POSTING_TYPES = frozenset({PostingType.CHARGE, PostingType.ADJUSTMENT})
CREDIT_POSTING_TYPES = frozenset({PostingType.PAYMENT, PostingType.REFUND})


class Folio(TimestampMixin, Base):
    """Running account of a guest's stay."""

    __tablename__ = "folios"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    folio_number: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    folio_type: Mapped[str] = mapped_column(String(32), default="guest", nullable=False)
    status: Mapped[FolioStatus] = mapped_column(
        Enum(FolioStatus), default=FolioStatus.OPEN, nullable=False
    )
    balance: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    credit_limit: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    notes: Mapped[str | None] = mapped_column(String(1024))
    closed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    reservation_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("reservations.id", ondelete="CASCADE"), nullable=False
    )
    guest_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("guests.id", ondelete="SET NULL")
    )

    reservation: Mapped["Reservation"] = relationship(
        "Reservation", back_populates="folios"
    )
    guest: Mapped["Guest | None"] = relationship("Guest")
    postings: Mapped[list["FolioPosting"]] = relationship(
        "FolioPosting",
        back_populates="folio",
        cascade="all, delete-orphan",
        order_by="FolioPosting.created_at",
    )


class FolioPosting(TimestampMixin, Base):
    """One ledger line on a folio; only the reversal fields change after insert."""

    __tablename__ = "folio_postings"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    folio_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("folios.id", ondelete="CASCADE"), nullable=False, index=True
    )
    posting_date: Mapped[date] = mapped_column(Date, nullable=False)
    posting_type: Mapped[PostingType] = mapped_column(
        Enum(PostingType), nullable=False
    )
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    tax_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    quantity: Mapped[int | None] = mapped_column(Integer)
    reference: Mapped[str | None] = mapped_column(String(64))
    posted_by: Mapped[str | None] = mapped_column(String(255))
    is_reversed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    reversed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    reversed_by: Mapped[str | None] = mapped_column(String(255))
    transaction_code_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("transaction_codes.id", ondelete="SET NULL")
    )

    folio: Mapped[Folio] = relationship("Folio", back_populates="postings")
    transaction_code: Mapped[TransactionCode | None] = relationship(
        "TransactionCode", lazy="selectin"
    )

    @property
    def code(self) -> str | None:
        """Short code of the linked transaction code, if any."""
        return self.transaction_code.code if self.transaction_code else None
