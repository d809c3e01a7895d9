"""Tax invoice model."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hospitality.db.base import Base
from hospitality.models.mixins import TimestampMixin


if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from hospitality.models.reservation import Reservation


class Invoice(TimestampMixin, Base):
    """Simplified tax invoice issued once per reservation."""

    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint("reservation_id", name="uq_invoice_reservation"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    invoice_no: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    invoice_type: Mapped[str] = mapped_column(
        String(32), default="standard", nullable=False
    )
    reservation_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("reservations.id", ondelete="RESTRICT"), nullable=False
    )
    issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    tax_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    seller_vat_number: Mapped[str | None] = mapped_column(String(32))
    buyer_vat_number: Mapped[str | None] = mapped_column(String(32))
    zatca_qr_code: Mapped[str | None] = mapped_column(Text)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    notes: Mapped[str | None] = mapped_column(String(1024))

    reservation: Mapped["Reservation"] = relationship(
        "Reservation", back_populates="invoice"
    )
