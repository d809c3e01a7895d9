"""Reservation models."""
from __future__ import annotations

import enum
import uuid
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Date, Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hospitality.db.base import Base
from hospitality.models.mixins import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from hospitality.models.folio import Folio
    from hospitality.models.guest import Guest
    from hospitality.models.invoice import Invoice
    from hospitality.models.property import Unit


class ReservationStatus(str, enum.Enum):
    """Lifecycle states for reservations."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class PaymentStatus(str, enum.Enum):
    """Settlement state of the reservation's balance."""

    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    REFUNDED = "refunded"
    FAILED = "failed"


class Reservation(TimestampMixin, Base):
    """A guest's stay in a unit."""

    __tablename__ = "reservations"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    confirmation_code: Mapped[str] = mapped_column(
        String(32), unique=True, nullable=False
    )
    guest_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("guests.id", ondelete="RESTRICT"), nullable=False
    )
    unit_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("units.id", ondelete="RESTRICT"), nullable=False
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    nights: Mapped[int | None] = mapped_column(Integer)
    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), default=Decimal("0"), nullable=False
    )
    taxes_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    fees_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    status: Mapped[ReservationStatus] = mapped_column(
        Enum(ReservationStatus), default=ReservationStatus.PENDING, nullable=False
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False
    )

    guest: Mapped["Guest"] = relationship("Guest", back_populates="reservations")
    unit: Mapped["Unit"] = relationship("Unit")
    folios: Mapped[list["Folio"]] = relationship(
        "Folio", back_populates="reservation"
    )
    invoice: Mapped["Invoice | None"] = relationship(
        "Invoice", back_populates="reservation", uselist=False
    )
