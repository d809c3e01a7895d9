"""Guest profiles referenced by reservations and folios."""
from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hospitality.db.base import Base
from hospitality.models.mixins import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from hospitality.models.reservation import Reservation


class Guest(TimestampMixin, Base):
    """A person staying at one of the properties."""

    __tablename__ = "guests"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32))
    email: Mapped[str | None] = mapped_column(String(320))
    vat_number: Mapped[str | None] = mapped_column(String(32))

    reservations: Mapped[list["Reservation"]] = relationship(
        "Reservation", back_populates="guest"
    )
