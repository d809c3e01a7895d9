"""Catalog of transaction codes that classify folio postings."""
from __future__ import annotations

import enum
import uuid
from decimal import Decimal

from sqlalchemy import Boolean, Enum, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from hospitality.db.base import Base
from hospitality.models.mixins import TimestampMixin


class TransactionCategory(str, enum.Enum):
    """Groups shown in the cashier's code picker."""

    ACCOMMODATION = "accommodation"
    FOOD_BEVERAGE = "food_beverage"
    SERVICES = "services"
    TELECOM = "telecom"
    TAX = "tax"
    PAYMENT = "payment"
    ADJUSTMENT = "adjustment"


# Posted by night audit and invoicing; cashiers may not reverse them.
SYSTEM_TRANSACTION_CODES = frozenset({"ROOM", "TAX"})


class TransactionCode(TimestampMixin, Base):
    """A chargeable or payable item a posting can be booked against."""

    __tablename__ = "transaction_codes"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    code: Mapped[str] = mapped_column(String(16), unique=True, nullable=False)
    name_en: Mapped[str] = mapped_column(String(255), nullable=False)
    name_ar: Mapped[str | None] = mapped_column(String(255))
    category: Mapped[TransactionCategory] = mapped_column(
        Enum(TransactionCategory), nullable=False
    )
    default_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    gl_account: Mapped[str | None] = mapped_column(String(32))
    is_tax_exempt: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_revenue: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int | None] = mapped_column(Integer)

    @property
    def is_system(self) -> bool:
        return self.code in SYSTEM_TRANSACTION_CODES
