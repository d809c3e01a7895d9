"""Transaction code catalog used by folio postings."""

from __future__ import annotations

import logging
from typing import NamedTuple

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from hospitality.core.errors import UnknownTransactionCode
from hospitality.models import TransactionCategory, TransactionCode

logger = logging.getLogger(__name__)


class CodeDefinition(NamedTuple):
    code: str
    name_en: str
    name_ar: str
    category: TransactionCategory
    is_tax_exempt: bool = False
    is_revenue: bool = True


DEFAULT_TRANSACTION_CODES: tuple[CodeDefinition, ...] = (
    CodeDefinition("ROOM", "Room Charge", "رسوم الغرفة", TransactionCategory.ACCOMMODATION),
    CodeDefinition(
        "TAX",
        "VAT 15%",
        "ضريبة القيمة المضافة ١٥٪",
        TransactionCategory.TAX,
        is_tax_exempt=True,
        is_revenue=False,
    ),
    CodeDefinition("BKFT", "Breakfast", "إفطار", TransactionCategory.FOOD_BEVERAGE),
    CodeDefinition("LNCH", "Lunch", "غداء", TransactionCategory.FOOD_BEVERAGE),
    CodeDefinition("DNIR", "Dinner", "عشاء", TransactionCategory.FOOD_BEVERAGE),
    CodeDefinition("MINI", "Minibar", "ميني بار", TransactionCategory.FOOD_BEVERAGE),
    CodeDefinition("LNDY", "Laundry", "غسيل", TransactionCategory.SERVICES),
    CodeDefinition("PARK", "Parking", "موقف سيارات", TransactionCategory.SERVICES),
    CodeDefinition("TEL", "Telephone", "هاتف", TransactionCategory.TELECOM),
    CodeDefinition(
        "CASH",
        "Cash Payment",
        "دفع نقدي",
        TransactionCategory.PAYMENT,
        is_tax_exempt=True,
        is_revenue=False,
    ),
    CodeDefinition(
        "CARD",
        "Credit Card",
        "بطاقة ائتمان",
        TransactionCategory.PAYMENT,
        is_tax_exempt=True,
        is_revenue=False,
    ),
    CodeDefinition(
        "CITY",
        "City Ledger",
        "تحويل حساب",
        TransactionCategory.PAYMENT,
        is_tax_exempt=True,
        is_revenue=False,
    ),
    CodeDefinition("ADJ", "Adjustment", "تعديل", TransactionCategory.ADJUSTMENT),
)


async def list_transaction_codes(
    session: AsyncSession, *, include_inactive: bool = False
) -> list[TransactionCode]:
    """Return the catalog in picker order."""

    stmt: Select[tuple[TransactionCode]] = select(TransactionCode).order_by(
        TransactionCode.sort_order.asc(), TransactionCode.code.asc()
    )
    if not include_inactive:
        stmt = stmt.where(TransactionCode.is_active.is_(True))
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_transaction_code(
    session: AsyncSession, *, code: str
) -> TransactionCode | None:
    return await session.scalar(
        select(TransactionCode).where(TransactionCode.code == code.strip().upper())
    )


async def require_active_code(session: AsyncSession, *, code: str) -> TransactionCode:
    """Resolve ``code`` or raise ``UnknownTransactionCode``."""

    transaction_code = await get_transaction_code(session, code=code)
    if transaction_code is None or not transaction_code.is_active:
        raise UnknownTransactionCode(f"Transaction code {code!r} is not available")
    return transaction_code


async def ensure_default_transaction_codes(session: AsyncSession) -> int:
    """Insert any missing catalog entries; return how many were added."""

    existing = set(await session.scalars(select(TransactionCode.code)))
    added = 0
    for position, definition in enumerate(DEFAULT_TRANSACTION_CODES, start=1):
        if definition.code in existing:
            continue
        session.add(
            TransactionCode(**definition._asdict(), sort_order=position * 10)
        )
        added += 1
    if added:
        await session.commit()
        logger.info("Seeded %d transaction codes", added)
    return added
