from __future__ import annotations

import asyncio
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import select

from hospitality.core.config import get_settings
from hospitality.db.session import get_sessionmaker
from hospitality.models import (
    Guest,
    Property,
    Reservation,
    ReservationStatus,
    Unit,
    UserRole,
)
from hospitality.services.transaction_code_service import (
    ensure_default_transaction_codes,
)
from hospitality.services.user_service import create_user, get_user_by_email

EMAIL = "admin@awwa.local"
PASSWORD = "admin123"
CONFIRMATION_CODE = "DEV-0001"


async def main() -> None:
    settings = get_settings()
    sessionmaker = get_sessionmaker(settings.database_url)
    async with sessionmaker() as session:
        if await get_user_by_email(session, email=EMAIL) is None:
            await create_user(
                session,
                email=EMAIL,
                password=PASSWORD,
                full_name="Dev Admin",
                role=UserRole.ADMIN,
            )
            print(f"Created admin {EMAIL} / {PASSWORD}")

        added = await ensure_default_transaction_codes(session)
        if added:
            print(f"Seeded {added} transaction codes")

        existing = await session.scalar(
            select(Reservation).where(Reservation.confirmation_code == CONFIRMATION_CODE)
        )
        if existing is not None:
            print(f"Reservation {CONFIRMATION_CODE} already exists ({existing.id})")
            return

        lodge = Property(name_en="Awwa Lodges", name_ar="نزل أوي المكان")
        unit = Unit(property=lodge, name_en="Chalet 1", name_ar="شاليه ١")
        guest = Guest(full_name="Demo Guest", phone="+966500000001")
        session.add_all([lodge, unit, guest])
        await session.flush()

        start = date.today()
        reservation = Reservation(
            confirmation_code=CONFIRMATION_CODE,
            guest_id=guest.id,
            unit_id=unit.id,
            start_date=start,
            end_date=start + timedelta(days=2),
            nights=2,
            total_amount=Decimal("1150.00"),
            taxes_amount=Decimal("150.00"),
            status=ReservationStatus.CONFIRMED,
        )
        session.add(reservation)
        await session.commit()
        print(f"Created reservation {CONFIRMATION_CODE} ({reservation.id})")


if __name__ == "__main__":
    asyncio.run(main())
