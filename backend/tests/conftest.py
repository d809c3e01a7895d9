"""Test fixtures for the hospitality billing backend."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator
from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from hospitality.core.config import get_settings
from hospitality.core.security import get_password_hash
from hospitality.db.base import Base
from hospitality.db.session import dispose_engine, get_sessionmaker
from hospitality.main import app
from hospitality.services.transaction_code_service import (
    ensure_default_transaction_codes,
)
from hospitality.models import (
    Guest,
    Property,
    Reservation,
    ReservationStatus,
    Unit,
    User,
    UserRole,
    UserStatus,
)


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def seeded(reset_database: None, db_url: str) -> dict[str, object]:
    """Seed users, a unit and two reservations; return their identifiers."""
    sessionmaker = get_sessionmaker(db_url)
    cashier_password = "Passw0rd!"
    housekeeper_password = "Cl3anRooms!"

    async with sessionmaker() as session:
        cashier = User(
            email="cashier@example.com",
            hashed_password=get_password_hash(cashier_password),
            full_name="Noura Cashier",
            role=UserRole.STAFF,
            status=UserStatus.ACTIVE,
        )
        housekeeper = User(
            email="housekeeping@example.com",
            hashed_password=get_password_hash(housekeeper_password),
            full_name="Omar Housekeeping",
            role=UserRole.HOUSEKEEPING,
            status=UserStatus.ACTIVE,
        )
        guest = Guest(
            full_name="Fahad Al-Qahtani",
            phone="+966500000000",
            email="fahad@example.com",
            vat_number="300000000000003",
        )
        lodge = Property(name_en="Awwa Lodges", name_ar="نزل عوى")
        unit = Unit(property=lodge, name_en="Chalet 3", name_ar="شاليه ٣")
        session.add_all([cashier, housekeeper, guest, lodge, unit])
        await session.flush()

        taxed = Reservation(
            confirmation_code="AWM-1001",
            guest_id=guest.id,
            unit_id=unit.id,
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 3),
            nights=2,
            total_amount=Decimal("1150.00"),
            taxes_amount=Decimal("150.00"),
            status=ReservationStatus.CONFIRMED,
        )
        untaxed = Reservation(
            confirmation_code="AWM-1002",
            guest_id=guest.id,
            unit_id=unit.id,
            start_date=date(2024, 2, 1),
            end_date=date(2024, 2, 1),
            nights=0,
            total_amount=Decimal("1150.00"),
            taxes_amount=Decimal("0"),
            status=ReservationStatus.CONFIRMED,
        )
        session.add_all([taxed, untaxed])
        await session.commit()
        await ensure_default_transaction_codes(session)

        return {
            "cashier_email": cashier.email,
            "cashier_password": cashier_password,
            "cashier_name": cashier.full_name,
            "housekeeper_email": housekeeper.email,
            "housekeeper_password": housekeeper_password,
            "guest_id": guest.id,
            "unit_id": unit.id,
            "reservation_id": taxed.id,
            "untaxed_reservation_id": untaxed.id,
        }


@pytest_asyncio.fixture()
async def db_session(seeded: dict[str, object], db_url: str):
    """Yield a session bound to the seeded test database."""
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        yield session


@pytest_asyncio.fixture()
async def app_context(
    seeded: dict[str, object],
) -> AsyncIterator[dict[str, object]]:
    """Yield an async client alongside the seeded data."""
    context = dict(seeded)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        context["client"] = client
        yield context

