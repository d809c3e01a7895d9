"""Service-level tests for tax invoice issuance."""

from __future__ import annotations

import asyncio
import uuid
from datetime import UTC, datetime
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from hospitality.core.company import company_from_settings
from hospitality.core.config import get_settings
from hospitality.core.errors import (
    InvoiceAlreadyIssued,
    MalformedPayload,
    MissingReservation,
    NumberingConflict,
)
from hospitality.db.session import get_sessionmaker
from hospitality.models import Invoice
from hospitality.services import invoice_service
from hospitality.services.zatca import TLVRecord

pytestmark = pytest.mark.asyncio

ISSUED_AT = datetime(2024, 3, 1, 9, 30, tzinfo=UTC)


def _company():
    return company_from_settings(get_settings())


async def test_create_invoice_uses_recorded_taxes(db_session, seeded) -> None:
    invoice = await invoice_service.create_invoice(
        db_session,
        reservation_id=seeded["reservation_id"],
        company=_company(),
        issued_at=ISSUED_AT,
    )

    assert invoice.invoice_no == "INV-2024-000001"
    assert invoice.subtotal == Decimal("1000.00")
    assert invoice.tax_amount == Decimal("150.00")
    assert invoice.total_amount == Decimal("1150.00")
    assert invoice.seller_vat_number == "310231928400003"
    assert invoice.buyer_vat_number == "300000000000003"
    assert invoice.reservation.confirmation_code == "AWM-1001"
    assert invoice.reservation.unit.property.name_en == "Awwa Lodges"

    records = invoice_service.verify_invoice_qr(invoice)
    assert records == [
        TLVRecord(1, "Awwa Al-Makan Tourist Lodges"),
        TLVRecord(2, "310231928400003"),
        TLVRecord(3, "2024-03-01T09:30:00Z"),
        TLVRecord(4, "1150.00"),
        TLVRecord(5, "150.00"),
    ]


async def test_create_invoice_applies_flat_rate_without_taxes(db_session, seeded) -> None:
    invoice = await invoice_service.create_invoice(
        db_session,
        reservation_id=seeded["untaxed_reservation_id"],
        company=_company(),
        issued_at=ISSUED_AT,
    )

    assert invoice.subtotal == Decimal("1150.00")
    assert invoice.tax_amount == Decimal("172.50")
    assert invoice.total_amount == Decimal("1322.50")


async def test_invoice_numbers_increase_per_year(db_session, seeded) -> None:
    first = await invoice_service.create_invoice(
        db_session,
        reservation_id=seeded["reservation_id"],
        company=_company(),
        issued_at=ISSUED_AT,
    )
    second = await invoice_service.create_invoice(
        db_session,
        reservation_id=seeded["untaxed_reservation_id"],
        company=_company(),
        issued_at=ISSUED_AT,
    )
    assert (first.invoice_no, second.invoice_no) == (
        "INV-2024-000001",
        "INV-2024-000002",
    )


async def test_second_invoice_for_reservation_is_rejected(db_session, seeded) -> None:
    await invoice_service.create_invoice(
        db_session, reservation_id=seeded["reservation_id"], company=_company()
    )

    with pytest.raises(InvoiceAlreadyIssued):
        await invoice_service.create_invoice(
            db_session, reservation_id=seeded["reservation_id"], company=_company()
        )

    existing = await invoice_service.get_invoice(
        db_session, reservation_id=seeded["reservation_id"]
    )
    assert existing is not None


async def test_storage_enforces_one_invoice_per_reservation(db_session, seeded) -> None:
    for number in ("INV-X-1", "INV-X-2"):
        db_session.add(
            Invoice(
                invoice_no=number,
                reservation_id=seeded["reservation_id"],
                issued_at=ISSUED_AT,
                subtotal=Decimal("1"),
                tax_amount=Decimal("0"),
                total_amount=Decimal("1"),
            )
        )
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()


async def test_unknown_reservation(db_session, seeded) -> None:
    with pytest.raises(MissingReservation):
        await invoice_service.create_invoice(
            db_session, reservation_id=uuid.uuid4(), company=_company()
        )


async def test_get_invoice_before_and_after_issue(db_session, seeded) -> None:
    assert (
        await invoice_service.get_invoice(
            db_session, reservation_id=seeded["reservation_id"]
        )
        is None
    )
    created = await invoice_service.create_invoice(
        db_session, reservation_id=seeded["reservation_id"], company=_company()
    )
    fetched = await invoice_service.get_invoice(
        db_session, reservation_id=seeded["reservation_id"]
    )
    assert fetched is not None
    assert fetched.id == created.id
    by_id = await invoice_service.get_invoice_by_id(db_session, invoice_id=created.id)
    assert by_id is not None
    assert by_id.invoice_no == created.invoice_no


async def test_mark_invoice_paid_once(db_session, seeded) -> None:
    invoice = await invoice_service.create_invoice(
        db_session, reservation_id=seeded["reservation_id"], company=_company()
    )
    paid_at = datetime(2024, 3, 2, 12, 0, tzinfo=UTC)

    paid = await invoice_service.mark_invoice_paid(
        db_session, invoice_id=invoice.id, paid_at=paid_at
    )
    assert paid.paid_at is not None
    assert paid.total_amount == Decimal("1150.00")

    with pytest.raises(ValueError):
        await invoice_service.mark_invoice_paid(db_session, invoice_id=invoice.id)
    with pytest.raises(ValueError):
        await invoice_service.mark_invoice_paid(db_session, invoice_id=uuid.uuid4())


async def test_verify_requires_stored_payload() -> None:
    invoice = Invoice(invoice_no="INV-2024-000009", zatca_qr_code=None)
    with pytest.raises(MalformedPayload):
        invoice_service.verify_invoice_qr(invoice)


async def test_taken_invoice_number_is_retried(db_session, seeded, monkeypatch) -> None:
    await invoice_service.create_invoice(
        db_session,
        reservation_id=seeded["reservation_id"],
        company=_company(),
        issued_at=ISSUED_AT,
    )
    allocate = invoice_service._next_invoice_number
    stale = iter(["INV-2024-000001"])

    async def stale_then_fresh(session, year):
        return next(stale, None) or await allocate(session, year)

    monkeypatch.setattr(invoice_service, "_next_invoice_number", stale_then_fresh)

    second = await invoice_service.create_invoice(
        db_session,
        reservation_id=seeded["untaxed_reservation_id"],
        company=_company(),
        issued_at=ISSUED_AT,
    )
    assert second.invoice_no == "INV-2024-000002"
    assert second.reservation.confirmation_code == "AWM-1002"


async def test_numbering_gives_up_after_bounded_attempts(
    db_session, seeded, monkeypatch
) -> None:
    await invoice_service.create_invoice(
        db_session,
        reservation_id=seeded["reservation_id"],
        company=_company(),
        issued_at=ISSUED_AT,
    )
    calls = []

    async def always_taken(session, year):
        calls.append(year)
        return "INV-2024-000001"

    monkeypatch.setattr(invoice_service, "_next_invoice_number", always_taken)

    with pytest.raises(NumberingConflict):
        await invoice_service.create_invoice(
            db_session,
            reservation_id=seeded["untaxed_reservation_id"],
            company=_company(),
            issued_at=ISSUED_AT,
        )
    assert len(calls) == invoice_service.NUMBER_ALLOCATION_ATTEMPTS
    assert (
        await invoice_service.get_invoice(
            db_session, reservation_id=seeded["untaxed_reservation_id"]
        )
        is None
    )


async def test_concurrent_issues_get_distinct_numbers(
    seeded, db_url, monkeypatch
) -> None:
    allocate = invoice_service._next_invoice_number

    async def slow_allocate(session, year):
        number = await allocate(session, year)
        await asyncio.sleep(0.2)
        return number

    monkeypatch.setattr(invoice_service, "_next_invoice_number", slow_allocate)
    sessionmaker = get_sessionmaker(db_url)

    async def issue(reservation_id):
        async with sessionmaker() as session:
            invoice = await invoice_service.create_invoice(
                session,
                reservation_id=reservation_id,
                company=_company(),
                issued_at=ISSUED_AT,
            )
            return invoice.invoice_no

    numbers = await asyncio.gather(
        issue(seeded["reservation_id"]),
        issue(seeded["untaxed_reservation_id"]),
    )
    assert sorted(numbers) == ["INV-2024-000001", "INV-2024-000002"]


async def test_concurrent_issue_for_same_reservation_reports_conflict(
    seeded, db_url, monkeypatch
) -> None:
    allocate = invoice_service._next_invoice_number

    async def slow_allocate(session, year):
        number = await allocate(session, year)
        await asyncio.sleep(0.2)
        return number

    monkeypatch.setattr(invoice_service, "_next_invoice_number", slow_allocate)
    sessionmaker = get_sessionmaker(db_url)

    async def issue():
        async with sessionmaker() as session:
            return await invoice_service.create_invoice(
                session,
                reservation_id=seeded["reservation_id"],
                company=_company(),
                issued_at=ISSUED_AT,
            )

    results = await asyncio.gather(issue(), issue(), return_exceptions=True)
    issued = [result for result in results if isinstance(result, Invoice)]
    rejected = [result for result in results if isinstance(result, InvoiceAlreadyIssued)]
    assert len(issued) == 1
    assert len(rejected) == 1
