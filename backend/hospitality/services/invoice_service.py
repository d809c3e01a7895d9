"""Tax invoice issuance and lookup."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hospitality.core.company import CompanySettings
from hospitality.core.errors import (
    InvoiceAlreadyIssued,
    MalformedPayload,
    MissingReservation,
    NumberingConflict,
)
from hospitality.models import Invoice, Reservation, Unit
from hospitality.services.invoice_amounts import DEFAULT_VAT_RATE, derive_invoice_amounts
from hospitality.services.zatca import (
    TLVRecord,
    decode_zatca_payload,
    encode_zatca_payload,
)

logger = logging.getLogger(__name__)

INVOICE_NUMBER_PREFIX = "INV"
NUMBER_ALLOCATION_ATTEMPTS = 5


def _invoice_options():
    return (
        selectinload(Invoice.reservation).selectinload(Reservation.guest),
        selectinload(Invoice.reservation)
        .selectinload(Reservation.unit)
        .selectinload(Unit.property),
    )


async def get_invoice(
    session: AsyncSession,
    *,
    reservation_id: uuid.UUID,
) -> Invoice | None:
    """Return the invoice issued for a reservation, if any."""

    stmt: Select[tuple[Invoice]] = (
        select(Invoice)
        .options(*_invoice_options())
        .where(Invoice.reservation_id == reservation_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalars().unique().one_or_none()


async def get_invoice_by_id(
    session: AsyncSession,
    *,
    invoice_id: uuid.UUID,
) -> Invoice | None:
    stmt: Select[tuple[Invoice]] = (
        select(Invoice)
        .options(*_invoice_options())
        .where(Invoice.id == invoice_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalars().unique().one_or_none()


async def create_invoice(
    session: AsyncSession,
    *,
    reservation_id: uuid.UUID,
    company: CompanySettings,
    vat_rate: Decimal = DEFAULT_VAT_RATE,
    issued_at: datetime | None = None,
) -> Invoice:
    """Issue the tax invoice of a reservation.

    Raises ``MissingReservation`` for an unknown reservation and
    ``InvoiceAlreadyIssued`` when the reservation already has an invoice,
    including when a concurrent request won the insert. A number taken by a
    concurrent issue for another reservation is retried with the next free
    number; ``NumberingConflict`` is raised once the attempts run out.
    """

    reservation = await _load_reservation(session, reservation_id)
    if reservation is None:
        raise MissingReservation(f"Reservation {reservation_id} not found")
    if reservation.invoice is not None:
        raise InvoiceAlreadyIssued(
            f"Reservation {reservation.confirmation_code} already has invoice "
            f"{reservation.invoice.invoice_no}"
        )

    amounts = derive_invoice_amounts(reservation, vat_rate)
    issued_at = issued_at or datetime.now(UTC)
    qr_code = encode_zatca_payload(
        company.establishment_name_en,
        company.vat_number,
        issued_at,
        amounts.total_amount,
        amounts.tax_amount,
    )
    # A rollback expires the loaded reservation.
    confirmation_code = reservation.confirmation_code
    buyer_vat_number = reservation.guest.vat_number if reservation.guest else None

    for attempt in range(1, NUMBER_ALLOCATION_ATTEMPTS + 1):
        invoice_no = await _next_invoice_number(session, issued_at.year)
        invoice = Invoice(
            invoice_no=invoice_no,
            reservation_id=reservation_id,
            issued_at=issued_at,
            subtotal=amounts.subtotal,
            tax_amount=amounts.tax_amount,
            total_amount=amounts.total_amount,
            seller_vat_number=company.vat_number,
            buyer_vat_number=buyer_vat_number,
            zatca_qr_code=qr_code,
        )
        session.add(invoice)
        try:
            await session.commit()
        except IntegrityError:
            await session.rollback()
            existing = await get_invoice(session, reservation_id=reservation_id)
            if existing is not None:
                logger.warning(
                    "Concurrent invoice creation for reservation %s; kept %s",
                    confirmation_code,
                    existing.invoice_no,
                )
                raise InvoiceAlreadyIssued(
                    f"Reservation {confirmation_code} already has invoice "
                    f"{existing.invoice_no}"
                ) from None
            if not await _invoice_number_taken(session, invoice_no):
                raise
            logger.warning(
                "Invoice number %s was claimed concurrently (attempt %d of %d)",
                invoice_no,
                attempt,
                NUMBER_ALLOCATION_ATTEMPTS,
            )
            continue

        logger.info(
            "Issued invoice %s for reservation %s (total %s)",
            invoice.invoice_no,
            confirmation_code,
            invoice.total_amount,
        )
        persisted = await get_invoice_by_id(session, invoice_id=invoice.id)
        if persisted is None:
            raise RuntimeError("Invoice was not persisted as expected")
        return persisted

    raise NumberingConflict(
        f"Could not allocate an invoice number for reservation {confirmation_code} "
        f"after {NUMBER_ALLOCATION_ATTEMPTS} attempts"
    )


async def mark_invoice_paid(
    session: AsyncSession,
    *,
    invoice_id: uuid.UUID,
    paid_at: datetime | None = None,
) -> Invoice:
    """Record settlement time; the only change allowed on an issued invoice."""

    invoice = await get_invoice_by_id(session, invoice_id=invoice_id)
    if invoice is None:
        raise ValueError("Invoice not found")
    if invoice.paid_at is not None:
        raise ValueError("Invoice is already paid")
    invoice.paid_at = paid_at or datetime.now(UTC)
    await session.commit()
    logger.info("Invoice %s marked paid", invoice.invoice_no)
    refreshed = await get_invoice_by_id(session, invoice_id=invoice_id)
    if refreshed is None:
        raise RuntimeError("Invoice disappeared while recording payment")
    return refreshed


def verify_invoice_qr(invoice: Invoice) -> list[TLVRecord]:
    """Decode the stored QR payload of ``invoice``."""

    if not invoice.zatca_qr_code:
        raise MalformedPayload(f"Invoice {invoice.invoice_no} has no QR payload")
    return decode_zatca_payload(invoice.zatca_qr_code)


async def _next_invoice_number(session: AsyncSession, year: int) -> str:
    prefix = f"{INVOICE_NUMBER_PREFIX}-{year}-"
    issued = await session.scalar(
        select(func.count(Invoice.id)).where(Invoice.invoice_no.like(f"{prefix}%"))
    )
    return f"{prefix}{int(issued or 0) + 1:06d}"


async def _invoice_number_taken(session: AsyncSession, invoice_no: str) -> bool:
    found = await session.scalar(
        select(Invoice.id).where(Invoice.invoice_no == invoice_no)
    )
    return found is not None


async def _load_reservation(
    session: AsyncSession,
    reservation_id: uuid.UUID,
) -> Reservation | None:
    stmt: Select[tuple[Reservation]] = (
        select(Reservation)
        .options(
            selectinload(Reservation.guest),
            selectinload(Reservation.invoice),
        )
        .where(Reservation.id == reservation_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalars().unique().one_or_none()
