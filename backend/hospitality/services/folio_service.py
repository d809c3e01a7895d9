"""Folio lifecycle and posting operations."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, date, datetime
from decimal import Decimal

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hospitality.core.errors import (
    MissingFolio,
    MissingReservation,
    NumberingConflict,
)
from hospitality.models import (
    CREDIT_POSTING_TYPES,
    Folio,
    FolioPosting,
    FolioStatus,
    PostingType,
    Reservation,
    TransactionCategory,
    TransactionCode,
)
from hospitality.services.ledger import (
    FolioTotals,
    LedgerLine,
    compute_totals,
    running_balances,
)
from hospitality.services.money import ZERO, optional_amount, require_amount
from hospitality.services.transaction_code_service import require_active_code

logger = logging.getLogger(__name__)

FOLIO_NUMBER_PREFIX = "F"
NUMBER_ALLOCATION_ATTEMPTS = 5


async def open_folio(
    session: AsyncSession,
    *,
    reservation_id: uuid.UUID,
    folio_type: str = "guest",
    credit_limit: Decimal | None = None,
    notes: str | None = None,
) -> Folio:
    """Open a new folio against a reservation.

    A folio number claimed concurrently is retried with the next free
    number; ``NumberingConflict`` is raised once the attempts run out.
    """

    reservation = await session.get(Reservation, reservation_id)
    if reservation is None:
        raise MissingReservation(f"Reservation {reservation_id} not found")
    confirmation_code = reservation.confirmation_code
    guest_id = reservation.guest_id
    normalized_limit = (
        require_amount(credit_limit, field="credit_limit")
        if credit_limit is not None
        else None
    )

    opened_at = datetime.now(UTC)
    for attempt in range(1, NUMBER_ALLOCATION_ATTEMPTS + 1):
        folio_number = await _next_folio_number(session, opened_at.year)
        folio = Folio(
            folio_number=folio_number,
            folio_type=folio_type,
            status=FolioStatus.OPEN,
            balance=ZERO,
            credit_limit=normalized_limit,
            notes=notes,
            reservation_id=reservation_id,
            guest_id=guest_id,
        )
        session.add(folio)
        try:
            await session.commit()
        except IntegrityError:
            await session.rollback()
            if not await _folio_number_taken(session, folio_number):
                raise
            logger.warning(
                "Folio number %s was claimed concurrently (attempt %d of %d)",
                folio_number,
                attempt,
                NUMBER_ALLOCATION_ATTEMPTS,
            )
            continue

        await session.refresh(folio)
        logger.info(
            "Opened folio %s for reservation %s", folio.folio_number, confirmation_code
        )
        return folio

    raise NumberingConflict(
        f"Could not allocate a folio number for reservation {confirmation_code} "
        f"after {NUMBER_ALLOCATION_ATTEMPTS} attempts"
    )


async def get_folio(session: AsyncSession, *, folio_id: uuid.UUID) -> Folio | None:
    return await session.get(Folio, folio_id)


async def list_postings(
    session: AsyncSession, *, folio_id: uuid.UUID
) -> list[FolioPosting]:
    """Return the postings of a folio in insertion order."""

    await _require_folio(session, folio_id)
    stmt: Select[tuple[FolioPosting]] = (
        select(FolioPosting)
        .where(FolioPosting.folio_id == folio_id)
        .order_by(FolioPosting.created_at.asc(), FolioPosting.posting_date.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def folio_ledger(session: AsyncSession, *, folio_id: uuid.UUID) -> list[LedgerLine]:
    """Transaction listing with running balances for the cashier view."""

    postings = await list_postings(session, folio_id=folio_id)
    return running_balances(postings)


async def folio_totals(session: AsyncSession, *, folio_id: uuid.UUID) -> FolioTotals:
    """Recompute the folio totals and store the balance on the folio."""

    folio = await _require_folio(session, folio_id)
    totals = await _refresh_balance(session, folio)
    await session.commit()
    return totals


async def post_to_folio(
    session: AsyncSession,
    *,
    folio_id: uuid.UUID,
    posting_type: PostingType,
    description: str | None = None,
    amount: Decimal | None = None,
    tax_amount: Decimal | None = None,
    posting_date: date | None = None,
    reference: str | None = None,
    quantity: int | None = None,
    posted_by: str | None = None,
    transaction_code: str | None = None,
) -> FolioPosting:
    """Append a ledger entry to an open folio.

    When ``transaction_code`` is given, the code's English name and default
    amount fill in a missing description and amount. Payment codes only book
    payments and refunds, and tax-exempt codes reject a tax amount.
    """

    folio = await _require_folio(session, folio_id)
    if folio.status is not FolioStatus.OPEN:
        raise ValueError(f"Folio {folio.folio_number} is not open")

    posting_type = PostingType(posting_type)
    code = None
    if transaction_code is not None:
        code = await require_active_code(session, code=transaction_code)
        _check_code_fits(code, posting_type)
        if amount is None:
            amount = code.default_amount
        if not description:
            description = code.name_en

    if amount is None:
        raise ValueError("amount is required")
    if not description:
        raise ValueError("description is required")
    normalized_amount = require_amount(amount, field="amount")
    normalized_tax = optional_amount(tax_amount, field="tax_amount")
    if posting_type in CREDIT_POSTING_TYPES and normalized_tax:
        raise ValueError("Payments and refunds do not carry tax")
    if code is not None and code.is_tax_exempt and normalized_tax:
        raise ValueError(f"Transaction code {code.code} is tax exempt")

    posting = FolioPosting(
        folio_id=folio.id,
        posting_type=posting_type,
        description=description,
        amount=normalized_amount,
        tax_amount=normalized_tax if tax_amount is not None else None,
        posting_date=posting_date or datetime.now(UTC).date(),
        reference=reference,
        quantity=quantity,
        posted_by=posted_by,
        transaction_code=code,
    )
    session.add(posting)
    await session.flush()
    await _refresh_balance(session, folio)
    await session.commit()
    await session.refresh(posting)
    return posting


async def reverse_posting(
    session: AsyncSession,
    *,
    folio_id: uuid.UUID,
    posting_id: uuid.UUID,
    reversed_by: str | None = None,
) -> FolioPosting:
    """Flag a posting as reversed; it stays on the folio for audit."""

    folio = await _require_folio(session, folio_id)
    if folio.status is not FolioStatus.OPEN:
        raise ValueError(f"Folio {folio.folio_number} is not open")

    posting = await session.get(FolioPosting, posting_id)
    if posting is None or posting.folio_id != folio.id:
        raise ValueError("Posting not found on folio")
    if posting.is_reversed:
        raise ValueError("Posting is already reversed")
    if posting.transaction_code is not None and posting.transaction_code.is_system:
        raise ValueError(
            f"{posting.transaction_code.code} postings cannot be reversed by the cashier"
        )

    posting.is_reversed = True
    posting.reversed_at = datetime.now(UTC)
    posting.reversed_by = reversed_by
    await session.flush()
    await _refresh_balance(session, folio)
    await session.commit()
    await session.refresh(posting)
    logger.info(
        "Reversed posting %s on folio %s by %s",
        posting.id,
        folio.folio_number,
        reversed_by or "unknown",
    )
    return posting


async def close_folio(session: AsyncSession, *, folio_id: uuid.UUID) -> Folio:
    """Settle a folio once its balance is zero."""

    folio = await _require_folio(session, folio_id)
    if folio.status is not FolioStatus.OPEN:
        raise ValueError(f"Folio {folio.folio_number} is not open")
    totals = await _refresh_balance(session, folio)
    if totals.balance != ZERO:
        raise ValueError(
            f"Folio {folio.folio_number} has an outstanding balance of {totals.balance}"
        )
    folio.status = FolioStatus.SETTLED
    folio.closed_at = datetime.now(UTC)
    await session.commit()
    await session.refresh(folio)
    logger.info("Settled folio %s", folio.folio_number)
    return folio


async def _require_folio(session: AsyncSession, folio_id: uuid.UUID) -> Folio:
    folio = await session.get(Folio, folio_id)
    if folio is None:
        raise MissingFolio(f"Folio {folio_id} not found")
    return folio


async def _refresh_balance(session: AsyncSession, folio: Folio) -> FolioTotals:
    result = await session.execute(
        select(FolioPosting).where(FolioPosting.folio_id == folio.id)
    )
    totals = compute_totals(result.scalars().all())
    folio.balance = totals.balance
    return totals


async def _next_folio_number(session: AsyncSession, year: int) -> str:
    prefix = f"{FOLIO_NUMBER_PREFIX}-{year}-"
    opened = await session.scalar(
        select(func.count(Folio.id)).where(Folio.folio_number.like(f"{prefix}%"))
    )
    return f"{prefix}{int(opened or 0) + 1:04d}"


async def _folio_number_taken(session: AsyncSession, folio_number: str) -> bool:
    found = await session.scalar(select(Folio.id).where(Folio.folio_number == folio_number))
    return found is not None


def _check_code_fits(code: TransactionCode, posting_type: PostingType) -> None:
    is_payment_code = code.category is TransactionCategory.PAYMENT
    if is_payment_code != (posting_type in CREDIT_POSTING_TYPES):
        raise ValueError(
            f"Transaction code {code.code} cannot be used for a {posting_type.value}"
        )
