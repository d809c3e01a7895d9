"""Cashier endpoints for guest folios."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from hospitality.api import deps
from hospitality.core.errors import MissingFolio, MissingReservation, NumberingConflict
from hospitality.models.user import User
from hospitality.schemas.folio import (
    FolioCreate,
    FolioDetailRead,
    FolioRead,
    FolioTotalsRead,
    LedgerLineRead,
    LedgerRead,
    PostingCreate,
    PostingRead,
    TransactionCodeRead,
)
from hospitality.services import folio_service, transaction_code_service

router = APIRouter(prefix="/folios")


def _http_error(exc: ValueError) -> HTTPException:
    if isinstance(exc, (MissingFolio, MissingReservation)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, NumberingConflict):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


async def _detail(session: AsyncSession, folio_id: uuid.UUID) -> FolioDetailRead:
    totals = await folio_service.folio_totals(session, folio_id=folio_id)
    folio = await folio_service.get_folio(session, folio_id=folio_id)
    if folio is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Folio not found"
        )
    return FolioDetailRead(
        **FolioRead.model_validate(folio).model_dump(exclude={"status_label"}),
        totals=FolioTotalsRead.model_validate(totals),
    )


@router.post(
    "",
    response_model=FolioRead,
    status_code=status.HTTP_201_CREATED,
    summary="Open a folio",
)
async def open_folio(
    payload: FolioCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_billing_user)],
) -> FolioRead:
    try:
        folio = await folio_service.open_folio(
            session,
            reservation_id=payload.reservation_id,
            folio_type=payload.folio_type,
            credit_limit=payload.credit_limit,
            notes=payload.notes,
        )
    except ValueError as exc:
        raise _http_error(exc) from exc
    return FolioRead.model_validate(folio)


@router.get(
    "/transaction-codes",
    response_model=list[TransactionCodeRead],
    summary="List active transaction codes",
)
async def list_transaction_codes(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_billing_user)],
) -> list[TransactionCodeRead]:
    codes = await transaction_code_service.list_transaction_codes(session)
    return [TransactionCodeRead.model_validate(code) for code in codes]


@router.get("/{folio_id}", response_model=FolioDetailRead, summary="Get folio")
async def get_folio(
    folio_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_billing_user)],
) -> FolioDetailRead:
    try:
        return await _detail(session, folio_id)
    except ValueError as exc:
        raise _http_error(exc) from exc


@router.get(
    "/{folio_id}/postings",
    response_model=LedgerRead,
    summary="List folio transactions",
)
async def list_postings(
    folio_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_billing_user)],
) -> LedgerRead:
    try:
        lines = await folio_service.folio_ledger(session, folio_id=folio_id)
        totals = await folio_service.folio_totals(session, folio_id=folio_id)
    except ValueError as exc:
        raise _http_error(exc) from exc
    return LedgerRead(
        folio_id=folio_id,
        lines=[
            LedgerLineRead(
                posting=PostingRead.model_validate(line.posting),
                code=line.posting.code,
                debit=line.debit,
                credit=line.credit,
                balance=line.balance,
                is_reversed=line.is_reversed,
            )
            for line in lines
        ],
        totals=FolioTotalsRead.model_validate(totals),
    )


@router.post(
    "/{folio_id}/postings",
    response_model=PostingRead,
    status_code=status.HTTP_201_CREATED,
    summary="Post a charge, adjustment, payment or refund",
)
async def add_posting(
    folio_id: uuid.UUID,
    payload: PostingCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_billing_user)],
) -> PostingRead:
    try:
        posting = await folio_service.post_to_folio(
            session,
            folio_id=folio_id,
            posting_type=payload.posting_type,
            description=payload.description,
            amount=payload.amount,
            tax_amount=payload.tax_amount,
            posting_date=payload.posting_date,
            reference=payload.reference,
            quantity=payload.quantity,
            posted_by=current_user.full_name,
            transaction_code=payload.transaction_code,
        )
    except ValueError as exc:
        raise _http_error(exc) from exc
    return PostingRead.model_validate(posting)


@router.post(
    "/{folio_id}/postings/{posting_id}/reverse",
    response_model=PostingRead,
    summary="Reverse a posting",
)
async def reverse_posting(
    folio_id: uuid.UUID,
    posting_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    current_user: Annotated[User, Depends(deps.get_current_billing_user)],
) -> PostingRead:
    try:
        posting = await folio_service.reverse_posting(
            session,
            folio_id=folio_id,
            posting_id=posting_id,
            reversed_by=current_user.full_name,
        )
    except ValueError as exc:
        raise _http_error(exc) from exc
    return PostingRead.model_validate(posting)


@router.post("/{folio_id}/close", response_model=FolioRead, summary="Settle folio")
async def close_folio(
    folio_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_billing_user)],
) -> FolioRead:
    try:
        folio = await folio_service.close_folio(session, folio_id=folio_id)
    except ValueError as exc:
        raise _http_error(exc) from exc
    return FolioRead.model_validate(folio)
