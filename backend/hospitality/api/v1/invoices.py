"""Tax invoice API endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from hospitality.api import deps
from hospitality.core.company import CompanySettings
from hospitality.core.config import Settings
from hospitality.core.errors import (
    InvoiceAlreadyIssued,
    MissingReservation,
    NumberingConflict,
    PayloadTooLarge,
)
from hospitality.models.invoice import Invoice
from hospitality.models.user import User
from hospitality.schemas.invoice import (
    InvoicePaymentRequest,
    InvoiceQRRead,
    InvoiceRead,
    TLVRecordRead,
)
from hospitality.services import invoice_service
from hospitality.services.invoice_document import (
    build_invoice_document,
    render_invoice_html,
)

router = APIRouter()


async def _require_invoice(session: AsyncSession, invoice_id: uuid.UUID) -> Invoice:
    invoice = await invoice_service.get_invoice_by_id(session, invoice_id=invoice_id)
    if invoice is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found"
        )
    return invoice


@router.get(
    "/reservations/{reservation_id}/invoice",
    response_model=InvoiceRead,
    summary="Get the invoice issued for a reservation",
)
async def get_reservation_invoice(
    reservation_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_billing_user)],
) -> InvoiceRead:
    invoice = await invoice_service.get_invoice(session, reservation_id=reservation_id)
    if invoice is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found"
        )
    return InvoiceRead.model_validate(invoice)


@router.post(
    "/reservations/{reservation_id}/invoice",
    response_model=InvoiceRead,
    status_code=status.HTTP_201_CREATED,
    summary="Issue the tax invoice for a reservation",
)
async def create_reservation_invoice(
    reservation_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    company: Annotated[CompanySettings, Depends(deps.get_company)],
    settings: Annotated[Settings, Depends(deps.get_app_settings)],
    _: Annotated[User, Depends(deps.get_current_billing_user)],
) -> InvoiceRead:
    try:
        invoice = await invoice_service.create_invoice(
            session,
            reservation_id=reservation_id,
            company=company,
            vat_rate=settings.vat_rate,
        )
    except MissingReservation as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    except (InvoiceAlreadyIssued, NumberingConflict) as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except PayloadTooLarge as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return InvoiceRead.model_validate(invoice)


@router.get("/invoices/{invoice_id}", response_model=InvoiceRead, summary="Get invoice")
async def get_invoice(
    invoice_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_billing_user)],
) -> InvoiceRead:
    invoice = await _require_invoice(session, invoice_id)
    return InvoiceRead.model_validate(invoice)


@router.post(
    "/invoices/{invoice_id}/pay",
    response_model=InvoiceRead,
    summary="Record invoice settlement",
)
async def pay_invoice(
    invoice_id: uuid.UUID,
    payload: InvoicePaymentRequest,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_billing_user)],
) -> InvoiceRead:
    await _require_invoice(session, invoice_id)
    try:
        invoice = await invoice_service.mark_invoice_paid(
            session, invoice_id=invoice_id, paid_at=payload.paid_at
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return InvoiceRead.model_validate(invoice)


@router.get(
    "/invoices/{invoice_id}/document",
    response_class=HTMLResponse,
    summary="Printable tax invoice",
)
async def invoice_document(
    invoice_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    company: Annotated[CompanySettings, Depends(deps.get_company)],
    settings: Annotated[Settings, Depends(deps.get_app_settings)],
    _: Annotated[User, Depends(deps.get_current_billing_user)],
) -> HTMLResponse:
    invoice = await _require_invoice(session, invoice_id)
    try:
        document = build_invoice_document(
            invoice,
            company,
            currency=settings.currency,
            vat_rate=settings.vat_rate,
            qr_image_base_url=settings.qr_image_base_url,
            qr_image_size=settings.qr_image_size,
        )
    except MissingReservation as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)
        ) from exc
    return HTMLResponse(content=render_invoice_html(document))


@router.get(
    "/invoices/{invoice_id}/qr",
    response_model=InvoiceQRRead,
    summary="Decode the stored ZATCA QR payload",
)
async def invoice_qr(
    invoice_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_billing_user)],
) -> InvoiceQRRead:
    invoice = await _require_invoice(session, invoice_id)
    try:
        records = invoice_service.verify_invoice_qr(invoice)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return InvoiceQRRead(
        invoice_id=invoice.id,
        invoice_no=invoice.invoice_no,
        records=[TLVRecordRead.model_validate(record) for record in records],
    )
