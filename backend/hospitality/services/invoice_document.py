"""Printable bilingual tax invoice."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from pathlib import Path
from typing import Final
from urllib.parse import urlencode

from jinja2 import Environment, FileSystemLoader, select_autoescape

from hospitality.core.company import (
    CompanySettings,
    company_address_ar,
    company_address_en,
)
from hospitality.core.errors import MissingReservation
from hospitality.models.invoice import Invoice
from hospitality.models.reservation import Reservation
from hospitality.services.invoice_amounts import DEFAULT_VAT_RATE
from hospitality.services.money import MONEY_PLACES, format_money, to_money
from hospitality.services.status_labels import (
    StatusLabel,
    payment_status_label,
    reservation_status_label,
)

_TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "templates"
_ENV = Environment(
    loader=FileSystemLoader(_TEMPLATE_DIR),
    autoescape=select_autoescape(["html", "xml"]),
)

DEFAULT_QR_IMAGE_BASE_URL: Final = "https://api.qrserver.com/v1/create-qr-code/"
_DEFAULT_UNIT_NAME: Final = "Accommodation"


@dataclass(slots=True, frozen=True)
class InvoiceDocument:
    """Every value shown on the printed invoice, already formatted."""

    seller_name_en: str
    seller_name_ar: str
    seller_address_en: str
    seller_address_ar: str
    seller_vat_number: str
    seller_cr_number: str
    invoice_no: str
    issued_at: str
    booking_reference: str
    guest_name: str
    guest_phone: str | None
    buyer_vat_number: str | None
    payment_status: StatusLabel | None
    stay_status: StatusLabel | None
    unit_name_en: str
    unit_name_ar: str | None
    stay_start: str
    stay_end: str
    nights: int
    price_per_night: str
    line_total: str
    subtotal: str
    vat_label: str
    tax_amount: str
    total_amount: str
    currency: str
    qr_payload: str | None
    qr_image_url: str | None


def format_date(value: date | datetime | None) -> str:
    if value is None:
        return ""
    return value.strftime("%d/%m/%Y")


def format_datetime(value: datetime | None) -> str:
    if value is None:
        return ""
    return value.strftime("%d/%m/%Y %H:%M")


def billable_nights(nights: int | None) -> int:
    """Nights used as the per-night divisor; absent or zero counts as one."""

    return max(nights or 0, 1)


def price_per_night(subtotal: Decimal, nights: int | None) -> Decimal:
    return (to_money(subtotal) / billable_nights(nights)).quantize(
        MONEY_PLACES, rounding=ROUND_HALF_UP
    )


def vat_rate_label(vat_rate: Decimal) -> str:
    percent = (Decimal(vat_rate) * 100).normalize()
    return f"VAT {percent:f}%"


def qr_image_url(
    payload: str, *, base_url: str = DEFAULT_QR_IMAGE_BASE_URL, size: int = 150
) -> str:
    """URL of an externally rendered QR image carrying ``payload``."""

    query = urlencode({"size": f"{size}x{size}", "data": payload})
    return f"{base_url}?{query}"


def build_invoice_document(
    invoice: Invoice,
    company: CompanySettings,
    *,
    reservation: Reservation | None = None,
    currency: str = "SAR",
    vat_rate: Decimal = DEFAULT_VAT_RATE,
    qr_image_base_url: str = DEFAULT_QR_IMAGE_BASE_URL,
    qr_image_size: int = 150,
) -> InvoiceDocument:
    """Collect and format the printable fields of ``invoice``."""

    reservation = reservation if reservation is not None else invoice.reservation
    if reservation is None:
        raise MissingReservation(f"Invoice {invoice.invoice_no} has no reservation")

    guest = reservation.guest
    unit = reservation.unit
    subtotal = to_money(invoice.subtotal)
    qr_payload = invoice.zatca_qr_code or None

    return InvoiceDocument(
        seller_name_en=company.establishment_name_en,
        seller_name_ar=company.establishment_name_ar,
        seller_address_en=company_address_en(company),
        seller_address_ar=company_address_ar(company),
        seller_vat_number=invoice.seller_vat_number or company.vat_number,
        seller_cr_number=company.cr_number,
        invoice_no=invoice.invoice_no,
        issued_at=format_datetime(invoice.issued_at),
        booking_reference=reservation.confirmation_code or "-",
        guest_name=guest.full_name if guest is not None else "-",
        guest_phone=guest.phone if guest is not None else None,
        buyer_vat_number=invoice.buyer_vat_number,
        payment_status=(
            payment_status_label(reservation.payment_status)
            if reservation.payment_status is not None
            else None
        ),
        stay_status=(
            reservation_status_label(reservation.status)
            if reservation.status is not None
            else None
        ),
        unit_name_en=unit.name_en if unit is not None else _DEFAULT_UNIT_NAME,
        unit_name_ar=unit.name_ar if unit is not None else None,
        stay_start=format_date(reservation.start_date),
        stay_end=format_date(reservation.end_date),
        nights=billable_nights(reservation.nights),
        price_per_night=format_money(price_per_night(subtotal, reservation.nights)),
        line_total=format_money(subtotal),
        subtotal=format_money(subtotal),
        vat_label=vat_rate_label(vat_rate),
        tax_amount=format_money(invoice.tax_amount),
        total_amount=format_money(invoice.total_amount),
        currency=currency,
        qr_payload=qr_payload,
        qr_image_url=(
            qr_image_url(qr_payload, base_url=qr_image_base_url, size=qr_image_size)
            if qr_payload
            else None
        ),
    )


def render_invoice_html(document: InvoiceDocument) -> str:
    template = _ENV.get_template("tax_invoice.html")
    return template.render(doc=document)


__all__ = [
    "InvoiceDocument",
    "billable_nights",
    "build_invoice_document",
    "format_date",
    "format_datetime",
    "price_per_night",
    "qr_image_url",
    "render_invoice_html",
    "vat_rate_label",
]
