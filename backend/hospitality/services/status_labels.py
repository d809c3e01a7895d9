"""Bilingual display labels for status enumerations.

Each lookup is an exhaustive ``match``; a new enum member without a label
is reported by the type checker through ``assert_never``.
"""

from __future__ import annotations

from typing import NamedTuple, assert_never

from hospitality.models.folio import FolioStatus, PostingType
from hospitality.models.reservation import PaymentStatus, ReservationStatus


class StatusLabel(NamedTuple):
    en: str
    ar: str


def reservation_status_label(status: ReservationStatus) -> StatusLabel:
    match status:
        case ReservationStatus.PENDING:
            return StatusLabel("Pending", "قيد الانتظار")
        case ReservationStatus.CONFIRMED:
            return StatusLabel("Confirmed", "مؤكد")
        case ReservationStatus.CHECKED_IN:
            return StatusLabel("Checked In", "تم تسجيل الوصول")
        case ReservationStatus.CHECKED_OUT:
            return StatusLabel("Checked Out", "تم تسجيل المغادرة")
        case ReservationStatus.CANCELLED:
            return StatusLabel("Cancelled", "ملغي")
        case ReservationStatus.NO_SHOW:
            return StatusLabel("No Show", "لم يحضر")
        case _:
            assert_never(status)


def payment_status_label(status: PaymentStatus) -> StatusLabel:
    match status:
        case PaymentStatus.PENDING:
            return StatusLabel("Pending", "معلق")
        case PaymentStatus.PARTIAL:
            return StatusLabel("Partially Paid", "مدفوع جزئياً")
        case PaymentStatus.PAID:
            return StatusLabel("Paid", "مدفوع")
        case PaymentStatus.REFUNDED:
            return StatusLabel("Refunded", "مسترد")
        case PaymentStatus.FAILED:
            return StatusLabel("Failed", "فشل")
        case _:
            assert_never(status)


def folio_status_label(status: FolioStatus) -> StatusLabel:
    match status:
        case FolioStatus.OPEN:
            return StatusLabel("Open", "مفتوح")
        case FolioStatus.CLOSED:
            return StatusLabel("Closed", "مغلق")
        case FolioStatus.TRANSFERRED:
            return StatusLabel("Transferred", "محول")
        case FolioStatus.SETTLED:
            return StatusLabel("Settled", "مسدد")
        case _:
            assert_never(status)


def posting_type_label(posting_type: PostingType) -> StatusLabel:
    match posting_type:
        case PostingType.CHARGE:
            return StatusLabel("Charge", "رسوم")
        case PostingType.ADJUSTMENT:
            return StatusLabel("Adjustment", "تسوية")
        case PostingType.PAYMENT:
            return StatusLabel("Payment", "دفعة")
        case PostingType.REFUND:
            return StatusLabel("Refund", "استرداد")
        case _:
            assert_never(posting_type)


__all__ = [
    "StatusLabel",
    "folio_status_label",
    "payment_status_label",
    "posting_type_label",
    "reservation_status_label",
]
