"""Bilingual status label tests."""

from __future__ import annotations

import pytest

from hospitality.models import FolioStatus, PaymentStatus, PostingType, ReservationStatus
from hospitality.services.status_labels import (
    StatusLabel,
    folio_status_label,
    payment_status_label,
    posting_type_label,
    reservation_status_label,
)


@pytest.mark.parametrize(
    ("lookup", "enum_type"),
    [
        (reservation_status_label, ReservationStatus),
        (payment_status_label, PaymentStatus),
        (folio_status_label, FolioStatus),
        (posting_type_label, PostingType),
    ],
)
def test_every_member_has_both_languages(lookup, enum_type) -> None:
    for member in enum_type:
        label = lookup(member)
        assert isinstance(label, StatusLabel)
        assert label.en
        assert label.ar


def test_known_labels() -> None:
    assert reservation_status_label(ReservationStatus.CHECKED_IN) == StatusLabel(
        "Checked In", "تم تسجيل الوصول"
    )
    assert payment_status_label(PaymentStatus.PARTIAL).en == "Partially Paid"
    assert folio_status_label(FolioStatus.SETTLED).ar == "مسدد"
    assert posting_type_label(PostingType.REFUND).en == "Refund"
