"""Seller identity tests."""

from __future__ import annotations

from hospitality.core.company import (
    CompanySettings,
    company_address_ar,
    company_address_en,
    company_from_settings,
    compose_address,
)
from hospitality.core.config import get_settings


def _company(**overrides) -> CompanySettings:
    values = {
        "name_en": "Test Holding",
        "name_ar": "شركة الاختبار",
        "establishment_name_en": "Test Lodges",
        "establishment_name_ar": "نزل الاختبار",
        "street_en": "King Fahd Road",
        "street_ar": "طريق الملك فهد",
        "city_en": "Riyadh",
        "city_ar": "الرياض",
        "country_en": "Saudi Arabia",
        "country_ar": "المملكة العربية السعودية",
        "vat_number": "310231928400003",
    }
    values.update(overrides)
    return CompanySettings(**values)


def test_addresses_use_language_separators() -> None:
    company = _company()
    assert company_address_en(company) == "King Fahd Road, Riyadh, Saudi Arabia"
    assert company_address_ar(company) == (
        "طريق الملك فهد، الرياض، المملكة العربية السعودية"
    )


def test_empty_parts_are_skipped() -> None:
    assert compose_address("", "Riyadh", "Saudi Arabia", separator=", ") == (
        "Riyadh, Saudi Arabia"
    )
    assert compose_address("", "", "", separator=", ") == ""


def test_settings_supply_the_seller_identity() -> None:
    company = company_from_settings(get_settings())
    assert company.vat_number == "310231928400003"
    assert company.establishment_name_en == "Awwa Al-Makan Tourist Lodges"
    assert company.cr_number == ""
