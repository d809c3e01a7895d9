"""Seller identity printed on tax invoices."""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from hospitality.core.config import Settings, get_settings

_ARABIC_COMMA = "، "


class CompanySettings(BaseModel):
    """Immutable seller identity passed into invoice generation."""

    name_en: str
    name_ar: str
    establishment_name_en: str
    establishment_name_ar: str
    street_en: str
    street_ar: str
    city_en: str
    city_ar: str
    country_en: str
    country_ar: str
    vat_number: str
    cr_number: str = ""

    model_config = ConfigDict(frozen=True)


def compose_address(street: str, city: str, country: str, *, separator: str) -> str:
    """Join the non-empty address parts with ``separator``."""

    return separator.join(part for part in (street, city, country) if part)


def company_address_en(company: CompanySettings) -> str:
    return compose_address(
        company.street_en, company.city_en, company.country_en, separator=", "
    )


def company_address_ar(company: CompanySettings) -> str:
    return compose_address(
        company.street_ar, company.city_ar, company.country_ar, separator=_ARABIC_COMMA
    )


def company_from_settings(settings: Settings) -> CompanySettings:
    """Build the seller identity from the ``COMPANY_*`` configuration keys."""

    return CompanySettings(
        name_en=settings.company_name_en,
        name_ar=settings.company_name_ar,
        establishment_name_en=settings.company_establishment_name_en,
        establishment_name_ar=settings.company_establishment_name_ar,
        street_en=settings.company_street_en,
        street_ar=settings.company_street_ar,
        city_en=settings.company_city_en,
        city_ar=settings.company_city_ar,
        country_en=settings.company_country_en,
        country_ar=settings.company_country_ar,
        vat_number=settings.company_vat_number,
        cr_number=settings.company_cr_number,
    )


@lru_cache
def get_company_settings() -> CompanySettings:
    """Return the cached seller identity for the running application."""
    return company_from_settings(get_settings())


__all__ = [
    "CompanySettings",
    "company_address_ar",
    "company_address_en",
    "company_from_settings",
    "compose_address",
    "get_company_settings",
]
