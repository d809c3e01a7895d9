"""Application configuration via pydantic settings."""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from typing import Any

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed application configuration."""

    app_env: str = Field("local", alias="APP_ENV")
    app_name: str = "Awwa Al-Makan Hospitality API"
    api_v1_prefix: str = "/api/v1"

    database_url: str = Field(..., alias="DATABASE_URL")
    sync_database_url: str | None = Field(default=None, alias="SYNC_DATABASE_URL")

    secret_key: str = Field(..., alias="SECRET_KEY")
    jwt_secret_key: str = Field(default="", alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    jwt_issuer: str = Field("awwa-billing", alias="JWT_ISSUER")

    redis_url: str | None = Field(default=None, alias="REDIS_URL")

    bootstrap_admin_email: str | None = Field(default=None, alias="BOOTSTRAP_ADMIN_EMAIL")
    bootstrap_admin_password: str | None = Field(
        default=None, alias="BOOTSTRAP_ADMIN_PASSWORD"
    )

    cors_allowlist: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"], alias="CORS_ALLOWLIST"
    )
    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")

    rate_limit_default: str = Field("100/minute", alias="RATE_LIMIT_DEFAULT")
    rate_limit_login: str = Field("10/minute", alias="RATE_LIMIT_LOGIN")

    vat_rate: Decimal = Field(Decimal("0.15"), alias="VAT_RATE", ge=0, lt=1)
    currency: str = Field("SAR", alias="CURRENCY")
    qr_image_base_url: str = Field(
        "https://api.qrserver.com/v1/create-qr-code/", alias="QR_IMAGE_BASE_URL"
    )
    qr_image_size: int = Field(150, alias="QR_IMAGE_SIZE")

    company_name_en: str = Field(
        "Jah Al-Amal Real Estate Services", alias="COMPANY_NAME_EN"
    )
    company_name_ar: str = Field(
        "مكتب جاه الأعمال للخدمات العقارية", alias="COMPANY_NAME_AR"
    )
    company_establishment_name_en: str = Field(
        "Awwa Al-Makan Tourist Lodges", alias="COMPANY_ESTABLISHMENT_NAME_EN"
    )
    company_establishment_name_ar: str = Field(
        "مؤسسة أوي المكان للنزل السياحية", alias="COMPANY_ESTABLISHMENT_NAME_AR"
    )
    company_street_en: str = Field(
        "Prince Mohammed bin Salman bin Abdulaziz Road", alias="COMPANY_STREET_EN"
    )
    company_street_ar: str = Field(
        "طريق الأمير محمد بن سلمان بن عبدالعزيز", alias="COMPANY_STREET_AR"
    )
    company_city_en: str = Field("Riyadh", alias="COMPANY_CITY_EN")
    company_city_ar: str = Field("الرياض", alias="COMPANY_CITY_AR")
    company_country_en: str = Field(
        "Kingdom of Saudi Arabia", alias="COMPANY_COUNTRY_EN"
    )
    company_country_ar: str = Field(
        "المملكة العربية السعودية", alias="COMPANY_COUNTRY_AR"
    )
    company_vat_number: str = Field("310231928400003", alias="COMPANY_VAT_NUMBER")
    company_cr_number: str = Field("", alias="COMPANY_CR_NUMBER")

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[3] / ".env",
        case_sensitive=False,
        populate_by_name=True,
    )

    def model_post_init(self, __context: Any) -> None:
        """Populate JWT secret from the generic secret when not provided."""

        if not self.jwt_secret_key:
            object.__setattr__(self, "jwt_secret_key", self.secret_key)

    @field_validator("cors_allowlist", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()  # type: ignore[call-arg]
