"""Bootstrap helpers for default data."""

from __future__ import annotations

import logging

from hospitality.core.config import get_settings
from hospitality.db.session import get_sessionmaker
from hospitality.models import UserRole, UserStatus
from hospitality.services.transaction_code_service import (
    ensure_default_transaction_codes,
)
from hospitality.services.user_service import create_user, get_user_by_email

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_NAME = "Front Office Administrator"


async def ensure_default_admin() -> None:
    """Create the configured admin user if one does not yet exist."""

    settings = get_settings()
    if not settings.bootstrap_admin_email or not settings.bootstrap_admin_password:
        logger.debug("No bootstrap admin configured; skipping")
        return

    sessionmaker = get_sessionmaker(settings.database_url)
    async with sessionmaker() as session:
        email = settings.bootstrap_admin_email.lower()
        if await get_user_by_email(session, email=email) is not None:
            return
        await create_user(
            session,
            email=email,
            password=settings.bootstrap_admin_password,
            full_name=DEFAULT_ADMIN_NAME,
            role=UserRole.ADMIN,
            status=UserStatus.ACTIVE,
        )
        logger.info("Created bootstrap admin %s", email)


async def ensure_transaction_codes() -> None:
    """Seed the default transaction code catalog."""

    settings = get_settings()
    sessionmaker = get_sessionmaker(settings.database_url)
    async with sessionmaker() as session:
        await ensure_default_transaction_codes(session)
