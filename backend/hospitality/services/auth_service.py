"""Cashier sign-in and token issuance."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from hospitality.core.security import create_access_token, verify_password
from hospitality.models.user import User, UserStatus
from hospitality.security.permissions import scopes_for_role
from hospitality.services import user_service

logger = logging.getLogger(__name__)


async def authenticate_user(
    session: AsyncSession, email: str, password: str
) -> User | None:
    """Return the active user matching the credentials, or ``None``."""

    user = await user_service.get_user_by_email(session, email=email.strip().lower())
    if user is None or not verify_password(password, user.hashed_password):
        logger.info("Rejected sign-in for %s: bad credentials", email)
        return None
    if user.status is not UserStatus.ACTIVE:
        logger.info("Rejected sign-in for %s: account is %s", email, user.status.value)
        return None
    return user


def create_access_token_for_user(user: User) -> str:
    """Token whose scopes tell the front desk which billing screens to show."""

    return create_access_token(
        str(user.id),
        role=user.role.value,
        scopes=scopes_for_role(user.role),
    )
