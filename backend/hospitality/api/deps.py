"""Common API dependencies."""

from __future__ import annotations

import uuid
from typing import Annotated
from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from hospitality.core.company import CompanySettings, get_company_settings
from hospitality.core.config import Settings, get_settings
from hospitality.core.security import decode_access_token
from hospitality.db.session import get_session
from hospitality.models.user import User, UserStatus
from hospitality.security.permissions import BILLING_ROLES, require_roles
from hospitality.services import user_service

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{get_settings().api_v1_prefix}/auth/token"
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session."""
    async for session in get_session():
        yield session


def get_app_settings() -> Settings:
    return get_settings()


def get_company() -> CompanySettings:
    """Seller identity injected into invoice endpoints."""
    return get_company_settings()


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> User:
    """Authenticate request via bearer token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        claims = decode_access_token(token)
    except JWTError as exc:
        raise credentials_exception from exc

    try:
        user_id = uuid.UUID(claims.subject)
    except (ValueError, TypeError) as exc:
        raise credentials_exception from exc

    user = await user_service.get_user(session, user_id)
    if user is None or user.status != UserStatus.ACTIVE:
        raise credentials_exception
    return user


async def get_current_billing_user(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Ensure the current user may work folios and invoices."""
    require_roles(current_user, BILLING_ROLES)
    return current_user
