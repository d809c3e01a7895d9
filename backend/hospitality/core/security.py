"""Password hashing and the signed access tokens cashiers sign in with."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from hospitality.core.config import get_settings


@dataclass(frozen=True)
class AccessClaims:
    """Verified contents of an access token."""

    subject: str
    role: str | None
    scopes: tuple[str, ...]
    issued_at: datetime | None
    expires_at: datetime | None

    def allows(self, scope: str) -> bool:
        return scope in self.scopes


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())
    except ValueError:  # stored value is not a bcrypt hash
        return False


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def create_access_token(
    subject: str,
    *,
    role: str | None = None,
    scopes: Iterable[str] = (),
    expires_delta: timedelta | None = None,
) -> str:
    """Sign a token for ``subject`` carrying its role and billing scopes."""

    settings = get_settings()
    issued_at = datetime.now(UTC)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims: dict[str, Any] = {
        "sub": subject,
        "iss": settings.jwt_issuer,
        "iat": issued_at,
        "exp": issued_at + lifetime,
        "role": role,
        "scope": " ".join(scopes),
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> AccessClaims:
    """Verify signature, expiry and issuer; raise ``JWTError`` otherwise."""

    settings = get_settings()
    payload = jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
        issuer=settings.jwt_issuer,
    )
    subject = payload.get("sub")
    if not subject:
        raise JWTError("Token has no subject")
    return AccessClaims(
        subject=str(subject),
        role=payload.get("role"),
        scopes=tuple(str(payload.get("scope") or "").split()),
        issued_at=_from_timestamp(payload.get("iat")),
        expires_at=_from_timestamp(payload.get("exp")),
    )


def _from_timestamp(value: Any) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), UTC)
