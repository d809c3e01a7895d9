"""Role helper for explicit authorization checks."""

from __future__ import annotations

from fastapi import HTTPException, status

from hospitality.models.user import User, UserRole

BILLING_ROLES: frozenset[UserRole] = frozenset(
    {UserRole.ADMIN, UserRole.OPERATIONS_MANAGER, UserRole.STAFF}
)

BILLING_SCOPES: tuple[str, ...] = ("folios:read", "folios:write", "invoices:issue")


def scopes_for_role(role: UserRole) -> tuple[str, ...]:
    """Token scopes granted to a role; only billing roles get any."""

    return BILLING_SCOPES if role in BILLING_ROLES else ()


def require_roles(user: User, allowed: frozenset[UserRole] | set[UserRole]) -> None:
    """Raise HTTP 403 if a user is not a member of the allowed role set."""

    if user.role not in allowed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions",
        )


__all__ = ["BILLING_ROLES", "BILLING_SCOPES", "require_roles", "scopes_for_role"]
