"""Versioned API router."""

from fastapi import APIRouter

from . import auth, folios, health, invoices

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(folios.router, tags=["folios"])
router.include_router(invoices.router, tags=["invoices"])

__all__ = ["router"]
