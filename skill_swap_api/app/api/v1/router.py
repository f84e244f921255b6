"""
Top-level router for version 1 of the API.

Aggregates the domain routers under their prefixes.  ``create_app``
mounts this router under ``settings.api_prefix``.
"""

from fastapi import APIRouter

from .endpoints import admin, auth, swaps, users

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(swaps.router, prefix="/swaps", tags=["swaps"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
