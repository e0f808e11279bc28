"""API v1 routes."""

from fastapi import APIRouter

from storefront.api.v1 import admin, auth, health, staff, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
router.include_router(staff.router, prefix="/staff", tags=["staff"])
router.include_router(users.router, prefix="/users", tags=["users"])
