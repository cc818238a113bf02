"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import (
    admin,
    analytics,
    applications,
    auth,
    health,
    notifications,
    payments,
    staff,
    users,
)

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(staff.router, prefix="/staff", tags=["staff"])
router.include_router(applications.router, prefix="/applications", tags=["applications"])
router.include_router(payments.router, prefix="/payments", tags=["payments"])
router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
