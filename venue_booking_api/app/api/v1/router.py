"""
Top-level router for version 1 of the API.

Customer-facing routers are mounted by resource name; organizer
routers live under ``/admin``.  Update this file when a new domain is
added.
"""

from fastapi import APIRouter

from .endpoints import analytics, auth, events, meals, organizer, payments, venues


router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(venues.router, prefix="/venues", tags=["venues"])
router.include_router(meals.router, prefix="/meals", tags=["meals"])
router.include_router(events.router, prefix="/events", tags=["events"])
router.include_router(payments.router, prefix="/payments", tags=["payments"])

# Organizer routes
router.include_router(organizer.router, prefix="/admin", tags=["admin"])
router.include_router(venues.admin_router, prefix="/admin/venues", tags=["admin"])
router.include_router(meals.admin_router, prefix="/admin/meals", tags=["admin"])
router.include_router(events.admin_router, prefix="/admin/events", tags=["admin"])
router.include_router(analytics.router, prefix="/admin/analytics", tags=["analytics"])
