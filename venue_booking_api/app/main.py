"""
Main entrypoint for the Venue Booking API.

This module assembles the FastAPI application: logging, the central
error handlers, versioned routers and a health check.  The ``app``
instance is created at import time so it can be served directly::

    uvicorn venue_booking_api.app.main:app --reload
"""

import time
from typing import Any, Dict

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import check_connection, init_db, utcnow
from .core.exceptions import register_exception_handlers
from .core.logging_config import setup_logging
from .services.account_service import OrganizerService


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured application with all v1 routes under ``/api/v1``.
    """
    # Logging first so that the startup hook below can log.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    register_exception_handlers(app)
    app.include_router(v1_router, prefix="/api/v1")

    started_at = time.monotonic()

    @app.on_event("startup")
    async def startup_event() -> None:
        init_db()
        OrganizerService.ensure_default_admin()

    @app.get("/api/health", tags=["health"])
    async def health() -> Dict[str, Any]:
        database_ok = check_connection()
        return {
            "status": "OK" if database_ok else "DEGRADED",
            "timestamp": utcnow().isoformat(),
            "database": "connected" if database_ok else "unavailable",
            "uptime": round(time.monotonic() - started_at, 3),
        }

    return app


app = create_app()
