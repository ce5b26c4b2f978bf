"""
Application error types and their HTTP translation.

Services raise subclasses of ``ServiceError``; each carries the HTTP
status it maps to.  ``register_exception_handlers`` installs handlers
on the FastAPI app that render every failure with the same envelope::

    {"success": false, "error": {"message": "...", "details": [...]}}

Request validation failures are reported as 400 with one entry per
offending field.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException


logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Base error raised by the service layer."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT


def error_body(message: str, details: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    error: Dict[str, Any] = {"message": message}
    if details:
        error["details"] = details
    return {"success": False, "error": error}


def _format_validation_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    details = []
    for err in exc.errors():
        # Drop the leading "body"/"query"/"path" marker from the location.
        loc = [str(part) for part in err.get("loc", ())[1:]]
        details.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})
    return details


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = _format_validation_errors(exc)
    logger.warning("Validation failed for %s %s: %s", request.method, request.url.path, details)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Validation failed", details),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error envelope handlers to ``app``."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
