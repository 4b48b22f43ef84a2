"""
Exception handlers for the FastAPI application.

Field errors, from ``ExtendedBadRequest`` or request validation, share one
400 body shape the front-end maps onto form fields. Anything unhandled is
logged with an error id and returned as a generic 500.
"""
import traceback
from typing import Any, Dict
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog

from cad_api.config import settings
from cad_api.exceptions import ExtendedBadRequest

logger = structlog.get_logger()


def bad_request_body(errors: Dict[str, Any]) -> Dict[str, Any]:
    return {"detail": "badRequest", "errors": errors}


async def extended_bad_request_handler(request: Request, exc: ExtendedBadRequest) -> JSONResponse:
    logger.debug("Bad request", path=request.url.path, errors=exc.errors)
    return JSONResponse(
        status_code=exc.status_code,
        content=bad_request_body(exc.errors),
        headers=exc.headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Render request validation failures as field errors.

    Each error is keyed by the last element of its location, which is the
    camelCase alias for body fields. The first error per field wins.
    """
    errors: Dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("body",)
        field = str(loc[-1])
        errors.setdefault(field, error.get("msg", "invalid"))

    logger.debug("Request validation failed", path=request.url.path, fields=list(errors))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=bad_request_body(errors),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions securely.

    The full context is logged server-side; the client only gets an error
    id it can report.
    """
    error_id = str(uuid4())[:8]

    logger.error(
        "Unhandled exception",
        error_id=error_id,
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
        error_message=str(exc),
        client_ip=request.client.host if request.client else None,
        traceback=traceback.format_exc() if settings.DEBUG else None,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "An internal error occurred. Please try again later.",
            "error_id": error_id,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the application's exception handlers."""
    app.add_exception_handler(ExtendedBadRequest, extended_bad_request_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered")
