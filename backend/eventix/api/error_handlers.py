"""Error Handlers — global exception handlers for the Eventix API.

Invariants:
    - EventixError → its own http_status, message as the error string
    - RequestValidationError → 400 with one details entry per offending field
    - Exception (catch-all) → 500, never leaks internal details
    - Every error body is {success: false, error: <reason>, errorCode: <code>},
      the same shape orchestrated failures answer with

Design Decisions:
    - Orchestrated writes already answer with OperationOutcome; these handlers
      cover read routes and request parsing
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from eventix.core.errors import EventixError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(EventixError, handle_eventix_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


def _failure(
    status_code: int, message: str, code: str, details: list | None = None,
) -> JSONResponse:
    content = {"success": False, "error": message, "errorCode": code}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


async def handle_eventix_error(request: Request, exc: EventixError):
    logger.warning(
        f"{exc.code} on {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "mint": exc.context.mint,
        },
    )
    return _failure(exc.http_status, exc.message, exc.code)


async def handle_validation_error(request: Request, exc: RequestValidationError):
    fields = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.warning(
        f"Rejected request body on {request.url.path}: "
        f"{[f['field'] for f in fields]}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return _failure(
        status.HTTP_400_BAD_REQUEST, "Invalid request data",
        "VALIDATION_ERROR", fields,
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    """Catch-all: never leaks internal details."""
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}",
        exc_info=True,
        extra={"path": request.url.path},
    )
    return _failure(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred", "INTERNAL_ERROR",
    )
