"""Exception handlers for FastAPI applications serving paginated endpoints.

Client-caused pagination errors (bad cursor, bad ordering, unknown sort
field) become 400 Problem Details responses. Any other ``RepositoryError``
is logged and answered with a generic 500.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from keyset_pager.core.database.exceptions import (
    InvalidOrderSpecError,
    MalformedCursorError,
    RepositoryError,
    UnknownFieldError,
)
from keyset_pager.core.exceptions import AppException, BadRequestException

logger = logging.getLogger(__name__)


def to_app_exception(exc: RepositoryError) -> AppException | None:
    """Map client-caused repository errors to an HTTP exception.

    Returns None for errors that are not the client's fault.
    """
    if isinstance(exc, MalformedCursorError):
        extra = {k: v for k, v in exc.details.items() if k in ("expected", "actual")}
        return BadRequestException(detail=exc.message, type="invalid-cursor", extra=extra)
    if isinstance(exc, InvalidOrderSpecError):
        return BadRequestException(detail=exc.message, type="invalid-order")
    if isinstance(exc, UnknownFieldError):
        return BadRequestException(
            detail=exc.message, type="unknown-sort-field", extra={"field": exc.field}
        )
    return None


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render an AppException as RFC 7807 Problem Details."""
    logger.warning(
        "Application exception occurred",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": exc.type,
            "status_code": exc.status_code,
        },
    )
    problem = exc.to_problem(instance=str(request.url))
    return JSONResponse(status_code=exc.status_code, content=problem.to_response_body())


async def repository_exception_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    """Client errors go through ``app_exception_handler``; the rest become 500."""
    app_exc = to_app_exception(exc)
    if app_exc is not None:
        return await app_exception_handler(request, app_exc)

    logger.error(
        "Repository error",
        extra={"path": request.url.path, "method": request.method, "details": exc.details},
        exc_info=exc,
    )
    internal = AppException(
        status_code=500,
        detail="An unexpected error occurred",
        type="internal-error",
    )
    problem = internal.to_problem(instance=str(request.url))
    return JSONResponse(status_code=500, content=problem.to_response_body())


def configure_exception_handlers(app: FastAPI) -> None:
    """Register the pagination exception handlers on ``app``."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RepositoryError, repository_exception_handler)


__all__ = [
    "app_exception_handler",
    "configure_exception_handlers",
    "repository_exception_handler",
    "to_app_exception",
]
