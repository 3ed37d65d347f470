"""Exception handlers for the build trigger API.

Domain errors abort a run before any image is built; the handler picks the
HTTP status from the most specific mapped class in the exception's MRO and
answers with an :class:`ErrorResponse`.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from service_builder.domain.exceptions import (
    CommitNotFoundError,
    DiffFetchError,
    GitHubRateLimitError,
    InvalidChangeError,
    RepositoryAccessDeniedError,
    ServiceBuilderError,
    WorkspaceMismatchError,
)
from service_builder.interface.schemas import ErrorResponse

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[ServiceBuilderError], int] = {
    CommitNotFoundError: 404,
    RepositoryAccessDeniedError: 403,
    GitHubRateLimitError: 429,
    DiffFetchError: 502,
    InvalidChangeError: 502,
    WorkspaceMismatchError: 409,
}


def status_for(exc: ServiceBuilderError) -> int:
    """HTTP status of a domain error; unmapped errors are server faults."""
    for cls in type(exc).__mro__:
        if cls in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[cls]
    return 500


def _respond(status_code: int, error: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=error, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application."""

    @app.exception_handler(ServiceBuilderError)
    async def domain_handler(request: Request, exc: ServiceBuilderError) -> JSONResponse:
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error("Build run aborted: %s: %s", type(exc).__name__, exc)
        else:
            logger.warning("Build run rejected: %s: %s", type(exc).__name__, exc)
        return _respond(status_code, type(exc).__name__, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
            for err in exc.errors()
        )
        return _respond(422, "ValidationError", message)

    @app.exception_handler(Exception)
    async def generic_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception during build run")
        return _respond(500, "InternalError", "An unexpected error occurred.")
