"""Interface layer error mapping.

Every error leaves the API as {"detail": {"kind": ..., "message": ...}} so
clients can branch on a machine-readable kind.
"""

from enum import Enum
from typing import Any

import logfire
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from onlyfacts.domain.error import (
    ContentionError,
    DomainError,
    DuplicateVoteError,
    NotFoundError,
)
from onlyfacts.persistence.connection import DatabaseConnection
from onlyfacts.persistence.error import StorageUnavailableError

# Seconds a client should wait before retrying after a 503
RETRY_AFTER_SECONDS = 5


class ErrorKind(str, Enum):
    """Machine-readable error kinds."""

    VALIDATION = "validation_error"
    NOT_FOUND = "not_found"
    DUPLICATE_VOTE = "duplicate_vote"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    INTERNAL = "internal_error"


def error_detail(kind: ErrorKind, message: str, **extra: Any) -> dict[str, Any]:
    """Build the error detail payload."""
    return {"kind": kind.value, "message": message, **extra}


def http_error(
    status_code: int,
    kind: ErrorKind,
    message: str,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> HTTPException:
    """Build an HTTPException carrying an error kind."""
    return HTTPException(
        status_code=status_code,
        detail=error_detail(kind, message, **extra),
        headers=headers,
    )


def storage_unavailable(message: str) -> HTTPException:
    """503 telling the client to back off and retry."""
    return http_error(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        ErrorKind.STORAGE_UNAVAILABLE,
        message,
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )


def _duplicate_vote_detail(error: DuplicateVoteError) -> dict[str, Any]:
    return error_detail(
        ErrorKind.DUPLICATE_VOTE,
        "You have already voted on this fact",
        hasVoted=True,
        previousChoice=error.previous_choice.value,
    )


def duplicate_vote_response(error: DuplicateVoteError) -> JSONResponse:
    """409 for a repeat vote.

    Besides the detail, the body repeats hasVoted and previousVote at the top
    level, where the first web client reads them to restore its local vote.
    """
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "detail": _duplicate_vote_detail(error),
            "hasVoted": True,
            "previousVote": error.previous_choice.value,
        },
    )


def domain_error_to_http(error: DomainError) -> HTTPException:
    """Map a domain error to its HTTP response.

    Args:
        error: Domain error raised by a use case

    Returns:
        HTTPException to raise from the route
    """
    if isinstance(error, DuplicateVoteError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=_duplicate_vote_detail(error),
        )
    if isinstance(error, NotFoundError):
        return http_error(status.HTTP_404_NOT_FOUND, ErrorKind.NOT_FOUND, str(error))
    if isinstance(error, ContentionError):
        return storage_unavailable(str(error))
    # ValidationError, and any other rule the client broke
    return http_error(status.HTTP_400_BAD_REQUEST, ErrorKind.VALIDATION, str(error))


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400 instead of FastAPI's 422."""
    errors = jsonable_encoder(exc.errors())
    message = "; ".join(
        f"{'.'.join(str(p) for p in error['loc'][1:]) or 'body'}: {error['msg']}"
        for error in errors
    )
    logfire.warn("Request validation failed", path=request.url.path, errors=message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": error_detail(ErrorKind.VALIDATION, message, errors=errors)},
    )


async def storage_unavailable_handler(
    request: Request, exc: StorageUnavailableError
) -> JSONResponse:
    """Storage errors raised outside a route body (e.g. opening the session)."""
    logfire.warn("Storage unavailable", path=request.url.path, error=str(exc))
    error = storage_unavailable(str(exc))
    return JSONResponse(
        status_code=error.status_code,
        content={"detail": error.detail},
        headers=error.headers,
    )


async def operational_error_handler(
    request: Request, exc: OperationalError
) -> JSONResponse:
    """Database went away mid-request: flag the connection and answer 503."""
    container = getattr(request.state, "dishka_container", None)
    if container is not None:
        connection = await container.get(DatabaseConnection)
        connection.mark_lost(exc)
    return await storage_unavailable_handler(
        request, StorageUnavailableError("Lost connection to storage")
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log and answer 500 without leaking internals."""
    logfire.error(
        "Unexpected error",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": error_detail(ErrorKind.INTERNAL, "Internal server error")},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register application-wide exception handlers.

    Args:
        app: FastAPI application
    """
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StorageUnavailableError, storage_unavailable_handler)
    app.add_exception_handler(OperationalError, operational_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
