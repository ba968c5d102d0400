"""Shared error helpers for HTTP APIs.

Every error leaves the API in cargo's ``{"errors": [{"detail": ...}]}`` shape.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from registry_api.errors import (
    BlobNotFoundError,
    DuplicateCrateVersionError,
    InternalError,
    MalformedPayloadError,
    NonExistentCrateVersionError,
    NonExistentPackageInfoError,
    NonExistentTokenError,
    RegistryError,
    UnauthorizedError,
    WriteConflictError,
)
from registry_api.models.responses import ErrorDetail, ErrorResponse

LOGGER = logging.getLogger(__name__)

_STATUS_BY_ERROR: tuple[tuple[type[RegistryError], int], ...] = (
    (MalformedPayloadError, status.HTTP_400_BAD_REQUEST),
    (DuplicateCrateVersionError, status.HTTP_409_CONFLICT),
    (WriteConflictError, status.HTTP_409_CONFLICT),
    (NonExistentPackageInfoError, status.HTTP_404_NOT_FOUND),
    (NonExistentCrateVersionError, status.HTTP_404_NOT_FOUND),
    (NonExistentTokenError, status.HTTP_404_NOT_FOUND),
    (BlobNotFoundError, status.HTTP_404_NOT_FOUND),
)


def error_payload(message: str) -> dict[str, Any]:
    return ErrorResponse(errors=[ErrorDetail(detail=message)]).model_dump()


def status_for(exc: RegistryError) -> int:
    if isinstance(exc, UnauthorizedError):
        return status.HTTP_403_FORBIDDEN if exc.forbidden else status.HTTP_401_UNAUTHORIZED
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def http_error(
    status_code: int,
    message: str,
    *,
    headers: Optional[dict[str, str]] = None,
) -> HTTPException:
    return HTTPException(status_code=status_code, detail=error_payload(message), headers=headers)


def not_found(message: str) -> HTTPException:
    return http_error(status.HTTP_404_NOT_FOUND, message)


async def registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        LOGGER.error(
            "Request %s %s failed: %s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc,
        )
        message = InternalError().message
    else:
        message = exc.message
    return JSONResponse(status_code=status_code, content=error_payload(message))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    if not (isinstance(detail, dict) and "errors" in detail):
        detail = error_payload(str(detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=detail,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"invalid request: {location}: {first.get('msg')}" if location else first.get("msg")
    else:
        message = "invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_payload(str(message)),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RegistryError, registry_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)


__all__ = [
    "error_payload",
    "http_error",
    "not_found",
    "register_error_handlers",
    "status_for",
]
