"""HTTP rendering of failures.

Every error body has the same shape, ``{"detail", "error", "request_id"}``,
where ``error`` is a stable machine-readable name and ``request_id`` matches
the X-Request-ID response header and the log lines of the request.
"""

from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.teamspace.core.errors import ProvisioningError
from src.teamspace.core.logging import get_logger

logger = get_logger(__name__)


def error_response(
    status_code: int,
    detail: Any,
    error: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            {"detail": detail, "error": error, "request_id": correlation_id.get()}
        ),
        headers=headers,
    )


async def provisioning_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, ProvisioningError):
        raise exc
    logger.info(
        "Request rejected",
        error=exc.code,
        status_code=exc.status_code,
        path=request.url.path,
    )
    return error_response(exc.status_code, exc.message, exc.code)


async def http_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, StarletteHTTPException):
        raise exc
    return error_response(
        exc.status_code,
        exc.detail,
        "HTTPError",
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, RequestValidationError):
        raise exc
    return error_response(422, exc.errors(), "RequestValidationError")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Never echo the exception text; it may carry connection strings or SQL
    logger.exception("Unhandled exception", exc_info=exc, path=request.url.path)
    return error_response(500, "Internal server error", "InternalError")


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ProvisioningError, provisioning_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
