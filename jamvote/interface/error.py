"""Interface layer errors and their HTTP translation."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from jamvote.domain.error import (
    IdentityProviderUnavailableError,
    StorageUnavailableError,
)

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = "1"


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400 rather than 422."""
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Malformed request", "errors": errors},
    )


async def unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    """Report dependency outages as retryable 503s."""
    logger.warning("Dependency unavailable on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": str(exc) or "Service temporarily unavailable"},
        headers={"Retry-After": RETRY_AFTER_SECONDS},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install app-wide exception handlers."""
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StorageUnavailableError, unavailable_handler)
    app.add_exception_handler(IdentityProviderUnavailableError, unavailable_handler)
