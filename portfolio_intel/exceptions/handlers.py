import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from .custom import (
    DuplicateHotelError,
    ErrorKind,
    FolderNotFoundError,
    HotelNotFoundError,
    MissingCredentialError,
    RateLimitError,
    SourceError,
)

logger = logging.getLogger(__name__)


async def source_error_handler(_request: Request, exc: SourceError) -> JSONResponse:
    logger.error("%s: %s (status=%s)", type(exc).__name__, exc.message, exc.status_code)
    return JSONResponse(
        status_code=404 if exc.kind == ErrorKind.not_found else 502,
        content={"detail": exc.message, "kind": exc.kind},
    )


async def rate_limit_error_handler(_request: Request, exc: RateLimitError) -> JSONResponse:
    logger.warning("Rate limit hit for %s", exc.service)
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded for {exc.service}", "kind": exc.kind},
    )


async def missing_credential_handler(_request: Request, exc: MissingCredentialError) -> JSONResponse:
    logger.warning("Credential not configured: %s", exc.message)
    return JSONResponse(
        status_code=503,
        content={"detail": exc.message, "kind": exc.kind},
    )


async def not_found_handler(
    _request: Request, exc: FolderNotFoundError | HotelNotFoundError
) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def duplicate_hotel_handler(_request: Request, exc: DuplicateHotelError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})
