"""
Registry error handling - Maps domain error kinds to HTTP responses.

Every RegistryError raised by the domain reaches the client as
``{"detail": <message>, "error": <kind>}`` with the status code below.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.domain.exceptions import (
    AlreadyRegistered,
    AlreadyReported,
    AlreadyReviewed,
    InvalidData,
    InvalidUser,
    NoPermission,
    NotFound,
    NotInDispute,
    RatingOutOfBounds,
    RegistryError,
    Unauthorized,
    VerificationFailed,
)

# Checked in order; AlreadyResolved is caught by its NotInDispute base.
ERROR_STATUS: list[tuple[type[RegistryError], int]] = [
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Unauthorized, status.HTTP_403_FORBIDDEN),
    (NoPermission, status.HTTP_403_FORBIDDEN),
    (AlreadyRegistered, status.HTTP_409_CONFLICT),
    (AlreadyReviewed, status.HTTP_409_CONFLICT),
    (AlreadyReported, status.HTTP_409_CONFLICT),
    (NotInDispute, status.HTTP_409_CONFLICT),
    (InvalidData, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InvalidUser, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (RatingOutOfBounds, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (VerificationFailed, status.HTTP_401_UNAUTHORIZED),
]


def status_for(error: RegistryError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
    return JSONResponse(
        status_code=status_for(exc),
        content={"detail": exc.message, "error": exc.kind},
    )


def install_error_handlers(app: FastAPI) -> None:
    """Register the registry error handler on an application."""
    app.add_exception_handler(RegistryError, registry_error_handler)
