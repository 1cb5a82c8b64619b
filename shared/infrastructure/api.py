"""HTTP mapping of domain errors for the DRF views."""

from __future__ import annotations

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.domain.exceptions import (
    ConflictError,
    DomainError,
    HoldExpiredError,
    HoldOwnershipError,
    NotFoundError,
    RoomUnavailableError,
    ValidationError,
)

# Most specific first: HoldExpiredError is also a NotFoundError.
ERROR_STATUS_CODES = (
    (HoldExpiredError, status.HTTP_410_GONE),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (HoldOwnershipError, status.HTTP_403_FORBIDDEN),
    (RoomUnavailableError, status.HTTP_409_CONFLICT),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
)


def status_for(exc: DomainError) -> int:
    for error_class, code in ERROR_STATUS_CODES:
        if isinstance(exc, error_class):
            return code
    return status.HTTP_400_BAD_REQUEST


def domain_error_response(exc: DomainError) -> Response:
    """Response with ``{"detail": ..., "code": ...}`` for a domain error."""
    return Response(
        {"detail": exc.message, "code": type(exc).__name__},
        status=status_for(exc),
    )
