"""
Translation of service errors into HTTP errors.

Response bodies carry a generic message only; the underlying cause is logged
where the error was raised.
"""

from __future__ import annotations

from fastapi import HTTPException, status

from weather_booking.errors import (
    AuthenticationRequired,
    BookingError,
    BookingNotFound,
    BookingStateConflict,
    PaymentGatewayError,
    PersistenceError,
    RoomNotFound,
    SignatureInvalid,
    UpstreamUnavailable,
    ValidationError,
)

# Checked in order; subclasses before their bases
_ERROR_RESPONSES: tuple[tuple[type[BookingError], int, str, str], ...] = (
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY, "Invalid request", "invalid_request"),
    (AuthenticationRequired, status.HTTP_401_UNAUTHORIZED, "Authentication required", "unauthenticated"),
    (BookingNotFound, status.HTTP_404_NOT_FOUND, "Booking not found", "not_found"),
    (RoomNotFound, status.HTTP_404_NOT_FOUND, "Room not found", "room_not_found"),
    (BookingStateConflict, status.HTTP_409_CONFLICT, "Booking cannot be changed", "conflict"),
    (PaymentGatewayError, status.HTTP_502_BAD_GATEWAY, "Payment could not be started", "payment_error"),
    (UpstreamUnavailable, status.HTTP_502_BAD_GATEWAY, "Service temporarily unavailable", "upstream_error"),
    (PersistenceError, status.HTTP_503_SERVICE_UNAVAILABLE, "Service temporarily unavailable", "persistence_error"),
    (SignatureInvalid, status.HTTP_400_BAD_REQUEST, "Invalid signature", "rejected"),
)


def error_kind(error: BookingError) -> str:
    """Short label for metrics (e.g. "not_found", "upstream_error")."""
    for error_type, _, _, kind in _ERROR_RESPONSES:
        if isinstance(error, error_type):
            return kind
    return "error"


def to_http_exception(error: BookingError) -> HTTPException:
    """
    Map a service error to the HTTPException returned to the caller.

    Args:
        error: Error raised by a service

    Returns:
        HTTPException: Status code and generic detail message
    """
    for error_type, status_code, detail, _ in _ERROR_RESPONSES:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=detail)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error"
    )
