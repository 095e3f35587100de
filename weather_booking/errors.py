"""
Error taxonomy for the booking service.

Services raise these; route handlers translate them into HTTP responses with a
generic message. Upstream details stay in the logs.
"""

from __future__ import annotations


class BookingError(Exception):
    """Base class for all booking service errors."""


class ValidationError(BookingError):
    """Malformed caller input (e.g. blank roomId)."""


class UpstreamUnavailable(BookingError):
    """Room catalog or payment gateway unreachable or returned an error."""


class RoomNotFound(UpstreamUnavailable):
    """Room catalog answered but does not know the room id."""


class PaymentGatewayError(UpstreamUnavailable):
    """Checkout session could not be created."""


class AuthenticationRequired(BookingError):
    """Request carries no authenticated subject."""


class SignatureInvalid(BookingError):
    """Payment notification failed signature verification."""


class MalformedPaymentEvent(BookingError):
    """Payment notification passed verification but its body is unusable."""


class BookingNotFound(BookingError):
    """Booking id unknown, or owned by someone else."""


class BookingStateConflict(BookingError):
    """Requested transition is not defined for the booking's current status."""


class PersistenceError(BookingError):
    """Booking store unavailable or the write failed."""
