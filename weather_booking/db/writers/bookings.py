"""
Booking writes.

Status transitions are single conditional UPDATE statements guarded by
``status = 'pending'``. The database applies each atomically to one row, so a
confirmation and a cancellation racing on the same booking cannot both win, and
the affected row count tells the caller whether its transition happened.
"""

from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import insert, update
from sqlalchemy.engine import Connection

from weather_booking.metrics import db_operations
from weather_booking.models.bookings import Booking, BookingStatus
from weather_booking.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def insert_booking(conn: Connection, booking: dict[str, Any]) -> None:
    """
    Insert a new booking row.

    Args:
        conn (Connection): SQLAlchemy DB connection (within a transaction).
        booking (dict): Column values, including id, prices and payment_session_id.
    """
    if booking["final_price"] != booking["base_price"] + booking["weather_charge"]:
        raise ValueError("final_price must equal base_price + weather_charge")

    conn.execute(insert(Booking).values(**booking))
    db_operations.labels(operation="insert", table="bookings").inc()

    logger.debug("booking_inserted", booking_id=str(booking["id"]))


def confirm_booking_by_session(conn: Connection, session_id: str) -> bool:
    """
    Move the booking paid through ``session_id`` from pending to confirmed.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        session_id (str): Checkout session ID from the payment notification.

    Returns:
        bool: True if a pending booking was confirmed, False if no pending booking matched.
    """
    stmt = (
        update(Booking)
        .where(Booking.payment_session_id == session_id)
        .where(Booking.status == BookingStatus.PENDING.value)
        .values(status=BookingStatus.CONFIRMED.value, updated_at=utc_now())
    )
    result = conn.execute(stmt)
    db_operations.labels(operation="update", table="bookings").inc()
    return result.rowcount == 1


def cancel_booking_for_user(conn: Connection, booking_id: UUID, user_id: str) -> bool:
    """
    Move a pending booking owned by ``user_id`` to cancelled.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        booking_id (UUID): Booking ID.
        user_id (str): Authenticated subject of the caller.

    Returns:
        bool: True if the booking was cancelled, False if no pending booking of this user matched.
    """
    stmt = (
        update(Booking)
        .where(Booking.id == booking_id)
        .where(Booking.user_id == user_id)
        .where(Booking.status == BookingStatus.PENDING.value)
        .values(status=BookingStatus.CANCELLED.value, updated_at=utc_now())
    )
    result = conn.execute(stmt)
    db_operations.labels(operation="update", table="bookings").inc()
    return result.rowcount == 1
