from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.engine import Connection

from weather_booking.metrics import db_operations
from weather_booking.models.bookings import Booking

bookings_table = Booking.__table__


def get_booking_for_user(
    conn: Connection, booking_id: UUID, user_id: str
) -> Optional[dict[str, Any]]:
    """
    Fetch a booking by id, only if it belongs to the given user.

    A booking owned by someone else is indistinguishable from a missing one.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        booking_id (UUID): Booking ID.
        user_id (str): Authenticated subject of the caller.

    Returns:
        Optional[dict[str, Any]]: Booking row or None.
    """
    db_operations.labels(operation="select", table="bookings").inc()
    row = (
        conn.execute(
            select(bookings_table).where(
                bookings_table.c.id == booking_id,
                bookings_table.c.user_id == user_id,
            )
        )
        .mappings()
        .fetchone()
    )
    return dict(row) if row else None


def list_bookings_for_user(conn: Connection, user_id: str) -> list[dict[str, Any]]:
    """
    List every booking owned by a user, newest first.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        user_id (str): Authenticated subject of the caller.

    Returns:
        list[dict[str, Any]]: Booking rows ordered by created_at descending.
    """
    db_operations.labels(operation="select", table="bookings").inc()
    result = conn.execute(
        select(bookings_table)
        .where(bookings_table.c.user_id == user_id)
        .order_by(bookings_table.c.created_at.desc())
    )
    return [dict(row) for row in result.mappings()]


def get_booking_by_session(conn: Connection, session_id: str) -> Optional[dict[str, Any]]:
    """
    Fetch the booking created with the given checkout session.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        session_id (str): Payment gateway checkout session ID.

    Returns:
        Optional[dict[str, Any]]: Booking row or None.
    """
    db_operations.labels(operation="select", table="bookings").inc()
    row = (
        conn.execute(
            select(bookings_table).where(bookings_table.c.payment_session_id == session_id)
        )
        .mappings()
        .fetchone()
    )
    return dict(row) if row else None
