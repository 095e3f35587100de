"""
Integration tests for booking readers and writers against an in-memory database.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import Any, Callable

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from weather_booking.db.readers.bookings import (
    get_booking_by_session,
    get_booking_for_user,
    list_bookings_for_user,
)
from weather_booking.db.writers.bookings import (
    cancel_booking_for_user,
    confirm_booking_by_session,
    insert_booking,
)

MakeBooking = Callable[..., dict[str, Any]]


@pytest.mark.integration
def test_insert_and_read_back(db_engine: Engine, make_booking: MakeBooking) -> None:
    booking = make_booking(session_id="sess_abc")

    with db_engine.connect() as conn:
        row = get_booking_for_user(conn, booking["id"], "auth0|alice")
        by_session = get_booking_by_session(conn, "sess_abc")

    assert row is not None
    assert row["id"] == booking["id"]
    assert row["status"] == "pending"
    assert row["final_price"] == 130.0
    assert by_session is not None
    assert by_session["id"] == booking["id"]


@pytest.mark.integration
def test_insert_rejects_inconsistent_prices(db_engine: Engine) -> None:
    row = {
        "id": uuid.uuid4(),
        "user_id": "auth0|alice",
        "room_id": "room-1",
        "final_price": 140.0,
        "base_price": 100.0,
        "weather_charge": 30.0,
    }

    with pytest.raises(ValueError):
        with db_engine.begin() as conn:
            insert_booking(conn, row)


@pytest.mark.integration
def test_payment_session_id_is_unique(make_booking: MakeBooking) -> None:
    make_booking(session_id="sess_dup")

    with pytest.raises(IntegrityError):
        make_booking(session_id="sess_dup")


@pytest.mark.integration
def test_get_booking_for_user_hides_other_users_bookings(
    db_engine: Engine, make_booking: MakeBooking
) -> None:
    booking = make_booking(user_id="auth0|alice")

    with db_engine.connect() as conn:
        assert get_booking_for_user(conn, booking["id"], "auth0|bob") is None
        assert get_booking_for_user(conn, uuid.uuid4(), "auth0|alice") is None


@pytest.mark.integration
def test_list_bookings_for_user_newest_first(
    db_engine: Engine, make_booking: MakeBooking, one_hour_ago: datetime
) -> None:
    older = make_booking(created_at=one_hour_ago - timedelta(days=1))
    newer = make_booking(created_at=one_hour_ago)
    make_booking(user_id="auth0|bob")

    with db_engine.connect() as conn:
        rows = list_bookings_for_user(conn, "auth0|alice")

    assert [row["id"] for row in rows] == [newer["id"], older["id"]]


@pytest.mark.integration
def test_list_bookings_for_unknown_user_is_empty(db_engine: Engine) -> None:
    with db_engine.connect() as conn:
        assert list_bookings_for_user(conn, "auth0|nobody") == []


@pytest.mark.integration
def test_confirm_only_moves_pending_bookings(db_engine: Engine, make_booking: MakeBooking) -> None:
    make_booking(session_id="sess_pending")
    make_booking(session_id="sess_cancelled", status="cancelled")

    with db_engine.begin() as conn:
        assert confirm_booking_by_session(conn, "sess_pending") is True
        assert confirm_booking_by_session(conn, "sess_pending") is False
        assert confirm_booking_by_session(conn, "sess_cancelled") is False
        assert confirm_booking_by_session(conn, "sess_unknown") is False

    with db_engine.connect() as conn:
        assert get_booking_by_session(conn, "sess_pending")["status"] == "confirmed"
        assert get_booking_by_session(conn, "sess_cancelled")["status"] == "cancelled"


@pytest.mark.integration
def test_confirm_updates_timestamp(
    db_engine: Engine, make_booking: MakeBooking, one_hour_ago: datetime
) -> None:
    make_booking(session_id="sess_ts", created_at=one_hour_ago)

    with db_engine.begin() as conn:
        confirm_booking_by_session(conn, "sess_ts")

    with db_engine.connect() as conn:
        row = get_booking_by_session(conn, "sess_ts")

    assert row["updated_at"] > row["created_at"]


@pytest.mark.integration
def test_cancel_requires_owner_and_pending(db_engine: Engine, make_booking: MakeBooking) -> None:
    pending = make_booking()
    confirmed = make_booking(status="confirmed")

    with db_engine.begin() as conn:
        assert cancel_booking_for_user(conn, pending["id"], "auth0|bob") is False
        assert cancel_booking_for_user(conn, confirmed["id"], "auth0|alice") is False
        assert cancel_booking_for_user(conn, pending["id"], "auth0|alice") is True
        assert cancel_booking_for_user(conn, pending["id"], "auth0|alice") is False

    with db_engine.connect() as conn:
        assert get_booking_for_user(conn, pending["id"], "auth0|alice")["status"] == "cancelled"
        assert get_booking_for_user(conn, confirmed["id"], "auth0|alice")["status"] == "confirmed"
