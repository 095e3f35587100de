"""SQLAlchemy model for room bookings."""

import enum

from sqlalchemy import Column, Date, DateTime, Float, String, Uuid

from weather_booking.models.base import Base


class BookingStatus(str, enum.Enum):
    """Booking lifecycle states. ``confirmed`` and ``cancelled`` are terminal."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class Booking(Base):
    """
    ORM model for a user's booking of a room on a date.

    Room name and prices are a snapshot taken at creation time, so later catalog
    changes never alter what the user was asked to pay. final_price is always
    base_price + weather_charge.

    payment_session_id is the checkout session issued by the payment gateway when
    the booking was created; payment notifications are matched on it.
    """

    __tablename__ = "bookings"

    id = Column(Uuid(as_uuid=True), primary_key=True)
    user_id = Column(String, nullable=False, index=True)  # Identity provider subject
    room_id = Column(String, nullable=False)
    room_name = Column(String, nullable=True)
    date = Column(Date, nullable=False)

    base_price = Column(Float, nullable=False)
    weather_charge = Column(Float, nullable=False)
    final_price = Column(Float, nullable=False)

    status = Column(String(16), nullable=False, default=BookingStatus.PENDING.value)
    payment_session_id = Column(String, nullable=False, unique=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
