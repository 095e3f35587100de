"""
Booking lifecycle: pricing, creation, listing and owner cancellation.

Creation runs its steps in a fixed order (room lookup, forecast, pricing,
checkout session, persistence). Each step raises its own error and stops the
chain, and the booking row is written only after every upstream step succeeded.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from weather_booking.db.readers.bookings import get_booking_for_user, list_bookings_for_user
from weather_booking.db.writers.bookings import cancel_booking_for_user, insert_booking
from weather_booking.errors import (
    BookingNotFound,
    BookingStateConflict,
    PersistenceError,
    ValidationError,
)
from weather_booking.metrics import surcharge_bands
from weather_booking.models.bookings import BookingStatus
from weather_booking.network.room_catalog import RoomCatalogClient
from weather_booking.payments.stripe_gateway import (
    CheckoutRequest,
    CheckoutSession,
    StripePaymentGateway,
)
from weather_booking.pricing.forecast import Forecast, get_forecast
from weather_booking.pricing.surcharge import SurchargeQuote, calculate_weather_surcharge
from weather_booking.schemas.rooms import Room
from weather_booking.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PricedStay:
    room_id: str
    room: Room
    date: date
    forecast: Forecast
    quote: SurchargeQuote


@dataclass(frozen=True)
class BookingCheckout:
    booking_id: UUID
    checkout_url: str


class BookingService:
    """
    Orchestrates booking creation, listing and cancellation.

    Collaborators are injected so the service never reaches for process globals:
    the database engine, the room catalog client and the payment gateway.
    """

    def __init__(
        self,
        engine: Engine,
        catalog: RoomCatalogClient,
        gateway: StripePaymentGateway,
    ):
        self.engine = engine
        self.catalog = catalog
        self.gateway = gateway

    def price_stay(self, room_id: str, stay_date: date) -> PricedStay:
        """
        Resolve the room and price it for the forecast on ``stay_date``.

        Raises:
            ValidationError: Blank or dot-only room id
            RoomNotFound / UpstreamUnavailable: Room catalog failure
        """
        room_id = room_id.strip()
        if not room_id:
            raise ValidationError("roomId is required")
        if not room_id.strip("."):
            raise ValidationError("roomId is not a room reference")

        room = self.catalog.get_room(room_id)
        forecast = get_forecast(room.location, stay_date.isoformat())
        quote = calculate_weather_surcharge(room.base_price, forecast.temperature)

        logger.debug(
            "stay_priced",
            room_id=room_id,
            location=room.location,
            date=forecast.date,
            temperature=forecast.temperature,
            percentage=quote.percentage,
        )
        return PricedStay(room_id=room_id, room=room, date=stay_date, forecast=forecast, quote=quote)

    def create_booking(self, user_id: str, room_id: str, stay_date: date) -> BookingCheckout:
        """
        Price a stay, open a checkout session for it and store a pending booking.

        Args:
            user_id: Authenticated subject of the caller
            room_id: Room catalog reference
            stay_date: Calendar date of the stay

        Returns:
            BookingCheckout: New booking id and the checkout URL to redirect to

        Raises:
            ValidationError, RoomNotFound, UpstreamUnavailable, PaymentGatewayError:
                Nothing was stored
            PersistenceError: The session was opened but the booking could not be stored;
                the session is expired
        """
        priced = self.price_stay(room_id, stay_date)
        booking_id = uuid.uuid4()

        session = self.gateway.create_checkout_session(
            CheckoutRequest(
                booking_id=str(booking_id),
                user_id=user_id,
                room_id=priced.room_id,
                room_name=priced.room.name,
                date=priced.forecast.date,
                temperature=priced.forecast.temperature,
                condition=priced.forecast.condition,
                surcharge_percentage=priced.quote.percentage,
                base_price=priced.room.base_price,
                weather_charge=priced.quote.surcharge,
                final_price=priced.quote.total,
            )
        )

        self._store_pending_booking(booking_id, user_id, priced, session)

        surcharge_bands.labels(percentage=f"{priced.quote.percentage * 100:.0f}").inc()
        logger.info(
            "booking_created",
            booking_id=str(booking_id),
            user_id=user_id,
            room_id=priced.room_id,
            date=priced.forecast.date,
            final_price=priced.quote.total,
            session_id=session.session_id,
        )
        return BookingCheckout(booking_id=booking_id, checkout_url=session.checkout_url)

    def _store_pending_booking(
        self, booking_id: UUID, user_id: str, priced: PricedStay, session: CheckoutSession
    ) -> None:
        now = utc_now()
        row: dict[str, Any] = {
            "id": booking_id,
            "user_id": user_id,
            "room_id": priced.room_id,
            "room_name": priced.room.name,
            "date": priced.date,
            "base_price": priced.room.base_price,
            "weather_charge": priced.quote.surcharge,
            "final_price": priced.quote.total,
            "status": BookingStatus.PENDING.value,
            "payment_session_id": session.session_id,
            "created_at": now,
            "updated_at": now,
        }

        try:
            with self.engine.begin() as conn:
                insert_booking(conn, row)
        except SQLAlchemyError as e:
            logger.error(
                "booking_persist_failed",
                booking_id=str(booking_id),
                session_id=session.session_id,
                error=str(e),
            )
            self.gateway.expire_checkout_session(session.session_id)
            raise PersistenceError("Booking could not be stored") from e

    def list_bookings(self, user_id: str) -> list[dict[str, Any]]:
        """Return the caller's bookings, newest first."""
        try:
            with self.engine.connect() as conn:
                return list_bookings_for_user(conn, user_id)
        except SQLAlchemyError as e:
            logger.error("booking_list_failed", user_id=user_id, error=str(e))
            raise PersistenceError("Bookings could not be loaded") from e

    def cancel_booking(self, user_id: str, booking_id: UUID) -> dict[str, Any]:
        """
        Cancel a pending booking owned by the caller.

        Unknown ids and other users' bookings both raise BookingNotFound.
        Cancelling an already cancelled booking succeeds without change.

        Args:
            user_id: Authenticated subject of the caller
            booking_id: Booking to cancel

        Returns:
            dict: The booking row after cancellation

        Raises:
            BookingNotFound: No booking with this id belongs to the caller
            BookingStateConflict: The booking is already confirmed
            PersistenceError: Store unavailable
        """
        try:
            with self.engine.begin() as conn:
                cancelled = cancel_booking_for_user(conn, booking_id, user_id)
                booking = get_booking_for_user(conn, booking_id, user_id)
        except SQLAlchemyError as e:
            logger.error(
                "booking_cancel_failed", booking_id=str(booking_id), user_id=user_id, error=str(e)
            )
            raise PersistenceError("Booking could not be cancelled") from e

        if booking is None:
            raise BookingNotFound(f"Booking {booking_id} not found")

        if cancelled:
            logger.info("booking_cancelled", booking_id=str(booking_id), user_id=user_id)
            return booking

        if booking["status"] == BookingStatus.CANCELLED.value:
            logger.info("booking_already_cancelled", booking_id=str(booking_id))
            return booking

        logger.warning(
            "booking_cancel_refused", booking_id=str(booking_id), status=booking["status"]
        )
        raise BookingStateConflict(f"Booking {booking_id} is {booking['status']}")
