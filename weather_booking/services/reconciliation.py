"""
Payment reconciliation.

Payment notifications arrive out of band, at least once and in any order. The
handler only ever moves a booking from pending to confirmed, using the stored
booking matched by checkout session; nothing is recomputed. Redelivery of the
same event is a no-op, and a cancelled booking is never revived.
"""

from __future__ import annotations

import json
from typing import Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from weather_booking.db.readers.bookings import get_booking_by_session
from weather_booking.db.writers.bookings import confirm_booking_by_session
from weather_booking.errors import MalformedPaymentEvent, SignatureInvalid
from weather_booking.metrics import payment_events
from weather_booking.models.bookings import BookingStatus
from weather_booking.payments.stripe_gateway import StripePaymentGateway
from weather_booking.schemas.payment_events import (
    CheckoutCompleted,
    ReconcileOutcome,
    UnsupportedEvent,
    parse_payment_event,
)

logger = structlog.get_logger(__name__)


class PaymentReconciler:
    """Applies verified payment notifications to stored bookings."""

    def __init__(self, engine: Engine, gateway: StripePaymentGateway):
        self.engine = engine
        self.gateway = gateway

    def reconcile(self, payload: bytes, signature_header: Optional[str]) -> ReconcileOutcome:
        """
        Verify, parse and apply one payment notification.

        Args:
            payload: Raw request body, exactly as received
            signature_header: Signature header sent with the body

        Returns:
            ReconcileOutcome: ACKNOWLEDGED when handled or nothing to do (including
                authentic but unusable bodies), REJECTED for bad signatures, RETRY for
                transient store failures
        """
        try:
            self.gateway.verify_signature(payload, signature_header)
        except SignatureInvalid as e:
            logger.warning("payment_event_signature_invalid", reason=str(e))
            payment_events.labels(event_type="unknown", outcome="rejected").inc()
            return ReconcileOutcome.REJECTED

        try:
            event = parse_payment_event(json.loads(payload))
        except (ValueError, MalformedPaymentEvent, PydanticValidationError) as e:
            logger.warning("payment_event_malformed", error=str(e))
            payment_events.labels(event_type="unknown", outcome="malformed").inc()
            return ReconcileOutcome.ACKNOWLEDGED

        if isinstance(event, UnsupportedEvent):
            logger.info("payment_event_ignored", event_id=event.event_id, event_type=event.event_type)
            payment_events.labels(event_type=event.event_type, outcome="ignored").inc()
            return ReconcileOutcome.ACKNOWLEDGED

        if not event.is_settled:
            # Delayed payment methods complete the checkout before the money arrives
            logger.info(
                "payment_event_unsettled",
                event_id=event.event_id,
                session_id=event.session_id,
                payment_status=event.payment_status,
            )
            payment_events.labels(event_type=event.event_type, outcome="unsettled").inc()
            return ReconcileOutcome.ACKNOWLEDGED

        return self._confirm(event)

    def _confirm(self, event: CheckoutCompleted) -> ReconcileOutcome:
        try:
            with self.engine.begin() as conn:
                confirmed = confirm_booking_by_session(conn, event.session_id)
                booking = None if confirmed else get_booking_by_session(conn, event.session_id)
        except SQLAlchemyError as e:
            logger.error(
                "payment_event_persist_failed",
                event_id=event.event_id,
                session_id=event.session_id,
                error=str(e),
            )
            payment_events.labels(event_type=event.event_type, outcome="retry").inc()
            return ReconcileOutcome.RETRY

        if confirmed:
            logger.info("booking_confirmed", event_id=event.event_id, session_id=event.session_id)
            outcome = "confirmed"
        elif booking is None:
            logger.warning(
                "reconciliation_booking_not_found",
                event_id=event.event_id,
                session_id=event.session_id,
                client_reference_id=event.client_reference_id,
            )
            outcome = "not_found"
        elif booking["status"] == BookingStatus.CONFIRMED.value:
            logger.info(
                "payment_event_duplicate",
                event_id=event.event_id,
                booking_id=str(booking["id"]),
            )
            outcome = "duplicate"
        else:
            logger.warning(
                "payment_for_cancelled_booking",
                event_id=event.event_id,
                booking_id=str(booking["id"]),
                status=booking["status"],
            )
            outcome = "cancelled"

        payment_events.labels(event_type=event.event_type, outcome=outcome).inc()
        return ReconcileOutcome.ACKNOWLEDGED
