"""
Payment notification events.

Verified notification bodies are parsed into a closed set of variants: a
completed checkout, or an event type this service does not act on. Anything
else is a malformed event.
"""

from __future__ import annotations

import enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field

from weather_booking.errors import MalformedPaymentEvent

CHECKOUT_COMPLETED = "checkout.session.completed"

# Checkout payment_status values meaning the booking has been paid for
SETTLED_PAYMENT_STATUSES = frozenset({"paid", "no_payment_required"})


class CheckoutCompleted(BaseModel):
    """A checkout session was completed. Paid only when ``is_settled``."""

    kind: Literal["checkout_completed"] = "checkout_completed"
    event_id: Optional[str] = None
    event_type: str = CHECKOUT_COMPLETED
    session_id: str = Field(..., min_length=1)
    payment_status: Optional[str] = None
    client_reference_id: Optional[str] = None

    @property
    def is_settled(self) -> bool:
        return self.payment_status in SETTLED_PAYMENT_STATUSES


class UnsupportedEvent(BaseModel):
    """Any other event type. Acknowledged without action."""

    kind: Literal["unsupported"] = "unsupported"
    event_id: Optional[str] = None
    event_type: str


PaymentEvent = Union[CheckoutCompleted, UnsupportedEvent]


class ReconcileOutcome(str, enum.Enum):
    """What the notification sender is told."""

    ACKNOWLEDGED = "acknowledged"  # 200, handled or nothing to do
    REJECTED = "rejected"  # 400, do not retry
    RETRY = "retry"  # 500, transient failure, sender retries


def parse_payment_event(raw: Any) -> PaymentEvent:
    """
    Parse a decoded notification body into a PaymentEvent.

    Expected shape (Stripe event)::

        {
            "id": "evt_123",
            "type": "checkout.session.completed",
            "data": {"object": {"id": "cs_test_abc", "payment_status": "paid", ...}}
        }

    Args:
        raw: JSON-decoded body

    Returns:
        PaymentEvent: CheckoutCompleted or UnsupportedEvent

    Raises:
        MalformedPaymentEvent: Body is not an object, has no type, or a completed
            checkout carries no session id
    """
    if not isinstance(raw, dict):
        raise MalformedPaymentEvent("Event body is not a JSON object")

    event_type = raw.get("type")
    if not isinstance(event_type, str) or not event_type:
        raise MalformedPaymentEvent("Event has no type")

    event_id = raw.get("id") if isinstance(raw.get("id"), str) else None

    if event_type != CHECKOUT_COMPLETED:
        return UnsupportedEvent(event_id=event_id, event_type=event_type)

    data = raw.get("data")
    session = data.get("object") if isinstance(data, dict) else None
    if not isinstance(session, dict) or not isinstance(session.get("id"), str) or not session["id"]:
        raise MalformedPaymentEvent("Completed checkout event has no session id")

    return CheckoutCompleted(
        event_id=event_id,
        session_id=session["id"],
        payment_status=session.get("payment_status"),
        client_reference_id=session.get("client_reference_id"),
    )
