"""
Stripe payment gateway: checkout session creation and notification signature checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import stripe
import structlog

from weather_booking.errors import PaymentGatewayError, SignatureInvalid
from weather_booking.metrics import upstream_latency, upstream_requests

logger = structlog.get_logger(__name__)

UPSTREAM = "payment_gateway"


@dataclass(frozen=True)
class CheckoutRequest:
    """Everything the payment page needs to describe and charge one booking."""

    booking_id: str
    user_id: str
    room_id: str
    room_name: str
    date: str
    temperature: int
    condition: str
    surcharge_percentage: float
    base_price: float
    weather_charge: float
    final_price: float


@dataclass(frozen=True)
class CheckoutSession:
    session_id: str
    checkout_url: str


def to_minor_units(amount: float) -> int:
    """Convert a currency amount to minor units (cents). The only place prices are rounded."""
    return int(round(amount * 100))


def describe_checkout(request: CheckoutRequest) -> str:
    """Line item description shown on the payment page."""
    return (
        f"Stay on {request.date}: {request.condition}, {request.temperature}°C. "
        f"Base {request.base_price:.2f} + weather surcharge "
        f"{request.surcharge_percentage * 100:.0f}% ({request.weather_charge:.2f}) "
        f"= {request.final_price:.2f}"
    )


class StripePaymentGateway:
    """
    Wraps a StripeClient configured with a bounded request timeout.

    Created once at application startup and closed at shutdown. Tests pass a
    mock ``client`` instead of talking to Stripe.

    Example:
        >>> gateway = StripePaymentGateway(
        ...     api_key="sk_test_...",
        ...     webhook_secret="whsec_...",
        ...     success_url="https://app.example.com/success",
        ...     cancel_url="https://app.example.com/cancel",
        ... )
        >>> session = gateway.create_checkout_session(request)
        >>> session.checkout_url
        'https://checkout.stripe.com/c/pay/cs_test_...'
    """

    def __init__(
        self,
        api_key: str,
        webhook_secret: str,
        success_url: str,
        cancel_url: str,
        currency: str = "usd",
        timeout: float = 10.0,
        webhook_tolerance: int = 300,
        client: Optional[Any] = None,
    ):
        self.webhook_secret = webhook_secret
        self.success_url = success_url
        self.cancel_url = cancel_url
        self.currency = currency
        self.webhook_tolerance = webhook_tolerance

        self._http_client: Optional[stripe.RequestsClient] = None
        if client is None:
            self._http_client = stripe.RequestsClient(timeout=timeout)
            client = stripe.StripeClient(api_key, http_client=self._http_client)
        self._client = client

    def create_checkout_session(self, request: CheckoutRequest) -> CheckoutSession:
        """
        Open a hosted checkout session for the booking's final price.

        The room id is passed as client_reference_id so the gateway echoes it back
        in the completed-checkout notification.

        Args:
            request: Booking and price breakdown to charge

        Returns:
            CheckoutSession: Session ID and the URL to redirect the user to

        Raises:
            PaymentGatewayError: Stripe rejected the request or was unreachable
        """
        params: dict[str, Any] = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": self.currency,
                        "product_data": {
                            "name": (request.room_name or request.room_id)[:100],
                            "description": describe_checkout(request),
                        },
                        "unit_amount": to_minor_units(request.final_price),
                    },
                    "quantity": 1,
                }
            ],
            "success_url": self.success_url + "?session_id={CHECKOUT_SESSION_ID}",
            "cancel_url": self.cancel_url,
            "client_reference_id": request.room_id,
            "metadata": {
                "booking_id": request.booking_id,
                "user_id": request.user_id,
                "room_id": request.room_id,
                "date": request.date,
            },
        }

        try:
            with upstream_latency.labels(upstream=UPSTREAM).time():
                session = self._client.checkout.sessions.create(params=params)
        except stripe.StripeError as e:
            upstream_requests.labels(
                upstream=UPSTREAM, status=str(getattr(e, "http_status", None) or "error")
            ).inc()
            logger.error(
                "checkout_session_failed",
                booking_id=request.booking_id,
                room_id=request.room_id,
                error=str(e),
            )
            raise PaymentGatewayError("Checkout session could not be created") from e

        upstream_requests.labels(upstream=UPSTREAM, status="200").inc()

        if not session.id or not session.url:
            logger.error("checkout_session_incomplete", booking_id=request.booking_id)
            raise PaymentGatewayError("Checkout session has no id or url")

        logger.info(
            "checkout_session_created",
            booking_id=request.booking_id,
            session_id=session.id,
            unit_amount=params["line_items"][0]["price_data"]["unit_amount"],
        )
        return CheckoutSession(session_id=session.id, checkout_url=session.url)

    def expire_checkout_session(self, session_id: str) -> bool:
        """
        Expire an open checkout session so it can no longer be paid.

        Used when a booking could not be stored after its session was created.

        Args:
            session_id: Checkout session to expire

        Returns:
            bool: True if Stripe expired the session, False otherwise
        """
        try:
            self._client.checkout.sessions.expire(session_id)
        except stripe.StripeError as e:
            logger.error("checkout_session_expire_failed", session_id=session_id, error=str(e))
            return False

        logger.info("checkout_session_expired", session_id=session_id)
        return True

    def verify_signature(self, payload: bytes, signature_header: Optional[str]) -> None:
        """
        Verify a notification signature over the exact raw request body.

        Fails closed: a missing secret, missing header, undecodable body or bad
        signature all raise.

        Args:
            payload: Raw, unparsed request body
            signature_header: Value of the Stripe-Signature header

        Raises:
            SignatureInvalid: Verification failed
        """
        if not self.webhook_secret:
            logger.error("webhook_secret_not_configured")
            raise SignatureInvalid("Webhook secret is not configured")

        if not signature_header:
            raise SignatureInvalid("Missing signature header")

        try:
            stripe.WebhookSignature.verify_header(
                payload.decode("utf-8"),
                signature_header,
                self.webhook_secret,
                self.webhook_tolerance,
            )
        except (stripe.SignatureVerificationError, UnicodeDecodeError) as e:
            raise SignatureInvalid("Signature verification failed") from e

    def close(self) -> None:
        """Release the HTTP client owned by this gateway."""
        if self._http_client is not None:
            self._http_client.close()
