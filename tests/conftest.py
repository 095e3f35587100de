"""
Shared fixtures: in-memory booking store, fake upstream clients and a signed
payment-event factory.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
import uuid
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Callable, Generator
from unittest.mock import MagicMock, Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from weather_booking.db.writers.bookings import insert_booking
from weather_booking.models.base import Base
from weather_booking.models.bookings import Booking  # noqa: F401
from weather_booking.network.room_catalog import RoomCatalogClient
from weather_booking.payments.stripe_gateway import StripePaymentGateway
from weather_booking.schemas.rooms import Room

WEBHOOK_SECRET = "whsec_test_secret"
USER_HEADER = "X-User-Id"


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    """Fresh in-memory SQLite database with the bookings table."""
    engine = create_engine(
        "sqlite://",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def room() -> Room:
    return Room(name="Sea View Suite", basePrice=100.0, location="Lisbon")


@pytest.fixture
def catalog(room: Room) -> Mock:
    """Room catalog that knows every room id as the Lisbon suite."""
    mock_catalog = Mock(spec=RoomCatalogClient)
    mock_catalog.get_room.return_value = room
    return mock_catalog


@pytest.fixture
def stripe_client() -> MagicMock:
    """Stand-in for stripe.StripeClient; issues sequential session ids."""
    client = MagicMock()
    counter = {"n": 0}

    def create_session(params: dict[str, Any]) -> SimpleNamespace:
        counter["n"] += 1
        session_id = f"sess_{counter['n']}"
        return SimpleNamespace(id=session_id, url=f"https://checkout.stripe.com/c/pay/{session_id}")

    client.checkout.sessions.create.side_effect = create_session
    return client


@pytest.fixture
def gateway(stripe_client: MagicMock) -> StripePaymentGateway:
    return StripePaymentGateway(
        api_key="sk_test_123",
        webhook_secret=WEBHOOK_SECRET,
        success_url="https://app.example.com/success",
        cancel_url="https://app.example.com/cancel",
        currency="usd",
        client=stripe_client,
    )


@pytest.fixture
def sign_payload() -> Callable[..., str]:
    """Build a Stripe-Signature header for a raw payload."""

    def _sign(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
        ts = int(time.time()) if timestamp is None else timestamp
        signed = f"{ts}.{payload.decode('utf-8')}".encode("utf-8")
        signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
        return f"t={ts},v1={signature}"

    return _sign


@pytest.fixture
def completed_event() -> Callable[..., bytes]:
    """Raw checkout.session.completed event body for a session id."""

    def _event(
        session_id: str, event_id: str = "evt_1", payment_status: str = "paid"
    ) -> bytes:
        body = {
            "id": event_id,
            "object": "event",
            "type": "checkout.session.completed",
            "data": {
                "object": {
                    "id": session_id,
                    "object": "checkout.session",
                    "payment_status": payment_status,
                    "client_reference_id": "room-1",
                }
            },
        }
        return json.dumps(body).encode("utf-8")

    return _event


@pytest.fixture
def make_booking(db_engine: Engine) -> Callable[..., dict[str, Any]]:
    """Insert a booking row directly and return it."""

    def _make(
        user_id: str = "auth0|alice",
        status: str = "pending",
        session_id: str | None = None,
        created_at: datetime | None = None,
        base_price: float = 100.0,
        weather_charge: float = 30.0,
    ) -> dict[str, Any]:
        now = created_at or datetime.now(timezone.utc)
        row = {
            "id": uuid.uuid4(),
            "user_id": user_id,
            "room_id": "room-1",
            "room_name": "Sea View Suite",
            "date": date(2026, 12, 24),
            "base_price": base_price,
            "weather_charge": weather_charge,
            "final_price": base_price + weather_charge,
            "status": status,
            "payment_session_id": session_id or f"sess_{uuid.uuid4().hex}",
            "created_at": now,
            "updated_at": now,
        }
        with db_engine.begin() as conn:
            insert_booking(conn, row)
        return row

    return _make


@pytest.fixture
def api_client(
    db_engine: Engine, catalog: Mock, gateway: StripePaymentGateway
) -> Generator[TestClient, None, None]:
    """TestClient for the application with store and upstream clients replaced."""
    from weather_booking.dependencies import get_db_engine, get_payment_gateway, get_room_catalog
    from weather_booking.main import app

    app.dependency_overrides[get_db_engine] = lambda: db_engine
    app.dependency_overrides[get_room_catalog] = lambda: catalog
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def one_hour_ago() -> datetime:
    return datetime.now(timezone.utc) - timedelta(hours=1)
