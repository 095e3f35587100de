"""
FastAPI dependency injection providers.

The database engine, room catalog client and payment gateway are constructed
explicitly (the engine at import, the clients at application startup) and
handed to services through these providers. Tests replace any of them with
app.dependency_overrides.

Testing Example:
    >>> app.dependency_overrides[get_db_engine] = lambda: sqlite_engine
    >>> app.dependency_overrides[get_room_catalog] = lambda: Mock(spec=RoomCatalogClient)
    >>> client = TestClient(app)
    >>> client.get("/bookings", headers={"X-User-Id": "auth0|alice"})
"""

from __future__ import annotations

from typing import Generator

from fastapi import Depends, Request
from sqlalchemy.engine import Engine

from weather_booking.config import USER_ID_HEADER
from weather_booking.db.engine import engine
from weather_booking.errors import AuthenticationRequired
from weather_booking.network.room_catalog import RoomCatalogClient
from weather_booking.payments.stripe_gateway import StripePaymentGateway
from weather_booking.routes._errors import to_http_exception
from weather_booking.services.bookings import BookingService
from weather_booking.services.reconciliation import PaymentReconciler


def get_db_engine() -> Generator[Engine, None, None]:
    """
    Provide the SQLAlchemy engine.

    Yields:
        Engine: Application database engine
    """
    yield engine


def get_room_catalog(request: Request) -> RoomCatalogClient:
    """Room catalog client opened at startup."""
    catalog: RoomCatalogClient = request.app.state.room_catalog
    return catalog


def get_payment_gateway(request: Request) -> StripePaymentGateway:
    """Payment gateway opened at startup."""
    gateway: StripePaymentGateway = request.app.state.payment_gateway
    return gateway


def get_current_user_id(request: Request) -> str:
    """
    Return the authenticated subject of the caller.

    Authentication happens before requests reach this service; the verified
    subject arrives in the USER_ID_HEADER header.

    Raises:
        HTTPException: 401 if the header is missing or blank
    """
    user_id = (request.headers.get(USER_ID_HEADER) or "").strip()
    if not user_id:
        raise to_http_exception(AuthenticationRequired(f"Missing {USER_ID_HEADER} header"))
    return user_id


def get_booking_service(
    db_engine: Engine = Depends(get_db_engine),
    catalog: RoomCatalogClient = Depends(get_room_catalog),
    gateway: StripePaymentGateway = Depends(get_payment_gateway),
) -> BookingService:
    return BookingService(engine=db_engine, catalog=catalog, gateway=gateway)


def get_payment_reconciler(
    db_engine: Engine = Depends(get_db_engine),
    gateway: StripePaymentGateway = Depends(get_payment_gateway),
) -> PaymentReconciler:
    return PaymentReconciler(engine=db_engine, gateway=gateway)
