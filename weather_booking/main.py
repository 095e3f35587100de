# weather_booking/main.py

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from weather_booking.config import (
    ALLOWED_ORIGINS,
    CHECKOUT_CANCEL_URL,
    CHECKOUT_SUCCESS_URL,
    CURRENCY,
    PORT,
    ROOM_CATALOG_URL,
    STRIPE_API_KEY,
    STRIPE_WEBHOOK_SECRET,
    STRIPE_WEBHOOK_TOLERANCE_SECONDS,
    UPSTREAM_MAX_RETRIES,
    UPSTREAM_TIMEOUT_SECONDS,
)
from weather_booking.logging_config import setup_logging
from weather_booking.middleware import RequestIDMiddleware
from weather_booking.network.room_catalog import RoomCatalogClient
from weather_booking.payments.stripe_gateway import StripePaymentGateway
from weather_booking.routes.bookings import router as bookings_router
from weather_booking.routes.health import router as health_router
from weather_booking.routes.metrics import router as metrics_router
from weather_booking.routes.payments import router as payments_router

# Initialize structured logging
setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Booking Service",
    description="Room bookings priced by weather forecast, confirmed by payment notifications",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if "*" not in ALLOWED_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

# Register routers
app.include_router(health_router, tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])
app.include_router(bookings_router, tags=["Bookings"])
app.include_router(payments_router, tags=["Payments"])


@app.on_event("startup")
def startup_event() -> None:
    """Open the upstream clients shared by all requests."""
    logger.info("FastAPI application starting up...")

    app.state.room_catalog = RoomCatalogClient(
        ROOM_CATALOG_URL,
        timeout=UPSTREAM_TIMEOUT_SECONDS,
        max_retries=UPSTREAM_MAX_RETRIES,
    )
    app.state.payment_gateway = StripePaymentGateway(
        api_key=STRIPE_API_KEY,
        webhook_secret=STRIPE_WEBHOOK_SECRET,
        success_url=CHECKOUT_SUCCESS_URL,
        cancel_url=CHECKOUT_CANCEL_URL,
        currency=CURRENCY,
        timeout=UPSTREAM_TIMEOUT_SECONDS,
        webhook_tolerance=STRIPE_WEBHOOK_TOLERANCE_SECONDS,
    )

    if not STRIPE_WEBHOOK_SECRET:
        logger.warning("stripe_webhook_secret_missing", effect="all payment events rejected")

    logger.info("FastAPI application initialized", room_catalog_url=ROOM_CATALOG_URL)


@app.on_event("shutdown")
def shutdown_event() -> None:
    """Close the upstream clients."""
    app.state.room_catalog.close()
    app.state.payment_gateway.close()
    logger.info("FastAPI application shut down")


if __name__ == "__main__":
    logger.info("Booking Service running", port=PORT)
    uvicorn.run(app, host="0.0.0.0", port=PORT)
