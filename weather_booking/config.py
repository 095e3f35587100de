import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = LOG_LEVEL == "DEBUG"

PORT = int(os.getenv("PORT", "3003"))

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./weather_booking.db")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL must not be empty")

ALLOWED_ORIGINS_RAW = os.getenv("ALLOWED_ORIGINS", "*")

ALLOWED_ORIGINS: list[str] = [
    origin.strip() for origin in ALLOWED_ORIGINS_RAW.split(",") if origin.strip()
]

# Identity is verified upstream; this header carries the authenticated subject
USER_ID_HEADER = os.getenv("USER_ID_HEADER", "X-User-Id")

# Room catalog
ROOM_CATALOG_URL = os.getenv("ROOM_CATALOG_URL", "http://localhost:3002/rooms/")

# Payment gateway
STRIPE_API_KEY = os.getenv("STRIPE_API_KEY", "")
STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET", "")
STRIPE_WEBHOOK_TOLERANCE_SECONDS = int(os.getenv("STRIPE_WEBHOOK_TOLERANCE_SECONDS", "300"))
CHECKOUT_SUCCESS_URL = os.getenv("CHECKOUT_SUCCESS_URL", "http://localhost:3000/bookings/success")
CHECKOUT_CANCEL_URL = os.getenv("CHECKOUT_CANCEL_URL", "http://localhost:3000/bookings/cancel")
CURRENCY = os.getenv("CURRENCY", "usd").lower()

UPSTREAM_TIMEOUT_SECONDS = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "10"))
if UPSTREAM_TIMEOUT_SECONDS <= 0:
    raise ValueError("UPSTREAM_TIMEOUT_SECONDS must be positive")

UPSTREAM_MAX_RETRIES = int(os.getenv("UPSTREAM_MAX_RETRIES", "2"))
