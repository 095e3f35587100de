"""
Prometheus metrics for booking operations, upstream calls, and payment reconciliation.

Metrics are exposed via the /metrics endpoint for scraping by Prometheus.

Example:
    >>> from weather_booking.metrics import upstream_latency, upstream_requests
    >>> with upstream_latency.labels(upstream="room_catalog").time():
    ...     room = catalog.get_room("room-1")
    >>> upstream_requests.labels(upstream="room_catalog", status="200").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Booking Metrics
# =============================================================================

booking_operations = Counter(
    "booking_operations_total",
    "Total booking operations (success and failure)",
    ["operation", "status"],
)
"""
Counter for booking operations.

Labels:
    operation: create, list, cancel, quote
    status: success or the failure kind (upstream_error, persistence_error, not_found, ...)
"""

surcharge_bands = Counter(
    "booking_surcharge_band_total",
    "Number of priced bookings per weather surcharge band",
    ["percentage"],
)
"""
Counter for applied surcharge bands.

Labels:
    percentage: Surcharge percentage as a string ("0", "10", "20", "30", "50")
"""

# =============================================================================
# Upstream Metrics
# =============================================================================

upstream_requests = Counter(
    "upstream_requests_total",
    "Requests made to the room catalog and payment gateway",
    ["upstream", "status"],
)
"""
Counter for upstream requests.

Labels:
    upstream: room_catalog or payment_gateway
    status: HTTP status code, or "error" when no response was received
"""

upstream_latency = Histogram(
    "upstream_latency_seconds",
    "Upstream request latency in seconds",
    ["upstream"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, float("inf")),
)

# =============================================================================
# Payment Reconciliation Metrics
# =============================================================================

payment_events = Counter(
    "payment_events_total",
    "Payment notifications received, by event type and reconciliation outcome",
    ["event_type", "outcome"],
)
"""
Counter for payment notifications.

Labels:
    event_type: Gateway event type (e.g. checkout.session.completed), or "unknown"
    outcome: confirmed, duplicate, not_found, cancelled, unsettled, ignored, malformed,
        rejected, retry
"""

# =============================================================================
# Database Metrics
# =============================================================================

db_operations = Counter(
    "booking_db_operations_total",
    "Total database operations performed",
    ["operation", "table"],
)
"""
Counter for database operations.

Labels:
    operation: insert, update, select
    table: Database table name
"""
