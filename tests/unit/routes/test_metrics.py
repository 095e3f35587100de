"""
Unit tests for metrics endpoint.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from weather_booking.main import app
from weather_booking.metrics import (
    booking_operations,
    db_operations,
    payment_events,
    surcharge_bands,
    upstream_latency,
    upstream_requests,
)


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.mark.unit
def test_metrics_endpoint_returns_prometheus_format(client: TestClient) -> None:
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "text/plain" in response.headers["content-type"]


@pytest.mark.unit
def test_metrics_endpoint_contains_booking_metrics(client: TestClient) -> None:
    booking_operations.labels(operation="create", status="success").inc()
    surcharge_bands.labels(percentage="30").inc()
    upstream_requests.labels(upstream="room_catalog", status="200").inc()
    upstream_latency.labels(upstream="room_catalog").observe(0.12)
    payment_events.labels(event_type="checkout.session.completed", outcome="confirmed").inc()
    db_operations.labels(operation="insert", table="bookings").inc()

    content = client.get("/metrics").text

    assert "booking_operations_total" in content
    assert "booking_surcharge_band_total" in content
    assert "upstream_requests_total" in content
    assert "upstream_latency_seconds" in content
    assert "payment_events_total" in content
    assert "booking_db_operations_total" in content
    assert "# HELP" in content
    assert "# TYPE" in content
