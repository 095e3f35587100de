"""
Integration tests for status, health and readiness endpoints.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient


@pytest.mark.integration
def test_service_status(api_client: TestClient) -> None:
    response = api_client.get("/")

    assert response.status_code == 200
    assert response.json() == {"service": "Booking Service", "status": "Active"}


@pytest.mark.integration
def test_health_endpoint_returns_ok(api_client: TestClient) -> None:
    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.integration
def test_readiness_endpoint_returns_ready_when_db_accessible(api_client: TestClient) -> None:
    response = api_client.get("/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ready", "checks": {"database": "ok"}}


@pytest.mark.integration
def test_readiness_endpoint_returns_503_when_db_not_accessible(api_client: TestClient) -> None:
    with patch("weather_booking.routes.health.check_engine_health") as mock_health:
        mock_health.return_value = False

        response = api_client.get("/ready")

    assert response.status_code == 503
    assert response.json() == {"status": "not ready", "checks": {"database": "failed"}}


@pytest.mark.integration
def test_health_does_not_depend_on_database(api_client: TestClient) -> None:
    """Liveness only reports the process; readiness is where the database is checked."""
    with patch("weather_booking.routes.health.check_engine_health") as mock_health:
        mock_health.return_value = False

        response = api_client.get("/health")

    assert response.status_code == 200
    mock_health.assert_not_called()
