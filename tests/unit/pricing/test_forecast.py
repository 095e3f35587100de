"""Unit tests for the synthetic weather forecast."""

from __future__ import annotations

import pytest

from weather_booking.pricing.forecast import _to_int32, forecast_hash, get_forecast


@pytest.mark.unit
def test_forecast_is_deterministic() -> None:
    """Same location and date always produce the same forecast."""
    first = get_forecast("Lisbon", "2026-12-24")
    for _ in range(5):
        assert get_forecast("Lisbon", "2026-12-24") == first


@pytest.mark.unit
def test_forecast_known_values() -> None:
    """Hash of "<location>-<date>" maps to fixed temperatures."""
    # "-" -> 45 -> 45 % 50 - 10
    assert get_forecast("", "").temperature == 35
    # "a-b" -> 94710 -> 10 - 10
    assert get_forecast("a", "b").temperature == 0


@pytest.mark.unit
def test_forecast_hash_wraps_shift_to_32_bits() -> None:
    """The shifted value wraps to a signed 32-bit integer once it overflows."""
    assert forecast_hash("abc", "de") == -1424438836
    forecast = get_forecast("abc", "de")
    assert forecast.temperature == 26
    assert forecast.condition == "Sunny"


@pytest.mark.unit
def test_forecast_echoes_location_and_date() -> None:
    forecast = get_forecast("Porto", "2027-01-01")
    assert forecast.location == "Porto"
    assert forecast.date == "2027-01-01"


@pytest.mark.unit
@pytest.mark.parametrize(
    "location",
    ["Lisbon", "Reykjavík", "東京", "São Paulo", "x" * 500, "🏖 Beach"],
)
def test_forecast_temperature_in_range(location: str) -> None:
    """Temperature stays within [-10, 39] for any input, including long and non-ASCII strings."""
    for day in range(1, 29):
        forecast = get_forecast(location, f"2026-02-{day:02d}")
        assert -10 <= forecast.temperature <= 39


@pytest.mark.unit
@pytest.mark.parametrize(
    "location,date,expected",
    [
        ("", "", "Sunny"),  # 35 degrees
        ("a", "b", "Cloudy"),  # 0 degrees
        ("abc", "de", "Sunny"),  # 26 degrees
    ],
)
def test_forecast_condition(location: str, date: str, expected: str) -> None:
    assert get_forecast(location, date).condition == expected


@pytest.mark.unit
def test_condition_threshold_is_strictly_above_20() -> None:
    """Every forecast is Sunny exactly when the temperature is above 20."""
    for day in range(1, 32):
        forecast = get_forecast("Madeira", f"2026-07-{day:02d}")
        assert (forecast.condition == "Sunny") == (forecast.temperature > 20)


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,expected",
    [
        (0, 0),
        (2**31 - 1, 2**31 - 1),
        (2**31, -(2**31)),
        (2**32, 0),
        (-1, -1),
        (2**32 + 5, 5),
    ],
)
def test_to_int32(value: int, expected: int) -> None:
    assert _to_int32(value) == expected
