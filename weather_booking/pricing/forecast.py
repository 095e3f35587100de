"""
Synthetic weather forecast.

No real weather source is queried. The forecast is derived from a hash of the
location and date so the same pair always produces the same temperature, in
every process, which keeps booking prices reproducible.
"""

from __future__ import annotations

from dataclasses import dataclass

MIN_TEMPERATURE = -10
TEMPERATURE_SPAN = 50  # [-10, 39]
SUNNY_ABOVE = 20


@dataclass(frozen=True)
class Forecast:
    """Forecast for one location on one date."""

    location: str
    date: str
    temperature: int
    condition: str


def _to_int32(value: int) -> int:
    """Wrap an integer to a signed 32-bit value."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def forecast_hash(location: str, date: str) -> int:
    """
    Rolling string hash of "<location>-<date>".

    Each UTF-16 code unit is added to ``(hash << 5) - hash``, where the shift
    operates on the 32-bit wrapped hash while the running value itself is not
    truncated. This matches the hash the service has always used, so existing
    quotes remain stable.

    Args:
        location: Room location as stored in the catalog
        date: Calendar date of the stay (ISO format)

    Returns:
        int: Signed hash value
    """
    key = f"{location}-{date}".encode("utf-16-le")
    value = 0
    for i in range(0, len(key), 2):
        code_unit = key[i] | (key[i + 1] << 8)
        value = code_unit + (_to_int32(value << 5) - value)
    return value


def get_forecast(location: str, date: str) -> Forecast:
    """
    Return the deterministic forecast for a location and date.

    Temperature is always within [-10, 39]. Condition is "Sunny" above 20
    degrees, "Cloudy" otherwise.

    Example:
        >>> get_forecast("", "").temperature
        35
    """
    temperature = abs(forecast_hash(location, date)) % TEMPERATURE_SPAN + MIN_TEMPERATURE
    condition = "Sunny" if temperature > SUNNY_ABOVE else "Cloudy"
    return Forecast(location=location, date=date, temperature=temperature, condition=condition)
