"""Weather surcharge pricing."""

from __future__ import annotations

from dataclasses import dataclass

OPTIMAL_TEMPERATURE = 21

# (exclusive upper bound of |temperature - optimal|, surcharge percentage)
# Evaluated in order, first match wins; anything beyond the last bound pays 50%.
SURCHARGE_BANDS: tuple[tuple[int, float], ...] = (
    (2, 0.0),
    (5, 0.10),
    (10, 0.20),
    (20, 0.30),
)
MAX_SURCHARGE_PERCENTAGE = 0.50


@dataclass(frozen=True)
class SurchargeQuote:
    """Price breakdown for one room night. Amounts are unrounded."""

    percentage: float
    surcharge: float
    total: float


def surcharge_percentage(temperature: int) -> float:
    """Map a forecast temperature to its surcharge percentage (0.0 - 0.5)."""
    diff = abs(temperature - OPTIMAL_TEMPERATURE)
    for upper_bound, percentage in SURCHARGE_BANDS:
        if diff < upper_bound:
            return percentage
    return MAX_SURCHARGE_PERCENTAGE


def calculate_weather_surcharge(base_price: float, temperature: int) -> SurchargeQuote:
    """
    Price a room for the forecast temperature.

    No rounding happens here; amounts are rounded to minor currency units only
    when handed to the payment gateway.

    Args:
        base_price: Non-negative room price from the catalog
        temperature: Forecast temperature in degrees

    Returns:
        SurchargeQuote: percentage, surcharge amount and total

    Example:
        >>> calculate_weather_surcharge(100, 35)
        SurchargeQuote(percentage=0.3, surcharge=30.0, total=130.0)
    """
    if base_price < 0:
        raise ValueError("base_price must be non-negative")

    percentage = surcharge_percentage(temperature)
    surcharge = base_price * percentage
    return SurchargeQuote(percentage=percentage, surcharge=surcharge, total=base_price + surcharge)
