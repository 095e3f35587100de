import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import argparse
import json

from weather_booking.payments.stripe_gateway import to_minor_units
from weather_booking.pricing.forecast import get_forecast
from weather_booking.pricing.surcharge import calculate_weather_surcharge


def main() -> None:
    """
    Print the synthetic forecast and weather-adjusted price for a stay.

    Example:
        python scripts/quote_room.py "Lisbon" 2026-12-24 120
    """
    parser = argparse.ArgumentParser(description="Quote a room price for a location and date")
    parser.add_argument("location", help="Room location, as stored in the room catalog")
    parser.add_argument("date", help="Stay date (YYYY-MM-DD)")
    parser.add_argument("base_price", type=float, help="Nightly base price")
    args = parser.parse_args()

    if args.base_price < 0:
        parser.error("base_price must be non-negative")

    forecast = get_forecast(args.location, args.date)
    quote = calculate_weather_surcharge(args.base_price, forecast.temperature)

    print(
        json.dumps(
            {
                "location": forecast.location,
                "date": forecast.date,
                "temperature": forecast.temperature,
                "condition": forecast.condition,
                "percentage": quote.percentage,
                "basePrice": args.base_price,
                "weatherCharge": quote.surcharge,
                "finalPrice": quote.total,
                "chargedMinorUnits": to_minor_units(quote.total),
            },
            indent=2,
        )
    )


if __name__ == "__main__":
    main()
