import datetime as dt
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookingCreatePayload(CamelModel):
    """
    Schema for creating a booking. The owner comes from the authenticated identity.
    """

    room_id: str = Field(..., min_length=1, description="Room catalog reference")
    date: dt.date = Field(..., description="Calendar date of the stay")


class BookingCheckoutResponse(CamelModel):
    """Returned on creation: where to send the user to pay."""

    booking_id: UUID
    checkout_url: str


class BookingSnapshot(CamelModel):
    """A booking as exposed to its owner."""

    id: UUID
    user_id: str
    room_id: str
    room_name: str | None = None
    date: dt.date
    base_price: float
    weather_charge: float
    final_price: float
    status: str
    payment_session_id: str
    created_at: dt.datetime
    updated_at: dt.datetime

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "BookingSnapshot":
        return cls.model_validate(row)


class PriceQuote(CamelModel):
    """Forecast and price breakdown for a room on a date. Nothing is persisted."""

    room_id: str
    room_name: str
    location: str
    date: dt.date
    temperature: int
    condition: str
    surcharge_percentage: float
    base_price: float
    weather_charge: float
    final_price: float
