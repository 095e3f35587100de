import datetime as dt
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from weather_booking.dependencies import get_booking_service, get_current_user_id
from weather_booking.errors import BookingError, BookingNotFound
from weather_booking.metrics import booking_operations
from weather_booking.routes._errors import error_kind, to_http_exception
from weather_booking.schemas.bookings import (
    BookingCheckoutResponse,
    BookingCreatePayload,
    BookingSnapshot,
    PriceQuote,
)
from weather_booking.services.bookings import BookingService

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/bookings/quote", response_model=PriceQuote)
def quote_booking(
    room_id: str = Query(..., alias="roomId", min_length=1, description="Room catalog reference"),
    date: dt.date = Query(..., description="Calendar date of the stay"),
    user_id: str = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service),
) -> PriceQuote:
    """
    Preview the forecast and price for a room on a date without booking it.

    Args:
        room_id: Room catalog reference
        date: Calendar date of the stay
        user_id: Authenticated caller
        service: Booking service

    Returns:
        PriceQuote: Forecast and price breakdown
    """
    try:
        priced = service.price_stay(room_id, date)
    except BookingError as e:
        booking_operations.labels(operation="quote", status=error_kind(e)).inc()
        raise to_http_exception(e)
    except Exception as e:
        booking_operations.labels(operation="quote", status="error").inc()
        logger.exception("booking_quote_failed", room_id=room_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")

    booking_operations.labels(operation="quote", status="success").inc()
    return PriceQuote(
        room_id=priced.room_id,
        room_name=priced.room.name,
        location=priced.room.location,
        date=priced.date,
        temperature=priced.forecast.temperature,
        condition=priced.forecast.condition,
        surcharge_percentage=priced.quote.percentage,
        base_price=priced.room.base_price,
        weather_charge=priced.quote.surcharge,
        final_price=priced.quote.total,
    )


@router.post(
    "/bookings",
    status_code=status.HTTP_201_CREATED,
    response_model=BookingCheckoutResponse,
)
def create_booking(
    payload: BookingCreatePayload,
    user_id: str = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service),
) -> BookingCheckoutResponse:
    """
    Create a pending booking and return the checkout URL to pay for it.

    The booking is confirmed later, when the payment notification arrives.

    Args:
        payload: Room and date to book
        user_id: Authenticated caller
        service: Booking service

    Returns:
        BookingCheckoutResponse: Booking id and checkout URL
    """
    try:
        checkout = service.create_booking(user_id, payload.room_id, payload.date)
    except BookingError as e:
        booking_operations.labels(operation="create", status=error_kind(e)).inc()
        logger.warning(
            "booking_creation_failed",
            user_id=user_id,
            room_id=payload.room_id,
            reason=type(e).__name__,
        )
        raise to_http_exception(e)
    except Exception as e:
        booking_operations.labels(operation="create", status="error").inc()
        logger.exception("booking_creation_failed", user_id=user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")

    booking_operations.labels(operation="create", status="success").inc()
    return BookingCheckoutResponse(
        booking_id=checkout.booking_id, checkout_url=checkout.checkout_url
    )


@router.get("/bookings", response_model=list[BookingSnapshot])
def list_my_bookings(
    user_id: str = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service),
) -> list[BookingSnapshot]:
    """
    List the caller's bookings, newest first.

    Returns:
        list[BookingSnapshot]: Bookings owned by the caller
    """
    try:
        rows = service.list_bookings(user_id)
    except BookingError as e:
        booking_operations.labels(operation="list", status=error_kind(e)).inc()
        raise to_http_exception(e)
    except Exception as e:
        booking_operations.labels(operation="list", status="error").inc()
        logger.exception("booking_list_failed", user_id=user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")

    booking_operations.labels(operation="list", status="success").inc()
    return [BookingSnapshot.from_row(row) for row in rows]


@router.delete("/bookings/{booking_id}", status_code=status.HTTP_200_OK)
def cancel_booking(
    booking_id: str,
    user_id: str = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service),
) -> dict[str, str]:
    """
    Cancel one of the caller's pending bookings.

    Unknown ids, malformed ids and other users' bookings all get the same 404.

    Args:
        booking_id: Booking to cancel
        user_id: Authenticated caller
        service: Booking service

    Returns:
        dict: Confirmation message
    """
    try:
        try:
            parsed_id = UUID(booking_id)
        except ValueError:
            raise BookingNotFound(f"Booking {booking_id} not found")

        service.cancel_booking(user_id, parsed_id)
    except BookingError as e:
        booking_operations.labels(operation="cancel", status=error_kind(e)).inc()
        raise to_http_exception(e)
    except Exception as e:
        booking_operations.labels(operation="cancel", status="error").inc()
        logger.exception("booking_cancel_failed", booking_id=booking_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")

    booking_operations.labels(operation="cancel", status="success").inc()
    return {"message": f"Booking {booking_id} cancelled"}
