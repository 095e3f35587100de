"""Payment provider notification receiver."""

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from weather_booking.dependencies import get_payment_reconciler
from weather_booking.schemas.payment_events import ReconcileOutcome
from weather_booking.services.reconciliation import PaymentReconciler

router = APIRouter()
logger = structlog.get_logger(__name__)

SIGNATURE_HEADER = "Stripe-Signature"


@router.post("/payments/webhook")
async def receive_payment_webhook(
    request: Request,
    reconciler: PaymentReconciler = Depends(get_payment_reconciler),
) -> JSONResponse:
    """
    Handle incoming payment provider events.

    Authentication: signature over the raw body (Stripe-Signature header), not
    user identity. Only checkout.session.completed changes state; every other
    event type is acknowledged without action.

    Responses:
        200: Event handled, duplicate, unknown booking, unpaid, unsupported type, or
             authentic but malformed body
        400: Signature missing or invalid
        500: Transient failure (provider retries)

    Args:
        request: FastAPI request carrying the signed event
        reconciler: Payment reconciler

    Returns:
        JSONResponse: Acknowledgment response
    """
    # Signature covers the exact bytes received; never re-serialize before verifying
    payload = await request.body()
    signature = request.headers.get(SIGNATURE_HEADER)

    try:
        outcome = await run_in_threadpool(reconciler.reconcile, payload, signature)
    except Exception as e:
        logger.exception("payment_webhook_processing_failed", error=str(e))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    if outcome is ReconcileOutcome.REJECTED:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid event"},
        )

    if outcome is ReconcileOutcome.RETRY:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Temporary failure"},
        )

    return JSONResponse(content={"received": True})
