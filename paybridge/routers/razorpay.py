import logging

from fastapi import APIRouter, Header, HTTPException, Request, status

from .. import schemas
from ..config import settings
from ..razorpay_signatures import verify_payment_signature, verify_webhook_signature

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/razorpay", tags=["Razorpay"])


@router.post("/verify-payment", status_code=status.HTTP_200_OK, response_model=schemas.PaymentVerificationResponse)
def verify_payment(request: schemas.PaymentVerification):
    if not (request.razorpay_order_id and request.razorpay_payment_id and request.razorpay_signature):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing parameters")

    if not settings.RAZORPAY_KEY_SECRET:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Razorpay configuration missing")

    if not verify_payment_signature(
        request.razorpay_order_id,
        request.razorpay_payment_id,
        request.razorpay_signature,
        settings.RAZORPAY_KEY_SECRET,
    ):
        logger.error("Invalid payment signature for Razorpay order %s", request.razorpay_order_id)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Payment verification failed")

    logger.info("Payment %s verified for Razorpay order %s", request.razorpay_payment_id, request.razorpay_order_id)
    return {"success": True, "message": "Payment verified"}


@router.post("/webhook")
async def webhook(request: Request, x_razorpay_signature: str | None = Header(None)):
    if not settings.RAZORPAY_WEBHOOK_SECRET:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Webhook secret not configured")

    # HMAC is over the raw body, don't re-serialise request.json()
    body = await request.body()
    if not verify_webhook_signature(body, x_razorpay_signature, settings.RAZORPAY_WEBHOOK_SECRET):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid webhook signature")

    try:
        event = (await request.json()).get("event")
    except (ValueError, AttributeError):
        event = None
    logger.info("Razorpay webhook verified: %s", event)
    return {"status": "ok"}
