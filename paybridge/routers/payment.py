import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from .. import models, schemas
from ..callbacks import CallbackVerifier
from ..config import GatewayConfig, get_gateway_config
from ..database import get_db
from ..errors import ConfigMissing, InvalidSignature
from ..gateway import LgPayClient
from ..orders import OrderBuilder

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["LG-Pay"])


def get_gateway_client(config: GatewayConfig = Depends(get_gateway_config)) -> LgPayClient:
    return LgPayClient(config)


def get_notification_hook(
    db: Session = Depends(get_db),
    config: GatewayConfig = Depends(get_gateway_config),
):
    """Default business hook: record the outcome the gateway reported on the matching order."""

    def record_notification(notification):
        order_sn = notification.get("order_sn")
        order = db.query(models.PaymentOrder).filter(models.PaymentOrder.order_sn == order_sn).first()
        if not order:
            logger.warning("Notification for unknown order %s", order_sn)
            return
        order.status = "PAID" if config.is_paid(notification) else "FAILED"  # type: ignore
        order.last_notification = dict(notification)  # type: ignore
        db.commit()
        logger.info("Order %s marked %s", order_sn, order.status)

    return record_notification


async def notification_payload(request: Request) -> Dict[str, Any]:
    """The gateway posts either form fields or a JSON object."""
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            body = None
        return body if isinstance(body, dict) else {}
    form = await request.form()
    return {k: v for k, v in form.items() if isinstance(v, str)}


# --- ACT 1: CREATE ORDER (Server-Side) ---
@router.post("/create-order", response_model=schemas.OrderResponse)
def create_order(
    payload: schemas.OrderCreate,
    request: Request,
    config: GatewayConfig = Depends(get_gateway_config),
    client: LgPayClient = Depends(get_gateway_client),
    db: Session = Depends(get_db),
):
    client_ip = request.client.host if request.client else None
    signed = OrderBuilder(config).build(payload.amount, client_ip=client_ip)

    # Now send it to LG-Pay
    result = client.order.create(signed)

    # Create an entry in the database (STATUS : CREATED)
    try:
        db.add(models.PaymentOrder(
            order_sn=signed["order_sn"],
            amount=int(signed["money"]),
            client_ip=signed["ip"],
            status="CREATED",
            payment_url=result["payment_url"],
            gateway_response=result["response"],
        ))
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Could not record order %s", signed["order_sn"])
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Database Commit Failed")

    return {
        "success": True,
        "order_sn": signed["order_sn"],
        "amount": int(signed["money"]),
        "payment_url": result["payment_url"],
        "response": result["response"],
    }


# --- ACT 2: NOTIFY (Gateway-Side) ---
@router.post("/webhook", response_class=PlainTextResponse)
def webhook(
    notification: Dict[str, Any] = Depends(notification_payload),
    config: GatewayConfig = Depends(get_gateway_config),
    hook=Depends(get_notification_hook),
):
    logger.info("Webhook received for order %s", notification.get("order_sn"))
    verifier = CallbackVerifier(config, hook=hook)
    try:
        ack = verifier.handle(notification)
    except ConfigMissing:
        logger.error("Webhook rejected: LG-Pay secret is not configured")
        return PlainTextResponse("Configuration error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    except InvalidSignature as e:
        return PlainTextResponse(e.message, status_code=status.HTTP_400_BAD_REQUEST)
    except Exception:
        logger.exception("Webhook error for order %s", notification.get("order_sn"))
        return PlainTextResponse("Error processing webhook", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    # LG-Pay expects this exact text
    return PlainTextResponse(ack)
